"""
ExtensionSet: owner-level view of the extensions on one record.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..codec.tlv import TlvEntry, decode_tlv, encode_all
from ..layout import RecordLayout
from ..runtime.errors import (
    DuplicateExtensionError,
    ExtensionShapeError,
    InvalidScopeMixError,
    UnknownExtensionTypeError,
)
from .length import add_type_and_length_to_len, get_record_len
from .registry import ExtensionScope, ExtensionType, is_known, scope_of, shape_of


class ExtensionSet:
    """
    Ordered, duplicate-free mapping of extension type to payload.

    Insertion order is the encode order. Payloads of fixed-shape types must
    have exactly the registered size, and all types must belong to the same
    record kind. Entries with unregistered discriminants only arrive through
    from_tlv and are carried along unchanged.
    """

    def __init__(self, entries: Optional[List[Tuple[Union[ExtensionType, int], bytes]]] = None):
        self._entries: Dict[int, Tuple[Union[ExtensionType, int], bytes]] = {}
        self._scope: Optional[ExtensionScope] = None
        for extension_type, payload in entries or []:
            self.add(extension_type, payload)

    @property
    def scope(self) -> Optional[ExtensionScope]:
        """Record kind of the registered extensions, None while empty."""
        return self._scope

    def add(self, extension_type: Union[ExtensionType, int], payload: bytes = b"") -> "ExtensionSet":
        """
        Add an extension.

        Raises:
            UnknownExtensionTypeError: gap marker or unregistered type
            DuplicateExtensionError: type already in the set
            ExtensionShapeError: payload size differs from the fixed shape
            InvalidScopeMixError: type belongs to the other record kind
        """
        if not is_known(extension_type):
            raise UnknownExtensionTypeError(
                f"Cannot add extension type {int(extension_type)}",
                details={"extension_type": int(extension_type)},
            )
        self._insert(ExtensionType(extension_type), bytes(payload))
        return self

    def _insert(self, extension_type: Union[ExtensionType, int], payload: bytes) -> None:
        key = int(extension_type)
        if key in self._entries:
            raise DuplicateExtensionError(
                f"Extension {key} already in set",
                details={"extension_type": key},
            )
        if isinstance(extension_type, ExtensionType):
            shape = shape_of(extension_type)
            if shape.is_fixed and len(payload) != shape.length:
                raise ExtensionShapeError(
                    f"{extension_type.name} payload must be {shape.length} bytes, got {len(payload)}",
                    details={"extension_type": key, "expected": shape.length, "length": len(payload)},
                )
            scope = scope_of(extension_type)
            if self._scope is not None and scope is not self._scope:
                raise InvalidScopeMixError(
                    f"{extension_type.name} is a {scope.value} extension, set holds {self._scope.value} extensions",
                    details={"extension_type": key},
                )
            self._scope = scope
        self._entries[key] = (extension_type, payload)

    def get(self, extension_type: Union[ExtensionType, int]) -> Optional[bytes]:
        item = self._entries.get(int(extension_type))
        return item[1] if item is not None else None

    def __contains__(self, extension_type: object) -> bool:
        try:
            return int(extension_type) in self._entries
        except (TypeError, ValueError):
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Union[ExtensionType, int]]:
        return (extension_type for extension_type, _ in self._entries.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtensionSet):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def __repr__(self) -> str:
        names = [t.name if isinstance(t, ExtensionType) else str(t) for t in self]
        return f"ExtensionSet({names})"

    def items(self) -> Iterator[Tuple[Union[ExtensionType, int], bytes]]:
        return iter(list(self._entries.values()))

    def types(self) -> List[ExtensionType]:
        """Registered types, in insertion order."""
        return [t for t in self if isinstance(t, ExtensionType)]

    def encode(self) -> bytes:
        """Encode the set as a TLV region (no padding)."""
        return encode_all(self.items())

    def required_length(self, layout: RecordLayout, extra_padding: int = 0) -> int:
        """
        Allocation size for a record of this layout holding this set.

        Unregistered entries carried over from from_tlv are counted at their
        encoded size.
        """
        variable_lengths = {
            t: len(payload) for t, payload in self.items()
            if isinstance(t, ExtensionType) and shape_of(t).is_variable
        }
        unregistered = sum(
            add_type_and_length_to_len(len(payload)) for t, payload in self.items()
            if not isinstance(t, ExtensionType)
        )
        return get_record_len(layout, self.types(), extra_padding + unregistered, variable_lengths)

    @classmethod
    def from_tlv(cls, data: Union[bytes, bytearray, memoryview]) -> "ExtensionSet":
        """
        Decode a TLV region into a set.

        Raises:
            TruncatedError, DuplicateExtensionError: malformed region
            ExtensionShapeError: a fixed-shape payload has the wrong size
            InvalidScopeMixError: mint and account extensions in one region
        """
        return cls.from_entries(decode_tlv(data))

    @classmethod
    def from_entries(cls, entries: List[TlvEntry]) -> "ExtensionSet":
        result = cls()
        for entry in entries:
            result._insert(entry.extension_type, entry.payload)
        return result

    def to_entries(self) -> List[TlvEntry]:
        return [TlvEntry(extension_type=t, payload=payload) for t, payload in self.items()]

