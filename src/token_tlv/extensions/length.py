"""
Record sizing.

Storage must be allocated before any TLV bytes exist, so every size here is
computed from extension types alone (plus explicit lengths for the
variable-shape types).
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Mapping, Optional, Union

from ..codec.tlv import MAX_PAYLOAD_LENGTH, TLV_HEADER_SIZE, TYPE_SIZE
from ..layout import ACCOUNT_LAYOUT, MINT_LAYOUT, RecordLayout, unpack_record
from ..runtime.errors import (
    InvalidScopeMixError,
    UnknownRequestedTypeError,
    VariableLengthRequiredError,
)
from .accessor import find
from .registry import ExtensionScope, ExtensionType, all_known_types, scope_of, shape_of, to_extension_type

logger = logging.getLogger(__name__)

VariableLengths = Optional[Mapping[Union[ExtensionType, int], int]]


def _unique_known(extension_types: Iterable[Union[ExtensionType, int]]) -> List[ExtensionType]:
    result: List[ExtensionType] = []
    for raw in extension_types:
        known = to_extension_type(raw)
        if known is None or known not in all_known_types():
            raise UnknownRequestedTypeError(
                f"Cannot size extension type {int(raw)}",
                details={"extension_type": int(raw)},
            )
        if known not in result:
            result.append(known)
    return result


def _check_scope(types: List[ExtensionType], scope: Optional[ExtensionScope]) -> None:
    scopes = {scope_of(t) for t in types}
    if len(scopes) > 1:
        raise InvalidScopeMixError(
            "Mint and account extensions cannot share a record",
            details={"extension_types": [t.name for t in types]},
        )
    if scope is not None and scopes and scopes != {scope}:
        raise InvalidScopeMixError(
            f"Expected only {scope.value} extensions",
            details={"extension_types": [t.name for t in types], "scope": scope.value},
        )


def get_type_len(extension_type: Union[ExtensionType, int], variable_lengths: VariableLengths = None) -> int:
    """
    Payload size of one extension type.

    Raises:
        UnknownRequestedTypeError: gap marker or unregistered type
        VariableLengthRequiredError: variable type with no entry in variable_lengths
    """
    shape = shape_of(extension_type)
    if not shape.is_known:
        raise UnknownRequestedTypeError(
            f"Cannot size extension type {int(extension_type)}",
            details={"extension_type": int(extension_type)},
        )
    if shape.is_fixed:
        return shape.length

    lengths = variable_lengths or {}
    length = lengths.get(extension_type, lengths.get(int(extension_type)))
    if length is None:
        raise VariableLengthRequiredError(
            f"{ExtensionType(extension_type).name} has no fixed size",
            details={"extension_type": int(extension_type)},
        )
    if not 0 <= length <= MAX_PAYLOAD_LENGTH:
        raise ValueError(f"Extension length {length} out of range")
    return length


def add_type_and_length_to_len(payload_length: int) -> int:
    return payload_length + TLV_HEADER_SIZE


def required_length(base_length: int, tag_length: int,
                    extension_types: Iterable[Union[ExtensionType, int]],
                    extra_padding: int = 0, *,
                    variable_lengths: VariableLengths = None,
                    scope: Optional[ExtensionScope] = None) -> int:
    """
    Total buffer size for a record carrying the given extensions.

    base_length + tag_length + sum(4 + payload size) + extra_padding.
    A type listed twice is counted once.

    Args:
        base_length: Size of the base record (including any padding before the tag)
        tag_length: Size of the account type tag
        extension_types: Extensions the record will hold
        extra_padding: Spare bytes to reserve for later appends
        variable_lengths: Payload sizes for variable-shape types
        scope: Require every type to belong to this record kind

    Raises:
        UnknownRequestedTypeError: gap marker or unregistered type requested
        InvalidScopeMixError: mint and account types mixed, or scope violated
        VariableLengthRequiredError: variable type without a length
    """
    if base_length < 0 or tag_length < 0 or extra_padding < 0:
        raise ValueError("Lengths must not be negative")

    types = _unique_known(extension_types)
    _check_scope(types, scope)

    total = base_length + tag_length + extra_padding
    for extension_type in types:
        total += add_type_and_length_to_len(get_type_len(extension_type, variable_lengths))
    return total


def adjust_len_for_reserved(length: int, layout: RecordLayout) -> int:
    """Grow a length past any size reserved for another record kind."""
    while layout.is_reserved_length(length):
        logger.debug(f"Length {length} collides with a legacy {layout.name} shape, growing by {TYPE_SIZE}")
        length += TYPE_SIZE
    return length


def get_record_len(layout: RecordLayout, extension_types: Iterable[Union[ExtensionType, int]],
                   extra_padding: int = 0, variable_lengths: VariableLengths = None) -> int:
    """
    Allocation size for a record of the given layout.

    A record with no extensions and no extra space keeps its legacy size.
    """
    types = list(extension_types)
    if not types and extra_padding == 0:
        return layout.base_length
    scope = ExtensionScope.MINT if layout.account_type == MINT_LAYOUT.account_type else ExtensionScope.ACCOUNT
    length = required_length(
        layout.padded_base_length, layout.tag_length, types, extra_padding,
        variable_lengths=variable_lengths, scope=scope,
    )
    return adjust_len_for_reserved(length, layout)


def get_account_len(extension_types: Iterable[Union[ExtensionType, int]], extra_padding: int = 0) -> int:
    """Allocation size for a token account with the given extensions."""
    return get_record_len(ACCOUNT_LAYOUT, extension_types, extra_padding)


def get_mint_len(extension_types: Iterable[Union[ExtensionType, int]], extra_padding: int = 0,
                 variable_lengths: VariableLengths = None) -> int:
    """Allocation size for a mint with the given extensions."""
    return get_record_len(MINT_LAYOUT, extension_types, extra_padding, variable_lengths)


def get_new_record_len_for_extension_len(data: Union[bytes, bytearray, memoryview], layout: RecordLayout,
                                         extension_type: Union[ExtensionType, int],
                                         extension_len: int) -> int:
    """
    Size an existing record must grow to so it can hold one more extension.

    An extension already present is replaced, so only the size difference
    counts. Legacy (untagged) records also gain the padding and tag.
    """
    record = unpack_record(data, layout)
    current_length = len(data) if record.is_extended else layout.tlv_offset

    existing = find(record.extensions(), extension_type)
    current_extension_len = add_type_and_length_to_len(len(existing)) if existing is not None else 0
    new_extension_len = add_type_and_length_to_len(extension_len)

    return adjust_len_for_reserved(current_length + new_extension_len - current_extension_len, layout)
