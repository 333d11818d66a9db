"""
TLV extension codec.

Encodes and decodes the flat sequence of extension entries that follows the
account-type byte of an extended record:

    type:    u16 little-endian (0 = uninitialized / end of data)
    length:  u16 little-endian
    payload: length bytes

Entries are packed back to back. Anything after the last entry (a zero type,
or fewer than four bytes) is padding and decodes to nothing.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from ..extensions.registry import ExtensionType, to_extension_type
from ..runtime.errors import (
    CapacityExceededError,
    DuplicateExtensionError,
    ExtensionAlreadyPresentError,
    InvalidExtensionTypeError,
    PayloadTooLargeError,
    TruncatedError,
)
from .reader import BinaryReader
from .writer import BinaryWriter

logger = logging.getLogger(__name__)

TYPE_SIZE = 2
LENGTH_SIZE = 2
TLV_HEADER_SIZE = TYPE_SIZE + LENGTH_SIZE
MAX_PAYLOAD_LENGTH = 0xFFFF

BufferLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class TlvEntry:
    """
    One decoded extension entry.

    extension_type is an ExtensionType when the discriminant is registered
    and the raw int otherwise.
    """

    extension_type: Union[ExtensionType, int]
    payload: bytes
    offset: int = 0

    @property
    def length(self) -> int:
        return len(self.payload)

    @property
    def is_known(self) -> bool:
        return isinstance(self.extension_type, ExtensionType)

    @property
    def end(self) -> int:
        """Offset just past this entry within the TLV region."""
        return self.offset + TLV_HEADER_SIZE + len(self.payload)


@dataclass(frozen=True)
class TlvScan:
    """Result of scanning a TLV region."""

    entries: List[TlvEntry]
    end_offset: int

    def free_space(self, buffer_length: int) -> int:
        """Bytes available after the last entry."""
        return buffer_length - self.end_offset


EntryLike = Union[TlvEntry, Tuple[Union[ExtensionType, int], BufferLike]]


def scan_tlv(data: BufferLike) -> TlvScan:
    """
    Walk a TLV region and collect its entries.

    Stops cleanly at a zero type field or when fewer than four bytes remain;
    the content after that point is not inspected.

    Args:
        data: TLV region (everything after the account-type byte)

    Returns:
        TlvScan with the entries in buffer order and the offset where
        decoding stopped

    Raises:
        TruncatedError: an entry's length runs past the end of data
        DuplicateExtensionError: a type occurs twice
    """
    reader = BinaryReader(data)
    entries: List[TlvEntry] = []
    seen = set()

    while reader.remaining >= TLV_HEADER_SIZE:
        start = reader.offset
        raw_type = reader.u16le()
        length = reader.u16le()

        if raw_type == ExtensionType.UNINITIALIZED:
            # zeroed space; the length field here is not trustworthy
            logger.debug(f"TLV gap marker at offset {start}, {len(data) - start} bytes of padding")
            return TlvScan(entries, start)

        if length > reader.remaining:
            raise TruncatedError(
                f"Extension {raw_type} at offset {start} declares {length} bytes, "
                f"only {reader.remaining} remain",
                details={"offset": start, "extension_type": raw_type,
                         "length": length, "remaining": reader.remaining},
            )

        if raw_type in seen:
            raise DuplicateExtensionError(
                f"Extension {raw_type} appears more than once",
                details={"offset": start, "extension_type": raw_type},
            )
        seen.add(raw_type)

        known = to_extension_type(raw_type)
        entries.append(TlvEntry(
            extension_type=known if known is not None else raw_type,
            payload=reader.bytes(length),
            offset=start,
        ))

    if reader.remaining:
        logger.debug(f"Ignoring {reader.remaining} trailing bytes, too short for a TLV header")
    return TlvScan(entries, reader.offset)


def decode_tlv(data: BufferLike) -> List[TlvEntry]:
    """Decode a TLV region into its entries, in buffer order."""
    return scan_tlv(data).entries


def _check_entry(extension_type: Union[ExtensionType, int], payload: BufferLike) -> None:
    if not 0 <= int(extension_type) <= 0xFFFF:
        raise InvalidExtensionTypeError(
            f"Extension type {int(extension_type)} does not fit u16",
            details={"extension_type": int(extension_type)},
        )
    if extension_type == ExtensionType.UNINITIALIZED:
        raise InvalidExtensionTypeError(
            "UNINITIALIZED is the gap marker and cannot be written as an entry",
            details={"extension_type": 0},
        )
    if len(payload) > MAX_PAYLOAD_LENGTH:
        raise PayloadTooLargeError(
            f"Payload of {len(payload)} bytes does not fit a u16 length",
            details={"extension_type": int(extension_type), "length": len(payload)},
        )


def _entry_parts(entry: EntryLike) -> Tuple[Union[ExtensionType, int], bytes]:
    if isinstance(entry, TlvEntry):
        return entry.extension_type, entry.payload
    extension_type, payload = entry
    return extension_type, bytes(payload)


def encode_entry(extension_type: Union[ExtensionType, int], payload: BufferLike) -> bytes:
    """Encode a single entry: type, length, payload."""
    _check_entry(extension_type, payload)
    writer = BinaryWriter()
    writer.u16le(int(extension_type))
    writer.u16le(len(payload))
    writer.bytes(payload)
    return writer.to_bytes()


def encode_all(entries: Iterable[EntryLike]) -> bytes:
    """
    Encode entries back to back, in the given order.

    Args:
        entries: TlvEntry objects or (type, payload) pairs

    Returns:
        Encoded TLV region without padding

    Raises:
        InvalidExtensionTypeError: an entry uses the gap marker
        DuplicateExtensionError: two entries share a type
        PayloadTooLargeError: a payload exceeds 65535 bytes
    """
    writer = BinaryWriter()
    seen = set()
    for entry in entries:
        extension_type, payload = _entry_parts(entry)
        if int(extension_type) in seen:
            raise DuplicateExtensionError(
                f"Extension {int(extension_type)} given more than once",
                details={"extension_type": int(extension_type)},
            )
        seen.add(int(extension_type))
        writer.bytes(encode_entry(extension_type, payload))
    return writer.to_bytes()


def append_in_place(buffer: BufferLike, extension_type: Union[ExtensionType, int],
                    payload: BufferLike) -> Union[bytearray, memoryview]:
    """
    Write one more entry into free space after the existing entries.

    The region is scanned first; the new entry goes where scanning stopped.
    Anything after the new entry is cleared to zero, so dead bytes that sat
    behind a gap marker can never be read as entries. A tail that is already
    zero is not touched.

    Args:
        buffer: TLV region. A bytearray or writable memoryview is modified in
            place; other buffers are copied into a new bytearray.
        extension_type: Type of the new entry
        payload: Payload of the new entry

    Returns:
        The buffer holding the new entry (the caller's object when writable)

    Raises:
        ExtensionAlreadyPresentError: type already present
        CapacityExceededError: fewer than 4 + len(payload) bytes are free
        TruncatedError, DuplicateExtensionError: existing region is malformed
    """
    _check_entry(extension_type, payload)
    scan = scan_tlv(buffer)

    for entry in scan.entries:
        if int(entry.extension_type) == int(extension_type):
            raise ExtensionAlreadyPresentError(
                f"Extension {int(extension_type)} already present at offset {entry.offset}",
                details={"extension_type": int(extension_type), "offset": entry.offset},
            )

    needed = TLV_HEADER_SIZE + len(payload)
    free = scan.free_space(len(buffer))
    if free < needed:
        raise CapacityExceededError(
            f"Extension {int(extension_type)} needs {needed} bytes, {free} free",
            details={"extension_type": int(extension_type), "needed": needed,
                     "free": free, "offset": scan.end_offset},
        )

    if isinstance(buffer, bytearray):
        target = buffer
    elif isinstance(buffer, memoryview) and not buffer.readonly:
        target = buffer
    else:
        target = bytearray(buffer)

    start = scan.end_offset
    target[start:start + needed] = encode_entry(extension_type, payload)
    tail = start + needed
    if any(target[tail:]):
        logger.debug(f"Clearing {len(target) - tail} dead bytes after appended extension {int(extension_type)}")
        target[tail:] = bytes(len(target) - tail)
    logger.debug(f"Appended extension {int(extension_type)} at offset {start} ({needed} bytes)")
    return target


__all__ = [
    "TYPE_SIZE",
    "LENGTH_SIZE",
    "TLV_HEADER_SIZE",
    "MAX_PAYLOAD_LENGTH",
    "TlvEntry",
    "TlvScan",
    "scan_tlv",
    "decode_tlv",
    "encode_entry",
    "encode_all",
    "append_in_place",
]
