"""
Record layout and the account-type disambiguation byte.

An extended record is laid out as:

    [ base record ][ zero padding up to 165 ][ account type: u8 ][ TLV entries ][ padding ]

A record exactly as long as its base has no tag and no extensions (legacy).
Mints (82 bytes) are padded to the token-account size so that the account
type byte of mints and accounts sits at the same offset. No extended record
may be exactly as long as a multisig record (355 bytes); sizing helpers bump
such lengths and unpacking rejects them.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field, model_validator

from .codec.reader import BinaryReader
from .codec.tlv import TlvEntry, decode_tlv
from .codec.writer import BinaryWriter
from .extensions.registry import ExtensionType
from .runtime.errors import CapacityExceededError, InvalidAccountDataError

logger = logging.getLogger(__name__)

MINT_SIZE = 82
ACCOUNT_SIZE = 165
MULTISIG_SIZE = 355
ACCOUNT_TYPE_SIZE = 1


class AccountType(IntEnum):
    """Value of the disambiguation byte."""

    UNINITIALIZED = 0
    MINT = 1
    ACCOUNT = 2


class RecordLayout(BaseModel):
    """
    Fixed part of a record kind.

    The TLV region starts at padded_base_length + tag_length. Buffers whose
    length is in legacy_lengths (other than base_length itself) belong to a
    different record shape and are never read as extended records.
    """
    name: str = Field(description="Record kind name")
    base_length: int = Field(ge=0, description="Size of the base record")
    padded_base_length: int = Field(ge=0, description="Offset of the account type tag")
    tag_length: int = Field(default=ACCOUNT_TYPE_SIZE, ge=0, le=8, description="Size of the account type tag")
    account_type: AccountType = Field(description="Tag value identifying this record kind")
    legacy_lengths: Tuple[int, ...] = Field(
        default=(MULTISIG_SIZE,),
        description="Buffer lengths reserved for other legacy fixed-size records",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_offsets(self) -> "RecordLayout":
        if self.padded_base_length < self.base_length:
            raise ValueError("padded_base_length must not be smaller than base_length")
        return self

    @property
    def tag_offset(self) -> int:
        return self.padded_base_length

    @property
    def tlv_offset(self) -> int:
        return self.padded_base_length + self.tag_length

    @property
    def padding_length(self) -> int:
        return self.padded_base_length - self.base_length

    def is_reserved_length(self, length: int) -> bool:
        """True if a buffer of this length is another record kind."""
        return length != self.base_length and length in self.legacy_lengths


MINT_LAYOUT = RecordLayout(
    name="mint",
    base_length=MINT_SIZE,
    padded_base_length=ACCOUNT_SIZE,
    account_type=AccountType.MINT,
)

ACCOUNT_LAYOUT = RecordLayout(
    name="account",
    base_length=ACCOUNT_SIZE,
    padded_base_length=ACCOUNT_SIZE,
    account_type=AccountType.ACCOUNT,
)


@dataclass(frozen=True)
class ExtendedRecord:
    """A record split into base bytes, tag and TLV region."""

    base: bytes
    account_type: Optional[AccountType]
    tlv_data: bytes

    @property
    def is_extended(self) -> bool:
        return self.account_type is not None

    def extensions(self) -> List[TlvEntry]:
        """Decode the TLV region."""
        return decode_tlv(self.tlv_data)

    def get_extension(self, extension_type: Union[ExtensionType, int]) -> Optional[bytes]:
        """Payload of one extension, or None when absent."""
        from .extensions.accessor import find

        return find(self.extensions(), extension_type)


def _read_tag(data, layout: RecordLayout) -> int:
    reader = BinaryReader(data, layout.tag_offset)
    if layout.tag_length == ACCOUNT_TYPE_SIZE:
        return reader.u8()
    return int.from_bytes(reader.bytes(layout.tag_length), "little")


def unpack_record(data: Union[bytes, bytearray, memoryview], layout: RecordLayout,
                  allow_uninitialized: bool = False) -> ExtendedRecord:
    """
    Split a raw record into base, account type and TLV region.

    The length is checked before the tag is read: a buffer exactly as long as
    the base record is a legacy record with no extensions.

    Args:
        data: Raw record bytes
        layout: Layout of the expected record kind
        allow_uninitialized: accept a zero tag (record being initialized)

    Returns:
        ExtendedRecord; account_type is None for legacy records

    Raises:
        InvalidAccountDataError: short buffer, reserved length, dirty
            padding, or a tag naming another record kind
    """
    length = len(data)
    if length < layout.base_length:
        raise InvalidAccountDataError(
            f"{layout.name} record needs {layout.base_length} bytes, got {length}",
            details={"length": length, "base_length": layout.base_length},
        )
    if layout.is_reserved_length(length):
        raise InvalidAccountDataError(
            f"Length {length} is reserved for a legacy record",
            details={"length": length},
        )

    base = bytes(data[:layout.base_length])
    if length == layout.base_length:
        logger.debug(f"Legacy {layout.name} record ({length} bytes), no extensions")
        return ExtendedRecord(base=base, account_type=None, tlv_data=b"")

    if length < layout.tlv_offset:
        raise InvalidAccountDataError(
            f"{layout.name} record of {length} bytes is too short for its account type",
            details={"length": length, "tlv_offset": layout.tlv_offset},
        )

    padding = data[layout.base_length:layout.padded_base_length]
    if any(padding):
        raise InvalidAccountDataError(
            f"{layout.name} padding before the account type is not zero",
            details={"offset": layout.base_length},
        )

    if layout.tag_length == 0:
        account_type = layout.account_type
    else:
        raw_tag = _read_tag(data, layout)
        if raw_tag == layout.account_type:
            account_type = layout.account_type
        elif raw_tag == AccountType.UNINITIALIZED and allow_uninitialized:
            account_type = AccountType.UNINITIALIZED
        else:
            raise InvalidAccountDataError(
                f"Account type {raw_tag} does not match {layout.name}",
                details={"account_type": raw_tag, "expected": int(layout.account_type)},
            )

    return ExtendedRecord(base=base, account_type=account_type,
                          tlv_data=bytes(data[layout.tlv_offset:]))


def pack_record(base: bytes, layout: RecordLayout, tlv_data: bytes = b"",
                total_length: Optional[int] = None,
                account_type: Optional[AccountType] = None) -> bytearray:
    """
    Build a raw record from its parts.

    With no TLV data and no larger total_length the legacy untagged record is
    returned. Otherwise the result carries padding, the tag, the TLV bytes,
    and zero fill up to total_length.

    Raises:
        InvalidAccountDataError: base has the wrong size or the result would
            have a reserved length
        CapacityExceededError: total_length is too small for the content
    """
    if len(base) != layout.base_length:
        raise InvalidAccountDataError(
            f"{layout.name} base must be {layout.base_length} bytes, got {len(base)}",
            details={"length": len(base)},
        )
    if not tlv_data and total_length in (None, layout.base_length):
        return bytearray(base)

    writer = BinaryWriter()
    writer.bytes(base)
    writer.zeros(layout.padding_length)
    tag = layout.account_type if account_type is None else account_type
    if layout.tag_length == ACCOUNT_TYPE_SIZE:
        writer.u8(tag)
    elif layout.tag_length:
        writer.bytes(int(tag).to_bytes(layout.tag_length, "little"))
    writer.bytes(tlv_data)

    used = len(writer)
    target = used if total_length is None else total_length
    if target < used:
        raise CapacityExceededError(
            f"{layout.name} record needs {used} bytes, {target} allocated",
            details={"needed": used, "allocated": target},
        )
    writer.zeros(target - used)

    if layout.is_reserved_length(target):
        raise InvalidAccountDataError(
            f"Extended {layout.name} record may not be {target} bytes long",
            details={"length": target},
        )
    return bytearray(writer.to_bytes())


__all__ = [
    "MINT_SIZE",
    "ACCOUNT_SIZE",
    "MULTISIG_SIZE",
    "ACCOUNT_TYPE_SIZE",
    "AccountType",
    "RecordLayout",
    "MINT_LAYOUT",
    "ACCOUNT_LAYOUT",
    "ExtendedRecord",
    "unpack_record",
    "pack_record",
]
