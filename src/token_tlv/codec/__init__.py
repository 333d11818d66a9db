"""
Token TLV Binary Codec Module

Key components:
- reader.py: Binary reader for fixed-width little-endian primitives
- writer.py: Binary writer for fixed-width little-endian primitives
- tlv.py: Extension entry encoding, padding-tolerant decoding and in-place append
"""

from .reader import BinaryReader
from .tlv import (
    TLV_HEADER_SIZE,
    TlvEntry,
    TlvScan,
    append_in_place,
    decode_tlv,
    encode_all,
    encode_entry,
    scan_tlv,
)
from .writer import BinaryWriter

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "TLV_HEADER_SIZE",
    "TlvEntry",
    "TlvScan",
    "append_in_place",
    "decode_tlv",
    "encode_all",
    "encode_entry",
    "scan_tlv",
]
