"""Lookup of extension payloads in decoded or raw TLV data."""

from __future__ import annotations
from typing import Iterable, List, Optional, Union

from ..codec.tlv import TlvEntry, decode_tlv
from .registry import ExtensionType


def find(entries: Iterable[TlvEntry], extension_type: Union[ExtensionType, int]) -> Optional[bytes]:
    """
    Get the payload of an extension from decoded entries.

    Returns None when the extension is absent; absence is never an error.
    """
    wanted = int(extension_type)
    for entry in entries:
        if int(entry.extension_type) == wanted:
            return entry.payload
    return None


def get_extension_data(extension_type: Union[ExtensionType, int],
                       tlv_data: Union[bytes, bytearray, memoryview]) -> Optional[bytes]:
    """Decode a TLV region and return one extension's payload, or None."""
    return find(decode_tlv(tlv_data), extension_type)


def get_extension_types(tlv_data: Union[bytes, bytearray, memoryview]) -> List[ExtensionType]:
    """Registered extension types present in a TLV region, in buffer order."""
    return [entry.extension_type for entry in decode_tlv(tlv_data) if entry.is_known]
