"""
Binary Writer

Builds extension headers and record images from fixed-width little-endian
integers and raw byte runs.
"""

import struct


class BinaryWriter:
    """
    Growing output buffer.

    Integers go through struct.pack, so a value that does not fit its width
    raises struct.error and nothing is appended.
    """

    def __init__(self):
        self._out = bytearray()

    def __len__(self) -> int:
        return len(self._out)

    def u8(self, v: int) -> None:
        self._out += struct.pack("<B", v)

    def u16le(self, v: int) -> None:
        """Append a little-endian u16 (extension type and length fields)."""
        self._out += struct.pack("<H", v)

    def bytes(self, v) -> None:
        """Append v as-is, with no length prefix."""
        self._out += v

    def zeros(self, n: int) -> None:
        if n < 0:
            raise ValueError("Cannot write a negative number of zero bytes")
        self._out += b"\x00" * n

    def to_bytes(self) -> bytes:
        return bytes(self._out)
