"""
Binary Reader

Cursor over a byte buffer for the fixed-width little-endian integers used in
extension headers and the account type tag. There is no alignment.
"""

import builtins
import struct

_U16 = struct.Struct("<H")


class BinaryReader:
    """
    Reads primitives from bytes, bytearray or memoryview without copying the buffer.

    A read past the end raises IndexError and does not move the cursor.
    """

    def __init__(self, buf, offset: int = 0):
        self._buf = buf
        self._pos = offset

    @property
    def offset(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return max(len(self._buf) - self._pos, 0)

    def _advance(self, n: int, what: str) -> int:
        start = self._pos
        if start + n > len(self._buf):
            raise IndexError(f"Read of {what} at offset {start} runs past end of {len(self._buf)}-byte buffer")
        self._pos = start + n
        return start

    def _unpack(self, fmt: struct.Struct, what: str) -> int:
        start = self._advance(fmt.size, what)
        return fmt.unpack_from(self._buf, start)[0]

    def u8(self) -> int:
        return self._buf[self._advance(1, "u8")]

    def u16le(self) -> int:
        """Read a little-endian u16 (extension type and length fields)."""
        return self._unpack(_U16, "u16le")

    def bytes(self, n: int) -> builtins.bytes:
        """
        Copy the next n bytes out of the buffer.

        Raises:
            ValueError: n is negative
            IndexError: fewer than n bytes remain
        """
        if n < 0:
            raise ValueError("Cannot read a negative number of bytes")
        start = self._advance(n, f"{n} bytes")
        return builtins.bytes(self._buf[start:start + n])
