"""Runtime helpers for the token TLV codec"""

from .errors import ErrorCode, TlvError

__all__ = [
    "ErrorCode",
    "TlvError",
]
