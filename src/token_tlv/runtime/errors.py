"""
Token TLV Error Model

This module provides the error handling framework for the extension codec.
Every structural problem with a buffer or a sizing request is reported as one
of the typed errors below; absence of an extension is never an error.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes for the extension codec."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Decode errors (100-199)
    DECODE_ERROR = 100
    TRUNCATED = 101
    DUPLICATE_EXTENSION = 102
    EXTENSION_SHAPE_MISMATCH = 103

    # Encode errors (200-299)
    ENCODE_ERROR = 200
    INVALID_EXTENSION_TYPE = 201
    PAYLOAD_TOO_LARGE = 202

    # Sizing errors (300-399)
    LENGTH_ERROR = 300
    UNKNOWN_REQUESTED_TYPE = 301
    INVALID_SCOPE_MIX = 302
    VARIABLE_LENGTH_REQUIRED = 303

    # Append errors (400-499)
    APPEND_ERROR = 400
    CAPACITY_EXCEEDED = 401
    EXTENSION_ALREADY_PRESENT = 402

    # Layout errors (500-599)
    INVALID_ACCOUNT_DATA = 500

    # Registry errors (600-699)
    UNKNOWN_EXTENSION_TYPE = 600
    REGISTRY_EXHAUSTIVENESS_VIOLATION = 601


class TlvError(Exception):
    """
    Base class for all codec errors.

    Carries a machine-readable code and optional structured details.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a codec error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details (offsets, types, lengths)
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class DecodeError(TlvError):
    """Malformed TLV region."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DECODE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class TruncatedError(DecodeError):
    """An entry declares more payload bytes than the buffer holds."""

    def __init__(self, message: str = "Entry runs past end of buffer",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.TRUNCATED, details, cause)


class DuplicateExtensionError(DecodeError):
    """The same extension type appears twice."""

    def __init__(self, message: str = "Duplicate extension",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.DUPLICATE_EXTENSION, details, cause)


class ExtensionShapeError(DecodeError):
    """Payload length does not match the registered fixed size."""

    def __init__(self, message: str = "Extension payload has wrong length",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.EXTENSION_SHAPE_MISMATCH, details, cause)


class EncodeError(TlvError):
    """Entries that cannot be written."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class InvalidExtensionTypeError(EncodeError):
    """Entry type is the reserved gap marker or out of u16 range."""

    def __init__(self, message: str = "Invalid extension type",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_EXTENSION_TYPE, details, cause)


class PayloadTooLargeError(EncodeError):
    """Payload does not fit a u16 length field."""

    def __init__(self, message: str = "Payload too large",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.PAYLOAD_TOO_LARGE, details, cause)


class LengthError(TlvError):
    """Bad input to the length calculator."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.LENGTH_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class UnknownRequestedTypeError(LengthError):
    """Sizing request names the gap marker or an unregistered type."""

    def __init__(self, message: str = "Unknown extension type requested",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNKNOWN_REQUESTED_TYPE, details, cause)


class InvalidScopeMixError(LengthError):
    """Mint-level and account-level extensions requested for one record."""

    def __init__(self, message: str = "Mint and account extensions mixed",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_SCOPE_MIX, details, cause)


class VariableLengthRequiredError(LengthError):
    """A variable-shape type was requested without a payload length."""

    def __init__(self, message: str = "Variable-length extension needs an explicit length",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.VARIABLE_LENGTH_REQUIRED, details, cause)


class AppendError(TlvError):
    """In-place append rejected."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.APPEND_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class CapacityExceededError(AppendError):
    """No free trailing room for the new entry."""

    def __init__(self, message: str = "Not enough free space for extension",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.CAPACITY_EXCEEDED, details, cause)


class ExtensionAlreadyPresentError(AppendError):
    """The buffer already holds an entry of that type."""

    def __init__(self, message: str = "Extension already present",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.EXTENSION_ALREADY_PRESENT, details, cause)


class InvalidAccountDataError(TlvError):
    """Base record, padding or account-type tag is malformed."""

    def __init__(self, message: str = "Invalid account data",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_ACCOUNT_DATA, details, cause)


class UnknownExtensionTypeError(TlvError):
    """Discriminant is not a registered extension."""

    def __init__(self, message: str = "Unknown extension type",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNKNOWN_EXTENSION_TYPE, details, cause)


class RegistryExhaustivenessError(TlvError):
    """Registry tables do not cover the discriminant space exactly."""

    def __init__(self, message: str = "Extension registry is not exhaustive",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.REGISTRY_EXHAUSTIVENESS_VIOLATION, details, cause)


__all__ = [
    "ErrorCode",
    "TlvError",
    "DecodeError",
    "TruncatedError",
    "DuplicateExtensionError",
    "ExtensionShapeError",
    "EncodeError",
    "InvalidExtensionTypeError",
    "PayloadTooLargeError",
    "LengthError",
    "UnknownRequestedTypeError",
    "InvalidScopeMixError",
    "VariableLengthRequiredError",
    "AppendError",
    "CapacityExceededError",
    "ExtensionAlreadyPresentError",
    "InvalidAccountDataError",
    "UnknownExtensionTypeError",
    "RegistryExhaustivenessError",
]
