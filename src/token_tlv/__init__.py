"""
Token TLV - extension container codec for token mints and accounts

Parses and produces records made of a fixed-size base, an account-type
byte, and a flat sequence of type-length-value extension entries.
"""

from .runtime.errors import *
from .extensions import (
    ExtensionScope,
    ExtensionSet,
    ExtensionShape,
    ExtensionType,
    ShapeKind,
    account_extensions,
    account_type_of_mint_type,
    all_known_types,
    assert_registry_exhaustive,
    find,
    get_account_len,
    get_extension_data,
    get_extension_types,
    get_mint_len,
    get_new_record_len_for_extension_len,
    get_record_len,
    get_type_len,
    is_jit_initializable,
    mint_extensions,
    required_length,
    scope_of,
    shape_of,
)
from .codec import (
    TLV_HEADER_SIZE,
    BinaryReader,
    BinaryWriter,
    TlvEntry,
    TlvScan,
    append_in_place,
    decode_tlv,
    encode_all,
    encode_entry,
    scan_tlv,
)
from .layout import (
    ACCOUNT_LAYOUT,
    ACCOUNT_SIZE,
    ACCOUNT_TYPE_SIZE,
    MINT_LAYOUT,
    MINT_SIZE,
    MULTISIG_SIZE,
    AccountType,
    ExtendedRecord,
    RecordLayout,
    pack_record,
    unpack_record,
)

__version__ = "0.3.0"
__all__ = [
    # Errors
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

    # Registry and lookup
    "ExtensionScope",
    "ExtensionSet",
    "ExtensionShape",
    "ExtensionType",
    "ShapeKind",
    "account_extensions",
    "account_type_of_mint_type",
    "all_known_types",
    "assert_registry_exhaustive",
    "find",
    "get_extension_data",
    "get_extension_types",
    "is_jit_initializable",
    "mint_extensions",
    "scope_of",
    "shape_of",

    # Sizing
    "get_account_len",
    "get_mint_len",
    "get_new_record_len_for_extension_len",
    "get_record_len",
    "get_type_len",
    "required_length",

    # Codec
    "TLV_HEADER_SIZE",
    "BinaryReader",
    "BinaryWriter",
    "TlvEntry",
    "TlvScan",
    "append_in_place",
    "decode_tlv",
    "encode_all",
    "encode_entry",
    "scan_tlv",

    # Layout
    "ACCOUNT_LAYOUT",
    "ACCOUNT_SIZE",
    "ACCOUNT_TYPE_SIZE",
    "MINT_LAYOUT",
    "MINT_SIZE",
    "MULTISIG_SIZE",
    "AccountType",
    "ExtendedRecord",
    "RecordLayout",
    "pack_record",
    "unpack_record",
]
