"""Extension registry, sizing and lookup."""

# registry has to load before the modules that depend on the codec
from .registry import (
    ExtensionScope,
    ExtensionShape,
    ExtensionType,
    ShapeKind,
    account_extensions,
    account_type_of_mint_type,
    all_known_types,
    assert_registry_exhaustive,
    is_jit_initializable,
    mint_extensions,
    scope_of,
    shape_of,
)
from .accessor import find, get_extension_data, get_extension_types
from .length import (
    get_account_len,
    get_mint_len,
    get_new_record_len_for_extension_len,
    get_record_len,
    get_type_len,
    required_length,
)
from .extension_set import ExtensionSet

__all__ = [
    "ExtensionScope",
    "ExtensionShape",
    "ExtensionType",
    "ShapeKind",
    "account_extensions",
    "account_type_of_mint_type",
    "all_known_types",
    "assert_registry_exhaustive",
    "is_jit_initializable",
    "mint_extensions",
    "scope_of",
    "shape_of",
    "find",
    "get_extension_data",
    "get_extension_types",
    "get_account_len",
    "get_mint_len",
    "get_new_record_len_for_extension_len",
    "get_record_len",
    "get_type_len",
    "required_length",
    "ExtensionSet",
]
