from .factories import (
    SORTED_ACCOUNT_EXTENSIONS,
    SORTED_MINT_EXTENSIONS,
    choose_extensions,
    mk_entries,
    mk_payload,
    mk_record,
)
from .parity import assert_hex_equal

__all__ = [
    "SORTED_ACCOUNT_EXTENSIONS",
    "SORTED_MINT_EXTENSIONS",
    "choose_extensions",
    "mk_entries",
    "mk_payload",
    "mk_record",
    "assert_hex_equal",
]
