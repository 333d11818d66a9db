"""
Test factories for extension buffers.

Random extension subsets, payloads of the registered size, and complete
mint/account records built from them.
"""

from __future__ import annotations
import random
from typing import Iterable, List, Optional, Sequence, Tuple

from token_tlv.extensions.registry import (
    ACCOUNT_EXTENSIONS,
    MINT_EXTENSIONS,
    ExtensionType,
    shape_of,
)
from token_tlv.codec.tlv import encode_all
from token_tlv.extensions.length import get_record_len
from token_tlv.layout import RecordLayout, pack_record

SORTED_ACCOUNT_EXTENSIONS = sorted(ACCOUNT_EXTENSIONS)
SORTED_MINT_EXTENSIONS = sorted(MINT_EXTENSIONS)


def mk_payload(extension_type: ExtensionType, rng: Optional[random.Random] = None,
               variable_max: int = 64) -> bytes:
    """
    Create a payload of the right size for an extension.

    Variable-shape types get a random length up to variable_max.
    """
    rng = rng or random.Random(int(extension_type))
    shape = shape_of(extension_type)
    length = shape.length if shape.is_fixed else rng.randint(0, variable_max)
    return bytes(rng.getrandbits(8) for _ in range(length))


def choose_extensions(extensions: Sequence[ExtensionType], rng: random.Random) -> List[ExtensionType]:
    """
    Pick a random non-empty subset of extensions in random order.

    Empty sets are covered by dedicated tests.
    """
    shuffled = list(extensions)
    rng.shuffle(shuffled)
    return shuffled[rng.randrange(len(shuffled)):]


def mk_entries(extension_types: Iterable[ExtensionType],
               rng: Optional[random.Random] = None) -> List[Tuple[ExtensionType, bytes]]:
    """(type, payload) pairs for the given types, in order."""
    return [(t, mk_payload(t, rng)) for t in extension_types]


def mk_record(layout: RecordLayout, entries: List[Tuple[ExtensionType, bytes]],
              extra_padding: int = 0, base: Optional[bytes] = None) -> bytearray:
    """Allocate and fill a record the way an initializing program would."""
    variable_lengths = {t: len(p) for t, p in entries if shape_of(t).is_variable}
    total = get_record_len(layout, [t for t, _ in entries], extra_padding, variable_lengths)
    if base is None:
        base = bytes(i % 256 for i in range(layout.base_length))
    return pack_record(base, layout, encode_all(entries), total_length=total)
