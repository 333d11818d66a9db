"""
Extension registry.

Maps every extension discriminant to the shape of its payload and to the
record kind (mint or token account) it may be attached to.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, Optional, Union

from ..runtime.errors import RegistryExhaustivenessError, UnknownExtensionTypeError


class ExtensionType(IntEnum):
    """Extension discriminants as stored in the TLV type field."""

    UNINITIALIZED = 0
    TRANSFER_FEE_CONFIG = 1
    TRANSFER_FEE_AMOUNT = 2
    MINT_CLOSE_AUTHORITY = 3
    CONFIDENTIAL_TRANSFER_MINT = 4
    CONFIDENTIAL_TRANSFER_ACCOUNT = 5
    DEFAULT_ACCOUNT_STATE = 6
    IMMUTABLE_OWNER = 7
    MEMO_TRANSFER = 8
    NON_TRANSFERABLE = 9
    INTEREST_BEARING_CONFIG = 10
    CPI_GUARD = 11
    PERMANENT_DELEGATE = 12
    NON_TRANSFERABLE_ACCOUNT = 13
    TRANSFER_HOOK = 14
    TRANSFER_HOOK_ACCOUNT = 15
    CONFIDENTIAL_TRANSFER_FEE_CONFIG = 16
    CONFIDENTIAL_TRANSFER_FEE_AMOUNT = 17
    METADATA_POINTER = 18
    TOKEN_METADATA = 19


class ExtensionScope(Enum):
    """Record kind an extension belongs to."""

    MINT = "mint"
    ACCOUNT = "account"


class ShapeKind(Enum):
    FIXED = "fixed"
    VARIABLE = "variable"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ExtensionShape:
    """Payload shape of an extension: fixed size, variable, or unknown."""

    kind: ShapeKind
    length: Optional[int] = None

    @classmethod
    def fixed(cls, length: int) -> "ExtensionShape":
        return cls(ShapeKind.FIXED, length)

    @property
    def is_fixed(self) -> bool:
        return self.kind is ShapeKind.FIXED

    @property
    def is_variable(self) -> bool:
        return self.kind is ShapeKind.VARIABLE

    @property
    def is_known(self) -> bool:
        return self.kind is not ShapeKind.UNKNOWN


VARIABLE = ExtensionShape(ShapeKind.VARIABLE)
UNKNOWN = ExtensionShape(ShapeKind.UNKNOWN)


# Payload sizes in bytes
EXTENSION_SHAPES: Dict[ExtensionType, ExtensionShape] = {
    ExtensionType.TRANSFER_FEE_CONFIG: ExtensionShape.fixed(108),
    ExtensionType.TRANSFER_FEE_AMOUNT: ExtensionShape.fixed(8),
    ExtensionType.MINT_CLOSE_AUTHORITY: ExtensionShape.fixed(32),
    ExtensionType.CONFIDENTIAL_TRANSFER_MINT: ExtensionShape.fixed(65),
    ExtensionType.CONFIDENTIAL_TRANSFER_ACCOUNT: ExtensionShape.fixed(295),
    ExtensionType.DEFAULT_ACCOUNT_STATE: ExtensionShape.fixed(1),
    ExtensionType.IMMUTABLE_OWNER: ExtensionShape.fixed(0),
    ExtensionType.MEMO_TRANSFER: ExtensionShape.fixed(1),
    ExtensionType.NON_TRANSFERABLE: ExtensionShape.fixed(0),
    ExtensionType.INTEREST_BEARING_CONFIG: ExtensionShape.fixed(52),
    ExtensionType.CPI_GUARD: ExtensionShape.fixed(1),
    ExtensionType.PERMANENT_DELEGATE: ExtensionShape.fixed(32),
    ExtensionType.NON_TRANSFERABLE_ACCOUNT: ExtensionShape.fixed(0),
    ExtensionType.TRANSFER_HOOK: ExtensionShape.fixed(64),
    ExtensionType.TRANSFER_HOOK_ACCOUNT: ExtensionShape.fixed(1),
    ExtensionType.CONFIDENTIAL_TRANSFER_FEE_CONFIG: ExtensionShape.fixed(129),
    ExtensionType.CONFIDENTIAL_TRANSFER_FEE_AMOUNT: ExtensionShape.fixed(32),
    ExtensionType.METADATA_POINTER: ExtensionShape.fixed(64),
    ExtensionType.TOKEN_METADATA: VARIABLE,
}

MINT_EXTENSIONS: FrozenSet[ExtensionType] = frozenset({
    ExtensionType.TRANSFER_FEE_CONFIG,
    ExtensionType.MINT_CLOSE_AUTHORITY,
    ExtensionType.CONFIDENTIAL_TRANSFER_MINT,
    ExtensionType.DEFAULT_ACCOUNT_STATE,
    ExtensionType.NON_TRANSFERABLE,
    ExtensionType.INTEREST_BEARING_CONFIG,
    ExtensionType.PERMANENT_DELEGATE,
    ExtensionType.TRANSFER_HOOK,
    ExtensionType.CONFIDENTIAL_TRANSFER_FEE_CONFIG,
    ExtensionType.METADATA_POINTER,
    ExtensionType.TOKEN_METADATA,
})

ACCOUNT_EXTENSIONS: FrozenSet[ExtensionType] = frozenset({
    ExtensionType.TRANSFER_FEE_AMOUNT,
    ExtensionType.CONFIDENTIAL_TRANSFER_ACCOUNT,
    ExtensionType.IMMUTABLE_OWNER,
    ExtensionType.MEMO_TRANSFER,
    ExtensionType.CPI_GUARD,
    ExtensionType.NON_TRANSFERABLE_ACCOUNT,
    ExtensionType.TRANSFER_HOOK_ACCOUNT,
    ExtensionType.CONFIDENTIAL_TRANSFER_FEE_AMOUNT,
})

# Account extension every token account of a mint must carry when the mint
# has the key extension
MINT_TO_ACCOUNT_EXTENSION: Dict[ExtensionType, ExtensionType] = {
    ExtensionType.TRANSFER_FEE_CONFIG: ExtensionType.TRANSFER_FEE_AMOUNT,
    ExtensionType.CONFIDENTIAL_TRANSFER_MINT: ExtensionType.CONFIDENTIAL_TRANSFER_ACCOUNT,
    ExtensionType.NON_TRANSFERABLE: ExtensionType.NON_TRANSFERABLE_ACCOUNT,
    ExtensionType.TRANSFER_HOOK: ExtensionType.TRANSFER_HOOK_ACCOUNT,
    ExtensionType.CONFIDENTIAL_TRANSFER_FEE_CONFIG: ExtensionType.CONFIDENTIAL_TRANSFER_FEE_AMOUNT,
}

# Extensions that may be added after the account is initialized
JIT_INITIALIZABLE: FrozenSet[ExtensionType] = frozenset({
    ExtensionType.MEMO_TRANSFER,
    ExtensionType.CPI_GUARD,
})


def to_extension_type(value: Union[int, ExtensionType]) -> Optional[ExtensionType]:
    """Return the ExtensionType for a raw discriminant, or None if unregistered."""
    try:
        return ExtensionType(value)
    except ValueError:
        return None


def shape_of(extension_type: Union[int, ExtensionType]) -> ExtensionShape:
    """
    Get the payload shape of an extension.

    Never raises: the gap marker and any discriminant outside the enum
    report an UNKNOWN shape so decoders can skip them.
    """
    known = to_extension_type(extension_type)
    if known is None:
        return UNKNOWN
    return EXTENSION_SHAPES.get(known, UNKNOWN)


def scope_of(extension_type: Union[int, ExtensionType]) -> ExtensionScope:
    """
    Get the record kind an extension belongs to.

    Raises:
        UnknownExtensionTypeError: for the gap marker or unregistered values
    """
    known = to_extension_type(extension_type)
    if known in MINT_EXTENSIONS:
        return ExtensionScope.MINT
    if known in ACCOUNT_EXTENSIONS:
        return ExtensionScope.ACCOUNT
    raise UnknownExtensionTypeError(
        f"No scope for extension type {extension_type}",
        details={"extension_type": int(extension_type)},
    )


def all_known_types() -> FrozenSet[ExtensionType]:
    """All real extension types (the gap marker excluded)."""
    return MINT_EXTENSIONS | ACCOUNT_EXTENSIONS


def mint_extensions() -> FrozenSet[ExtensionType]:
    return MINT_EXTENSIONS


def account_extensions() -> FrozenSet[ExtensionType]:
    return ACCOUNT_EXTENSIONS


def is_known(extension_type: Union[int, ExtensionType]) -> bool:
    return to_extension_type(extension_type) in all_known_types()


def account_type_of_mint_type(extension_type: Union[int, ExtensionType]) -> ExtensionType:
    """
    Get the account extension required by a mint extension.

    Returns UNINITIALIZED when the mint extension imposes nothing on accounts.
    """
    known = to_extension_type(extension_type)
    if known is None:
        return ExtensionType.UNINITIALIZED
    return MINT_TO_ACCOUNT_EXTENSION.get(known, ExtensionType.UNINITIALIZED)


def is_jit_initializable(extension_type: Union[int, ExtensionType]) -> bool:
    return to_extension_type(extension_type) in JIT_INITIALIZABLE


def assert_registry_exhaustive() -> None:
    """
    Check that the registry tables partition the discriminant space.

    Mint and account sets must be disjoint, together with UNINITIALIZED they
    must equal every ExtensionType member, every member must have a shape,
    and discriminants must run densely from 0.

    Raises:
        RegistryExhaustivenessError: describing every violation found
    """
    problems = []
    members = frozenset(ExtensionType)

    overlap = MINT_EXTENSIONS & ACCOUNT_EXTENSIONS
    if overlap:
        problems.append(f"in both mint and account sets: {sorted(t.name for t in overlap)}")

    covered = MINT_EXTENSIONS | ACCOUNT_EXTENSIONS | {ExtensionType.UNINITIALIZED}
    missing = members - covered
    if missing:
        problems.append(f"not classified: {sorted(t.name for t in missing)}")
    if ExtensionType.UNINITIALIZED in MINT_EXTENSIONS | ACCOUNT_EXTENSIONS:
        problems.append("UNINITIALIZED must not be classified")

    unshaped = (members - {ExtensionType.UNINITIALIZED}) - frozenset(EXTENSION_SHAPES)
    if unshaped:
        problems.append(f"no shape: {sorted(t.name for t in unshaped)}")

    values = sorted(int(t) for t in members)
    if values != list(range(len(values))):
        problems.append(f"discriminants are not dense: {values}")
    if values and values[-1] > 0xFFFF:
        problems.append("discriminant does not fit u16")

    for mint_type, account_type in MINT_TO_ACCOUNT_EXTENSION.items():
        if mint_type not in MINT_EXTENSIONS or account_type not in ACCOUNT_EXTENSIONS:
            problems.append(f"bad mint/account pairing {mint_type.name} -> {account_type.name}")

    if problems:
        raise RegistryExhaustivenessError(
            "Extension registry is not exhaustive: " + "; ".join(problems),
            details={"problems": problems},
        )


__all__ = [
    "ExtensionType",
    "ExtensionScope",
    "ShapeKind",
    "ExtensionShape",
    "VARIABLE",
    "UNKNOWN",
    "EXTENSION_SHAPES",
    "MINT_EXTENSIONS",
    "ACCOUNT_EXTENSIONS",
    "to_extension_type",
    "shape_of",
    "scope_of",
    "all_known_types",
    "mint_extensions",
    "account_extensions",
    "is_known",
    "account_type_of_mint_type",
    "is_jit_initializable",
    "assert_registry_exhaustive",
]
