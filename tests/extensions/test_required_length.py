"""
Sizing tests: buffers must be allocated before any TLV bytes exist.
"""

import pytest

from token_tlv.codec.tlv import encode_all
from token_tlv.extensions.length import (
    adjust_len_for_reserved,
    get_account_len,
    get_mint_len,
    get_new_record_len_for_extension_len,
    get_type_len,
    required_length,
)
from token_tlv.extensions.registry import ExtensionScope, ExtensionType
from token_tlv.layout import ACCOUNT_LAYOUT, ACCOUNT_SIZE, MINT_LAYOUT, MINT_SIZE, MULTISIG_SIZE, pack_record
from token_tlv.runtime.errors import (
    InvalidAccountDataError,
    InvalidScopeMixError,
    LengthError,
    UnknownRequestedTypeError,
    VariableLengthRequiredError,
)


class TestRequiredLength:

    def test_scenario_d(self):
        """128-byte base, 1-byte tag, one 32-byte fixed extension."""
        assert required_length(128, 1, {ExtensionType.MINT_CLOSE_AUTHORITY}) == 128 + 1 + 4 + 32 == 165

    def test_transfer_fee_config(self):
        assert required_length(128, 1, {ExtensionType.TRANSFER_FEE_CONFIG}) == 128 + 1 + 4 + 108

    def test_empty_set(self):
        assert required_length(128, 1, []) == 129

    def test_extra_padding(self):
        assert required_length(10, 1, [ExtensionType.CPI_GUARD], extra_padding=7) == 10 + 1 + 5 + 7

    def test_zero_length_extension_costs_header(self):
        assert required_length(0, 0, [ExtensionType.IMMUTABLE_OWNER]) == 4

    def test_duplicates_counted_once(self):
        assert required_length(0, 1, [ExtensionType.CPI_GUARD, ExtensionType.CPI_GUARD, 11]) == 1 + 5

    def test_several_account_extensions(self):
        types = [ExtensionType.TRANSFER_FEE_AMOUNT, ExtensionType.MEMO_TRANSFER, ExtensionType.CPI_GUARD]
        assert required_length(165, 1, types) == 165 + 1 + 12 + 5 + 5

    @pytest.mark.parametrize("bad", [ExtensionType.UNINITIALIZED, 0, 20, 4242])
    def test_unknown_type_rejected(self, bad):
        with pytest.raises(UnknownRequestedTypeError):
            required_length(165, 1, [ExtensionType.CPI_GUARD, bad])

    def test_scope_mix_rejected(self):
        with pytest.raises(InvalidScopeMixError):
            required_length(165, 1, [ExtensionType.CPI_GUARD, ExtensionType.MINT_CLOSE_AUTHORITY])

    def test_requested_scope_enforced(self):
        with pytest.raises(InvalidScopeMixError):
            required_length(165, 1, [ExtensionType.MINT_CLOSE_AUTHORITY], scope=ExtensionScope.ACCOUNT)
        assert required_length(165, 1, [ExtensionType.CPI_GUARD], scope=ExtensionScope.ACCOUNT) == 171

    def test_variable_type_needs_length(self):
        with pytest.raises(VariableLengthRequiredError):
            required_length(165, 1, [ExtensionType.TOKEN_METADATA])

    def test_variable_type_with_length(self):
        lengths = {ExtensionType.TOKEN_METADATA: 100}
        assert required_length(165, 1, [ExtensionType.TOKEN_METADATA], variable_lengths=lengths) == 165 + 1 + 104

    def test_variable_length_by_raw_int(self):
        assert required_length(0, 0, [19], variable_lengths={19: 3}) == 7

    def test_variable_length_out_of_range(self):
        with pytest.raises(ValueError):
            required_length(0, 0, [ExtensionType.TOKEN_METADATA],
                            variable_lengths={ExtensionType.TOKEN_METADATA: 70000})

    def test_negative_lengths(self):
        with pytest.raises(ValueError):
            required_length(-1, 1, [])
        with pytest.raises(ValueError):
            required_length(1, 1, [], extra_padding=-1)

    def test_errors_share_base(self):
        with pytest.raises(LengthError):
            required_length(1, 1, [ExtensionType.UNINITIALIZED])

    def test_get_type_len(self):
        assert get_type_len(ExtensionType.CONFIDENTIAL_TRANSFER_ACCOUNT) == 295
        with pytest.raises(UnknownRequestedTypeError):
            get_type_len(ExtensionType.UNINITIALIZED)


class TestAccountAndMintLen:

    def test_account_without_extensions_is_legacy_size(self):
        assert get_account_len([]) == ACCOUNT_SIZE

    def test_mint_without_extensions_is_legacy_size(self):
        assert get_mint_len([]) == MINT_SIZE

    def test_account_with_extensions(self):
        assert get_account_len([ExtensionType.IMMUTABLE_OWNER]) == 170
        assert get_account_len([ExtensionType.MEMO_TRANSFER, ExtensionType.CPI_GUARD]) == 176

    def test_account_extra_space_only(self):
        """Extra space alone still needs the account type byte."""
        assert get_account_len([], extra_padding=3) == 169

    def test_mint_is_padded_to_account_size(self):
        assert get_mint_len([ExtensionType.MINT_CLOSE_AUTHORITY]) == 165 + 1 + 36

    def test_mint_with_metadata(self):
        lengths = {ExtensionType.TOKEN_METADATA: 10}
        types = [ExtensionType.METADATA_POINTER, ExtensionType.TOKEN_METADATA]
        assert get_mint_len(types, variable_lengths=lengths) == 166 + 68 + 14

    def test_multisig_length_is_avoided(self):
        """An extended record never has the legacy multisig length."""
        assert get_account_len([], extra_padding=MULTISIG_SIZE - 166) == MULTISIG_SIZE + 2
        assert get_account_len([ExtensionType.TRANSFER_FEE_AMOUNT], extra_padding=MULTISIG_SIZE - 166 - 12) == 357
        assert get_mint_len([ExtensionType.NON_TRANSFERABLE], extra_padding=MULTISIG_SIZE - 170) == 357

    def test_adjust_leaves_other_lengths(self):
        assert adjust_len_for_reserved(354, ACCOUNT_LAYOUT) == 354
        assert adjust_len_for_reserved(356, ACCOUNT_LAYOUT) == 356

    def test_wrong_scope_for_record_kind(self):
        with pytest.raises(InvalidScopeMixError):
            get_account_len([ExtensionType.TRANSFER_FEE_CONFIG])
        with pytest.raises(InvalidScopeMixError):
            get_mint_len([ExtensionType.TRANSFER_FEE_AMOUNT])


class TestReallocLen:
    """Growing an existing record for one more extension."""

    def test_legacy_mint_gains_padding_and_tag(self, mint_base):
        assert get_new_record_len_for_extension_len(mint_base, MINT_LAYOUT,
                                                    ExtensionType.MINT_CLOSE_AUTHORITY, 32) == 202

    def test_existing_extension_is_replaced(self, mint_base):
        data = pack_record(mint_base, MINT_LAYOUT, encode_all([(ExtensionType.MINT_CLOSE_AUTHORITY, bytes(32))]))
        assert len(data) == 202
        assert get_new_record_len_for_extension_len(data, MINT_LAYOUT, ExtensionType.MINT_CLOSE_AUTHORITY, 32) == 202

    def test_variable_extension_grows(self, mint_base):
        tlv = encode_all([(ExtensionType.TOKEN_METADATA, bytes(10))])
        data = pack_record(mint_base, MINT_LAYOUT, tlv)
        assert len(data) == 180
        assert get_new_record_len_for_extension_len(data, MINT_LAYOUT, ExtensionType.TOKEN_METADATA, 25) == 195

    def test_new_extension_adds_entry(self, account_base):
        data = pack_record(account_base, ACCOUNT_LAYOUT, encode_all([(ExtensionType.IMMUTABLE_OWNER, b"")]))
        assert get_new_record_len_for_extension_len(data, ACCOUNT_LAYOUT, ExtensionType.MEMO_TRANSFER, 1) == 175

    def test_malformed_record(self):
        with pytest.raises(InvalidAccountDataError):
            get_new_record_len_for_extension_len(bytes(10), ACCOUNT_LAYOUT, ExtensionType.MEMO_TRANSFER, 1)
