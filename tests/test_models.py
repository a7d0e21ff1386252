import pytest
from pydantic import ValidationError

from leverage_vault.errors import NotInitializedError
from leverage_vault.models import PairBalance, PoolRecord, RefreshState, VaultEntry, pair_key


def test_tvl_lookup_before_initialization_raises():
    state = RefreshState()
    assert not state.initialized
    with pytest.raises(NotInitializedError):
        state.pair_tvl_usd("0xa1", "0xa2")


def test_tvl_lookup_is_case_insensitive_and_defaults_to_zero():
    state = RefreshState()
    state.mark_initialized({"0xa1-0xa2": 12.5})
    assert state.initialized
    assert state.pair_tvl_usd("0xA1", "0xA2") == 12.5
    assert state.pair_tvl_usd("0xb1", "0xb2") == 0


def test_separate_states_do_not_share_tables():
    first, second = RefreshState(), RefreshState()
    first.mark_initialized({"0xa1-0xa2": 1.0})
    with pytest.raises(NotInitializedError):
        second.pair_tvl_usd("0xa1", "0xa2")


def test_pair_key_lowercases():
    assert pair_key("0xAbC", "0xDeF") == "0xabc-0xdef"


def test_vault_entry_reads_registry_keys():
    vault = VaultEntry.model_validate(
        {
            "protocol": "facCompound",
            "market": "facCompoundNative",
            "assetAddress": "0xAsset",
            "assetSymbol": "ARB",
            "debtAddress": "0xDebt",
            "debtSymbol": "USDC",
            "pool": "0xVault",
        }
    )
    assert vault.vault_address == "0xVault"
    assert vault.asset_address == "0xAsset"
    with pytest.raises(ValidationError):
        vault.market = "other"


def test_pair_balance_parses_subgraph_strings():
    pair = PairBalance.model_validate(
        {
            "id": "0xpair",
            "assetTokenAddress": "0xAAA",
            "debtTokenAddress": "0xBBB",
            "assetBalanceRaw": "123456789012345678901234",
            "debtBalanceRaw": "0",
        }
    )
    assert pair.asset_address == "0xaaa"
    assert pair.debt_address == "0xbbb"
    assert pair.asset_balance_raw == 123456789012345678901234
    assert pair.debt_balance_raw == 0


def test_pool_record_dumps_output_keys():
    record = PoolRecord(
        pool="p",
        chain="arbitrum",
        project="factor-leverage-vault",
        symbol="s",
        tvl_usd=1.0,
        apy_base=2.0,
        underlying_tokens=["0xa", "0xb"],
        url="u",
    )
    assert record.model_dump(by_alias=True) == {
        "pool": "p",
        "chain": "arbitrum",
        "project": "factor-leverage-vault",
        "symbol": "s",
        "tvlUsd": 1.0,
        "apyBase": 2.0,
        "underlyingTokens": ["0xa", "0xb"],
        "url": "u",
    }
