from __future__ import annotations

from typing import Iterable, List

from leverage_vault.adapters.registry import AdapterRegistry
from leverage_vault.config import Settings
from leverage_vault.models import PoolRecord, RefreshState, VaultEntry


def pool_id(market: str, asset_address: str, debt_address: str, chain: str) -> str:
    return f"{market}-{asset_address}-{debt_address}-{chain}".lower()


def pool_url(base_url: str, vault: VaultEntry) -> str:
    return (
        f"{base_url}/{vault.protocol}/{vault.market}/open-pair"
        f"?asset={vault.asset_address}&debt={vault.debt_address}&vault={vault.vault_address}"
    )


def pool_symbol(vault: VaultEntry) -> str:
    return f"{vault.protocol} {vault.asset_symbol}/{vault.debt_symbol}"


def build_record(vault: VaultEntry, state: RefreshState, adapters: AdapterRegistry, settings: Settings) -> PoolRecord:
    adapter = adapters.get(vault.market)
    return PoolRecord(
        pool=pool_id(vault.market, vault.asset_address, vault.debt_address, settings.CHAIN),
        chain=settings.CHAIN,
        project=settings.PROJECT,
        symbol=pool_symbol(vault),
        tvl_usd=state.pair_tvl_usd(vault.asset_address, vault.debt_address),
        apy_base=adapter.get_apy_base(vault.asset_address, vault.debt_address),
        underlying_tokens=[vault.asset_address, vault.debt_address],
        url=pool_url(settings.APP_BASE_URL, vault),
    )


def build_records(vaults: Iterable[VaultEntry], state: RefreshState, adapters: AdapterRegistry, settings: Settings) -> List[PoolRecord]:
    """One record per vault, in registry order."""
    return [build_record(v, state, adapters, settings) for v in vaults]


def build_listing_records(vaults: Iterable[VaultEntry], settings: Settings) -> List[PoolRecord]:
    """Zero-valued records keyed by vault address; needs no refresh state."""
    return [
        PoolRecord(
            pool=f"{v.vault_address}-{settings.CHAIN}".lower(),
            chain=settings.CHAIN,
            project=settings.LISTING_PROJECT,
            symbol=pool_symbol(v),
            tvl_usd=0.0,
            apy_base=0.0,
            underlying_tokens=[v.asset_address, v.debt_address],
            url=pool_url(settings.APP_BASE_URL, v),
        )
        for v in vaults
    ]
