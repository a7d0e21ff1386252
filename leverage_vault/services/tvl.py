from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from leverage_vault.clients.prices import get_coin_price_map, price_of
from leverage_vault.clients.subgraph import fetch_pair_balances
from leverage_vault.config import Settings, get_settings
from leverage_vault.http import HttpClient
from leverage_vault.models import PairBalance, PriceEntry, TvlTable, VaultEntry, pair_key

logger = logging.getLogger(__name__)

WAD = 10**18


def build_tvl_table(pairs: List[PairBalance], prices: Dict[str, PriceEntry], vaults: Iterable[VaultEntry]) -> TvlTable:
    """Net USD value (asset minus debt) per pair key.

    Duplicate pair keys overwrite (last write wins). Every registry pair the
    subgraph did not report is filled with 0.
    """
    tvl: TvlTable = {}
    for pair in pairs:
        asset_usd = pair.asset_balance_raw / WAD * price_of(prices, pair.asset_address)
        debt_usd = pair.debt_balance_raw / WAD * price_of(prices, pair.debt_address)
        tvl[pair_key(pair.asset_address, pair.debt_address)] = asset_usd - debt_usd

    for vault in vaults:
        tvl.setdefault(pair_key(vault.asset_address, vault.debt_address), 0.0)
    return tvl


async def initialize_tvl_table(http: HttpClient, vaults: Iterable[VaultEntry], settings: Settings | None = None) -> TvlTable:
    settings = settings or get_settings()
    pairs = await fetch_pair_balances(http, settings)
    tokens = {p.asset_address for p in pairs} | {p.debt_address for p in pairs}
    prices = await get_coin_price_map(http, tokens, settings)
    table = build_tvl_table(pairs, prices, vaults)
    logger.info(f"TVL table built: {len(pairs)} subgraph pairs, {len(table)} keys")
    return table
