from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

from web3 import AsyncWeb3

from leverage_vault.adapters.base import ReserveRatesAdapter
from leverage_vault.clients.chain import AAVE_POOL_ABI, RESERVE_DATA_COMPONENTS, call, contract
from leverage_vault.models import VaultEntry

logger = logging.getLogger(__name__)

RAY = 10**27
RESERVE_DATA_FIELDS = [c["name"] for c in RESERVE_DATA_COMPONENTS]


class AaveV3Adapter(ReserveRatesAdapter):
    name = "aave-v3"

    def __init__(self, w3: AsyncWeb3, vaults: Iterable[VaultEntry], pool_address: str):
        super().__init__()
        self.pool = contract(w3, pool_address, AAVE_POOL_ABI)
        tokens = {v.asset_address.lower() for v in vaults} | {v.debt_address.lower() for v in vaults}
        self.tokens: List[str] = sorted(tokens)

    async def initialize(self) -> None:
        await asyncio.gather(*(self._load_reserve(token) for token in self.tokens))
        logger.info(f"Aave V3 rates loaded for {len(self.tokens)} reserves")

    async def _load_reserve(self, token: str) -> None:
        raw = await call(self.pool.functions.getReserveData(AsyncWeb3.to_checksum_address(token)))
        reserve = dict(zip(RESERVE_DATA_FIELDS, raw))
        self.set_rates(
            token,
            reserve["currentLiquidityRate"] / RAY * 100.0,
            reserve["currentVariableBorrowRate"] / RAY * 100.0,
        )
