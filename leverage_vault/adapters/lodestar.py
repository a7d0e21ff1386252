from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence

from web3 import AsyncWeb3

from leverage_vault.adapters.base import ReserveRatesAdapter
from leverage_vault.clients.chain import COMPTROLLER_ABI, LTOKEN_ABI, call, contract

logger = logging.getLogger(__name__)

# Rates are per L1 block (~12s) on Arbitrum
BLOCKS_PER_YEAR = 2_628_000
WAD = 10**18


class LodestarAdapter(ReserveRatesAdapter):
    name = "lodestar"

    def __init__(self, w3: AsyncWeb3, comptroller_address: str, markets: Sequence[str]):
        super().__init__()
        self.w3 = w3
        self.comptroller = contract(w3, comptroller_address, COMPTROLLER_ABI)
        self.markets: List[str] = list(markets)

    async def initialize(self) -> None:
        markets = self.markets
        if not markets:
            markets = list(await call(self.comptroller.functions.getAllMarkets()))
        await asyncio.gather(*(self._load_market(m) for m in markets))
        logger.info(f"Lodestar rates loaded for {len(markets)} markets")

    async def _load_market(self, l_token_address: str) -> None:
        l_token = contract(self.w3, l_token_address, LTOKEN_ABI)
        underlying = await call(l_token.functions.underlying())
        supply_rate = await call(l_token.functions.supplyRatePerBlock())
        borrow_rate = await call(l_token.functions.borrowRatePerBlock())
        self.set_rates(
            underlying,
            supply_rate * BLOCKS_PER_YEAR / WAD * 100.0,
            borrow_rate * BLOCKS_PER_YEAR / WAD * 100.0,
        )
