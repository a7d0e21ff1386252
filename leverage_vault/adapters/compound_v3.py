from __future__ import annotations

import logging

from web3 import AsyncWeb3

from leverage_vault.adapters.base import ApyAdapter
from leverage_vault.clients.chain import COMET_ABI, call, contract

logger = logging.getLogger(__name__)

SECONDS_PER_YEAR = 31_536_000
WAD = 10**18


class CompoundV3Adapter(ApyAdapter):
    """Single-base-asset Comet market.

    Collateral earns nothing in Comet, so only the base token side of a pair
    carries a rate.
    """

    name = "compound-v3"

    def __init__(self, w3: AsyncWeb3, comet_address: str):
        self.comet_address = comet_address
        self.comet = contract(w3, comet_address, COMET_ABI)
        self.base_token: str | None = None
        self.supply_apy = 0.0
        self.borrow_apy = 0.0

    async def initialize(self) -> None:
        functions = self.comet.functions
        self.base_token = (await call(functions.baseToken())).lower()
        utilization = await call(functions.getUtilization())
        supply_rate = await call(functions.getSupplyRate(utilization))
        borrow_rate = await call(functions.getBorrowRate(utilization))
        self.supply_apy = supply_rate * SECONDS_PER_YEAR / WAD * 100.0
        self.borrow_apy = borrow_rate * SECONDS_PER_YEAR / WAD * 100.0
        logger.info(
            f"Compound V3 {self.comet_address}: base={self.base_token} "
            f"supply={self.supply_apy:.4f}% borrow={self.borrow_apy:.4f}%"
        )

    def get_apy_base(self, asset_address: str, debt_address: str) -> float:
        if self.base_token is None:
            return 0.0
        asset_is_base = asset_address.lower() == self.base_token
        debt_is_base = debt_address.lower() == self.base_token
        if not (asset_is_base or debt_is_base):
            return 0.0
        earned = self.supply_apy if asset_is_base else 0.0
        paid = self.borrow_apy if debt_is_base else 0.0
        return earned - paid
