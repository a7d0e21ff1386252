from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict


class ApyAdapter(ABC):
    """Computes base APY (in %) for the leverage pairs of one lending market.

    ``initialize`` fetches and caches market state once per refresh; after it
    returns, ``get_apy_base`` is a pure lookup and returns 0 for pairs the
    market does not know.
    """

    name: str = "adapter"

    @abstractmethod
    async def initialize(self) -> None:
        ...

    @abstractmethod
    def get_apy_base(self, asset_address: str, debt_address: str) -> float:
        ...


class ReserveRatesAdapter(ApyAdapter):
    """Adapter over per-token supply and borrow APYs.

    A leverage pair earns the supply APY of its asset and pays the borrow APY
    of its debt.
    """

    def __init__(self) -> None:
        self._supply_apy: Dict[str, float] = {}
        self._borrow_apy: Dict[str, float] = {}

    def set_rates(self, token: str, supply_apy: float, borrow_apy: float) -> None:
        self._supply_apy[token.lower()] = supply_apy
        self._borrow_apy[token.lower()] = borrow_apy

    def get_apy_base(self, asset_address: str, debt_address: str) -> float:
        supply = self._supply_apy.get(asset_address.lower())
        borrow = self._borrow_apy.get(debt_address.lower())
        if supply is None or borrow is None:
            return 0.0
        return supply - borrow
