from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List

from web3 import AsyncWeb3

from leverage_vault.adapters.aave_v3 import AaveV3Adapter
from leverage_vault.adapters.base import ApyAdapter
from leverage_vault.adapters.compound_v3 import CompoundV3Adapter
from leverage_vault.adapters.dummy import DummyAdapter
from leverage_vault.adapters.lodestar import LodestarAdapter
from leverage_vault.config import Settings
from leverage_vault.models import VaultEntry
from leverage_vault.vaults import vaults_for_market


class Market(str, Enum):
    AAVE_V3 = "facAAVEv3"
    COMPOUND = "facCompound"
    COMPOUND_NATIVE = "facCompoundNative"
    LODESTAR = "facLodestar"

    @classmethod
    def parse(cls, market: str) -> "Market | None":
        try:
            return cls(market)
        except ValueError:
            return None


class AdapterRegistry:
    """Market -> APY adapter, with a zero-APY fallback for unknown markets."""

    def __init__(self, adapters: Dict[Market, ApyAdapter], fallback: ApyAdapter | None = None):
        self._adapters = dict(adapters)
        self.fallback = fallback or DummyAdapter()

    def get(self, market: str) -> ApyAdapter:
        key = Market.parse(market)
        if key is None or key not in self._adapters:
            return self.fallback
        return self._adapters[key]

    def all(self) -> List[ApyAdapter]:
        return list(self._adapters.values())


def build_default_registry(w3: AsyncWeb3, vaults: Iterable[VaultEntry], settings: Settings) -> AdapterRegistry:
    vaults = list(vaults)
    return AdapterRegistry(
        {
            Market.AAVE_V3: AaveV3Adapter(w3, vaults_for_market(vaults, Market.AAVE_V3.value), settings.AAVE_V3_POOL),
            Market.COMPOUND: CompoundV3Adapter(w3, settings.COMPOUND_V3_COMET),
            Market.COMPOUND_NATIVE: CompoundV3Adapter(w3, settings.COMPOUND_V3_NATIVE_COMET),
            Market.LODESTAR: LodestarAdapter(w3, settings.LODESTAR_COMPTROLLER, settings.LODESTAR_MARKETS),
        }
    )
