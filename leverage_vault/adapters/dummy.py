from __future__ import annotations

from leverage_vault.adapters.base import ApyAdapter


class DummyAdapter(ApyAdapter):
    """Fallback for markets without an integration: always 0 APY."""

    name = "dummy"

    async def initialize(self) -> None:
        return None

    def get_apy_base(self, asset_address: str, debt_address: str) -> float:
        return 0.0
