from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, List

from web3 import AsyncWeb3

from leverage_vault.adapters.registry import AdapterRegistry, build_default_registry
from leverage_vault.clients.chain import close_web3, web3_from_settings
from leverage_vault.config import Settings, get_settings
from leverage_vault.http import HttpClient
from leverage_vault.models import PoolRecord, RefreshState, VaultEntry
from leverage_vault.services.builder import build_records
from leverage_vault.services.tvl import initialize_tvl_table
from leverage_vault.vaults import get_vaults

logger = logging.getLogger(__name__)


class LeverageVaultRefresher:
    """Owns one refresh cycle: concurrent initialization, then record building."""

    def __init__(
        self,
        http: HttpClient,
        vaults: Iterable[VaultEntry] | None = None,
        adapters: AdapterRegistry | None = None,
        settings: Settings | None = None,
        w3: AsyncWeb3 | None = None,
    ):
        self.http = http
        self.settings = settings or get_settings()
        self.vaults = list(vaults) if vaults is not None else list(get_vaults())
        if adapters is None:
            adapters = build_default_registry(w3 or web3_from_settings(self.settings), self.vaults, self.settings)
        self.adapters = adapters
        self.state = RefreshState()

    async def initialize(self) -> RefreshState:
        started = time.monotonic()
        tasks = [
            asyncio.ensure_future(initialize_tvl_table(self.http, self.vaults, self.settings)),
            *(asyncio.ensure_future(adapter.initialize()) for adapter in self.adapters.all()),
        ]
        try:
            tvl, *_ = await asyncio.gather(*tasks)
        except Exception:
            # First failure fails the refresh; stop the rest and wait for them to unwind
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        self.state.mark_initialized(tvl)
        logger.info(f"Refresh state initialized in {time.monotonic() - started:.2f}s")
        return self.state

    def create_pools_data(self) -> List[PoolRecord]:
        return build_records(self.vaults, self.state, self.adapters, self.settings)


async def refresh_pools(
    http: HttpClient, settings: Settings | None = None, w3: AsyncWeb3 | None = None
) -> List[PoolRecord]:
    settings = settings or get_settings()
    owned = w3 is None
    if owned:
        w3 = web3_from_settings(settings)
    try:
        refresher = LeverageVaultRefresher(http, settings=settings, w3=w3)
        await refresher.initialize()
    finally:
        if owned:
            await close_web3(w3)
    pools = refresher.create_pools_data()
    logger.info(f"Refreshed leverage vault pools: {len(pools)}")
    return pools
