"""Host adaptor for the yield aggregator: leverage vault pools with TVL and base APY."""
from __future__ import annotations

from typing import Any, Dict, List

from leverage_vault.config import get_settings
from leverage_vault.http import client_from_settings
from leverage_vault.services.refresher import refresh_pools

timetravel = False


async def apy() -> List[Dict[str, Any]]:
    settings = get_settings()
    http = client_from_settings(settings)
    try:
        # refresh_pools opens and closes its own web3 provider
        pools = await refresh_pools(http, settings)
    finally:
        await http.aclose()
    return [p.model_dump(by_alias=True) for p in pools]
