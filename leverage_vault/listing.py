"""Host adaptor listing every registered vault with zero TVL and APY."""
from __future__ import annotations

from typing import Any, Dict, List

from leverage_vault.config import get_settings
from leverage_vault.services.builder import build_listing_records
from leverage_vault.vaults import get_vaults

timetravel = False


async def apy() -> List[Dict[str, Any]]:
    pools = build_listing_records(get_vaults(), get_settings())
    return [p.model_dump(by_alias=True) for p in pools]
