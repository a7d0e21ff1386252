from __future__ import annotations

import logging
from typing import Dict, Iterable

from leverage_vault.config import Settings, get_settings
from leverage_vault.errors import MissingPriceError
from leverage_vault.http import HttpClient
from leverage_vault.models import PriceEntry

logger = logging.getLogger(__name__)


async def get_coin_price_map(http: HttpClient, addresses: Iterable[str], settings: Settings | None = None) -> Dict[str, PriceEntry]:
    """Fetch current USD prices from the DefiLlama coins API, keyed by lowercase address."""
    wanted = sorted({a.lower() for a in addresses})
    if not wanted:
        return {}
    settings = settings or get_settings()
    coins = ",".join(f"{settings.CHAIN}:{a}" for a in wanted)
    url = f"{settings.COINS_BASE_URL.rstrip('/')}/prices/current/{coins}"
    resp = await http.get(url)
    data = resp.json()
    out: Dict[str, PriceEntry] = {}
    for key, obj in (data.get("coins") or {}).items():
        price = obj.get("price")
        if isinstance(price, (int, float)):
            address = key.split(":", 1)[-1].lower()
            out[address] = PriceEntry(price=float(price))
    missing = [a for a in wanted if a not in out]
    if missing:
        logger.warning(f"No price returned for {len(missing)} tokens: {missing}")
    return out


def price_of(prices: Dict[str, PriceEntry], address: str) -> float:
    try:
        return prices[address.lower()].price
    except KeyError:
        raise MissingPriceError(address.lower()) from None
