from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from leverage_vault.config import Settings, get_settings
from leverage_vault.errors import SubgraphError
from leverage_vault.http import HttpClient
from leverage_vault.models import PairBalance

logger = logging.getLogger(__name__)

PAIR_STATES_QUERY = """
{
  leverageVaultPairStates {
    id
    assetBalanceRaw
    assetTokenAddress
    debtBalanceRaw
    debtTokenAddress
  }
}
"""


async def graphql_query(http: HttpClient, url: str, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"query": query, "variables": variables or {}}
    resp = await http.post(url, json=payload, headers={"Content-Type": "application/json"})
    data = resp.json()
    if data.get("errors"):
        logger.warning(f"GraphQL errors from {url}: {data['errors']}")
        raise SubgraphError(f"GraphQL query failed: {data['errors']}")
    return data.get("data") or {}


async def fetch_pair_balances(http: HttpClient, settings: Settings | None = None) -> List[PairBalance]:
    """Current raw balances of every leverage vault pair.

    Single request, no pagination: the subgraph returns all pair states at once.
    """
    settings = settings or get_settings()
    data = await graphql_query(http, settings.leverage_subgraph_url(), PAIR_STATES_QUERY)
    states = data.get("leverageVaultPairStates") or []
    logger.debug(f"Subgraph returned {len(states)} pair states")
    return [PairBalance.model_validate(s) for s in states]
