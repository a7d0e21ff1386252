from __future__ import annotations

import logging
from typing import List

import httpx
from fastapi import FastAPI, HTTPException

from leverage_vault.clients.chain import close_web3, web3_from_settings
from leverage_vault.config import get_settings
from leverage_vault.errors import LeverageVaultError
from leverage_vault.http import client_from_settings
from leverage_vault.models import PoolRecord
from leverage_vault.services.builder import build_listing_records
from leverage_vault.services.refresher import refresh_pools
from leverage_vault.utils.logging import setup_logging
from leverage_vault.vaults import get_vaults


app = FastAPI(title="Factor Leverage Vault Pools", version="1.0.0")

logger = logging.getLogger(__name__)


@app.on_event("startup")
async def startup_event() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    app.state.http = client_from_settings(settings)
    app.state.w3 = web3_from_settings(settings)
    logger.info(f"Serving {len(get_vaults())} leverage vaults on {settings.CHAIN}")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    http = getattr(app.state, "http", None)
    if http:
        await http.aclose()
    w3 = getattr(app.state, "w3", None)
    if w3 is not None:
        await close_web3(w3)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/pools", response_model=List[PoolRecord], response_model_by_alias=True)
async def get_pools():
    # Each call is one full refresh; callers own scheduling and timeouts
    try:
        return await refresh_pools(app.state.http, get_settings(), w3=app.state.w3)
    except (LeverageVaultError, httpx.HTTPError) as e:
        logger.exception(f"Refresh failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/api/pools/listing", response_model=List[PoolRecord], response_model_by_alias=True)
async def get_listing():
    return build_listing_records(get_vaults(), get_settings())
