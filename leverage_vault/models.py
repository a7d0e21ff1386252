from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leverage_vault.errors import NotInitializedError


class VaultEntry(BaseModel):
    """One registered leverage vault pair, as listed in the vault registry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    protocol: str
    market: str
    asset_address: str = Field(..., alias="assetAddress")
    asset_symbol: str = Field(..., alias="assetSymbol")
    debt_address: str = Field(..., alias="debtAddress")
    debt_symbol: str = Field(..., alias="debtSymbol")
    vault_address: str = Field(..., alias="pool", description="Vault contract address")


class PairBalance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    asset_address: str = Field(..., alias="assetTokenAddress")
    debt_address: str = Field(..., alias="debtTokenAddress")
    asset_balance_raw: int = Field(..., alias="assetBalanceRaw", description="Raw amount at 1e18 scale")
    debt_balance_raw: int = Field(..., alias="debtBalanceRaw", description="Raw amount at 1e18 scale")

    @field_validator("asset_address", "debt_address")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.lower()


class PriceEntry(BaseModel):
    price: float


class PoolRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pool: str = Field(..., description="lower(market-asset-debt-chain)")
    chain: str
    project: str
    symbol: str
    tvl_usd: float = Field(..., alias="tvlUsd", description="Net USD value, may be negative")
    apy_base: float = Field(..., alias="apyBase", description="Base APY in %")
    underlying_tokens: List[str] = Field(..., alias="underlyingTokens")
    url: str


def pair_key(asset_address: str, debt_address: str) -> str:
    return f"{asset_address}-{debt_address}".lower()


TvlTable = Dict[str, float]


class RefreshState:
    """TVL table and initialized flag for a single refresh cycle."""

    def __init__(self) -> None:
        self._tvl: TvlTable | None = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def mark_initialized(self, tvl: TvlTable) -> None:
        self._tvl = tvl
        self._initialized = True

    def pair_tvl_usd(self, asset_address: str, debt_address: str) -> float:
        if not self._initialized or self._tvl is None:
            raise NotInitializedError("Tvl pair map not initialized")
        return self._tvl.get(pair_key(asset_address, debt_address), 0.0)
