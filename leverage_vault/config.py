from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Runtime
    ENV: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Output records
    CHAIN: str = Field(default="arbitrum")
    PROJECT: str = Field(default="factor-leverage-vault")
    LISTING_PROJECT: str = Field(default="factor-leverage")
    APP_BASE_URL: str = Field(default="https://app.factor.fi/studio/vault-leveraged")

    # Leverage vault subgraph
    LEVERAGE_SUBGRAPH_URL: str = Field(
        default="https://api.thegraph.com/subgraphs/name/dimasriat/factor-leverage-vault"
    )
    THEGRAPH_API_KEY: str | None = None
    LEVERAGE_SUBGRAPH_ID: str | None = None

    # Prices
    COINS_BASE_URL: str = Field(default="https://coins.llama.fi")

    # Arbitrum RPC / Alchemy
    ARBITRUM_RPC_URL: str = Field(default="https://arb1.arbitrum.io/rpc")
    ALCHEMY_NETWORK: str = Field(default="arb-mainnet")
    ALCHEMY_API_KEY: str | None = None

    # Lending markets backing the vaults
    AAVE_V3_POOL: str = Field(default="0x794a61358D6845594F94dc1DB02A252b5b4814aD")
    COMPOUND_V3_COMET: str = Field(default="0xA5EDBDD9646f8dFF606d7448e414884C7d905dCA")
    COMPOUND_V3_NATIVE_COMET: str = Field(default="0x9c4ec768c28520B50860ea7a15bd7213a9fF58bf")
    LODESTAR_COMPTROLLER: str = Field(default="0x24C25910aF4068B5F6C3b75252a36c4810849135")
    LODESTAR_MARKETS: List[str] = Field(
        default_factory=lambda: [
            "0x1ca530f02DD0487cef4943c674342c5aEa08922F",  # lUSDC.e
            "0x4C9aAed3b8c443b4b634D1A189a5e25C604768dE",  # lUSDC
            "0xf21Ef887CB667f84B8eC5934C1713A7Ade8c38Cf",  # lMAGIC
            "0xC37896BF3EE5a2c62Cdbd674035069776f721668",  # lWBTC
            "0x9365181A7df82a1cC578eAE443EFd89f00dbb643",  # lUSDT
            "0x5d27cFf80dF09f28534bb37d386D43aA60f88e25",  # lDPX
            "0x8991d64fe388fA79A4f7Aa7826E8dA09F0c3C96a",  # lARB
            "0x4987782da9a63bC3ABace48648B15546D821c720",  # lDAI
            "0xD12d43Cdf498e377D3bfa2c6217f05B466E14228",  # lFRAX
            "0xfECe754D92bd956F681A941Cef4632AB65710495",  # lwstETH
            "0x79B6c5e1A7C0aD507E1dB81eC7cF269062BAb4Eb",  # lGMX
        ]
    )

    # Vault registry override (JSON file); bundled registry when unset
    VAULTS_FILE: str | None = None

    # HTTP transport
    HTTP_TIMEOUT_SECONDS: float = Field(default=15.0)
    HTTP_RETRY_ATTEMPTS: int = Field(default=1, ge=1)

    def rpc_url(self) -> str:
        if not self.ALCHEMY_API_KEY:
            return self.ARBITRUM_RPC_URL
        return f"https://{self.ALCHEMY_NETWORK}.g.alchemy.com/v2/{self.ALCHEMY_API_KEY}"

    def leverage_subgraph_url(self) -> str:
        # The Graph gateway when both key and subgraph id are configured
        if self.THEGRAPH_API_KEY and self.LEVERAGE_SUBGRAPH_ID:
            return f"https://gateway.thegraph.com/api/{self.THEGRAPH_API_KEY}/subgraphs/id/{self.LEVERAGE_SUBGRAPH_ID}"
        if self.THEGRAPH_API_KEY or self.LEVERAGE_SUBGRAPH_ID:
            logger.warning("THEGRAPH_API_KEY and LEVERAGE_SUBGRAPH_ID must both be set for the gateway; using LEVERAGE_SUBGRAPH_URL")
        return self.LEVERAGE_SUBGRAPH_URL


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
