from __future__ import annotations

import logging
from typing import Any, Dict, List

from web3 import AsyncWeb3
from web3.exceptions import Web3Exception

from leverage_vault.config import Settings
from leverage_vault.errors import RpcError

logger = logging.getLogger(__name__)


def _view(name: str, inputs: List[Dict[str, Any]], outputs: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"inputs": inputs, "name": name, "outputs": outputs, "stateMutability": "view", "type": "function"}


RESERVE_DATA_COMPONENTS = [
    {"name": "configuration", "type": "uint256"},
    {"name": "liquidityIndex", "type": "uint128"},
    {"name": "currentLiquidityRate", "type": "uint128"},
    {"name": "variableBorrowIndex", "type": "uint128"},
    {"name": "currentVariableBorrowRate", "type": "uint128"},
    {"name": "currentStableBorrowRate", "type": "uint128"},
    {"name": "lastUpdateTimestamp", "type": "uint40"},
    {"name": "id", "type": "uint16"},
    {"name": "aTokenAddress", "type": "address"},
    {"name": "stableDebtTokenAddress", "type": "address"},
    {"name": "variableDebtTokenAddress", "type": "address"},
    {"name": "interestRateStrategyAddress", "type": "address"},
    {"name": "accruedToTreasury", "type": "uint128"},
    {"name": "unbacked", "type": "uint128"},
    {"name": "isolationModeTotalDebt", "type": "uint128"},
]

AAVE_POOL_ABI = [
    _view(
        "getReserveData",
        [{"name": "asset", "type": "address"}],
        [{"name": "", "type": "tuple", "components": RESERVE_DATA_COMPONENTS}],
    ),
]

COMET_ABI = [
    _view("baseToken", [], [{"name": "", "type": "address"}]),
    _view("getUtilization", [], [{"name": "", "type": "uint256"}]),
    _view("getSupplyRate", [{"name": "utilization", "type": "uint256"}], [{"name": "", "type": "uint64"}]),
    _view("getBorrowRate", [{"name": "utilization", "type": "uint256"}], [{"name": "", "type": "uint64"}]),
]

LTOKEN_ABI = [
    _view("underlying", [], [{"name": "", "type": "address"}]),
    _view("supplyRatePerBlock", [], [{"name": "", "type": "uint256"}]),
    _view("borrowRatePerBlock", [], [{"name": "", "type": "uint256"}]),
]

COMPTROLLER_ABI = [
    _view("getAllMarkets", [], [{"name": "", "type": "address[]"}]),
]


def web3_from_settings(settings: Settings) -> AsyncWeb3:
    return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(settings.rpc_url()))


def contract(w3: AsyncWeb3, address: str, abi: List[Dict[str, Any]]):
    return w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=abi)


async def call(fn) -> Any:
    """Run a view call; RPC failures and reverts surface as ``RpcError``."""
    try:
        return await fn.call()
    except (Web3Exception, ValueError) as e:
        raise RpcError(f"{fn.fn_name} on {fn.address} failed: {e}") from e


async def close_web3(w3: AsyncWeb3) -> None:
    await w3.provider.disconnect()
