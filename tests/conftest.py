import itertools
from typing import Any, Dict, List, Sequence, Tuple

import httpx
import pytest
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector
from web3 import AsyncWeb3
from web3.providers.async_base import AsyncBaseProvider

from leverage_vault.clients.chain import RESERVE_DATA_COMPONENTS
from leverage_vault.config import Settings
from leverage_vault.http import HttpClient
from leverage_vault.models import VaultEntry

ARBITRUM_CHAIN_ID = "0xa4b1"


def call_data(signature: str, args: Sequence[Any] = ()) -> str:
    """Calldata for ``signature`` (e.g. ``getSupplyRate(uint256)``) applied to ``args``."""
    arg_types = [t for t in signature[signature.index("(") + 1:-1].split(",") if t]
    return "0x" + (function_signature_to_4byte_selector(signature) + encode(arg_types, list(args))).hex()


class FakeNetwork:
    """Serves the subgraph and the coins API from memory."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.pair_states: List[Dict[str, Any]] = []
        self.subgraph_errors: List[Dict[str, Any]] | None = None
        self.prices: Dict[str, float] = {}
        self.requests: List[httpx.Request] = []

    def price_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url).startswith(self.settings.COINS_BASE_URL)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url == self.settings.leverage_subgraph_url():
            if self.subgraph_errors:
                return httpx.Response(200, json={"errors": self.subgraph_errors})
            return httpx.Response(200, json={"data": {"leverageVaultPairStates": self.pair_states}})
        if url.startswith(self.settings.COINS_BASE_URL):
            requested = request.url.path.rsplit("/", 1)[-1].split(",")
            coins = {}
            for coin in requested:
                address = coin.split(":", 1)[1]
                if address in self.prices:
                    coins[coin] = {"price": self.prices[address], "symbol": "TKN", "decimals": 18, "confidence": 0.99}
            return httpx.Response(200, json={"coins": coins})
        return httpx.Response(404, json={"detail": "not found"})


class FakeChain(AsyncBaseProvider):
    """In-memory Arbitrum node answering ``eth_call`` from registered results.

    Unregistered calls revert.
    """

    def __init__(self):
        super().__init__()
        self.results: Dict[Tuple[str, str], str] = {}
        self.calls: List[Dict[str, Any]] = []
        self.disconnected = False
        self._ids = itertools.count(1)

    def add_call(self, to: str, signature: str, args: Sequence[Any], out_types: Sequence[str], values: Sequence[Any]) -> None:
        result = "0x" + encode(list(out_types), list(values)).hex()
        self.results[(to.lower(), call_data(signature, args))] = result

    async def make_request(self, method, params):
        response: Dict[str, Any] = {"jsonrpc": "2.0", "id": next(self._ids)}
        if method == "eth_chainId":
            response["result"] = ARBITRUM_CHAIN_ID
        elif method == "eth_getCode":
            response["result"] = "0x"
        elif method == "eth_call":
            tx = params[0]
            self.calls.append(tx)
            result = self.results.get((tx["to"].lower(), str(tx["data"]).lower()))
            if result is None:
                response["error"] = {"code": -32000, "message": "execution reverted"}
            else:
                response["result"] = result
        else:
            response["error"] = {"code": -32601, "message": f"method {method} not supported"}
        return response

    async def is_connected(self, show_traceback: bool = False) -> bool:
        return True

    async def disconnect(self) -> None:
        self.disconnected = True



RESERVE_DATA_TYPE = "(" + ",".join(c["type"] for c in RESERVE_DATA_COMPONENTS) + ")"
ZERO_ADDRESS = "0x" + "0" * 40


def seed_aave_reserve(chain: FakeChain, pool: str, token: str, liquidity_rate: int, borrow_rate: int) -> None:
    rates = {"currentLiquidityRate": liquidity_rate, "currentVariableBorrowRate": borrow_rate}
    reserve = tuple(
        rates.get(c["name"], ZERO_ADDRESS if c["type"] == "address" else 0) for c in RESERVE_DATA_COMPONENTS
    )
    chain.add_call(pool, "getReserveData(address)", [token], [RESERVE_DATA_TYPE], [reserve])


def seed_comet(chain: FakeChain, comet: str, base_token: str, utilization: int, supply_rate: int, borrow_rate: int) -> None:
    chain.add_call(comet, "baseToken()", [], ["address"], [base_token])
    chain.add_call(comet, "getUtilization()", [], ["uint256"], [utilization])
    chain.add_call(comet, "getSupplyRate(uint256)", [utilization], ["uint64"], [supply_rate])
    chain.add_call(comet, "getBorrowRate(uint256)", [utilization], ["uint64"], [borrow_rate])


def seed_l_token(chain: FakeChain, l_token: str, underlying: str, supply_rate: int, borrow_rate: int) -> None:
    chain.add_call(l_token, "underlying()", [], ["address"], [underlying])
    chain.add_call(l_token, "supplyRatePerBlock()", [], ["uint256"], [supply_rate])
    chain.add_call(l_token, "borrowRatePerBlock()", [], ["uint256"], [borrow_rate])


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        LEVERAGE_SUBGRAPH_URL="https://subgraph.test/leverage",
        THEGRAPH_API_KEY=None,
        LEVERAGE_SUBGRAPH_ID=None,
        COINS_BASE_URL="https://coins.test",
        ARBITRUM_RPC_URL="https://rpc.test/arbitrum",
        ALCHEMY_API_KEY=None,
    )


@pytest.fixture
def network(settings):
    return FakeNetwork(settings)


@pytest.fixture
async def http(network):
    client = HttpClient(transport=httpx.MockTransport(network.handler))
    yield client
    await client.aclose()


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def w3(chain):
    return AsyncWeb3(chain)


@pytest.fixture
def usdc_eth_vault():
    return VaultEntry(
        protocol="facAAVEv3",
        market="facAAVEv3",
        assetAddress="0xA1",
        assetSymbol="USDC",
        debtAddress="0xA2",
        debtSymbol="ETH",
        pool="0xV1",
    )
