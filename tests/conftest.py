"""
Shared fixtures: a scripted JSON-RPC node served through httpx.MockTransport.

No network access is needed; every RPC call is recorded on ``FakeNode.calls``
so tests can assert which methods ran and with what parameters.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest
import rlp
from eth_abi import encode
from eth_hash.auto import keccak

from tessera.chain.abi import find_function
from tessera.chain.rpc import RpcTransport
from tessera.config import TesseraConfig, erc20_abi

# Hardhat / Anvil default account #0 (public test vector, never funded on mainnet)
TEST_MNEMONIC = "test test test test test test test test test test test junk"
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TOKEN = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

Route = Union[dict[str, Any], Callable[[list], dict[str, Any]]]


class FakeNode:
    """Answers JSON-RPC requests from a table of per-method routes."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.routes: dict[str, Route] = {}
        self.contracts: dict[str, dict[str, Any]] = {}

    # -- scripting ---------------------------------------------------------

    def result(self, method: str, value: Any) -> "FakeNode":
        self.routes[method] = {"result": value}
        return self

    def error(self, method: str, message: str, code: int = -32000) -> "FakeNode":
        self.routes[method] = {"error": {"code": code, "message": message}}
        return self

    def route(self, method: str, handler: Route) -> "FakeNode":
        self.routes[method] = handler
        return self

    def standard(
        self,
        gas_price: int = 10**9,
        nonce: int = 5,
        chain_id: int = 1337,
        estimate: int = 50_000,
    ) -> "FakeNode":
        self.result("eth_gasPrice", hex(gas_price))
        self.result("eth_getTransactionCount", hex(nonce))
        self.result("eth_chainId", hex(chain_id))
        self.result("eth_estimateGas", hex(estimate))
        self.route("eth_sendRawTransaction", self._accept_raw)
        self.route("eth_call", self._contract_call)
        return self

    def token(
        self,
        address: str,
        name: str = "Test Token",
        symbol: str = "TST",
        decimals: int = 18,
        total_supply: int = 0,
        balances: Optional[dict[str, int]] = None,
    ) -> "FakeNode":
        self.contracts[address.lower()] = {
            "name": name,
            "symbol": symbol,
            "decimals": decimals,
            "totalSupply": total_supply,
            "balances": {k.lower(): v for k, v in (balances or {}).items()},
        }
        self.route("eth_call", self._contract_call)
        return self

    # -- handlers ----------------------------------------------------------

    def _accept_raw(self, params: list) -> dict[str, Any]:
        raw = params[0]
        return {"result": "0x" + keccak(bytes.fromhex(raw[2:])).hex()}

    def _contract_call(self, params: list) -> dict[str, Any]:
        call = params[0]
        state = self.contracts.get(call["to"].lower())
        if state is None:
            return {"result": "0x"}
        data = call["data"]
        selector = data[2:10]
        abi = erc20_abi()
        for method in ("name", "symbol", "decimals", "totalSupply", "balanceOf"):
            function = find_function(abi, method)
            if function.selector.hex() != selector:
                continue
            if method == "balanceOf":
                owner = "0x" + data[-40:]
                value: Any = state["balances"].get(owner.lower(), 0)
            else:
                value = state[method]
            return {"result": "0x" + encode(function.output_types, [value]).hex()}
        return {"error": {"code": 3, "message": "execution reverted"}}

    # -- transport ---------------------------------------------------------

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append(payload)
        method = payload["method"]
        route = self.routes.get(method)
        if route is None:
            body: dict[str, Any] = {"error": {"code": -32601, "message": f"method not found: {method}"}}
        else:
            body = route(payload["params"]) if callable(route) else route
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], **body})

    def transport(self) -> RpcTransport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self))
        return RpcTransport("http://fake.node", client=client)

    @property
    def methods(self) -> list[str]:
        return [c["method"] for c in self.calls]

    def params_of(self, method: str) -> list[list]:
        return [c["params"] for c in self.calls if c["method"] == method]

    @property
    def raw_transactions(self) -> list[str]:
        return [p[0] for p in self.params_of("eth_sendRawTransaction")]


def decode_legacy_tx(raw_hex: str) -> dict[str, Any]:
    """Decode an EIP-155 legacy transaction into its fields."""
    fields = rlp.decode(bytes.fromhex(raw_hex[2:]))
    nonce, gas_price, gas, to, value, data, v, r, s = fields

    def as_int(b: bytes) -> int:
        return int.from_bytes(b, "big")

    v_int = as_int(v)
    return {
        "nonce": as_int(nonce),
        "gasPrice": as_int(gas_price),
        "gas": as_int(gas),
        "to": "0x" + to.hex() if to else None,
        "value": as_int(value),
        "data": "0x" + data.hex(),
        "chainId": (v_int - 35) // 2,
    }


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode().standard()


@pytest.fixture()
def config() -> TesseraConfig:
    return TesseraConfig()
