"""Tests for the JSON-RPC transport and response interpretation."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from tessera.chain.rpc import RpcTransport, interpret_response, open_transport, rpc_request
from tessera.errors import ConnectivityError, RpcError


def _transport(handler) -> RpcTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RpcTransport("http://fake.node", client=client)


def _reply(body: dict, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body)

    return handler


# ============ interpret_response ============


@pytest.mark.parametrize("value", [0, "0x0", False, "", [], "0x"])
def test_falsy_result_is_success(value) -> None:
    assert interpret_response({"jsonrpc": "2.0", "id": 1, "result": value}) == value


def test_error_message_is_preserved() -> None:
    with pytest.raises(RpcError, match="insufficient funds") as excinfo:
        interpret_response({"error": {"code": -32000, "message": "insufficient funds"}})
    assert excinfo.value.code == -32000


def test_error_without_message_uses_raw_value() -> None:
    with pytest.raises(RpcError, match="nonce too low"):
        interpret_response({"error": "nonce too low"})


def test_error_data_is_kept() -> None:
    with pytest.raises(RpcError) as excinfo:
        interpret_response(
            {"error": {"code": 3, "message": "execution reverted", "data": "0x08c379a0"}}
        )
    assert excinfo.value.data == "0x08c379a0"


def test_null_result_with_error_raises() -> None:
    with pytest.raises(RpcError, match="boom"):
        interpret_response({"result": None, "error": {"message": "boom"}})


def test_neither_result_nor_error_is_none() -> None:
    assert interpret_response({"jsonrpc": "2.0", "id": 1}) is None
    assert interpret_response({"jsonrpc": "2.0", "id": 1, "result": None}) is None


def test_non_object_body_is_connectivity_error() -> None:
    with pytest.raises(ConnectivityError):
        interpret_response(["not", "an", "object"])


# ============ RpcTransport.send ============


def test_send_builds_jsonrpc_envelope() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1"})

    transport = _transport(handler)
    assert asyncio.run(transport.send("eth_chainId", [])) == "0x1"

    assert seen[0]["jsonrpc"] == "2.0"
    assert seen[0]["method"] == "eth_chainId"
    assert seen[0]["params"] == []
    assert isinstance(seen[0]["id"], int)


def test_send_returns_zero_result() -> None:
    transport = _transport(_reply({"jsonrpc": "2.0", "id": 7, "result": 0}))
    assert asyncio.run(transport.send("eth_blockNumber")) == 0


def test_send_raises_rpc_error() -> None:
    transport = _transport(_reply({"error": {"message": "execution reverted"}}))
    with pytest.raises(RpcError, match="execution reverted"):
        asyncio.run(transport.send("eth_estimateGas", [{}]))


def test_http_error_with_jsonrpc_body_is_rpc_error() -> None:
    transport = _transport(_reply({"error": {"code": -32005, "message": "rate limited"}}, status=429))
    with pytest.raises(RpcError, match="rate limited"):
        asyncio.run(transport.send("eth_gasPrice"))


def test_http_error_without_jsonrpc_body_is_connectivity_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(ConnectivityError, match="502"):
        asyncio.run(_transport(handler).send("eth_gasPrice"))


def test_non_json_body_is_connectivity_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>hello</html>")

    with pytest.raises(ConnectivityError):
        asyncio.run(_transport(handler).send("eth_gasPrice"))


def test_unreachable_endpoint_is_connectivity_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ConnectivityError, match="unreachable"):
        asyncio.run(_transport(handler).send("eth_gasPrice"))


def test_malformed_url_is_connectivity_error() -> None:
    with pytest.raises(ConnectivityError):
        asyncio.run(rpc_request("not-a-url", "eth_gasPrice", []))


def test_typed_helpers_decode_quantities() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        method = json.loads(request.content)["method"]
        results = {
            "eth_gasPrice": "0x3b9aca00",
            "eth_chainId": "0x539",
            "eth_getTransactionCount": "0x0",
            "eth_getBalance": "0xde0b6b3a7640000",
        }
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": results[method]})

    transport = _transport(handler)

    async def _all():
        return await asyncio.gather(
            transport.gas_price(),
            transport.chain_id(),
            transport.transaction_count("0x" + "00" * 20),
            transport.balance("0x" + "00" * 20),
        )

    assert asyncio.run(_all()) == [10**9, 1337, 0, 10**18]


@pytest.mark.parametrize("result", [None, "pending", {"number": "0x1"}])
def test_quantity_rejects_non_hex_result(result) -> None:
    transport = _transport(_reply({"jsonrpc": "2.0", "id": 1, "result": result}))
    with pytest.raises(RpcError, match="eth_blockNumber returned no quantity"):
        asyncio.run(transport.quantity("eth_blockNumber"))


# ============ Client lifetime ============


def test_requests_share_one_client() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1"})

    transport = _transport(handler)
    client = transport.client

    async def _twice():
        await transport.gas_price()
        await transport.chain_id()

    asyncio.run(_twice())
    assert len(seen) == 2
    assert transport.client is client


def test_owned_client_is_closed_on_exit() -> None:
    transport = RpcTransport("http://fake.node")
    client = transport.client
    assert transport.client is client

    async def _use():
        async with transport:
            pass

    asyncio.run(_use())
    assert client.is_closed


def test_injected_client_is_left_open() -> None:
    transport = _transport(_reply({"jsonrpc": "2.0", "id": 1, "result": "0x1"}))
    asyncio.run(transport.aclose())
    assert not transport.client.is_closed


def test_open_transport_yields_given_transport_unclosed() -> None:
    given = RpcTransport("http://fake.node")
    client = given.client

    async def _use():
        async with open_transport("http://other.node", transport=given) as rpc:
            assert rpc is given

    asyncio.run(_use())
    assert not client.is_closed
    asyncio.run(given.aclose())


def test_open_transport_closes_its_own_transport() -> None:
    async def _use():
        async with open_transport("http://fake.node", timeout=5.0) as rpc:
            client = rpc.client
            assert rpc.url == "http://fake.node"
            assert rpc.timeout == 5.0
        return client

    assert asyncio.run(_use()).is_closed
