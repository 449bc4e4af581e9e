"""
JSON-RPC transport.

Async httpx client for a single endpoint.  ``send`` posts one JSON-RPC 2.0
request and returns the ``result`` member, or raises ``RpcError`` carrying
the node's error message.  Unreachable endpoints and non-JSON bodies raise
``ConnectivityError``.  Nothing is retried.
"""

from __future__ import annotations

import itertools
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx

from ..errors import ConnectivityError, RpcError
from ..utils import hex_to_int

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def interpret_response(body: Any) -> Any:
    """
    Turn a decoded JSON-RPC response body into a result.

    A non-null ``result`` is success even when falsy (``0``, ``"0x0"``,
    ``False``).  Otherwise an ``error`` member raises.  A body with neither
    is treated as success with ``None``.
    """
    if not isinstance(body, dict):
        raise ConnectivityError(f"Unexpected JSON-RPC response: {body!r}")

    result = body.get("result")
    if result is not None:
        return result

    error = body.get("error")
    if error:
        if isinstance(error, dict):
            message = error.get("message") or str(error)
            raise RpcError(message, code=error.get("code"), data=error.get("data"))
        raise RpcError(str(error))

    return None


class RpcTransport:
    """
    JSON-RPC client bound to one endpoint.

    All requests share one ``httpx.AsyncClient``, created on first use.  Use
    the transport as an async context manager (or call ``aclose``) to release
    it; an injected client is left to its owner.

    Args:
        url: RPC endpoint URL
        timeout: Request timeout in seconds (transport default, no extra retry)
        client: Optional pre-built ``httpx.AsyncClient`` (tests inject one
            backed by ``httpx.MockTransport``)
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "RpcTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        """The connection pool shared by every request on this transport."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the client if this transport created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def envelope(self, method: str, params: list) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        return await self.client.post(self.url, json=payload)

    async def send(self, method: str, params: Optional[list] = None) -> Any:
        """
        Send one JSON-RPC request.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            The ``result`` member of the response (may be None)

        Raises:
            ConnectivityError: Endpoint unreachable or response not JSON
            RpcError: The node returned an error envelope
        """
        payload = self.envelope(method, list(params or []))
        logger.debug("rpc -> %s id=%s", method, payload["id"])

        try:
            response = await self._post(payload)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise ConnectivityError(f"Malformed RPC URL {self.url!r}: {exc}") from exc
        except httpx.TransportError as exc:
            raise ConnectivityError(f"RPC endpoint unreachable ({self.url}): {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            if response.is_error:
                raise ConnectivityError(
                    f"RPC endpoint returned HTTP {response.status_code}"
                ) from exc
            raise ConnectivityError("RPC endpoint did not return JSON") from exc

        if response.is_error and not (isinstance(body, dict) and "error" in body):
            raise ConnectivityError(f"RPC endpoint returned HTTP {response.status_code}")

        result = interpret_response(body)
        logger.debug("rpc <- %s id=%s", method, payload["id"])
        return result

    # ------------------------------------------------------------------
    # Typed helpers
    # ------------------------------------------------------------------

    async def quantity(self, method: str, params: Optional[list] = None) -> int:
        """
        Send a request whose result is a JSON-RPC quantity.

        Raises:
            RpcError: The node answered with a null or non-quantity result
        """
        result = await self.send(method, params)
        try:
            return hex_to_int(result)
        except ValueError as exc:
            raise RpcError(f"{method} returned no quantity: {result!r}") from exc

    async def gas_price(self) -> int:
        return await self.quantity("eth_gasPrice", [])

    async def chain_id(self) -> int:
        return await self.quantity("eth_chainId", [])

    async def transaction_count(self, address: str, block: str = "pending") -> int:
        return await self.quantity("eth_getTransactionCount", [address, block])

    async def balance(self, address: str, block: str = "latest") -> int:
        return await self.quantity("eth_getBalance", [address, block])

    async def call(self, tx: dict[str, Any], block: str = "latest") -> Optional[str]:
        return await self.send("eth_call", [tx, block])

    async def estimate_gas(self, tx: dict[str, Any]) -> int:
        return await self.quantity("eth_estimateGas", [tx])

    async def send_raw_transaction(self, raw_tx: str) -> str:
        return await self.send("eth_sendRawTransaction", [raw_tx])

    async def transaction_by_hash(self, tx_hash: str) -> Optional[dict[str, Any]]:
        return await self.send("eth_getTransactionByHash", [tx_hash])


async def rpc_request(
    url: str,
    method: str,
    params: Optional[list] = None,
    transport: Optional[RpcTransport] = None,
) -> Any:
    """One-shot JSON-RPC call against ``url``."""
    if transport is not None:
        return await transport.send(method, params)
    async with RpcTransport(url) as owned:
        return await owned.send(method, params)


@asynccontextmanager
async def open_transport(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[RpcTransport] = None,
) -> AsyncIterator[RpcTransport]:
    """
    Yield ``transport`` if given, otherwise a new transport for ``url`` that
    is closed on exit.  A caller-supplied transport is left open.
    """
    if transport is not None:
        yield transport
        return
    async with RpcTransport(url, timeout=timeout) as owned:
        yield owned
