"""
Read-only queries: native and token balances, token metadata, and
transaction lookups.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from ..config import TesseraConfig, default_config
from ..errors import NotFoundError, TesseraError
from ..models import BalanceRequest, TokenInfo, TokenInfoRequest, TransactionLookupRequest
from ..utils import checksum, format_units
from .context import ContractOnly, NoContext, resolve_context
from .rpc import RpcTransport, open_transport

logger = logging.getLogger(__name__)


async def get_balance(
    request: BalanceRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> float:
    """
    Native or token balance of ``request.address``.

    Returns:
        Balance in whole units as a float.  This is a display value; use
        the raw integer from the node where exact amounts matter.

    Raises:
        InvalidInputError: ``request.address`` is not an address
    """
    config = config or default_config()
    owner = checksum(request.address)
    logger.debug("balance of %s on %s", owner, request.network)

    async with open_transport(request.rpc_url, config.rpc_timeout, transport) as rpc:
        context = await resolve_context(
            request.rpc_url,
            contract_address=request.token_address,
            config=config,
            transport=rpc,
        )
        if isinstance(context, ContractOnly):
            decimals, raw = await asyncio.gather(
                context.contract.call("decimals"),
                context.contract.call("balanceOf", owner),
            )
            logger.debug("token balance %s @ %s = %s (decimals=%s)", owner, context.contract.address, raw, decimals)
            return float(format_units(raw, int(decimals)))

        raw = await context.transport.balance(owner)
        return float(format_units(raw, config.native_decimals))


async def get_token_info(
    request: TokenInfoRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> TokenInfo:
    """
    Read name, symbol, decimals and total supply of a token contract.

    Raises:
        NotFoundError: No contract could be bound at ``request.address``
    """
    config = config or default_config()
    async with open_transport(request.rpc_url, config.rpc_timeout, transport) as rpc:
        context = await resolve_context(
            request.rpc_url,
            contract_address=request.address,
            config=config,
            transport=rpc,
        )
        if not isinstance(context, ContractOnly):
            raise NotFoundError(f"No token contract at {request.address!r}")

        contract = context.contract
        name, symbol, decimals, total_supply = await asyncio.gather(
            contract.call("name"),
            contract.call("symbol"),
            contract.call("decimals"),
            contract.call("totalSupply"),
        )
    decimals = int(decimals)
    return TokenInfo(
        name=name,
        symbol=symbol,
        address=contract.address,
        decimals=decimals,
        total_supply=int(format_units(total_supply, decimals)),
    )


async def get_transaction(
    request: TransactionLookupRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> Optional[dict[str, Any]]:
    """
    Look up a transaction by hash.

    Returns:
        The node's transaction object, or None if the hash is unknown
    """
    config = config or default_config()
    async with open_transport(request.rpc_url, config.rpc_timeout, transport) as rpc:
        context = await resolve_context(request.rpc_url, config=config, transport=rpc)
        if not isinstance(context, NoContext):
            raise TesseraError(f"Expected a bare connection, got {type(context).__name__}")
        return await context.transport.transaction_by_hash(request.hash)
