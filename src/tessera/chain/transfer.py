"""
Transfer orchestration.

Picks the native or token path from the resolved context, lays caller
overrides (gas price, nonce, gas limit) over the fetched defaults, signs
and submits.  Failures during estimation or submission surface as
``TransactionSubmissionError`` with the node's message; there is no retry
and no nonce re-fetch.

Two concurrent transfers from the same account each fetch the same pending
nonce; one of them will be rejected by the node.  Callers that need
ordering must serialize transfers per account themselves.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..config import TesseraConfig, default_config
from ..errors import ConnectivityError, RpcError, TesseraError, TransactionSubmissionError
from ..models import TransferRequest
from ..utils import checksum, parse_gwei, parse_units, utf8_to_hex
from .context import SignerAndContract, SignerOnly, resolve_context
from .rpc import RpcTransport, open_transport
from .tx import broadcast, build_transaction, sign_transaction

logger = logging.getLogger(__name__)


def _gas_price(request: TransferRequest, fetched: int) -> int:
    return parse_gwei(request.gas_price) if request.gas_price else fetched


def _nonce(request: TransferRequest, fetched: int) -> int:
    return request.nonce if request.nonce is not None else fetched


async def _estimate(transport: RpcTransport, call: dict[str, Any]) -> int:
    try:
        return await transport.estimate_gas(call)
    except (RpcError, ConnectivityError) as exc:
        raise TransactionSubmissionError(str(exc)) from exc


async def _submit(context: SignerOnly | SignerAndContract, tx: dict[str, Any]) -> dict[str, Any]:
    signed = sign_transaction(tx, context.account.signer)
    try:
        tx_hash = await broadcast(context.transport, signed)
    except TesseraError as exc:
        raise TransactionSubmissionError(str(exc)) from exc
    return {
        "hash": tx_hash,
        "from": context.account.address,
        "to": tx.get("to"),
        "nonce": tx["nonce"],
        "gasPrice": tx["gasPrice"],
        "gasLimit": tx["gas"],
        "value": tx["value"],
        "data": tx["data"],
        "chainId": tx["chainId"],
    }


async def _token_transfer(request: TransferRequest, context: SignerAndContract) -> dict[str, Any]:
    contract = context.contract
    recipient = checksum(request.recipient_address)
    decimals = int(await contract.call("decimals"))
    units = parse_units(request.amount, decimals)

    call = contract.build_call("transfer", [recipient, units])
    gas_limit = request.gas_limit or await _estimate(context.transport, call)

    tx = build_transaction(
        to=contract.address,
        nonce=_nonce(request, context.nonce),
        gas=gas_limit,
        gas_price=_gas_price(request, context.gas_price),
        chain_id=context.chain_id,
        data=call["data"],
    )
    logger.info(
        "Token transfer %s units of %s -> %s (nonce=%s)",
        units, contract.address, recipient, tx["nonce"],
    )
    return await _submit(context, tx)


async def _native_transfer(
    request: TransferRequest,
    context: SignerOnly,
    native_decimals: int,
) -> dict[str, Any]:
    recipient = checksum(request.recipient_address)
    value = parse_units(request.amount, native_decimals)
    data = utf8_to_hex(request.data) if request.data else "0x"

    if request.gas_limit:
        gas_limit = request.gas_limit
    else:
        gas_limit = await _estimate(
            context.transport,
            {"from": context.account.address, "to": recipient, "value": hex(value), "data": data},
        )

    tx = build_transaction(
        to=recipient,
        nonce=_nonce(request, context.nonce),
        gas=gas_limit,
        gas_price=_gas_price(request, context.gas_price),
        chain_id=context.chain_id,
        value=value,
        data=data,
    )
    logger.info("Native transfer %s wei -> %s (nonce=%s)", value, recipient, tx["nonce"])
    return await _submit(context, tx)


async def transfer(
    request: TransferRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> dict[str, Any]:
    """
    Send native value or tokens.

    Returns:
        The submitted transaction's fields plus its ``hash``

    Raises:
        InvalidInputError: Malformed recipient, amount or gas price
        TransactionSubmissionError: Estimation or broadcast was rejected
    """
    config = config or default_config()
    logger.debug(
        "transfer on %s (%s path)",
        request.network, "token" if request.is_token_transfer else "native",
    )
    # input errors surface before any RPC round trip
    checksum(request.recipient_address)
    if request.gas_price:
        parse_gwei(request.gas_price)

    async with open_transport(request.rpc_url, config.rpc_timeout, transport) as rpc:
        context = await resolve_context(
            request.rpc_url,
            private_key=request.private_key,
            contract_address=request.token_address,
            config=config,
            transport=rpc,
        )
        if isinstance(context, SignerAndContract):
            return await _token_transfer(request, context)
        if not isinstance(context, SignerOnly):
            raise TesseraError(f"Expected a signer context, got {type(context).__name__}")
        return await _native_transfer(request, context, config.native_decimals)
