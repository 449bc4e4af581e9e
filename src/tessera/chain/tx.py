"""
Transaction Builder - Build, sign, and broadcast EVM transactions.

Uses eth-account for signing and RLP serialization, and the JSON-RPC
transport for estimation, nonce lookup and broadcast.  Transactions are
legacy (``gasPrice``) and EIP-155 scoped to a chain id.

``smart_contract_send`` is the raw path for arbitrary contract methods.
Each step depends on the previous one and any failure aborts the whole
pipeline with a step-specific error; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from ..config import TesseraConfig, default_config
from ..errors import (
    BroadcastError,
    EncodingError,
    EstimationError,
    InvalidKeyError,
    NonceFetchError,
    SigningError,
    TesseraError,
)
from ..keys.accounts import from_private_key
from ..models import SmartContractCallRequest
from ..utils import checksum, parse_gwei
from .abi import encode_function_call
from .rpc import RpcTransport, open_transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedTx:
    raw: str
    hash: str


def build_transaction(
    to: Optional[str],
    nonce: int,
    gas: int,
    gas_price: int,
    chain_id: int,
    value: int = 0,
    data: str = "0x",
) -> dict[str, Any]:
    """
    Build an unsigned legacy transaction dict.

    Raises:
        SigningError: If ``chain_id`` is missing (no replay protection)
    """
    if chain_id is None:
        raise SigningError("chain_id is required to sign a transaction")
    tx: dict[str, Any] = {
        "nonce": nonce,
        "gas": gas,
        "gasPrice": gas_price,
        "value": value,
        "data": data,
        "chainId": chain_id,
    }
    if to is not None:
        tx["to"] = checksum(to)
    return tx


def sign_transaction(tx: dict[str, Any], signer: LocalAccount) -> SignedTx:
    """Sign ``tx`` and serialize it to 0x-prefixed hex."""
    if tx.get("chainId") is None:
        raise SigningError("chain_id is required to sign a transaction")
    try:
        signed = signer.sign_transaction(tx)
    except Exception as exc:
        raise SigningError(f"Could not sign transaction: {exc}") from exc
    return SignedTx(
        raw="0x" + bytes(signed.raw_transaction).hex(),
        hash="0x" + bytes(signed.hash).hex(),
    )


async def broadcast(transport: RpcTransport, signed: SignedTx) -> str:
    """
    Broadcast a signed transaction.

    Returns:
        Transaction hash as reported by the node (falls back to the local
        hash when the node returns none)
    """
    tx_hash = await transport.send_raw_transaction(signed.raw)
    logger.info("Broadcast transaction %s", tx_hash or signed.hash)
    return tx_hash or signed.hash


async def smart_contract_send(
    request: SmartContractCallRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> str:
    """
    Encode, estimate, sign and broadcast a contract method call.

    Args:
        request: The call (contract, method, params, overrides, key, chain id)
        config: Tessera configuration (default ABI, default gas price)
        transport: Pre-built transport (tests)

    Returns:
        Broadcast transaction hash

    Raises:
        EncodingError: Unknown method or parameters not matching the ABI
        EstimationError: eth_estimateGas failed (e.g. execution reverted)
        NonceFetchError: eth_getTransactionCount failed
        SigningError: Missing chain id or invalid private key
        BroadcastError: eth_sendRawTransaction rejected the transaction
        InvalidInputError: Malformed gas price override
    """
    config = config or default_config()
    async with open_transport(request.rpc_url, config.rpc_timeout, transport) as rpc:
        return await _send_contract_call(request, config, rpc)


async def _send_contract_call(
    request: SmartContractCallRequest,
    config: TesseraConfig,
    transport: RpcTransport,
) -> str:
    # 1. Encode
    abi = request.contract_abi or config.default_abi
    data = encode_function_call(abi, request.method, list(request.params))
    try:
        to = checksum(request.contract_address)
    except ValueError as exc:
        raise EncodingError(str(exc)) from exc

    if not request.private_key:
        raise SigningError("A private key is required to sign a contract call")
    try:
        account = from_private_key(request.private_key)
    except InvalidKeyError as exc:
        raise SigningError(str(exc)) from exc

    gas_price = parse_gwei(request.gas_price or config.default_gas_price_gwei)

    value = int(request.value or 0)
    call: dict[str, Any] = {"from": account.address, "to": to, "data": data}
    if value:
        call["value"] = hex(value)

    # 2. Estimate
    try:
        estimated = await transport.estimate_gas(call)
    except TesseraError as exc:
        raise EstimationError(str(exc)) from exc

    # 3. Nonce
    if request.nonce is not None:
        nonce = request.nonce
    else:
        try:
            nonce = await transport.transaction_count(account.address, "latest")
        except TesseraError as exc:
            raise NonceFetchError(str(exc)) from exc

    # 4. Build
    chain_id = request.chain_id if request.chain_id is not None else config.chain_id
    tx = build_transaction(
        to=to,
        nonce=nonce,
        gas=request.gas_limit or estimated,
        gas_price=gas_price,
        chain_id=chain_id,  # type: ignore[arg-type]
        value=value,
        data=data,
    )

    # 5. Sign
    signed = sign_transaction(tx, account.signer)

    # 6. Broadcast
    logger.info(
        "Sending %s to %s from %s (nonce=%s, gas=%s)",
        request.method, to, account.address, nonce, tx["gas"],
    )
    try:
        return await broadcast(transport, signed)
    except TesseraError as exc:
        raise BroadcastError(str(exc)) from exc
