"""
Chain context resolution.

``resolve_context`` looks at which of ``private_key`` / ``contract_address``
were supplied and returns exactly one of four variants:

    NoContext          neither    (transaction lookups)
    SignerOnly         key        (native transfers)
    ContractOnly       contract   (balance / token-info reads)
    SignerAndContract  both       (token transfers)

Gas price is always fetched.  With a signer, the pending nonce and the chain
id are fetched concurrently.  Values are point-in-time reads: a context
belongs to one top-level operation and is never reused.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..config import TesseraConfig, default_config
from ..keys.accounts import Account, from_private_key
from .contract import ContractBinding
from .rpc import RpcTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoContext:
    transport: RpcTransport
    gas_price: int


@dataclass(frozen=True)
class SignerOnly:
    transport: RpcTransport
    gas_price: int
    account: Account
    nonce: int
    chain_id: int


@dataclass(frozen=True)
class ContractOnly:
    transport: RpcTransport
    gas_price: int
    contract: ContractBinding


@dataclass(frozen=True)
class SignerAndContract:
    transport: RpcTransport
    gas_price: int
    account: Account
    nonce: int
    chain_id: int
    contract: ContractBinding


ChainContext = Union[NoContext, SignerOnly, ContractOnly, SignerAndContract]


async def _signer_state(transport: RpcTransport, account: Account) -> tuple[int, int, int]:
    gas_price, nonce, chain_id = await asyncio.gather(
        transport.gas_price(),
        transport.transaction_count(account.address, "pending"),
        transport.chain_id(),
    )
    return gas_price, nonce, chain_id


async def resolve_context(
    rpc_url: str,
    private_key: Optional[str] = None,
    contract_address: Optional[str] = None,
    abi: Optional[list[dict[str, Any]]] = None,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> ChainContext:
    """
    Resolve the chain context for one operation.

    Args:
        rpc_url: RPC endpoint URL
        private_key: Signer key (optional)
        contract_address: Contract to bind (optional)
        abi: Contract ABI (default: config.default_abi)
        config: Tessera configuration
        transport: Pre-built transport.  Without one, the context owns a new
            transport; release it with ``await context.transport.aclose()``

    Raises:
        ConnectivityError / RpcError: A state fetch failed
        InvalidKeyError: ``private_key`` is malformed
        NotFoundError: ``contract_address`` is not an address
    """
    config = config or default_config()
    transport = transport or RpcTransport(rpc_url, timeout=config.rpc_timeout)
    contract_abi = abi or config.default_abi

    account = from_private_key(private_key) if private_key else None

    if account is not None:
        contract = (
            ContractBinding.bind(contract_address, contract_abi, transport, signer=account.signer)
            if contract_address
            else None
        )
        gas_price, nonce, chain_id = await _signer_state(transport, account)
        if contract is not None:
            logger.debug("context: signer %s + contract %s", account.address, contract.address)
            return SignerAndContract(
                transport=transport,
                gas_price=gas_price,
                account=account,
                nonce=nonce,
                chain_id=chain_id,
                contract=contract,
            )
        logger.debug("context: signer %s", account.address)
        return SignerOnly(
            transport=transport,
            gas_price=gas_price,
            account=account,
            nonce=nonce,
            chain_id=chain_id,
        )

    if contract_address:
        contract = ContractBinding.bind(contract_address, contract_abi, transport)
        gas_price = await transport.gas_price()
        logger.debug("context: read-only contract %s", contract.address)
        return ContractOnly(transport=transport, gas_price=gas_price, contract=contract)

    gas_price = await transport.gas_price()
    return NoContext(transport=transport, gas_price=gas_price)
