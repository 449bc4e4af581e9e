"""
Operation surface.

One coroutine per public operation.  Every success is wrapped as
``{"success": True, **payload}``; failures are raised, never returned as a
status field.
"""

from __future__ import annotations

from typing import Any, Optional

from .chain import queries
from .chain.rpc import RpcTransport
from .chain.transfer import transfer as _transfer
from .chain.tx import smart_contract_send as _smart_contract_send
from .config import TesseraConfig
from .keys import accounts
from .models import (
    BalanceRequest,
    SmartContractCallRequest,
    TokenInfoRequest,
    TransactionLookupRequest,
    TransferRequest,
)
from .utils import success_response

Response = dict[str, Any]


async def get_balance(
    request: BalanceRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> Response:
    balance = await queries.get_balance(request, config=config, transport=transport)
    return success_response(balance=balance)


async def create_wallet(
    derivation_path: Optional[str] = None,
    config: Optional[TesseraConfig] = None,
) -> Response:
    account = accounts.generate(derivation_path, config=config)
    return success_response(
        address=account.address,
        privateKey=account.private_key,
        mnemonic=account.mnemonic,
    )


async def get_address_from_private_key(private_key: str) -> Response:
    return success_response(address=accounts.address_of(private_key))


async def generate_wallet_from_mnemonic(
    mnemonic: str,
    derivation_path: Optional[str] = None,
    config: Optional[TesseraConfig] = None,
) -> Response:
    account = accounts.from_mnemonic(mnemonic, derivation_path, config=config)
    return success_response(
        address=account.address,
        privateKey=account.private_key,
        mnemonic=account.mnemonic,
    )


async def transfer(
    request: TransferRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> Response:
    tx = await _transfer(request, config=config, transport=transport)
    return success_response(**tx)


async def get_transaction(
    request: TransactionLookupRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> Response:
    tx = await queries.get_transaction(request, config=config, transport=transport)
    return success_response(**(tx or {}))


async def get_encrypted_json_from_private_key(private_key: str, password: str) -> Response:
    keystore = await accounts.to_encrypted_keystore(private_key, password)
    return success_response(json=keystore)


async def get_wallet_from_encrypted_json(keystore: str, password: str) -> Response:
    account = await accounts.from_encrypted_keystore(keystore, password)
    return success_response(privateKey=account.private_key, address=account.address)


async def get_token_info(
    request: TokenInfoRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> Response:
    info = await queries.get_token_info(request, config=config, transport=transport)
    return success_response(**info.to_dict())


async def smart_contract_send(
    request: SmartContractCallRequest,
    config: Optional[TesseraConfig] = None,
    transport: Optional[RpcTransport] = None,
) -> Response:
    tx_hash = await _smart_contract_send(request, config=config, transport=transport)
    return success_response(txHash=tx_hash)
