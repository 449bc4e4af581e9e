"""
Send commands - transfers and contract invocations.

Both sign with the key from --private-key / PRIVATE_KEY and pay gas from
that account.  Nothing is retried: a rejected transaction exits non-zero
with the node's message.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click

from .. import operations
from ..models import SmartContractCallRequest, TransferRequest
from ._runner import (
    echo_response,
    get_config,
    parse_json_list,
    private_key_option,
    resolve_rpc_url,
    rpc_url_option,
    run,
)


@click.command()
@click.option("--to", "recipient", required=True, help="Recipient address (0x...)")
@click.option("--amount", required=True, help="Amount in whole units (e.g. 1.5)")
@click.option("--token", "token_address", default=None, help="Token contract (omit for native)")
@click.option("--gas-price", default=None, help="Gas price in gwei")
@click.option("--gas-limit", default=None, type=int, help="Gas limit")
@click.option("--nonce", default=None, type=int, help="Nonce override")
@click.option("--data", default=None, help="UTF-8 payload (native transfers only)")
@click.option("--network", default="ethereum", show_default=True)
@rpc_url_option
@private_key_option
@click.pass_context
def transfer(
    ctx: click.Context,
    recipient: str,
    amount: str,
    token_address: Optional[str],
    gas_price: Optional[str],
    gas_limit: Optional[int],
    nonce: Optional[int],
    data: Optional[str],
    network: str,
    rpc_url: Optional[str],
    private_key: str,
) -> None:
    """
    Send native value or tokens.

    \b
    Examples:
      tessera transfer --to 0xAbc... --amount 0.25
      tessera transfer --token 0xDEF... --to 0xAbc... --amount 10 --gas-price 3
    """
    request = TransferRequest(
        recipient_address=recipient,
        amount=amount,
        rpc_url=resolve_rpc_url(ctx, rpc_url),
        private_key=private_key,
        network=network,
        gas_price=gas_price,
        token_address=token_address,
        nonce=nonce,
        data=data,
        gas_limit=gas_limit,
    )
    response = run(operations.transfer(request, config=get_config(ctx)))
    click.secho("Transaction submitted.", fg="green")
    echo_response(response)


@click.command()
@click.option("--contract", required=True, help="Target contract address")
@click.option("--method", required=True, help="Method name or signature")
@click.option("--params", "params_json", default="[]", help="Arguments as a JSON array")
@click.option(
    "--abi",
    "abi_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Contract ABI JSON file (default: token ABI)",
)
@click.option("--value", default=0, type=int, help="Value in wei")
@click.option("--gas-price", default=None, help="Gas price in gwei (default: 100)")
@click.option("--gas-limit", default=None, type=int, help="Gas limit (default: estimate)")
@click.option("--nonce", default=None, type=int, help="Nonce override")
@click.option("--chain-id", default=None, type=int, envvar="TESSERA_CHAIN_ID", help="Chain id")
@rpc_url_option
@private_key_option
@click.pass_context
def invoke(
    ctx: click.Context,
    contract: str,
    method: str,
    params_json: str,
    abi_file: Optional[Path],
    value: int,
    gas_price: Optional[str],
    gas_limit: Optional[int],
    nonce: Optional[int],
    chain_id: Optional[int],
    rpc_url: Optional[str],
    private_key: str,
) -> None:
    """Sign and broadcast an arbitrary contract call."""
    params = parse_json_list(params_json, "--params")
    abi = None
    if abi_file is not None:
        document = json.loads(abi_file.read_text(encoding="utf-8"))
        # Foundry / Hardhat artifacts wrap the ABI
        abi = document["abi"] if isinstance(document, dict) and "abi" in document else document

    request = SmartContractCallRequest(
        rpc_url=resolve_rpc_url(ctx, rpc_url),
        contract_address=contract,
        method=method,
        params=params,
        value=value or None,
        contract_abi=abi,
        gas_price=gas_price,
        gas_limit=gas_limit,
        nonce=nonce,
        private_key=private_key,
        chain_id=chain_id,
    )
    response = run(operations.smart_contract_send(request, config=get_config(ctx)))
    click.secho("Transaction submitted.", fg="green")
    click.echo(f"  TX: {response['txHash']}")
