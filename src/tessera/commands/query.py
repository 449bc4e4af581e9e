"""
Query commands - balances, token metadata and transaction lookups.
"""

from __future__ import annotations

from typing import Optional

import click

from .. import operations
from ..models import BalanceRequest, TokenInfoRequest, TransactionLookupRequest
from ._runner import echo_response, get_config, resolve_rpc_url, rpc_url_option, run


@click.command()
@click.argument("address")
@click.option("--token", "token_address", default=None, help="Token contract address")
@click.option("--network", default="ethereum", show_default=True)
@rpc_url_option
@click.pass_context
def balance(
    ctx: click.Context,
    address: str,
    token_address: Optional[str],
    network: str,
    rpc_url: Optional[str],
) -> None:
    """Show the native or token balance of ADDRESS."""
    request = BalanceRequest(
        address=address,
        rpc_url=resolve_rpc_url(ctx, rpc_url),
        network=network,
        token_address=token_address,
    )
    response = run(operations.get_balance(request, config=get_config(ctx)))
    unit = "tokens" if token_address else "native"
    click.echo(f"Balance: {response['balance']} ({unit})")


@click.command("token-info")
@click.argument("token_address")
@click.option("--network", default="ethereum", show_default=True)
@rpc_url_option
@click.pass_context
def token_info(
    ctx: click.Context,
    token_address: str,
    network: str,
    rpc_url: Optional[str],
) -> None:
    """Show name, symbol, decimals and supply of a token."""
    request = TokenInfoRequest(
        address=token_address,
        rpc_url=resolve_rpc_url(ctx, rpc_url),
        network=network,
    )
    response = run(operations.get_token_info(request, config=get_config(ctx)))
    echo_response(response, "Token")


@click.command("tx")
@click.argument("tx_hash")
@click.option("--network", default="ethereum", show_default=True)
@rpc_url_option
@click.pass_context
def lookup(
    ctx: click.Context,
    tx_hash: str,
    network: str,
    rpc_url: Optional[str],
) -> None:
    """Look up a transaction by hash."""
    request = TransactionLookupRequest(
        hash=tx_hash,
        rpc_url=resolve_rpc_url(ctx, rpc_url),
        network=network,
    )
    response = run(operations.get_transaction(request, config=get_config(ctx)))
    if len(response) == 1:
        click.secho(f"Transaction {tx_hash} not found.", fg="yellow")
        return
    echo_response(response, "Transaction")
