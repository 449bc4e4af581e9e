"""
Tessera CLI

Command-line interface for account and transaction orchestration over
EVM JSON-RPC.

Commands:
  wallet      - Create, recover, inspect, encrypt and decrypt accounts
  balance     - Native or token balance of an address
  token-info  - Token name, symbol, decimals and supply
  tx          - Look up a transaction by hash
  transfer    - Send native value or tokens
  invoke      - Sign and broadcast an arbitrary contract call
"""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .config import TesseraConfig

VERSION = __version__


def _print_banner() -> None:
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("T E S S E R A", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo()


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="tessera")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Tessera: accounts and transactions over JSON-RPC."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = TesseraConfig.from_env()
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


from .commands.query import balance, lookup, token_info
from .commands.send import invoke, transfer
from .commands.wallet import wallet

cli.add_command(wallet)
cli.add_command(balance)
cli.add_command(token_info)
cli.add_command(lookup)
cli.add_command(transfer)
cli.add_command(invoke)


def main() -> None:
    """Tessera CLI entry point."""
    # Ensure UTF-8 output on Windows (for the banner glyphs)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()
