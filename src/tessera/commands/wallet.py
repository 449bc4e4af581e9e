"""
Wallet commands - generate, recover and inspect accounts.

Nothing is written to disk except by ``encrypt --output``; keys and
phrases are printed once and are the caller's to keep.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .. import operations
from ._runner import echo_response, get_config, private_key_option, run


@click.group()
def wallet() -> None:
    """Create, recover and inspect accounts."""


@wallet.command()
@click.option("--path", "derivation_path", default=None, help="HD derivation path")
@click.pass_context
def create(ctx: click.Context, derivation_path: Optional[str]) -> None:
    """Generate a new account with a recovery phrase."""
    response = run(operations.create_wallet(derivation_path, config=get_config(ctx)))
    echo_response(response, "New Wallet")
    click.echo()
    click.secho("  Store the mnemonic offline. It will not be shown again.", fg="yellow")


@wallet.command()
@click.argument("mnemonic", nargs=-1, required=True)
@click.option("--path", "derivation_path", default=None, help="HD derivation path")
@click.pass_context
def recover(ctx: click.Context, mnemonic: tuple[str, ...], derivation_path: Optional[str]) -> None:
    """Derive an account from a recovery phrase."""
    phrase = " ".join(mnemonic)
    response = run(
        operations.generate_wallet_from_mnemonic(phrase, derivation_path, config=get_config(ctx))
    )
    echo_response(response, "Recovered Wallet")


@wallet.command()
@private_key_option
def address(private_key: str) -> None:
    """Show the address for a private key."""
    response = run(operations.get_address_from_private_key(private_key))
    click.echo(f"Address: {response['address']}")


@wallet.command()
@private_key_option
@click.password_option("--password", help="Keystore password")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the keystore to a file instead of stdout",
)
def encrypt(private_key: str, password: str, output: Optional[Path]) -> None:
    """Encrypt a private key into a v3 keystore."""
    response = run(operations.get_encrypted_json_from_private_key(private_key, password))
    if output is None:
        click.echo(response["json"])
        return
    output.write_text(response["json"] + "\n", encoding="utf-8")
    click.echo(f"Keystore written to {output}")


@wallet.command()
@click.argument("keystore", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--password", prompt=True, hide_input=True, help="Keystore password")
def decrypt(keystore: Path, password: str) -> None:
    """Decrypt a v3 keystore file."""
    text = keystore.read_text(encoding="utf-8")
    response = run(operations.get_wallet_from_encrypted_json(text, password))
    echo_response(response, "Decrypted Wallet")
