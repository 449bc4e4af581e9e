"""Shared plumbing for CLI commands: option helpers, async runner, output."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, TypeVar

import click

from ..config import TesseraConfig
from ..errors import TesseraError

T = TypeVar("T")


def rpc_url_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--rpc-url",
        envvar="TESSERA_RPC_URL",
        default=None,
        help="JSON-RPC endpoint (default: TESSERA_RPC_URL or config)",
    )(func)


def private_key_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--private-key",
        envvar="PRIVATE_KEY",
        required=True,
        help="Signer private key (default: PRIVATE_KEY)",
    )(func)


def get_config(ctx: click.Context) -> TesseraConfig:
    config = ctx.find_object(TesseraConfig)
    return config if config is not None else TesseraConfig.from_env()


def resolve_rpc_url(ctx: click.Context, rpc_url: str | None) -> str:
    return rpc_url or get_config(ctx).rpc_url


def run(coro: Awaitable[T]) -> T:
    """Drive an operation to completion, mapping failures to exit codes."""
    try:
        return asyncio.run(coro)  # type: ignore[arg-type]
    except TesseraError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(2)


def echo_response(response: dict[str, Any], title: str | None = None) -> None:
    if title:
        click.echo(f"=== {title} ===")
        click.echo()
    width = max((len(k) for k in response), default=0) + 2
    for key, value in response.items():
        if key == "success":
            continue
        if isinstance(value, (dict, list)):
            value = json.dumps(value, default=str)
        label = f"  {key}:".ljust(width + 3)
        click.echo(click.style(label, dim=True) + click.style(str(value), fg="bright_white"))


def parse_json_list(text: str, label: str) -> list[Any]:
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}", param_hint=label) from exc
    if not isinstance(value, list):
        raise click.BadParameter("Must be a JSON array", param_hint=label)
    return value
