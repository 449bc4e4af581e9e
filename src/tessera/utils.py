from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Union

from eth_utils import is_address, to_checksum_address

from .errors import InvalidInputError

Numeric = Union[int, float, str, Decimal]

GWEI_DECIMALS = 9


def _to_decimal(value: Numeric) -> Decimal:
    if isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1 rather than its binary expansion
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise InvalidInputError(f"Invalid decimal amount: {value!r}") from exc


def parse_units(value: Numeric, decimals: int) -> int:
    """Convert a human-readable amount to integer base units."""
    if decimals < 0:
        raise InvalidInputError(f"decimals must be non-negative, got {decimals}")
    amount = _to_decimal(value)
    if not amount.is_finite():
        raise InvalidInputError(f"Invalid decimal amount: {value!r}")
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = amount.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidInputError(
            f"Amount {value} has more fractional digits than {decimals} decimals allow"
        )
    return int(scaled)


def format_units(value: int, decimals: int) -> Decimal:
    """Convert integer base units to an exact Decimal amount."""
    if decimals < 0:
        raise InvalidInputError(f"decimals must be non-negative, got {decimals}")
    with localcontext() as ctx:
        ctx.prec = 100
        return Decimal(int(value)).scaleb(-decimals)


def parse_gwei(value: Numeric) -> int:
    return parse_units(value, GWEI_DECIMALS)


def hex_to_int(value: Any) -> int:
    """Decode a JSON-RPC quantity (0x-hex string or plain int)."""
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
    raise ValueError(f"Not a quantity: {value!r}")


def utf8_to_hex(text: str) -> str:
    return "0x" + text.encode("utf-8").hex()


def hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith(("0x", "0X")) else value)


def normalize_private_key(private_key: str) -> str:
    key = private_key.strip()
    return key if key.startswith(("0x", "0X")) else "0x" + key


def checksum(address: str) -> str:
    if not is_address(address):
        raise InvalidInputError(f"Invalid address: {address!r}")
    return to_checksum_address(address)


def success_response(**payload: Any) -> dict[str, Any]:
    return {"success": True, **payload}
