"""Unit tests for utils.py and config.py."""

from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path

import pytest

from tessera.config import DEFAULT_DERIVATION_PATH, TesseraConfig, erc20_abi
from tessera.errors import InvalidInputError, TesseraError
from tessera.schemas import KEYSTORE_SCHEMA, SchemaRegistry, SchemaValidationError
from tessera.utils import (
    checksum,
    format_units,
    hex_to_int,
    parse_gwei,
    parse_units,
    success_response,
    utf8_to_hex,
)


# ============ Unit conversion ============


@pytest.mark.parametrize(
    "value,decimals,expected",
    [
        ("1", 18, 10**18),
        ("0.000000000000000001", 18, 1),
        (1.5, 6, 1_500_000),
        (0.1, 18, 10**17),
        (Decimal("2.5"), 1, 25),
        (7, 0, 7),
        ("100", 9, 100 * 10**9),
    ],
)
def test_parse_units(value, decimals: int, expected: int) -> None:
    assert parse_units(value, decimals) == expected


@pytest.mark.parametrize("value,decimals", [("1.5", 0), ("0.01", 1), ("1.0000001", 6)])
def test_parse_units_rejects_excess_precision(value: str, decimals: int) -> None:
    with pytest.raises(ValueError, match="fractional digits"):
        parse_units(value, decimals)


@pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity"])
def test_parse_units_rejects_garbage(value: str) -> None:
    with pytest.raises(ValueError):
        parse_units(value, 18)


def test_format_units_is_exact() -> None:
    assert format_units(123_456_789, 6) == Decimal("123.456789")
    assert format_units(10**30 + 1, 18) == Decimal("1000000000000.000000000000000001")


def test_parse_gwei() -> None:
    assert parse_gwei("100") == 100_000_000_000
    assert parse_gwei("0.5") == 500_000_000


@pytest.mark.parametrize("value,expected", [("0x0", 0), ("0x539", 1337), (42, 42), ("10", 10)])
def test_hex_to_int(value, expected: int) -> None:
    assert hex_to_int(value) == expected


def test_hex_to_int_rejects_none() -> None:
    with pytest.raises(ValueError):
        hex_to_int(None)


def test_utf8_to_hex() -> None:
    assert utf8_to_hex("hi") == "0x6869"
    assert utf8_to_hex("") == "0x"


def test_checksum() -> None:
    assert checksum("0x70997970c51812dc3a010c7d01b50e0d17dc79c8") == (
        "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
    )
    with pytest.raises(InvalidInputError) as excinfo:
        checksum("0x1234")
    assert isinstance(excinfo.value, TesseraError)
    assert excinfo.value.exit_code == 2


def test_success_response() -> None:
    assert success_response(a=1) == {"success": True, "a": 1}
    assert success_response() == {"success": True}


# ============ Config ============


def test_config_defaults() -> None:
    config = TesseraConfig()
    assert config.default_derivation_path == DEFAULT_DERIVATION_PATH
    assert config.native_decimals == 18
    assert config.default_gas_price_gwei == "100"
    assert config.chain_id is None
    assert {f["name"] for f in config.default_abi if f["type"] == "function"} >= {
        "name", "symbol", "decimals", "totalSupply", "balanceOf", "transfer",
    }


def test_erc20_abi_is_a_fresh_copy() -> None:
    abi = erc20_abi()
    abi.clear()
    assert erc20_abi()


def test_config_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TESSERA_RPC_URL", "TESSERA_CHAIN_ID", "TESSERA_DERIVATION_PATH"):
        monkeypatch.delenv(name, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "TESSERA_RPC_URL=http://from-file:8545\nTESSERA_CHAIN_ID=0x2105\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("TESSERA_RPC_TIMEOUT", "5")

    try:
        config = TesseraConfig.from_env(env_file)
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("TESSERA_RPC_URL", None)
        os.environ.pop("TESSERA_CHAIN_ID", None)

    assert config.rpc_url == "http://from-file:8545"
    assert config.chain_id == 8453
    assert config.rpc_timeout == 5.0
    assert config.default_derivation_path == DEFAULT_DERIVATION_PATH


def test_environment_wins_over_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("TESSERA_RPC_URL=http://from-file\n", encoding="utf-8")
    monkeypatch.setenv("TESSERA_RPC_URL", "http://from-env")

    assert TesseraConfig.from_env(env_file).rpc_url == "http://from-env"


def test_config_from_env_without_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TESSERA_DERIVATION_PATH", "m/44'/60'/0'/0/3")
    monkeypatch.delenv("TESSERA_CHAIN_ID", raising=False)
    config = TesseraConfig.from_env(tmp_path / "missing.env")
    assert config.default_derivation_path == "m/44'/60'/0'/0/3"
    assert config.chain_id is None


# ============ Schemas ============


def test_keystore_schema_reports_errors() -> None:
    registry = SchemaRegistry.default()
    with pytest.raises(SchemaValidationError) as excinfo:
        registry.validate_instance({"version": 3}, KEYSTORE_SCHEMA)
    assert excinfo.value.errors
