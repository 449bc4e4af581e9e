"""
Tessera configuration.

Defaults live on ``TesseraConfig`` and are passed explicitly into the
resolvers, so tests can substitute their own ABI or derivation path
without touching shared state.  ``TesseraConfig.from_env`` reads
overrides from the environment after loading ``~/.tessera/.env``.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

TESSERA_DIR = Path.home() / ".tessera"
TESSERA_ENV = TESSERA_DIR / ".env"

DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/0"
DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_GAS_PRICE_GWEI = "100"
NATIVE_DECIMALS = 18

_ABI_DIR = Path(__file__).resolve().parent / "abis"


@lru_cache(maxsize=4)
def _load_bundled_abi(name: str) -> tuple[dict[str, Any], ...]:
    abi_path = _ABI_DIR / f"{name}.json"
    if not abi_path.exists():
        raise FileNotFoundError(f"Bundled ABI not found: {abi_path}")
    with abi_path.open("r", encoding="utf-8") as f:
        return tuple(json.load(f))


def erc20_abi() -> list[dict[str, Any]]:
    """The standard fungible-token ABI shipped with the package."""
    return list(_load_bundled_abi("erc20"))


@dataclass(frozen=True)
class TesseraConfig:
    default_derivation_path: str = DEFAULT_DERIVATION_PATH
    default_abi: list[dict[str, Any]] = field(default_factory=erc20_abi)
    native_decimals: int = NATIVE_DECIMALS
    default_gas_price_gwei: str = DEFAULT_GAS_PRICE_GWEI
    rpc_timeout: float = 30.0
    rpc_url: str = DEFAULT_RPC_URL
    chain_id: Optional[int] = None

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "TesseraConfig":
        """
        Build a config from environment variables.

        Args:
            env_path: Path to a .env file (default: ~/.tessera/.env)

        Returns:
            TesseraConfig with any TESSERA_* overrides applied
        """
        env_path = env_path or TESSERA_ENV
        if env_path.exists():
            load_dotenv(env_path, override=False)

        config = cls()
        overrides: dict[str, Any] = {}

        rpc_url = os.environ.get("TESSERA_RPC_URL")
        if rpc_url:
            overrides["rpc_url"] = rpc_url

        chain_id = os.environ.get("TESSERA_CHAIN_ID")
        if chain_id:
            overrides["chain_id"] = int(chain_id, 0)

        timeout = os.environ.get("TESSERA_RPC_TIMEOUT")
        if timeout:
            overrides["rpc_timeout"] = float(timeout)

        path = os.environ.get("TESSERA_DERIVATION_PATH")
        if path:
            overrides["default_derivation_path"] = path

        return replace(config, **overrides) if overrides else config


@lru_cache(maxsize=1)
def default_config() -> TesseraConfig:
    return TesseraConfig()
