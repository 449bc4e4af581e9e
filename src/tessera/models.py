from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Sequence, Union

Amount = Union[int, float, str, Decimal]


@dataclass(frozen=True)
class TransferRequest:
    """
    A value or token transfer.

    With ``token_address`` set this is a token transfer and ``data`` is
    ignored; without it, a native value transfer.
    """

    recipient_address: str
    amount: Amount
    rpc_url: str
    private_key: str
    network: str = "ethereum"
    gas_price: Optional[str] = None  # gwei
    token_address: Optional[str] = None
    nonce: Optional[int] = None
    data: Optional[str] = None
    gas_limit: Optional[int] = None

    @property
    def is_token_transfer(self) -> bool:
        return bool(self.token_address)


@dataclass(frozen=True)
class BalanceRequest:
    address: str
    rpc_url: str
    network: str = "ethereum"
    token_address: Optional[str] = None


@dataclass(frozen=True)
class TokenInfoRequest:
    address: str
    rpc_url: str
    network: str = "ethereum"


@dataclass(frozen=True)
class TransactionLookupRequest:
    hash: str
    rpc_url: str
    network: str = "ethereum"


@dataclass(frozen=True)
class TokenInfo:
    name: str
    symbol: str
    address: str
    decimals: int
    # totalSupply / 10**decimals, truncated; fractional supply is dropped
    total_supply: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "address": self.address,
            "decimals": self.decimals,
            "totalSupply": self.total_supply,
        }


@dataclass(frozen=True)
class SmartContractCallRequest:
    rpc_url: str
    contract_address: str
    method: str
    params: Sequence[Any] = field(default_factory=tuple)
    value: Optional[int] = None  # wei
    contract_abi: Optional[list[dict[str, Any]]] = None
    gas_price: Optional[str] = None  # gwei
    gas_limit: Optional[int] = None
    nonce: Optional[int] = None
    private_key: Optional[str] = None
    chain_id: Optional[int] = None
