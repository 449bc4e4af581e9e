"""
Contract binding - an address plus ABI bound to a transport.

A binding without a signer can only read (``call``).  A signer-bound
binding can also estimate and build transactions for the signer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from eth_account.signers.local import LocalAccount

from ..errors import NotFoundError
from ..utils import checksum
from .abi import AbiFunction, find_function, validate_abi
from .rpc import RpcTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractBinding:
    address: str
    abi: list[dict[str, Any]]
    transport: RpcTransport
    signer: Optional[LocalAccount] = None

    @classmethod
    def bind(
        cls,
        address: str,
        abi: list[dict[str, Any]],
        transport: RpcTransport,
        signer: Optional[LocalAccount] = None,
    ) -> "ContractBinding":
        """
        Bind to a contract address.

        Raises:
            NotFoundError: If ``address`` is not a valid address
            EncodingError: If ``abi`` is not a valid ABI document
        """
        try:
            resolved = checksum(address)
        except ValueError as exc:
            raise NotFoundError(f"No contract can be bound at {address!r}") from exc
        validate_abi(abi)
        return cls(address=resolved, abi=abi, transport=transport, signer=signer)

    @property
    def read_only(self) -> bool:
        return self.signer is None

    def function(self, method: str, arg_count: Optional[int] = None) -> AbiFunction:
        return find_function(self.abi, method, arg_count)

    def encode(self, method: str, *args: Any) -> str:
        return self.function(method, len(args)).encode_input(args)

    async def call(self, method: str, *args: Any) -> Any:
        """
        Read from the contract (eth_call).

        Raises:
            NotFoundError: If the address answered with empty return data
                (no contract code behind it)
        """
        function = self.function(method, len(args))
        tx: dict[str, Any] = {"to": self.address, "data": function.encode_input(args)}
        if self.signer is not None:
            tx["from"] = self.signer.address

        result = await self.transport.call(tx)
        if function.outputs and (result is None or result in ("0x", "0X", "")):
            raise NotFoundError(
                f"Contract {self.address} returned no data for {function.signature}"
            )
        return function.decode_output(result)

    def _sender(self) -> str:
        if self.signer is None:
            raise NotFoundError(f"Contract binding {self.address} has no signer")
        return self.signer.address

    async def estimate_gas(self, method: str, *args: Any, value: int = 0) -> int:
        tx = self.build_call(method, args, value=value)
        return await self.transport.estimate_gas(tx)

    def build_call(self, method: str, args: Sequence[Any], value: int = 0) -> dict[str, Any]:
        """Unsigned call object ``{from, to, data, value}`` for the signer."""
        tx: dict[str, Any] = {
            "from": self._sender(),
            "to": self.address,
            "data": self.encode(method, *args),
        }
        if value:
            tx["value"] = hex(value)
        return tx
