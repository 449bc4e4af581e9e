"""
ABI handling - function lookup, typed parameter validation, call encoding.

Parameters are checked against the declared ABI type before eth-abi sees
them, so a mismatch surfaces as ``EncodingError`` naming the offending
argument instead of a generic encoder failure.

Keccak-256 comes from eth-hash.  Keccak-256 != SHA3-256 (NIST); never use
hashlib.sha3_256 for selectors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError as AbiEncodingError
from eth_hash.auto import keccak
from eth_utils import is_address, to_checksum_address

from ..errors import EncodingError
from ..schemas import ABI_SCHEMA, SchemaRegistry, SchemaValidationError
from ..utils import hex_to_bytes

_INT_RE = re.compile(r"^(u?int)(\d*)$")
_BYTES_RE = re.compile(r"^bytes(\d+)$")
_ARRAY_RE = re.compile(r"^(.*)\[(\d*)\]$")


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AbiType:
    """
    Parsed ABI type.

    ``kind`` is one of: address, uint, int, bool, string, bytes,
    fixed_bytes, array, tuple.
    """

    kind: str
    canonical: str
    bits: int = 0
    size: int = 0
    item: Optional["AbiType"] = None
    length: Optional[int] = None
    components: tuple["AbiType", ...] = ()

    @classmethod
    def parse(cls, type_str: str, components: Optional[Sequence[dict]] = None) -> "AbiType":
        type_str = type_str.strip()

        array = _ARRAY_RE.match(type_str)
        if array:
            item = cls.parse(array.group(1), components)
            length = int(array.group(2)) if array.group(2) else None
            suffix = f"[{length}]" if length is not None else "[]"
            return cls(
                kind="array",
                canonical=item.canonical + suffix,
                item=item,
                length=length,
            )

        if type_str == "tuple":
            parsed = tuple(
                cls.parse(c["type"], c.get("components")) for c in (components or [])
            )
            canonical = "(" + ",".join(p.canonical for p in parsed) + ")"
            return cls(kind="tuple", canonical=canonical, components=parsed)

        if type_str in ("address", "bool", "string", "bytes"):
            return cls(kind=type_str, canonical=type_str)

        integer = _INT_RE.match(type_str)
        if integer:
            bits = int(integer.group(2) or 256)
            if bits % 8 or not 8 <= bits <= 256:
                raise EncodingError(f"Unsupported integer width: {type_str}")
            return cls(kind=integer.group(1), canonical=f"{integer.group(1)}{bits}", bits=bits)

        fixed = _BYTES_RE.match(type_str)
        if fixed:
            size = int(fixed.group(1))
            if not 1 <= size <= 32:
                raise EncodingError(f"Unsupported bytes width: {type_str}")
            return cls(kind="fixed_bytes", canonical=type_str, size=size)

        raise EncodingError(f"Unsupported ABI type: {type_str}")

    def coerce(self, value: Any, label: str = "value") -> Any:
        """Validate ``value`` against this type and normalize it for eth-abi."""
        if self.kind == "address":
            if not isinstance(value, str) or not is_address(value):
                raise EncodingError(f"{label}: expected address, got {value!r}")
            return to_checksum_address(value)

        if self.kind in ("uint", "int"):
            number = _coerce_integer(value, label)
            if self.kind == "uint":
                low, high = 0, 2**self.bits - 1
            else:
                low, high = -(2 ** (self.bits - 1)), 2 ** (self.bits - 1) - 1
            if not low <= number <= high:
                raise EncodingError(f"{label}: {number} out of range for {self.canonical}")
            return number

        if self.kind == "bool":
            if not isinstance(value, bool):
                raise EncodingError(f"{label}: expected bool, got {value!r}")
            return value

        if self.kind == "string":
            if not isinstance(value, str):
                raise EncodingError(f"{label}: expected string, got {value!r}")
            return value

        if self.kind in ("bytes", "fixed_bytes"):
            raw = _coerce_bytes(value, label)
            if self.kind == "fixed_bytes" and len(raw) != self.size:
                raise EncodingError(
                    f"{label}: expected {self.size} bytes for {self.canonical}, got {len(raw)}"
                )
            return raw

        if self.kind == "array":
            if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
                raise EncodingError(f"{label}: expected array, got {value!r}")
            if self.length is not None and len(value) != self.length:
                raise EncodingError(
                    f"{label}: expected {self.length} items for {self.canonical}, got {len(value)}"
                )
            assert self.item is not None
            return [self.item.coerce(v, f"{label}[{i}]") for i, v in enumerate(value)]

        if self.kind == "tuple":
            if not isinstance(value, (list, tuple)) or len(value) != len(self.components):
                raise EncodingError(f"{label}: expected tuple {self.canonical}, got {value!r}")
            return tuple(
                c.coerce(v, f"{label}.{i}") for i, (c, v) in enumerate(zip(self.components, value))
            )

        raise EncodingError(f"{label}: unsupported type {self.canonical}")


def _coerce_integer(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"{label}: expected integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError:
            pass
    raise EncodingError(f"{label}: expected integer, got {value!r}")


def _coerce_bytes(value: Any, label: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str) and value.startswith(("0x", "0X")):
        try:
            return hex_to_bytes(value)
        except ValueError:
            pass
    raise EncodingError(f"{label}: expected bytes or 0x-hex, got {value!r}")


@dataclass(frozen=True)
class AbiParam:
    name: str
    type: AbiType

    @classmethod
    def from_entry(cls, entry: dict[str, Any]) -> "AbiParam":
        return cls(
            name=entry.get("name") or "",
            type=AbiType.parse(entry["type"], entry.get("components")),
        )


@dataclass(frozen=True)
class AbiFunction:
    name: str
    inputs: tuple[AbiParam, ...]
    outputs: tuple[AbiParam, ...]
    state_mutability: str = "nonpayable"

    @classmethod
    def from_entry(cls, entry: dict[str, Any]) -> "AbiFunction":
        return cls(
            name=entry["name"],
            inputs=tuple(AbiParam.from_entry(p) for p in entry.get("inputs", [])),
            outputs=tuple(AbiParam.from_entry(p) for p in entry.get("outputs", [])),
            state_mutability=entry.get("stateMutability", "nonpayable"),
        )

    @property
    def input_types(self) -> list[str]:
        return [p.type.canonical for p in self.inputs]

    @property
    def output_types(self) -> list[str]:
        return [p.type.canonical for p in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return keccak(self.signature.encode("utf-8"))[:4]

    def encode_input(self, args: Sequence[Any]) -> str:
        """
        ABI-encode a call to this function.

        Returns:
            0x-prefixed hex encoded calldata
        """
        if len(args) != len(self.inputs):
            raise EncodingError(
                f"{self.signature} expects {len(self.inputs)} arguments, got {len(args)}"
            )
        values = [
            param.type.coerce(arg, param.name or f"arg{i}")
            for i, (param, arg) in enumerate(zip(self.inputs, args))
        ]
        try:
            encoded_args = encode(self.input_types, values) if values else b""
        except (AbiEncodingError, TypeError, ValueError) as exc:
            raise EncodingError(f"Cannot encode {self.signature}: {exc}") from exc
        return "0x" + self.selector.hex() + encoded_args.hex()

    def decode_output(self, data: str) -> Any:
        """
        ABI-decode a call result.

        Returns:
            Decoded result (single value or tuple), None for no outputs
        """
        if not self.outputs:
            return None
        try:
            decoded = decode(self.output_types, hex_to_bytes(data))
        except (DecodingError, ValueError) as exc:
            raise EncodingError(f"Cannot decode {self.name} result: {exc}") from exc
        if len(decoded) == 1:
            return decoded[0]
        return decoded


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def validate_abi(abi: Any, registry: Optional[SchemaRegistry] = None) -> None:
    registry = registry or SchemaRegistry.default()
    try:
        registry.validate_instance(abi, ABI_SCHEMA)
    except SchemaValidationError as exc:
        raise EncodingError(f"Invalid contract ABI: {exc}") from exc


def functions(abi: Iterable[dict[str, Any]]) -> list[AbiFunction]:
    return [AbiFunction.from_entry(e) for e in abi if e.get("type") == "function"]


def find_function(
    abi: Iterable[dict[str, Any]],
    method: str,
    arg_count: Optional[int] = None,
) -> AbiFunction:
    """
    Find a function by name or full signature (``transfer(address,uint256)``).

    Overloads sharing a name are disambiguated by argument count.
    """
    candidates = functions(abi)
    if "(" in method:
        wanted = method.replace(" ", "")
        matches = [f for f in candidates if f.signature == wanted]
    else:
        matches = [f for f in candidates if f.name == method]
        if len(matches) > 1 and arg_count is not None:
            matches = [f for f in matches if len(f.inputs) == arg_count]

    if not matches:
        raise EncodingError(f"Function {method} not found in ABI")
    if len(matches) > 1:
        options = ", ".join(f.signature for f in matches)
        raise EncodingError(f"Function {method} is ambiguous: {options}")
    return matches[0]


def encode_function_call(
    abi: list[dict[str, Any]],
    method: str,
    params: Sequence[Any],
) -> str:
    """Validate ``abi`` and encode ``method(*params)`` to 0x-hex calldata."""
    validate_abi(abi)
    function = find_function(abi, method, len(params))
    return function.encode_input(params)
