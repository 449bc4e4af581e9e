"""
JSON Schema validation for caller-supplied documents (contract ABIs and
encrypted keystores).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import FormatChecker

SCHEMA_ROOT = Path(__file__).resolve().parent

ABI_SCHEMA = "abi.schema.json"
KEYSTORE_SCHEMA = "keystore.schema.json"


class SchemaValidationError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@lru_cache(maxsize=8)
def _load_schema(schema_root: Path, schema_filename: str) -> dict[str, Any]:
    path = schema_root / schema_filename
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


@dataclass(frozen=True)
class SchemaRegistry:
    schema_root: Path = SCHEMA_ROOT

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return cls()

    def validator_for(self, schema_filename: str) -> jsonschema.Validator:
        schema = _load_schema(self.schema_root, schema_filename)
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        return validator_cls(schema, format_checker=FormatChecker())

    def validate_instance(self, instance: Any, schema_filename: str) -> None:
        validator = self.validator_for(schema_filename)
        errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
        if errors:
            formatted = [self._format_error(err) for err in errors]
            raise SchemaValidationError(
                f"Schema validation failed for {schema_filename}: {formatted[0]}",
                errors=formatted,
            )

    @staticmethod
    def _format_error(error: jsonschema.ValidationError) -> str:
        location = "/".join(str(part) for part in error.path) or "<root>"
        return f"{location}: {error.message}"


__all__ = [
    "ABI_SCHEMA",
    "KEYSTORE_SCHEMA",
    "SchemaRegistry",
    "SchemaValidationError",
]
