"""
Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic serialization of allocation inputs and ledgers
for audit hashing and Merkle leaves.

Canonical form:
    - Sorted object keys, no whitespace (separators "," and ":")
    - None fields dropped
    - Enums as their values, pydantic models dumped in JSON mode
    - Floats in Python's shortest round-trip repr; NaN/Infinity rejected
    - Non-ASCII emitted as UTF-8 (ensure_ascii=False)

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

import json
import math
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def _validate_float(value: float, path: str = "") -> None:
    """
    Validate that a float is finite (not NaN or Infinity).

    Raises:
        CanonicalizationException: If the float is NaN or Infinity.
    """
    if not math.isfinite(value):
        raise CanonicalizationException(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value cannot be canonicalized.
    """
    if value is None:
        return None

    if isinstance(value, bool):
        # Must check bool before int since bool is subclass of int
        return value

    if isinstance(value, Enum):
        # str-based enums would otherwise pass the str check below unchanged
        return value.value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        _validate_float(value, path)
        return value

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise CanonicalizationException(
                message=f"Non-finite decimal value encountered: {value}",
                details={"path": path, "value": str(value)},
            )
        return str(value)

    if isinstance(value, str):
        return value

    if isinstance(value, BaseModel):
        dumped = value.model_dump(
            mode="json",
            by_alias=False,
            exclude_none=True,
        )
        return canonicalize_value(dumped, path)

    if isinstance(value, dict):
        # Keys are sorted during JSON serialization
        return {
            str(k): canonicalize_value(v, f"{path}.{k}" if path else str(k))
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    if isinstance(value, bytes):
        return value.hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to its canonical JSON string.

    This is the exact byte source for every audit content hash.

    Example:
        >>> dumps_canonical({"percent": 50.0, "address": "0xA", "memo": None})
        '{"address":"0xA","percent":50.0}'
    """
    try:
        canonicalized = canonicalize_value(obj)
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
            allow_nan=False,
        )
    except CanonicalizationException:
        raise
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e
