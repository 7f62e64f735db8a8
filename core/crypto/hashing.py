"""
Hashing Utilities
Content digests for audit records and Merkle commitments.

This module provides:
- SHA-256 hashing for raw bytes (digest and lowercase hex forms)
- Canonical hashing for objects (via dumps_canonical)
- The Merkle parent rule over hex strings
- 0x-prefixed hex encoding for JSON-RPC quantities

Determinism Notes:
- Always hash raw bytes exactly as given
- Hex digests are 64 lowercase characters with no prefix
- Merkle parents hash the UTF-8 bytes of the two hex strings concatenated
  left-then-right with no separator
"""
from __future__ import annotations

import hashlib
from typing import Any

from core.schemas.canonical import dumps_canonical


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    """
    Compute the SHA-256 digest of raw bytes as lowercase hex.

    Args:
        data: Raw bytes to hash

    Returns:
        64-character lowercase hex string (no 0x prefix)
    """
    return hashlib.sha256(data).hexdigest()


def hash_canonical(obj: Any) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: digest = sha256(dumps_canonical(obj).encode("utf-8"))

    Raises:
        CanonicalizationException: If object cannot be canonically serialized
    """
    canonical_json = dumps_canonical(obj)
    return sha256(canonical_json.encode("utf-8"))


def hash_canonical_hex(obj: Any) -> str:
    """Hex form of hash_canonical(); this is the audit record content hash."""
    return hash_canonical(obj).hex()


def hash_concat_hex(left: str, right: str) -> str:
    """
    Hash the concatenation of two hex digests.

    This is the Merkle parent rule:
    parent = sha256_hex((left + right).encode("utf-8"))
    """
    return sha256_hex((left + right).encode("utf-8"))


def to_hex(data: bytes | int) -> str:
    """
    Convert bytes or a non-negative integer to a 0x-prefixed hex string.

    Integers use the minimal quantity encoding used by JSON-RPC
    (e.g. 255 -> "0xff", 0 -> "0x0").
    """
    if isinstance(data, int):
        if data < 0:
            raise ValueError(f"Cannot hex-encode negative integer: {data}")
        return hex(data)
    return "0x" + data.hex()


__all__ = [
    "sha256",
    "sha256_hex",
    "hash_canonical",
    "hash_canonical_hex",
    "hash_concat_hex",
    "to_hex",
]
