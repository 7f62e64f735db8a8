"""
Core cryptographic utilities.

SHA-256 digests for audit record hashes and Merkle parents.
"""
from .hashing import (
    sha256,
    sha256_hex,
    hash_canonical,
    hash_canonical_hex,
    hash_concat_hex,
    to_hex,
)

__all__ = [
    "sha256",
    "sha256_hex",
    "hash_canonical",
    "hash_canonical_hex",
    "hash_concat_hex",
    "to_hex",
]
