"""
Merkle Tree and Commitments

Commitment Rules:
1. Leaves: audit record content hashes (lowercase hex)
2. Parent hashing: sha256_hex(left + right)
3. Padding: Duplicate last node if odd number at any level
4. Empty tree: None
5. Single leaf: root = leaf

Usage:
    from core.merkle import build_merkle_root, build_merkle_proof, verify_merkle_proof

    root = build_merkle_root([record.content_hash for record in records])
    proof = build_merkle_proof(hashes, index=2)
    assert verify_merkle_proof(proof)
"""
from .merkle_tree import (
    MerkleProof,
    merkle_parent,
    build_merkle_root,
    build_merkle_proof,
    verify_merkle_proof,
    compute_tree_depth,
)


__all__ = [
    "MerkleProof",
    "merkle_parent",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
