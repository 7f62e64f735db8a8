"""
Merkle Tree Implementation
Deterministic Merkle root over audit record hashes, plus inclusion proofs.

Commitment Rules (Hard Contracts):
1. Leaves are audit record content hashes (lowercase hex strings)
2. Parent hashing: parent = sha256_hex((left + right).encode("utf-8"))
3. Padding rule: Duplicate last node if odd number at any level
4. Empty leaves: build_merkle_root([]) returns None
5. Single leaf: root = leaf, returned unhashed

Rule 5 means a one-record batch commits to the record hash itself rather
than to a hashed tree. Recorded roots depend on it, so it stays.

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is the audit sequence order
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from core.crypto.hashing import hash_concat_hex


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single audit record hash.

    Attributes:
        leaf: The leaf hash being proven
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: str
    index: int
    siblings: list[str]
    root: str

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(left: str, right: str) -> str:
    """Compute the parent hash of two child nodes: sha256_hex(left + right)."""
    return hash_concat_hex(left, right)


def _next_level(level: list[str]) -> list[str]:
    # Callers pad odd levels before pairing
    return [
        merkle_parent(level[i], level[i + 1])
        for i in range(0, len(level), 2)
    ]


def build_merkle_root(leaves: Sequence[str]) -> Optional[str]:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Algorithm:
    1. If empty: return None
    2. If single leaf: return the leaf itself
    3. Otherwise, iteratively build levels:
       - If odd number of nodes, duplicate the last node
       - Pair adjacent nodes and compute parent hashes
       - Repeat until single root remains

    Example: [a, b, c] -> [a, b, c, c] -> [parent(a,b), parent(c,c)]

    Args:
        leaves: Hex leaf hashes. Order matters and is preserved.

    Returns:
        Hex Merkle root, or None for no leaves
    """
    if len(leaves) == 0:
        return None

    if len(leaves) == 1:
        return leaves[0]

    current_level: list[str] = list(leaves)

    while len(current_level) > 1:
        if len(current_level) % 2 == 1:
            current_level.append(current_level[-1])
        current_level = _next_level(current_level)

    return current_level[0]


def build_merkle_proof(leaves: Sequence[str], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    At each level the sibling is the node at (index XOR 1) after padding;
    the index then moves up with index // 2.

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot generate proof for empty leaf list")

    if index < 0 or index >= len(leaves):
        raise IndexError(
            f"Leaf index {index} out of range for {len(leaves)} leaves"
        )

    if len(leaves) == 1:
        return MerkleProof(leaf=leaves[0], index=0, siblings=[], root=leaves[0])

    siblings: list[str] = []
    current_level: list[str] = list(leaves)
    current_index = index

    while len(current_level) > 1:
        if len(current_level) % 2 == 1:
            current_level.append(current_level[-1])

        siblings.append(current_level[current_index ^ 1])

        current_level = _next_level(current_level)
        current_index = current_index // 2

    return MerkleProof(
        leaf=leaves[index],
        index=index,
        siblings=siblings,
        root=current_level[0],
    )


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof by recomputing the root from leaf and siblings.

    Even indices are left children, odd indices are right children.
    """
    current_hash = proof.leaf
    current_index = proof.index

    for sibling in proof.siblings:
        if current_index % 2 == 0:
            current_hash = merkle_parent(current_hash, sibling)
        else:
            current_hash = merkle_parent(sibling, current_hash)
        current_index = current_index // 2

    return current_hash == proof.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels from leaves to root inclusive (0 for an empty tree).
    """
    if num_leaves == 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "MerkleProof",
    "merkle_parent",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
