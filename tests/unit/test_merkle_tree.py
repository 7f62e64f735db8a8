"""
Merkle Tree Unit Tests
Tests for core/merkle/merkle_tree.py

Required tests:
1. Root determinism - same leaves -> same root across runs
2. Padding correctness - odd leaf count uses "duplicate last" rule
3. Proof verification - generate proof for each index, verify passes
4. Tamper detection - tampered sibling/leaf/root fails verification
5. Empty leaves - build_merkle_root([]) returns None
6. Single leaf - root equals leaf
"""
import pytest

from core.crypto.hashing import hash_concat_hex, sha256_hex
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_root,
    compute_tree_depth,
    merkle_parent,
    verify_merkle_proof,
)


def _leaves(n: int) -> list[str]:
    return [sha256_hex(f"leaf-{i}".encode()) for i in range(n)]


class TestEmptyTree:

    def test_empty_leaves_returns_none(self):
        assert build_merkle_root([]) is None

    def test_build_proof_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            build_merkle_proof([], 0)

    def test_depth_zero(self):
        assert compute_tree_depth(0) == 0


class TestSingleLeaf:

    def test_single_leaf_root_equals_leaf(self):
        leaf = sha256_hex(b"single leaf")
        assert build_merkle_root([leaf]) == leaf

    def test_single_leaf_proof_no_siblings(self):
        leaf = sha256_hex(b"only one")
        proof = build_merkle_proof([leaf], 0)
        assert proof.siblings == []
        assert proof.root == leaf
        assert verify_merkle_proof(proof)


class TestRootComputation:

    def test_two_leaves(self):
        a, b = _leaves(2)
        assert build_merkle_root([a, b]) == hash_concat_hex(a, b)

    def test_parent_rule(self):
        a, b = _leaves(2)
        assert merkle_parent(a, b) == sha256_hex((a + b).encode("utf-8"))

    def test_three_leaves_duplicates_last(self):
        a, b, c = _leaves(3)
        expected = merkle_parent(merkle_parent(a, b), merkle_parent(c, c))
        assert build_merkle_root([a, b, c]) == expected

    def test_five_leaves_pads_every_odd_level(self):
        a, b, c, d, e = _leaves(5)
        level1 = [merkle_parent(a, b), merkle_parent(c, d), merkle_parent(e, e)]
        level2 = [merkle_parent(level1[0], level1[1]), merkle_parent(level1[2], level1[2])]
        assert build_merkle_root([a, b, c, d, e]) == merkle_parent(level2[0], level2[1])

    def test_same_leaves_same_root(self):
        leaves = _leaves(7)
        assert build_merkle_root(leaves) == build_merkle_root(list(leaves))

    def test_order_matters(self):
        leaves = _leaves(4)
        assert build_merkle_root(leaves) != build_merkle_root(list(reversed(leaves)))

    def test_input_not_mutated(self):
        leaves = _leaves(3)
        snapshot = list(leaves)
        build_merkle_root(leaves)
        assert leaves == snapshot

    def test_root_is_lowercase_hex(self):
        root = build_merkle_root(_leaves(6))
        assert len(root) == 64
        assert root == root.lower()


class TestProofs:

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 8, 9])
    def test_every_index_verifies(self, n):
        leaves = _leaves(n)
        root = build_merkle_root(leaves)
        for i in range(n):
            proof = build_merkle_proof(leaves, i)
            assert proof.root == root
            assert verify_merkle_proof(proof)

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            build_merkle_proof(_leaves(3), 3)

    def test_negative_index_rejected(self):
        with pytest.raises(IndexError):
            build_merkle_proof(_leaves(3), -1)

    def test_proof_rejects_negative_index(self):
        with pytest.raises(ValueError):
            MerkleProof(leaf="a", index=-1, siblings=[], root="a")


class TestTamperDetection:

    def test_tampered_leaf_fails(self):
        leaves = _leaves(4)
        proof = build_merkle_proof(leaves, 1)
        forged = MerkleProof(
            leaf=sha256_hex(b"forged"), index=proof.index, siblings=proof.siblings, root=proof.root
        )
        assert not verify_merkle_proof(forged)

    def test_tampered_sibling_fails(self):
        leaves = _leaves(4)
        proof = build_merkle_proof(leaves, 2)
        siblings = list(proof.siblings)
        siblings[0] = sha256_hex(b"x")
        forged = MerkleProof(leaf=proof.leaf, index=proof.index, siblings=siblings, root=proof.root)
        assert not verify_merkle_proof(forged)

    def test_wrong_index_fails(self):
        leaves = _leaves(4)
        proof = build_merkle_proof(leaves, 0)
        forged = MerkleProof(leaf=proof.leaf, index=1, siblings=proof.siblings, root=proof.root)
        assert not verify_merkle_proof(forged)

    def test_changed_leaf_changes_root(self):
        leaves = _leaves(4)
        altered = list(leaves)
        altered[3] = sha256_hex(b"changed")
        assert build_merkle_root(leaves) != build_merkle_root(altered)


class TestTreeDepth:

    @pytest.mark.parametrize("n,depth", [(1, 1), (2, 2), (3, 3), (4, 3), (5, 4), (8, 4), (9, 5)])
    def test_depth(self, n, depth):
        assert compute_tree_depth(n) == depth
