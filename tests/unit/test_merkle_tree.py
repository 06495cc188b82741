"""
Module 02 - Merkle Tree Unit Tests
Tests for core/merkle/merkle_tree.py

Required tests:
1. Root determinism - same leaves -> same root across runs
2. Order independence - any permutation of leaves -> same root and proofs
3. Carry-up correctness - odd levels promote the lone node unchanged
4. Proof generation - every leaf gets a sibling path that folds to the root
5. Empty leaves - EmptyTreeError
6. Single leaf - root equals leaf, proof is empty
"""
import itertools

import pytest

from core.crypto.hashing import keccak256
from core.merkle.merkle_tree import (
    MerkleTree,
    merkle_parent,
    build_levels,
    build_tree,
    build_merkle_root,
    prove_leaf,
    compute_tree_depth,
)
from core.merkle.merkle_proofs import process_proof
from core.schemas.errors import EmptyTreeError, LeafNotFoundError, ErrorCodes


def make_leaves(count: int) -> list[bytes]:
    """Distinct 32-byte digests, in generation (unsorted) order."""
    return [keccak256(f"leaf {i}".encode()) for i in range(count)]


class TestEmptyTree:
    """Tests for empty tree behavior."""

    def test_build_tree_empty_raises(self):
        with pytest.raises(EmptyTreeError) as exc_info:
            build_tree([])
        assert exc_info.value.code == ErrorCodes.EMPTY_TREE

    def test_build_merkle_root_empty_raises(self):
        with pytest.raises(EmptyTreeError):
            build_merkle_root([])

    def test_build_levels_empty_raises(self):
        with pytest.raises(EmptyTreeError):
            build_levels([])


class TestSingleLeaf:
    """Tests for single leaf tree behavior."""

    def test_single_leaf_root_equals_leaf(self):
        """Root of single-leaf tree equals the leaf itself."""
        leaf = keccak256(b"single leaf")
        tree = build_tree([leaf])

        assert tree.root == leaf
        assert tree.depth == 1

    def test_single_leaf_proof_empty(self):
        """Proof for single leaf has no siblings."""
        leaf = keccak256(b"single leaf")
        tree = build_tree([leaf])

        assert prove_leaf(tree, leaf) == []


class TestCarryUp:
    """Tests for odd leaf counts (lone node promoted unchanged)."""

    def test_two_leaves(self):
        a, b = make_leaves(2)
        assert build_merkle_root([a, b]) == merkle_parent(a, b) == keccak256(min(a, b) + max(a, b))

    def test_three_leaves_manual(self):
        """[s0, s1, s2] -> [H(s0,s1), s2] -> H(H(s0,s1), s2)."""
        s0, s1, s2 = sorted(make_leaves(3))

        h01 = merkle_parent(s0, s1)
        expected = merkle_parent(h01, s2)

        tree = build_tree(make_leaves(3))
        assert tree.root == expected
        assert tree.levels[1] == (h01, s2)

    def test_three_leaves_lone_node_not_duplicated(self):
        """The lone node is never hashed with itself."""
        s0, s1, s2 = sorted(make_leaves(3))
        duplicated = merkle_parent(merkle_parent(s0, s1), merkle_parent(s2, s2))

        assert build_merkle_root([s0, s1, s2]) != duplicated

    def test_five_leaves_manual(self):
        """Lone node carried up across two levels."""
        s = sorted(make_leaves(5))

        h01 = merkle_parent(s[0], s[1])
        h23 = merkle_parent(s[2], s[3])
        h0123 = merkle_parent(h01, h23)
        expected = merkle_parent(h0123, s[4])

        tree = build_tree(make_leaves(5))
        assert tree.root == expected
        assert [len(level) for level in tree.levels] == [5, 3, 2, 1]

    def test_five_leaves_lone_node_proof(self):
        """The carried-up leaf has a single sibling: the other subtree root."""
        s = sorted(make_leaves(5))
        h0123 = merkle_parent(merkle_parent(s[0], s[1]), merkle_parent(s[2], s[3]))

        tree = build_tree(s)
        assert tree.proof(s[4]) == [h0123]

    def test_three_leaves_proofs(self):
        s0, s1, s2 = sorted(make_leaves(3))
        tree = build_tree([s2, s0, s1])

        assert tree.proof(s0) == [s1, s2]
        assert tree.proof(s1) == [s0, s2]
        assert tree.proof(s2) == [merkle_parent(s0, s1)]


class TestDeterminism:
    """Tests for root determinism and order independence."""

    def test_same_leaves_same_root(self):
        leaves = make_leaves(7)
        assert build_merkle_root(leaves) == build_merkle_root(list(leaves))

    def test_order_independent_root(self):
        """Every permutation of four leaves gives the same root."""
        leaves = make_leaves(4)
        roots = {build_merkle_root(list(p)) for p in itertools.permutations(leaves)}
        assert len(roots) == 1

    def test_order_independent_proofs(self):
        leaves = make_leaves(6)
        forward = build_tree(leaves)
        backward = build_tree(list(reversed(leaves)))

        for leaf in leaves:
            assert forward.proof(leaf) == backward.proof(leaf)

    def test_different_leaves_different_root(self):
        assert build_merkle_root(make_leaves(3)) != build_merkle_root(make_leaves(4))


class TestProofGeneration:
    """Tests for proof generation on various tree sizes."""

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 8, 13])
    def test_every_proof_folds_to_root(self, count):
        leaves = make_leaves(count)
        tree = build_tree(leaves)

        for leaf in leaves:
            assert process_proof(leaf, prove_leaf(tree, leaf)) == tree.root

    def test_proof_length_bounded_by_depth(self):
        tree = build_tree(make_leaves(13))
        for leaf in tree:
            assert len(tree.proof(leaf)) <= tree.depth - 1

    def test_unknown_leaf_raises(self):
        tree = build_tree(make_leaves(4))
        with pytest.raises(LeafNotFoundError) as exc_info:
            tree.proof(keccak256(b"not a leaf"))
        assert exc_info.value.code == ErrorCodes.LEAF_NOT_FOUND

    def test_proof_at_out_of_range(self):
        tree = build_tree(make_leaves(4))
        with pytest.raises(IndexError):
            tree.proof_at(4)
        with pytest.raises(IndexError):
            tree.proof_at(-1)

    def test_hex_proof(self):
        leaves = make_leaves(3)
        tree = build_tree(leaves)
        hex_proof = tree.hex_proof(leaves[0])

        assert all(item.startswith("0x") and len(item) == 66 for item in hex_proof)


class TestMerkleTreeAccessors:
    """Tests for MerkleTree container behavior."""

    def test_leaves_sorted(self):
        leaves = make_leaves(5)
        tree = MerkleTree(leaves)
        assert list(tree.leaves) == sorted(leaves)

    def test_len_and_contains(self):
        leaves = make_leaves(5)
        tree = MerkleTree(leaves)

        assert len(tree) == 5
        assert leaves[2] in tree
        assert keccak256(b"other") not in tree

    def test_hex_root(self):
        tree = MerkleTree(make_leaves(2))
        assert tree.hex_root == "0x" + tree.root.hex()

    def test_rejects_non_digest_leaf(self):
        with pytest.raises(ValueError, match="32-byte"):
            MerkleTree([b"short"])


class TestComputeTreeDepth:
    """Tests for compute_tree_depth()."""

    @pytest.mark.parametrize("count,depth", [
        (0, 0),
        (1, 1),
        (2, 2),
        (3, 3),
        (4, 3),
        (5, 4),
        (8, 4),
        (9, 5),
    ])
    def test_depth(self, count, depth):
        assert compute_tree_depth(count) == depth

    @pytest.mark.parametrize("count", [1, 2, 3, 5, 9])
    def test_matches_built_tree(self, count):
        assert build_tree(make_leaves(count)).depth == compute_tree_depth(count)
