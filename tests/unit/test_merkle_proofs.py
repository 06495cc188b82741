"""
Module 02 - Merkle Proof Verification Tests
Tests for core/merkle/merkle_proofs.py

The verifier never touches MerkleTree; these tests build trees only to get
roots and proofs, then check them the way the claim contract would.
"""
import pytest

from core.crypto.hashing import keccak256
from core.merkle.leaf import encode_leaf, hash_leaf
from core.merkle.merkle_proofs import (
    MerkleProof,
    process_proof,
    verify_proof,
    verify_claim,
)
from core.merkle.merkle_tree import build_tree

from fixtures.common import ADDR_A, ADDR_B, make_recipients


def _flip_bit(data: bytes, position: int = 0) -> bytes:
    mutated = bytearray(data)
    mutated[position] ^= 0x01
    return bytes(mutated)


@pytest.fixture
def built():
    """Seven encoded leaves and the tree over their digests."""
    leaves = [encode_leaf(address, amount) for address, amount in make_recipients(7).items()]
    tree = build_tree([hash_leaf(leaf) for leaf in leaves])
    return leaves, tree


class TestTwoRecipientScenario:
    """0xAAAA... -> 100, 0xBBBB... -> 250."""

    def test_root_is_sorted_pair_of_digests(self):
        da = hash_leaf(encode_leaf(ADDR_A, 100))
        db = hash_leaf(encode_leaf(ADDR_B, 250))

        tree = build_tree([da, db])
        assert tree.root == keccak256(min(da, db) + max(da, db))

    def test_proof_is_other_digest(self):
        da = hash_leaf(encode_leaf(ADDR_A, 100))
        db = hash_leaf(encode_leaf(ADDR_B, 250))
        tree = build_tree([da, db])

        assert tree.proof(da) == [db]
        assert tree.proof(db) == [da]

    def test_verify(self):
        leaf_a = encode_leaf(ADDR_A, 100)
        leaf_b = encode_leaf(ADDR_B, 250)
        tree = build_tree([hash_leaf(leaf_a), hash_leaf(leaf_b)])

        assert verify_proof(tree.root, leaf_a, [hash_leaf(leaf_b)]) is True
        assert verify_proof(tree.root, leaf_b, [hash_leaf(leaf_a)]) is True

    def test_wrong_amount_rejected(self):
        leaf_b = encode_leaf(ADDR_B, 250)
        tree = build_tree([hash_leaf(encode_leaf(ADDR_A, 100)), hash_leaf(leaf_b)])

        assert verify_claim(tree.root, ADDR_A, 100, [hash_leaf(leaf_b)]) is True
        assert verify_claim(tree.root, ADDR_A, 101, [hash_leaf(leaf_b)]) is False


class TestVerifyProof:
    """Round-trip and negative verification."""

    def test_every_leaf_verifies(self, built):
        leaves, tree = built
        for leaf in leaves:
            assert verify_proof(tree.root, leaf, tree.proof(hash_leaf(leaf)))

    def test_single_leaf_empty_proof(self):
        leaf = encode_leaf(ADDR_A, 1)
        tree = build_tree([hash_leaf(leaf)])

        assert verify_proof(tree.root, leaf, []) is True

    def test_mutated_sibling_fails(self, built):
        leaves, tree = built
        proof = tree.proof(hash_leaf(leaves[0]))
        proof[0] = _flip_bit(proof[0], 31)

        assert verify_proof(tree.root, leaves[0], proof) is False

    def test_every_sibling_mutation_fails(self, built):
        leaves, tree = built
        leaf = leaves[3]
        proof = tree.proof(hash_leaf(leaf))

        for i in range(len(proof)):
            tampered = list(proof)
            tampered[i] = _flip_bit(tampered[i])
            assert not verify_proof(tree.root, leaf, tampered)

    def test_wrong_root_fails(self, built):
        leaves, tree = built
        proof = tree.proof(hash_leaf(leaves[0]))

        assert verify_proof(_flip_bit(tree.root), leaves[0], proof) is False

    def test_wrong_leaf_fails(self, built):
        leaves, tree = built
        proof = tree.proof(hash_leaf(leaves[0]))

        assert verify_proof(tree.root, leaves[1], proof) is False
        assert verify_proof(tree.root, _flip_bit(leaves[0], 51), proof) is False

    def test_truncated_proof_fails(self, built):
        leaves, tree = built
        proof = tree.proof(hash_leaf(leaves[0]))

        assert verify_proof(tree.root, leaves[0], proof[:-1]) is False

    def test_extra_sibling_fails(self, built):
        leaves, tree = built
        proof = tree.proof(hash_leaf(leaves[0])) + [keccak256(b"extra")]

        assert verify_proof(tree.root, leaves[0], proof) is False

    def test_sibling_order_matters(self, built):
        """Proofs are bottom-up; reversing a multi-step path breaks it."""
        leaves, tree = built
        proof = tree.proof(hash_leaf(leaves[0]))
        assert len(proof) > 1

        assert verify_proof(tree.root, leaves[0], list(reversed(proof))) is False


class TestProcessProof:
    """Tests for the proof fold."""

    def test_empty_proof_returns_digest(self):
        digest = keccak256(b"x")
        assert process_proof(digest, []) == digest

    def test_fold_uses_sorted_pairs(self):
        low = b"\x00" * 32
        high = b"\xff" * 32

        assert process_proof(high, [low]) == keccak256(low + high)
        assert process_proof(low, [high]) == keccak256(low + high)


class TestVerifyClaim:
    """Tests for verifying (address, amount) claims."""

    def test_malformed_address_returns_false(self, built):
        _, tree = built
        assert verify_claim(tree.root, "0x1234", 1, []) is False

    def test_malformed_amount_returns_false(self, built):
        _, tree = built
        assert verify_claim(tree.root, ADDR_A, -5, []) is False

    def test_address_case_irrelevant(self):
        leaf_b = encode_leaf(ADDR_B, 250)
        tree = build_tree([hash_leaf(encode_leaf(ADDR_A, 100)), hash_leaf(leaf_b)])

        upper = "0x" + ADDR_A[2:].upper()
        assert verify_claim(tree.root, upper, 100, [hash_leaf(leaf_b)]) is True


class TestMerkleProof:
    """Tests for the MerkleProof dataclass."""

    def test_verify(self, built):
        leaves, tree = built
        proof = MerkleProof(leaf=leaves[2], siblings=tree.proof(hash_leaf(leaves[2])), root=tree.root)

        assert proof.verify() is True

    def test_siblings_frozen_to_tuple(self, built):
        leaves, tree = built
        proof = MerkleProof(leaf=leaves[2], siblings=tree.proof(hash_leaf(leaves[2])), root=tree.root)

        assert isinstance(proof.siblings, tuple)

    def test_to_hex_list(self, built):
        leaves, tree = built
        siblings = tree.proof(hash_leaf(leaves[2]))
        proof = MerkleProof(leaf=leaves[2], siblings=siblings, root=tree.root)

        assert proof.to_hex_list() == ["0x" + s.hex() for s in siblings]

    def test_tampered_root_fails(self, built):
        leaves, tree = built
        proof = MerkleProof(leaf=leaves[2], siblings=tree.proof(hash_leaf(leaves[2])), root=b"\x00" * 32)

        assert proof.verify() is False
