"""
Module 02 - Merkle Tree and Commitments
Leaf encoding, sorted-pair Merkle tree construction, proof generation and
verification for cumulative airdrop distributions.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- encode_leaf / hash_leaf: Canonical (address, amount) leaf and its digest
- MerkleTree / build_tree: Tree over leaf digests with proof lookup
- prove_leaf: Sibling path for a leaf digest
- verify_proof / verify_claim: Contract-equivalent verification

Canonical Commitment Rules:
1. Leaf: address (20 bytes) || uint256 amount (32 bytes, big-endian)
2. Leaf digest: keccak256(leaf)
3. Parent hashing: keccak256(min(a, b) || max(a, b))
4. Odd levels: carry the last node up unchanged
5. Single leaf: root = leaf digest

Usage:
    from core.merkle import encode_leaf, hash_leaf, build_tree, prove_leaf, verify_proof

    leaves = [encode_leaf(addr, amount) for addr, amount in entries]
    tree = build_tree([hash_leaf(leaf) for leaf in leaves])

    proof = prove_leaf(tree, hash_leaf(leaves[0]))
    assert verify_proof(tree.root, leaves[0], proof)
"""
from .leaf import (
    ADDRESS_SIZE,
    AMOUNT_SIZE,
    LEAF_SIZE,
    MAX_AMOUNT,
    parse_address,
    parse_amount,
    encode_leaf,
    hash_leaf,
    leaf_digest,
)

from .merkle_tree import (
    MerkleTree,
    merkle_parent,
    build_levels,
    build_tree,
    build_merkle_root,
    prove_leaf,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProof,
    process_proof,
    verify_proof,
    verify_claim,
)


__all__ = [
    # Leaf encoding
    "ADDRESS_SIZE",
    "AMOUNT_SIZE",
    "LEAF_SIZE",
    "MAX_AMOUNT",
    "parse_address",
    "parse_amount",
    "encode_leaf",
    "hash_leaf",
    "leaf_digest",
    # Tree construction
    "MerkleTree",
    "merkle_parent",
    "build_levels",
    "build_tree",
    "build_merkle_root",
    "prove_leaf",
    "compute_tree_depth",
    # Verification
    "MerkleProof",
    "process_proof",
    "verify_proof",
    "verify_claim",
]
