"""
Module 02 - Merkle Tree Implementation
Deterministic sorted-pair Merkle tree construction and proof generation.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Deterministic Merkle root computation
- Merkle proof generation for any leaf digest
- Carry-up rule for odd levels

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = keccak256(address || uint256(amount))
   - Implemented via core.merkle.leaf.hash_leaf()
2. Leaf ordering: leaf digests are sorted byte-lexicographically before
   pairing, so the tree depends only on the set of leaves
3. Parent hashing: parent = keccak256(min(a, b) || max(a, b))
4. Odd levels: the last node is carried up unchanged (never duplicated,
   never hashed with itself)
5. Empty leaves: EmptyTreeError (there is no well-defined root)
6. Single leaf: root = leaf, proof = []

Rules 3 and 4 must match the verifier exactly. Rule 3 means a proof is just
a list of sibling digests; the verifier never needs left/right bits.
"""
from __future__ import annotations

import logging
from typing import Iterator, Sequence

from core.crypto.hashing import DIGEST_SIZE, hash_pair, to_hex
from core.schemas.errors import EmptyTreeError, LeafNotFoundError


logger = logging.getLogger(__name__)


def merkle_parent(a: bytes, b: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Parent hash is order-independent: keccak256(min(a, b) + max(a, b))

    Args:
        a: One child hash
        b: The other child hash

    Returns:
        Parent hash (32 bytes)
    """
    return hash_pair(a, b)


def build_levels(leaves: Sequence[bytes]) -> list[tuple[bytes, ...]]:
    """
    Build every level of the tree from already-ordered leaves.

    levels[0] is the leaf level, levels[-1] is (root,).

    Example: [a, b, c] -> [(a, b, c), (ab, c), (abc,)]
    where c is carried up unchanged at level 1.
    """
    if len(leaves) == 0:
        raise EmptyTreeError()

    levels: list[tuple[bytes, ...]] = [tuple(leaves)]
    current = levels[0]

    while len(current) > 1:
        next_level: list[bytes] = []
        for i in range(0, len(current), 2):
            if i + 1 < len(current):
                next_level.append(merkle_parent(current[i], current[i + 1]))
            else:
                # Lone node: promoted as is
                next_level.append(current[i])
        current = tuple(next_level)
        levels.append(current)

    return levels


class MerkleTree:
    """
    Immutable sorted-pair Merkle tree over 32-byte leaf digests.

    The tree keeps every level so sibling lookups during proof generation
    are O(1) per level. Nothing is mutated after __init__, so a single tree
    can be shared freely across readers.

    Example:
        >>> tree = MerkleTree([hash_leaf(encode_leaf(addr, 100)) for addr in addrs])
        >>> proof = tree.proof(tree.leaves[0])
        >>> verify_proof(tree.root, leaf_bytes, proof)
        True
    """

    def __init__(self, leaves: Sequence[bytes]) -> None:
        if len(leaves) == 0:
            raise EmptyTreeError()

        for position, leaf in enumerate(leaves):
            if len(leaf) != DIGEST_SIZE:
                raise ValueError(
                    f"Leaf {position} must be a {DIGEST_SIZE}-byte digest, got {len(leaf)} bytes"
                )

        self._levels = build_levels(sorted(bytes(leaf) for leaf in leaves))

        self._index: dict[bytes, int] = {}
        for position, leaf in enumerate(self._levels[0]):
            self._index.setdefault(leaf, position)

        logger.debug(
            f"Built Merkle tree: {len(self)} leaves, "
            f"level sizes {[len(level) for level in self._levels]}"
        )

    @property
    def root(self) -> bytes:
        """32-byte root digest."""
        return self._levels[-1][0]

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Leaf digests in tree (sorted) order."""
        return self._levels[0]

    @property
    def levels(self) -> tuple[tuple[bytes, ...], ...]:
        return tuple(self._levels)

    @property
    def depth(self) -> int:
        """Number of levels including leaves and root."""
        return len(self._levels)

    def __len__(self) -> int:
        return len(self._levels[0])

    def __contains__(self, leaf: object) -> bool:
        return leaf in self._index

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._levels[0])

    def index_of(self, leaf: bytes) -> int:
        """
        Position of a leaf digest in the leaf level.

        Raises:
            LeafNotFoundError: If the digest is not a leaf of this tree
        """
        try:
            return self._index[bytes(leaf)]
        except KeyError:
            raise LeafNotFoundError(
                f"Leaf {to_hex(bytes(leaf))} is not in the tree",
                leaf=to_hex(bytes(leaf)),
            ) from None

    def proof_at(self, index: int) -> list[bytes]:
        """
        Generate the sibling path for the leaf at a position.

        At each level the sibling is index ^ 1; a carried-up lone node has
        no sibling and contributes nothing. Siblings are ordered bottom-up,
        which is the order the verifier folds them in.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self):
            raise IndexError(f"Leaf index {index} out of range for {len(self)} leaves")

        proof: list[bytes] = []
        current_index = index

        for level in self._levels[:-1]:
            sibling_index = current_index ^ 1
            if sibling_index < len(level):
                proof.append(level[sibling_index])
            current_index //= 2

        return proof

    def proof(self, leaf: bytes) -> list[bytes]:
        """
        Generate the sibling path for a leaf digest.

        Raises:
            LeafNotFoundError: If the digest is not a leaf of this tree
        """
        return self.proof_at(self.index_of(leaf))

    def hex_proof(self, leaf: bytes) -> list[str]:
        return [to_hex(sibling) for sibling in self.proof(leaf)]


def build_tree(leaves: Sequence[bytes]) -> MerkleTree:
    """
    Build a Merkle tree from leaf digests.

    Args:
        leaves: 32-byte leaf digests, in any order

    Returns:
        MerkleTree exposing the root and proof lookup

    Raises:
        EmptyTreeError: If leaves is empty
    """
    return MerkleTree(leaves)


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """Compute only the root for a set of leaf digests."""
    return MerkleTree(leaves).root


def prove_leaf(tree: MerkleTree, leaf: bytes) -> list[bytes]:
    """
    Generate the inclusion proof for a leaf digest.

    Args:
        tree: A built MerkleTree
        leaf: The leaf digest to prove

    Returns:
        Sibling digests from the leaf up to (excluding) the root;
        empty for a single-leaf tree

    Raises:
        LeafNotFoundError: If the digest is not a leaf of the tree
    """
    return tree.proof(leaf)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of levels of a tree with given number of leaves.

    A single leaf has depth 1, two leaves have depth 2, etc.
    Odd levels carry their last node up, so each level has
    ceil(n / 2) nodes.

    Returns:
        Tree depth (0 for empty tree)
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "MerkleTree",
    "merkle_parent",
    "build_levels",
    "build_tree",
    "build_merkle_root",
    "prove_leaf",
    "compute_tree_depth",
]
