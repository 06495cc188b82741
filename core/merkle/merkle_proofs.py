"""
Module 02 - Merkle Proof Verification
Standalone verifier mirroring the on-chain claim contract.

Owner: Protocol/Crypto Engineer
Module ID: M02

The functions here never touch MerkleTree: they see only what the
contract sees (root, leaf bytes, sibling list) and recompute the root with
the same sorted-pair rule:

    current = keccak256(leaf)
    for sibling in proof:
        current = keccak256(min(current, sibling) || max(current, sibling))
    accept iff current == root

This module provides:
- process_proof: Fold a proof starting from a leaf digest
- verify_proof: Verify encoded leaf bytes against a root
- verify_claim: Re-derive the leaf from (address, amount) and verify
- MerkleProof: Immutable bundle of leaf, siblings and root
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from core.crypto.hashing import keccak256, to_hex
from core.merkle.leaf import encode_leaf
from core.schemas.errors import EncodingError


def process_proof(leaf_digest: bytes, proof: Sequence[bytes]) -> bytes:
    """
    Recompute a root from a leaf digest and its sibling path.

    Args:
        leaf_digest: keccak256 of the encoded leaf
        proof: Sibling digests, bottom-up

    Returns:
        The root implied by the proof
    """
    current = leaf_digest
    for sibling in proof:
        if current <= sibling:
            current = keccak256(current + sibling)
        else:
            current = keccak256(sibling + current)
    return current


def verify_proof(root: bytes, leaf: bytes, proof: Sequence[bytes]) -> bool:
    """
    Verify that encoded leaf bytes are committed under root.

    Args:
        root: Published 32-byte root
        leaf: Encoded leaf bytes (not the digest)
        proof: Sibling digests, bottom-up

    Returns:
        True if the recomputed root equals root, False otherwise
    """
    return process_proof(keccak256(leaf), proof) == root


def verify_claim(root: bytes, address: str | bytes, amount: Any, proof: Sequence[bytes]) -> bool:
    """
    Verify a claim the way the distributor contract does.

    The leaf is rebuilt from (address, amount) so a claim for the wrong
    amount fails even with an otherwise valid proof.

    Returns:
        True if the claim is valid; False for a bad proof or an
        address/amount that cannot be encoded
    """
    try:
        leaf = encode_leaf(address, amount)
    except EncodingError:
        return False
    return verify_proof(root, leaf, proof)


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single encoded leaf.

    Attributes:
        leaf: Encoded leaf bytes (address || uint256 amount)
        siblings: Sibling digests from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    siblings: tuple[bytes, ...] = field(default_factory=tuple)
    root: bytes = b""

    def __post_init__(self) -> None:
        # Callers may pass a list; freeze it
        object.__setattr__(self, "siblings", tuple(self.siblings))

    def verify(self) -> bool:
        return verify_proof(self.root, self.leaf, self.siblings)

    def to_hex_list(self) -> list[str]:
        return [to_hex(sibling) for sibling in self.siblings]


__all__ = [
    "process_proof",
    "verify_proof",
    "verify_claim",
    "MerkleProof",
]
