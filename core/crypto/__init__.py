"""
Core cryptographic utilities.

Module 02 provides Keccak-256 hashing and hex helpers.
"""
from .hashing import (
    DIGEST_SIZE,
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
]
