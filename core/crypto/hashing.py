"""
Module 02 - Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Keccak-256 hashing for raw bytes (the EVM's native hash)
- Sorted-pair hashing for Merkle parent nodes
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Keccak-256 is NOT hashlib.sha3_256 (different padding); the on-chain
  verifier only understands Keccak-256
- Always hash raw bytes exactly as specified
- All operations are deterministic
"""
from __future__ import annotations

from eth_utils import keccak


# Digest width in bytes for leaf and internal nodes
DIGEST_SIZE = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=bytes(data))


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two sibling digests in sorted order.

    parent = keccak256(min(a, b) + max(a, b)) under byte-lexicographic order.
    The result does not depend on which sibling was "left", so proofs never
    carry direction bits.

    Args:
        a: First child digest
        b: Second child digest

    Returns:
        32-byte parent digest
    """
    if b < a:
        a, b = b, a
    return keccak256(a + b)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Args:
        data: Raw bytes

    Returns:
        Hex string with 0x prefix (e.g., "0x1234abcd")

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    # Validate 0x prefix
    if not hex_string.startswith(("0x", "0X")):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    # Decode (will raise ValueError for invalid hex chars)
    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DIGEST_SIZE",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
]
