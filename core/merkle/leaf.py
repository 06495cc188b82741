"""
Module 02 - Leaf Encoding
Canonical (address, amount) leaf encoding and leaf hashing.

Owner: Protocol/Crypto Engineer
Module ID: M02

Leaf Layout (Hard Contract, mirrored by the on-chain verifier):
    leaf = address (20 bytes) || amount (uint256, big-endian, 32 bytes)

This is Solidity's abi.encodePacked(address, uint256): 52 bytes, no
separators, no length prefix. The leaf digest is keccak256(leaf), so it
commits to both fields jointly.

Amounts are cumulative entitlements and must be handled as arbitrary
precision ints; JSON numbers above 2**53 arrive intact through Python's
json module but never through float.
"""
from __future__ import annotations

import re
from typing import Any

from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_abi.packed import encode_packed
from eth_utils import is_checksum_address

from core.crypto.hashing import keccak256
from core.schemas.errors import EncodingError


ADDRESS_SIZE = 20
AMOUNT_SIZE = 32
LEAF_SIZE = ADDRESS_SIZE + AMOUNT_SIZE

MAX_AMOUNT = 2**256 - 1

_ADDRESS_RE = re.compile(r"^0[xX][0-9a-fA-F]{40}$")
_DECIMAL_RE = re.compile(r"^[0-9]+$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")


def parse_address(address: str | bytes) -> bytes:
    """
    Parse a recipient address into its 20 raw bytes.

    Accepts a 0x-prefixed 40-character hex string or 20 raw bytes.
    All-lowercase and all-uppercase hex are taken as is; mixed case must
    be a valid EIP-55 checksum.

    Raises:
        EncodingError: If the address is malformed
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) != ADDRESS_SIZE:
            raise EncodingError(
                f"Address must be {ADDRESS_SIZE} bytes, got {len(address)}",
                field="address",
                value=bytes(address).hex(),
            )
        return bytes(address)

    if not isinstance(address, str):
        raise EncodingError(
            f"Address must be a hex string, got {type(address).__name__}",
            field="address",
            value=address,
        )

    text = address.strip()
    if not _ADDRESS_RE.match(text):
        raise EncodingError(
            f"Invalid address {address!r}: expected 0x followed by 40 hex characters",
            field="address",
            value=address,
        )

    body = text[2:]
    if body != body.lower() and body != body.upper():
        if not is_checksum_address("0x" + body):
            raise EncodingError(
                f"Invalid EIP-55 checksum for address {address!r}",
                field="address",
                value=address,
            )

    return bytes.fromhex(body)


def parse_amount(amount: Any) -> int:
    """
    Parse a cumulative amount into a non-negative int below 2**256.

    Accepts ints, decimal strings and 0x-prefixed hex strings. Floats and
    bools are rejected.

    Raises:
        EncodingError: If the amount is not an integer or is out of range
    """
    if isinstance(amount, bool):
        raise EncodingError("Amount must be an integer, got bool", field="amount", value=amount)

    if isinstance(amount, int):
        value = amount
    elif isinstance(amount, str):
        text = amount.strip()
        if _DECIMAL_RE.match(text):
            value = int(text, 10)
        elif _HEX_RE.match(text):
            value = int(text[2:], 16)
        else:
            raise EncodingError(
                f"Amount must be a non-negative integer string, got {amount!r}",
                field="amount",
                value=amount,
            )
    else:
        raise EncodingError(
            f"Amount must be an integer or integer string, got {type(amount).__name__}",
            field="amount",
            value=amount,
        )

    if value < 0:
        raise EncodingError(f"Amount must be non-negative, got {value}", field="amount", value=value)
    if value > MAX_AMOUNT:
        raise EncodingError("Amount does not fit in 256 bits", field="amount", value=value)

    return value


def encode_leaf(address: str | bytes, amount: Any) -> bytes:
    """
    Encode one recipient entry into its 52-byte leaf.

    Args:
        address: 0x-prefixed hex address or 20 raw bytes
        amount: Cumulative amount (int, decimal string or 0x hex string)

    Returns:
        address (20 bytes) || amount as uint256 big-endian (32 bytes)

    Raises:
        EncodingError: If the address or amount is invalid

    Example:
        >>> len(encode_leaf("0x" + "aa" * 20, 100))
        52
    """
    address_bytes = parse_address(address)
    value = parse_amount(amount)

    try:
        leaf = encode_packed(["address", "uint256"], [address_bytes, value])
    except AbiEncodingError as e:
        raise EncodingError(f"Failed to pack leaf: {e}") from e

    if len(leaf) != LEAF_SIZE:
        raise EncodingError(f"Packed leaf has {len(leaf)} bytes, expected {LEAF_SIZE}")

    return leaf


def hash_leaf(leaf: bytes) -> bytes:
    """
    Hash an encoded leaf into its 32-byte digest.

    Same function as internal nodes: keccak256(leaf).
    """
    return keccak256(leaf)


def leaf_digest(address: str | bytes, amount: Any) -> bytes:
    """Encode and hash a recipient entry in one step."""
    return hash_leaf(encode_leaf(address, amount))


__all__ = [
    "ADDRESS_SIZE",
    "AMOUNT_SIZE",
    "LEAF_SIZE",
    "MAX_AMOUNT",
    "parse_address",
    "parse_amount",
    "encode_leaf",
    "hash_leaf",
    "leaf_digest",
]
