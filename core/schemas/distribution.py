"""
Module 01 - Schemas & Errors
File: distribution.py

Purpose: Typed schemas for distribution inputs and the output artifact.

Output artifact (the only persisted state):
    {
      "root": "0x<64 hex>",
      "data": [
        {"address": "0x<40 hex>", "amount": "<decimal>", "proof": ["0x<64 hex>", ...]},
        ...
      ]
    }

Amounts are decimal strings so values above 2**53 survive any JSON reader.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import from_hex


ADDRESS_PATTERN = r"^0[xX][0-9a-fA-F]{40}$"
DIGEST_PATTERN = r"^0[xX][0-9a-fA-F]{64}$"
DECIMAL_PATTERN = r"^[0-9]+$"


@dataclass(frozen=True)
class RecipientEntry:
    """
    One validated input row.

    Attributes:
        address: The address text as it appeared in the input
        address_bytes: The 20 parsed address bytes (identity for uniqueness)
        amount: Cumulative entitlement, 0 <= amount < 2**256
    """
    address: str
    address_bytes: bytes
    amount: int


class ClaimEntry(BaseModel):
    """A single recipient's claim: what the recipient submits to the contract."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(
        ...,
        description="Recipient address (0x-prefixed hex)",
        pattern=ADDRESS_PATTERN,
    )
    amount: str = Field(
        ...,
        description="Cumulative amount as a decimal string",
        pattern=DECIMAL_PATTERN,
    )
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling digests from leaf to root (0x-prefixed hex)",
    )

    @field_validator("proof")
    @classmethod
    def validate_proof_digests(cls, v: list[str]) -> list[str]:
        """Ensure every proof element is a 32-byte hex digest."""
        for position, digest in enumerate(v):
            if not isinstance(digest, str) or len(digest) != 66 or not digest[:2].lower() == "0x":
                raise ValueError(f"proof[{position}] must be a 0x-prefixed 32-byte hex digest")
            try:
                bytes.fromhex(digest[2:])
            except ValueError:
                raise ValueError(f"proof[{position}] contains invalid hex characters") from None
        return v

    @property
    def amount_int(self) -> int:
        return int(self.amount)

    @property
    def proof_bytes(self) -> list[bytes]:
        return [from_hex(digest) for digest in self.proof]


class DistributionArtifact(BaseModel):
    """
    Complete distribution output: the root plus one claim per recipient.

    Produced once per distribution and never updated in place; a new
    distribution means a new artifact with a new root.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str = Field(
        ...,
        description="Merkle root (0x-prefixed 32-byte hex)",
        pattern=DIGEST_PATTERN,
    )
    data: list[ClaimEntry] = Field(
        default_factory=list,
        description="Claims in input enumeration order",
    )

    @property
    def root_bytes(self) -> bytes:
        return from_hex(self.root)

    @property
    def total_amount(self) -> int:
        """Sum of all cumulative amounts."""
        return sum(entry.amount_int for entry in self.data)

    def __len__(self) -> int:
        return len(self.data)
