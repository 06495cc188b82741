"""
Module 03 - Distribution Pipeline

Deterministic, single-pass batch: validate recipients, encode and hash leaves,
build the tree, prove every leaf, assemble the artifact.

Key features:
- Fail closed: any malformed or duplicate entry aborts the whole run
- Artifact entries keep input enumeration order
- Verification of an existing artifact using only contract-visible data
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Iterable, Literal, Mapping

from eth_utils import to_checksum_address

from core.crypto.hashing import to_hex
from core.merkle.leaf import encode_leaf, hash_leaf, parse_address, parse_amount
from core.merkle.merkle_proofs import verify_claim
from core.merkle.merkle_tree import MerkleTree, build_tree
from core.schemas.distribution import ClaimEntry, DistributionArtifact, RecipientEntry
from core.schemas.errors import (
    DropException,
    DuplicateAddressError,
    EmptyTreeError,
    LeafNotFoundError,
)
from core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


AddressFormat = Literal["original", "lower", "checksum"]
ADDRESS_FORMATS: tuple[str, ...] = ("original", "lower", "checksum")


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class DistributionSummary:
    """Headline numbers for a built distribution."""
    root: str
    recipients: int
    total_amount: int
    depth: int

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        # Decimal string, like artifact amounts
        d["total_amount"] = str(self.total_amount)
        return d


@dataclass(frozen=True)
class DistributionResult:
    """
    Complete result of a distribution build.

    The tree is kept for callers that want further proofs or inspection;
    only the artifact is persisted.
    """
    artifact: DistributionArtifact
    tree: MerkleTree
    summary: DistributionSummary


# =============================================================================
# Input validation
# =============================================================================

def parse_recipients(
    recipients: Mapping[str, Any] | Iterable[tuple[str, Any] | RecipientEntry],
) -> list[RecipientEntry]:
    """
    Validate raw (address, amount) input.

    Args:
        recipients: Mapping of address -> amount, or an iterable of pairs
            (pairs let file loaders surface repeated keys); items may also
            be RecipientEntry objects, which are checked again

    Returns:
        Validated entries in input order

    Raises:
        EncodingError: If any address or amount is malformed
        DuplicateAddressError: If two entries share the same 20 address bytes
    """
    items = recipients.items() if isinstance(recipients, Mapping) else recipients

    entries: list[RecipientEntry] = []
    seen: dict[bytes, str] = {}

    for item in items:
        if isinstance(item, RecipientEntry):
            address, address_bytes = item.address, parse_address(item.address_bytes)
            value = parse_amount(item.amount)
        else:
            address, amount = item
            address_bytes = parse_address(address)
            value = parse_amount(amount)

        if address_bytes in seen:
            raise DuplicateAddressError(
                str(address).strip(),
                details={"first_seen_as": seen[address_bytes]},
            )
        seen[address_bytes] = str(address).strip()

        text = address.strip() if isinstance(address, str) else to_hex(address_bytes)
        entries.append(RecipientEntry(address=text, address_bytes=address_bytes, amount=value))

    return entries


def format_address(entry: RecipientEntry, address_format: str = "original") -> str:
    """
    Render an entry's address for the artifact.

    The rendering never affects leaf bytes, which always use the raw
    20 address bytes.
    """
    if address_format == "original":
        return entry.address
    if address_format == "lower":
        return to_hex(entry.address_bytes)
    if address_format == "checksum":
        return to_checksum_address(entry.address_bytes)
    raise ValueError(
        f"Unknown address format {address_format!r}, expected one of {', '.join(ADDRESS_FORMATS)}"
    )


# =============================================================================
# Build
# =============================================================================

def build_distribution(
    recipients: Mapping[str, Any] | Iterable[tuple[str, Any] | RecipientEntry],
    address_format: str = "original",
) -> DistributionResult:
    """
    Build the Merkle distribution for a set of recipients.

    Pipeline: validate -> encode -> hash -> build tree -> prove each leaf.

    Args:
        recipients: Address -> cumulative amount mapping, or pairs and/or
            RecipientEntry objects
        address_format: How addresses are written to the artifact
            ("original", "lower" or "checksum")

    Returns:
        DistributionResult with the artifact, tree and summary

    Raises:
        EncodingError: Malformed address or amount
        DuplicateAddressError: Repeated address
        EmptyTreeError: No recipients
    """
    if address_format not in ADDRESS_FORMATS:
        raise ValueError(
            f"Unknown address format {address_format!r}, expected one of {', '.join(ADDRESS_FORMATS)}"
        )

    entries = parse_recipients(recipients)

    if not entries:
        raise EmptyTreeError("Distribution has no recipients")

    logger.info(f"Building distribution for {len(entries)} recipients")

    digests = [hash_leaf(encode_leaf(entry.address_bytes, entry.amount)) for entry in entries]
    tree = build_tree(digests)

    claims = [
        ClaimEntry(
            address=format_address(entry, address_format),
            amount=str(entry.amount),
            proof=[to_hex(sibling) for sibling in tree.proof(digest)],
        )
        for entry, digest in zip(entries, digests)
    ]

    artifact = DistributionArtifact(root=tree.hex_root, data=claims)
    summary = DistributionSummary(
        root=artifact.root,
        recipients=len(claims),
        total_amount=sum(entry.amount for entry in entries),
        depth=tree.depth,
    )

    logger.info(
        f"Distribution root {summary.root} "
        f"({summary.recipients} recipients, depth {summary.depth}, total {summary.total_amount})"
    )

    return DistributionResult(artifact=artifact, tree=tree, summary=summary)


# =============================================================================
# Lookup & verification
# =============================================================================

def find_claim(artifact: DistributionArtifact, address: str) -> ClaimEntry:
    """
    Look up the claim for an address.

    Raises:
        EncodingError: If address is malformed
        LeafNotFoundError: If the address has no claim in the artifact
    """
    wanted = parse_address(address)
    for entry in artifact.data:
        # ClaimEntry guarantees 0x + 40 hex; checksum case is not re-checked here
        if bytes.fromhex(entry.address[2:]) == wanted:
            return entry
    raise LeafNotFoundError(
        f"Address {address} is not part of distribution {artifact.root}",
        leaf=address,
    )


def verify_distribution(artifact: DistributionArtifact) -> VerificationResult:
    """
    Check an artifact end to end.

    Checks:
        entries_valid: every address and amount encodes
        unique_addresses: no address appears twice
        root_matches: rebuilding the tree from the entries yields artifact.root
        claims_verify: every entry's proof verifies against artifact.root,
            exactly as the contract would check it

    Returns:
        VerificationResult; ok is False if any check fails
    """
    result = VerificationResult(ok=True)
    root = artifact.root_bytes

    logger.info(f"Verifying distribution {artifact.root} ({len(artifact)} entries)")

    try:
        entries = parse_recipients((entry.address, entry.amount) for entry in artifact.data)
    except DuplicateAddressError as e:
        result.add_check(CheckResult.failed("unique_addresses", e.message, details=e.details))
        entries = None
    except DropException as e:
        result.add_check(CheckResult.failed("entries_valid", e.message, details=e.details))
        entries = None
    else:
        result.add_check(CheckResult.passed("entries_valid", f"{len(entries)} entries encode"))
        result.add_check(CheckResult.passed("unique_addresses", "All addresses are unique"))

    if entries:
        digests = [hash_leaf(encode_leaf(entry.address_bytes, entry.amount)) for entry in entries]
        rebuilt = build_tree(digests).root
        if rebuilt == root:
            result.add_check(CheckResult.passed("root_matches", "Rebuilt root matches artifact root"))
        else:
            result.add_check(CheckResult.failed(
                "root_matches",
                "Rebuilt root does not match artifact root",
                details={"expected": artifact.root, "actual": to_hex(rebuilt)},
            ))
    elif entries is not None:
        result.add_check(CheckResult.failed("root_matches", "Artifact has no entries"))

    failures = [
        entry.address
        for entry in artifact.data
        if not verify_claim(root, entry.address, entry.amount, entry.proof_bytes)
    ]
    if failures:
        logger.warning(f"{len(failures)} claims failed verification")
        result.add_check(CheckResult.failed(
            "claims_verify",
            f"{len(failures)} of {len(artifact)} claims failed verification",
            details={"failures": failures},
        ))
    else:
        result.add_check(CheckResult.passed(
            "claims_verify", f"All {len(artifact)} claims verify against root"
        ))

    return result


__all__ = [
    "ADDRESS_FORMATS",
    "AddressFormat",
    "DistributionSummary",
    "DistributionResult",
    "parse_recipients",
    "format_address",
    "build_distribution",
    "find_claim",
    "verify_distribution",
]
