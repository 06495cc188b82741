"""
Module 03 - Distribution Pipeline

Single-pass batch runner: recipients in, root and per-recipient proofs out.

Public API:
- build_distribution: Build the tree and artifact for a set of recipients
- parse_recipients: Validate raw (address, amount) input
- verify_distribution: Check an artifact end to end
- find_claim: Look up one recipient's claim
- DistributionResult / DistributionSummary: Build outputs
"""

from orchestrator.pipeline import (
    ADDRESS_FORMATS,
    AddressFormat,
    DistributionResult,
    DistributionSummary,
    build_distribution,
    find_claim,
    format_address,
    parse_recipients,
    verify_distribution,
)

__all__ = [
    "ADDRESS_FORMATS",
    "AddressFormat",
    "DistributionResult",
    "DistributionSummary",
    "build_distribution",
    "find_claim",
    "format_address",
    "parse_recipients",
    "verify_distribution",
]
