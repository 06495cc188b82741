"""
Module 05 - CLI Verify Command

Verify a distribution artifact offline:
- Every entry encodes and addresses are unique
- Rebuilding the tree from the entries yields the published root
- Every proof verifies against the root

With --address, only that recipient's claim is checked, the same way the
claim contract would check it.

Usage:
    merkledrop verify output.json [--json] [--debug]
    merkledrop verify output.json --address 0x... [--amount N]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from typing import Any

from core.merkle.merkle_proofs import verify_claim
from core.schemas.distribution import DistributionArtifact
from core.schemas.errors import DropException
from core.schemas.verification import VerificationResult
from merkledrop_cli.commands.build import print_error
from orchestrator.artifacts.io import load_artifact
from orchestrator.pipeline import find_claim, verify_distribution


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of artifact verification for CLI output."""
    artifact_path: str = ""
    root: str = ""
    entries: int = 0
    ok: bool = False
    address: str | None = None
    amount: str | None = None
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.address is None:
            del d["address"]
            del d["amount"]
        if not d["checks"]:
            del d["checks"]
        if not d["errors"]:
            del d["errors"]
        return d


def verify_single_claim(
    artifact: DistributionArtifact,
    address: str,
    amount: str | None = None,
) -> tuple[bool, str]:
    """
    Check one address against the artifact root.

    The proof comes from the artifact; the amount defaults to the artifact's
    amount for that address, so passing a different amount tests whether
    that amount would be accepted.

    Returns:
        (ok, amount checked)
    """
    claim = find_claim(artifact, address)
    checked = amount if amount is not None else claim.amount
    ok = verify_claim(artifact.root_bytes, address, checked, claim.proof_bytes)
    return ok, str(checked)


def build_summary(
    artifact_path: str,
    artifact: DistributionArtifact,
    result: VerificationResult,
    debug: bool = False,
) -> VerifySummary:
    """Build a VerifySummary from a full verification result."""
    summary = VerifySummary(
        artifact_path=artifact_path,
        root=artifact.root,
        entries=len(artifact),
        ok=result.ok,
        errors=result.get_error_messages(),
    )

    if debug:
        summary.checks = [
            {
                "check_id": check.check_id,
                "ok": check.ok,
                "message": check.message,
                "details": check.details,
            }
            for check in result.checks
        ]

    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"artifact: {summary.artifact_path}")
    print(f"root: {summary.root}")
    print(f"entries: {summary.entries}")
    if summary.address is not None:
        print(f"address: {summary.address}")
        print(f"amount: {summary.amount}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")

    if summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        failed = len(summary.checks) - passed
        print(f"\nchecks: {passed} passed, {failed} failed")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}: {check['message']}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        0 if everything verifies, 2 on a verification failure,
        1 if the artifact cannot be loaded or the address is unknown
    """
    try:
        artifact = load_artifact(args.artifact)
    except DropException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR

    if args.address:
        try:
            ok, amount = verify_single_claim(artifact, args.address, args.amount)
        except DropException as e:
            print_error(e, args.json)
            return EXIT_RUNTIME_ERROR

        summary = VerifySummary(
            artifact_path=str(args.artifact),
            root=artifact.root,
            entries=len(artifact),
            ok=ok,
            address=args.address,
            amount=amount,
        )
        if not ok:
            summary.errors.append(f"Claim for {args.address} with amount {amount} does not verify")
    else:
        result = verify_distribution(artifact)
        summary = build_summary(str(args.artifact), artifact, result, debug=args.debug)

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
