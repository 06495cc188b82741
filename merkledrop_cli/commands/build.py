"""
Module 05 - CLI Build Command

Build a distribution artifact from an address -> amount input file.

Usage:
    merkledrop build input.json --out output.json
    merkledrop build input.csv --claims-csv claims.csv --address-format checksum
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from typing import Any

from core.schemas.errors import DropException
from merkledrop_cli.config import CLIConfig
from orchestrator.artifacts.io import load_recipients, save_distribution
from orchestrator.pipeline import build_distribution


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a build for CLI output."""
    input_path: str = ""
    output_path: str = ""
    root: str = ""
    recipients: int = 0
    total_amount: str = "0"
    depth: int = 0
    claims_csv: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["claims_csv"]:
            del d["claims_csv"]
        return d


def print_summary_human(summary: BuildSummary) -> None:
    print(f"root: {summary.root}")
    print(f"recipients: {summary.recipients}")
    print(f"total amount: {summary.total_amount}")
    print(f"tree depth: {summary.depth}")
    print(f"written to: {summary.output_path}")
    if summary.claims_csv:
        print(f"claims csv: {summary.claims_csv}")


def print_error(e: DropException, output_json: bool) -> None:
    if output_json:
        print(json.dumps({"ok": False, "error": e.to_error_model().model_dump()}, indent=2))
    else:
        print(f"Error: {e.message}", file=sys.stderr)


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config: CLIConfig = getattr(args, "cli_config", None) or CLIConfig()

    output_path = args.out or config.output_path
    address_format = args.address_format or config.address_format
    indent = args.indent if args.indent is not None else config.output_indent
    claims_csv = args.claims_csv or config.claims_csv

    # Nothing is written unless the whole distribution builds
    try:
        rows = load_recipients(args.input)
        result = build_distribution(rows, address_format=address_format)
    except DropException as e:
        logger.error(f"Build failed: {e.message}")
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR

    # Artifact and claims CSV land together or not at all
    saved, csv_path = save_distribution(
        result.artifact, output_path, indent=indent, claims_csv=claims_csv
    )

    summary = BuildSummary(
        input_path=str(args.input),
        output_path=str(saved),
        root=result.summary.root,
        recipients=result.summary.recipients,
        total_amount=str(result.summary.total_amount),
        depth=result.summary.depth,
        claims_csv=str(csv_path) if csv_path else None,
    )

    if args.json:
        print(json.dumps({"ok": True, **summary.to_dict()}, indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
