"""
Module 05 - CLI Proof Command

Print one recipient's claim (amount and proof) from a distribution artifact.

Usage:
    merkledrop proof output.json 0x1111111111111111111111111111111111111111
"""

from __future__ import annotations

import json
from argparse import Namespace

from core.schemas.errors import DropException
from merkledrop_cli.commands.build import print_error
from orchestrator.artifacts.io import load_artifact
from orchestrator.pipeline import find_claim


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def proof_cmd(args: Namespace) -> int:
    """
    Execute the proof command.

    Returns:
        Exit code (1 if the address has no claim)
    """
    try:
        artifact = load_artifact(args.artifact)
        claim = find_claim(artifact, args.address)
    except DropException as e:
        print_error(e, args.json)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps({"root": artifact.root, **claim.model_dump()}, indent=2))
    else:
        print(f"root: {artifact.root}")
        print(f"address: {claim.address}")
        print(f"amount: {claim.amount}")
        print(f"proof ({len(claim.proof)}):")
        for sibling in claim.proof:
            print(f"  {sibling}")

    return EXIT_SUCCESS
