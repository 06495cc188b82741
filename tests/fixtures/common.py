"""
Common test fixtures shared by all modules.

Provides factory functions for distribution inputs:
- Deterministic addresses
- Recipient mappings (address -> cumulative amount)
- Built distributions
- Input files on disk (JSON and CSV)
"""

import json
from pathlib import Path
from typing import Any, Optional

from orchestrator.pipeline import DistributionResult, build_distribution


# Two-recipient scenario: 0xAAAA... gets 100, 0xBBBB... gets 250
ADDR_A = "0x" + "aa" * 20
ADDR_B = "0x" + "bb" * 20

# EIP-55 reference address
CHECKSUM_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def make_address(index: int) -> str:
    """Deterministic lowercase address for a small integer."""
    return "0x" + f"{index + 1:040x}"


def make_recipients(
    count: int = 5,
    base_amount: int = 1000,
    start: int = 0,
) -> dict[str, int]:
    """
    Create a recipient mapping with distinct addresses and amounts.

    Args:
        count: Number of recipients
        base_amount: Amount of the first recipient; each next one adds 7
        start: Offset for address generation

    Returns:
        Mapping of address -> amount
    """
    return {
        make_address(start + i): base_amount + 7 * i
        for i in range(count)
    }


def make_distribution(
    recipients: Optional[dict[str, Any]] = None,
    address_format: str = "original",
) -> DistributionResult:
    """Build a distribution, defaulting to five recipients."""
    if recipients is None:
        recipients = make_recipients()
    return build_distribution(recipients, address_format=address_format)


def write_recipients_json(path: Path, recipients: dict[str, Any]) -> Path:
    path.write_text(json.dumps(recipients))
    return path


def write_recipients_csv(path: Path, recipients: dict[str, Any]) -> Path:
    lines = ["address,amount"]
    lines.extend(f"{address},{amount}" for address, amount in recipients.items())
    path.write_text("\n".join(lines) + "\n")
    return path
