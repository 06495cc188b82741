"""
Module 05 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkledrop_cli build <input> [--out PATH] [--claims-csv PATH] [--address-format FMT] [--json]
    python -m merkledrop_cli proof <artifact> <address> [--json]
    python -m merkledrop_cli verify <artifact> [--address ADDR [--amount N]] [--json] [--debug]
    python -m merkledrop_cli config --init

Environment Variables:
    MERKLEDROP_OUTPUT_PATH      Artifact output path (default: output.json)
    MERKLEDROP_OUTPUT_INDENT    Indent artifact JSON by N spaces (default: compact)
    MERKLEDROP_ADDRESS_FORMAT   original, lower or checksum (default: original)
    MERKLEDROP_CLAIMS_CSV       Also export claims to this CSV path
    MERKLEDROP_LOG_LEVEL        Log level (default: INFO)
    MERKLEDROP_LOG_FILE         Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from merkledrop_cli import __version__
from merkledrop_cli.commands import build, proof, verify
from merkledrop_cli.config import load_config, get_default_config_template
from orchestrator.pipeline import ADDRESS_FORMATS


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkledrop",
        description="Merkledrop CLI - Build cumulative airdrop Merkle trees, print proofs, and verify claims.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merkledrop.json or ~/.config/merkledrop/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a distribution from an address -> amount file",
        description="Build the Merkle tree, prove every recipient and write the distribution artifact.",
    )
    build_parser.add_argument(
        "input",
        type=str,
        help="Input file: JSON object of address -> amount, or CSV with address,amount header",
    )
    build_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the artifact (default: from config or output.json)",
    )
    build_parser.add_argument(
        "--claims-csv",
        type=str,
        default=None,
        help="Also export claims (address, amount, proof) as CSV",
    )
    build_parser.add_argument(
        "--address-format",
        type=str,
        choices=list(ADDRESS_FORMATS),
        default=None,
        help="How addresses are written to the artifact (default: original)",
    )
    build_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent artifact JSON (default: compact)",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Print the claim for one address",
        description="Look up an address in a distribution artifact and print its amount and proof.",
    )
    proof_parser.add_argument("artifact", type=str, help="Path to distribution artifact")
    proof_parser.add_argument("address", type=str, help="Recipient address")
    proof_parser.add_argument("--json", action="store_true", help="JSON output")
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a distribution artifact offline",
        description="Rebuild the root, check every proof, or check a single claim.",
    )
    verify_parser.add_argument(
        "artifact",
        type=str,
        help="Path to distribution artifact",
    )
    verify_parser.add_argument(
        "--address",
        type=str,
        default=None,
        help="Only verify the claim for this address",
    )
    verify_parser.add_argument(
        "--amount",
        type=str,
        default=None,
        help="Amount to verify for --address (default: the artifact's amount)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include detailed checks",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkledrop.json",
        help="Path for config file (default: merkledrop.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLEDROP_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: merkledrop config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
