"""
CLI command modules.
"""

from merkledrop_cli.commands import build, proof, verify

__all__ = ["build", "proof", "verify"]
