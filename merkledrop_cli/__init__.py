"""
Module 05 - Merkledrop CLI

Command-line interface for building and checking cumulative airdrop
distributions.

Usage:
    python -m merkledrop_cli build input.json --out output.json
    python -m merkledrop_cli proof output.json 0x...
    python -m merkledrop_cli verify output.json
"""

__version__ = "0.1.0"
