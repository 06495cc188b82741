"""
Test fixtures package for merkledrop tests.

This package provides factory functions for creating test inputs:
- common.py: addresses, recipient mappings, built distributions and
  artifact files

Usage:
    from fixtures import make_recipients, make_distribution

    def test_something():
        result = make_distribution(make_recipients(5))
"""

from .common import (
    ADDR_A,
    ADDR_B,
    CHECKSUM_ADDRESS,
    make_address,
    make_recipients,
    make_distribution,
    write_recipients_json,
    write_recipients_csv,
)

__all__ = [
    "ADDR_A",
    "ADDR_B",
    "CHECKSUM_ADDRESS",
    "make_address",
    "make_recipients",
    "make_distribution",
    "write_recipients_json",
    "write_recipients_csv",
]
