"""
Module 04 - Artifact IO

Provides functionality for loading distribution inputs and saving, loading
and exporting distribution artifacts.
"""

from orchestrator.artifacts.io import (
    CSV_FIELDS,
    CLAIMS_CSV_FIELDS,
    load_recipients,
    load_recipients_json,
    load_recipients_csv,
    dump_artifact,
    save_artifact,
    load_artifact,
    dump_claims_csv,
    save_claims_csv,
    save_distribution,
)

__all__ = [
    "CSV_FIELDS",
    "CLAIMS_CSV_FIELDS",
    "load_recipients",
    "load_recipients_json",
    "load_recipients_csv",
    "dump_artifact",
    "save_artifact",
    "load_artifact",
    "dump_claims_csv",
    "save_claims_csv",
    "save_distribution",
]
