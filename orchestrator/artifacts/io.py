"""
Module 04 - Artifact IO
File: io.py

Purpose: Load distribution inputs and save/load distribution artifacts.

Input formats:
- JSON: {"0x<address>": <amount>, ...} with amounts as integers or strings
- CSV: header "address,amount"

Repeated JSON keys are rejected instead of silently keeping the last one.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.schemas.distribution import DistributionArtifact
from core.schemas.errors import ArtifactFormatError, DuplicateAddressError


logger = logging.getLogger(__name__)


CSV_FIELDS = ("address", "amount")
CLAIMS_CSV_FIELDS = ("address", "amount", "proof")


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """json object_pairs_hook that fails on repeated keys."""
    obj: dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise DuplicateAddressError(key, details={"reason": "repeated JSON key"})
        obj[key] = value
    return obj


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ArtifactFormatError(f"Cannot read {path}: {e}", path=str(path)) from e


def load_recipients_json(path: str | Path) -> list[tuple[str, Any]]:
    """
    Load an address -> amount mapping from a JSON file.

    Integers are parsed by the json module at arbitrary precision, so
    amounts above 2**53 survive. Floats are passed through and rejected
    later by leaf encoding.

    Returns:
        (address, amount) pairs in file order

    Raises:
        ArtifactFormatError: If the file is not a JSON object
        DuplicateAddressError: If a key is repeated
    """
    path = Path(path)
    text = _read_text(path)

    try:
        data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as e:
        raise ArtifactFormatError(f"Invalid JSON in {path}: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise ArtifactFormatError(
            f"Expected a JSON object mapping address to amount in {path}, "
            f"got {type(data).__name__}",
            path=str(path),
        )

    return list(data.items())


def load_recipients_csv(path: str | Path) -> list[tuple[str, str]]:
    """
    Load (address, amount) rows from a CSV file with an address,amount header.

    Raises:
        ArtifactFormatError: If the header is missing or a row is incomplete
    """
    path = Path(path)
    text = _read_text(path)

    reader = csv.DictReader(text.splitlines())
    fieldnames = [name.strip() for name in (reader.fieldnames or [])]
    if not all(name in fieldnames for name in CSV_FIELDS):
        raise ArtifactFormatError(
            f"CSV {path} needs a header with columns: {', '.join(CSV_FIELDS)}",
            path=str(path),
        )
    reader.fieldnames = fieldnames

    rows: list[tuple[str, str]] = []
    for line_number, row in enumerate(reader, start=2):
        address = (row.get("address") or "").strip()
        amount = (row.get("amount") or "").strip()
        if not address and not amount:
            continue
        if not address or not amount:
            raise ArtifactFormatError(
                f"Incomplete row at {path}:{line_number}",
                path=str(path),
                details={"line": line_number},
            )
        rows.append((address, amount))

    return rows


def load_recipients(path: str | Path) -> list[tuple[str, Any]]:
    """Load recipients from a .csv file or, otherwise, a JSON file."""
    path = Path(path)
    if path.suffix.lower() == ".csv":
        rows = load_recipients_csv(path)
    else:
        rows = load_recipients_json(path)
    logger.info(f"Loaded {len(rows)} recipients from {path}")
    return rows


def _write_all_atomic(outputs: list[tuple[Path, str]]) -> None:
    """
    Write several files so that either all of them land or none does.

    Every file is first written to a temp file in its target directory;
    renames happen only once all temp files are complete.
    """
    staged: list[tuple[str, Path]] = []
    try:
        for path, content in outputs:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            staged.append((tmp_name, path))
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            # mkstemp creates 0600 files
            os.chmod(tmp_name, 0o644)
    except BaseException:
        for tmp_name, _ in staged:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
        raise

    for tmp_name, path in staged:
        os.replace(tmp_name, path)


def _write_atomic(path: Path, content: str) -> None:
    """Write via a temp file in the same directory, then rename into place."""
    _write_all_atomic([(path, content)])


def dump_artifact(artifact: DistributionArtifact, indent: int | None = None) -> str:
    """
    Serialize an artifact to JSON text.

    Compact by default; key order is root, data and address, amount, proof.
    """
    data = artifact.model_dump(mode="json")
    if indent is None:
        return json.dumps(data, separators=(",", ":"))
    return json.dumps(data, indent=indent)


def save_artifact(
    artifact: DistributionArtifact,
    path: str | Path,
    indent: int | None = None,
) -> Path:
    """
    Write a distribution artifact to disk.

    Returns:
        Path to the written file
    """
    out_path = Path(path)
    _write_atomic(out_path, dump_artifact(artifact, indent=indent))
    logger.info(f"Wrote distribution artifact to {out_path}")
    return out_path


def load_artifact(path: str | Path) -> DistributionArtifact:
    """
    Load and validate a distribution artifact.

    Raises:
        ArtifactFormatError: If the file is unreadable, not JSON, or does
            not match the artifact schema
    """
    path = Path(path)
    text = _read_text(path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ArtifactFormatError(f"Invalid JSON in {path}: {e}", path=str(path)) from e

    try:
        return DistributionArtifact.model_validate(data)
    except ValidationError as e:
        raise ArtifactFormatError(
            f"{path} is not a valid distribution artifact: {e.error_count()} validation error(s)",
            path=str(path),
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def dump_claims_csv(artifact: DistributionArtifact) -> str:
    """Render claims as CSV text: address, amount, proof (JSON list)."""
    lines: list[list[str]] = [list(CLAIMS_CSV_FIELDS)]
    for entry in artifact.data:
        lines.append([entry.address, entry.amount, json.dumps(entry.proof)])

    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerows(lines)
    return buffer.getvalue()


def save_claims_csv(artifact: DistributionArtifact, path: str | Path) -> Path:
    """
    Export claims as CSV rows: address, amount, proof (JSON list).

    Returns:
        Path to the written file
    """
    out_path = Path(path)
    _write_atomic(out_path, dump_claims_csv(artifact))
    logger.info(f"Wrote {len(artifact)} claims to {out_path}")
    return out_path


def save_distribution(
    artifact: DistributionArtifact,
    path: str | Path,
    indent: int | None = None,
    claims_csv: str | Path | None = None,
) -> tuple[Path, Path | None]:
    """
    Write the artifact and, optionally, the claims CSV as one unit.

    If either file cannot be written, neither is put in place.

    Returns:
        (artifact path, claims CSV path or None)
    """
    out_path = Path(path)
    outputs = [(out_path, dump_artifact(artifact, indent=indent))]
    csv_path = Path(claims_csv) if claims_csv else None
    if csv_path is not None:
        outputs.append((csv_path, dump_claims_csv(artifact)))

    _write_all_atomic(outputs)

    logger.info(f"Wrote distribution artifact to {out_path}")
    if csv_path is not None:
        logger.info(f"Wrote {len(artifact)} claims to {csv_path}")
    return out_path, csv_path

