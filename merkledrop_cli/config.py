"""
Module 05 - CLI Configuration

Configuration management for the merkledrop CLI.
Supports environment variables (and a .env file) and JSON configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from dotenv import load_dotenv


# Environment variable prefix
ENV_PREFIX = "MERKLEDROP_"

DEFAULT_CONFIG_FILES = ("merkledrop.json", ".merkledrop.json")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Output
    output_path: str = "output.json"
    output_indent: int | None = None  # None writes compact JSON
    address_format: str = "original"  # "original", "lower" or "checksum"
    claims_csv: str | None = None

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _env(name: str) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}")


def load_config_from_env(config: CLIConfig | None = None) -> CLIConfig:
    """
    Apply MERKLEDROP_* environment variables on top of a configuration.

    A .env file in the working directory is read first; variables already
    set in the environment win over it.
    """
    load_dotenv(dotenv_path=Path.cwd() / ".env")
    config = config or CLIConfig()

    if _env("OUTPUT_PATH"):
        config.output_path = _env("OUTPUT_PATH")
    if _env("OUTPUT_INDENT"):
        config.output_indent = int(_env("OUTPUT_INDENT"))
    if _env("ADDRESS_FORMAT"):
        config.address_format = _env("ADDRESS_FORMAT").lower()
    if _env("CLAIMS_CSV"):
        config.claims_csv = _env("CLAIMS_CSV")

    if _env("LOG_LEVEL"):
        config.log_level = _env("LOG_LEVEL")
    if _env("LOG_FILE"):
        config.log_file = _env("LOG_FILE")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")

    config = CLIConfig()

    config.output_path = data.get("output_path", config.output_path)
    config.output_indent = data.get("output_indent", config.output_indent)
    config.address_format = data.get("address_format", config.address_format)
    config.claims_csv = data.get("claims_csv", config.claims_csv)

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file. When omitted,
            ./merkledrop.json, ./.merkledrop.json and
            ~/.config/merkledrop/config.json are tried in order.

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [Path.cwd() / name for name in DEFAULT_CONFIG_FILES]
        default_paths.append(Path.home() / ".config" / "merkledrop" / "config.json")
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    return load_config_from_env(config)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "output_path": "output.json",
  "output_indent": null,
  "address_format": "original",
  "claims_csv": null,
  "log_level": "INFO",
  "log_file": null
}
"""
