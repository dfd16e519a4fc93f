"""
Merklist CLI - Configuration

Configuration management for the Merklist CLI.
Supports environment variables and JSON configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import ENV_PREFIX, RuntimeConfig
from core.schemas.errors import ConfigError


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree construction and engine log level
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    @property
    def log_level(self) -> str:
        return self.runtime.log_level


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {path}")

    return config_from_dict(data)


def config_from_dict(data: dict[str, Any]) -> CLIConfig:
    """Build a CLIConfig from parsed file contents."""
    output_format = data.get("default_output_format", "human")
    if output_format not in ("human", "json"):
        raise ConfigError(f"default_output_format must be 'human' or 'json', got {output_format!r}")

    return CLIConfig(
        runtime=RuntimeConfig.from_dict(data),
        log_file=data.get("log_file"),
        default_output_format=output_format,
    )


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "merklist.json",
            Path.cwd() / ".merklist.json",
            Path.home() / ".config" / "merklist" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Env takes precedence
    config.runtime = config.runtime.with_env_overrides()
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human").lower()

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "merkle": {
    "sort_pairs": true,
    "odd_node_policy": "duplicate",
    "sort_leaves": false,
    "hash_algorithm": "keccak256"
  },
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human"
}
"""
