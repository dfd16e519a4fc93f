"""
Merklist CLI - Shared Helpers

Reading whitelist files, resolving tree options and output format.
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import replace
from pathlib import Path

from core.config.runtime import RuntimeConfig
from core.merkle.merkle_tree import TreeOptions
from core.schemas.errors import WhitelistFormatError


logger = logging.getLogger(__name__)


def parse_whitelist_text(text: str) -> list[str]:
    """
    Parse a plain-text whitelist.

    One value per line. Blank lines are skipped and anything after
    a '#' is a comment.
    """
    values = []
    for line in text.splitlines():
        value = line.split("#", 1)[0].strip()
        if value:
            values.append(value)
    return values


def load_whitelist(path: Path) -> list[str]:
    """
    Load whitelist values from a file.

    A .json file must hold an array of strings; anything else is read
    as plain text (see parse_whitelist_text).

    Raises:
        FileNotFoundError: If path does not exist
        WhitelistFormatError: If the file is malformed or empty
    """
    if not path.exists():
        raise FileNotFoundError(f"Whitelist not found: {path}")

    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise WhitelistFormatError(f"Invalid JSON in whitelist: {e}", path=str(path)) from e
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise WhitelistFormatError(
                "JSON whitelist must be an array of strings", path=str(path)
            )
        values = [v.strip() for v in data if v.strip()]
    else:
        values = parse_whitelist_text(text)

    if not values:
        raise WhitelistFormatError(f"Whitelist is empty: {path}", path=str(path))

    logger.info(f"Loaded {len(values)} whitelist values from {path}")
    return values


def resolve_tree_options(args: Namespace) -> TreeOptions:
    """
    Combine configuration with per-command overrides.

    Command-line flags win over config file and environment.

    Raises:
        ConfigError: If the resulting policy or algorithm is not recognised
    """
    cli_config = getattr(args, "cli_config", None)
    runtime = cli_config.runtime if cli_config is not None else RuntimeConfig()

    overrides = {
        "sort_pairs": getattr(args, "sort_pairs", None),
        "sort_leaves": getattr(args, "sort_leaves", None),
        "odd_node_policy": getattr(args, "odd_policy", None),
        "hash_algorithm": getattr(args, "hash", None),
    }
    merkle = replace(
        runtime.merkle,
        **{key: value for key, value in overrides.items() if value is not None},
    )
    return merkle.to_tree_options()


def wants_json(args: Namespace) -> bool:
    """True if --json was given or the config defaults to JSON output."""
    if getattr(args, "json", False):
        return True
    cli_config = getattr(args, "cli_config", None)
    return cli_config is not None and cli_config.default_output_format == "json"
