"""
Runtime Configuration

Central configuration for tree construction and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM
from core.merkle.merkle_tree import OddNodePolicy, TreeOptions
from core.schemas.errors import ConfigError, MerklistException

load_dotenv()


ENV_PREFIX = "MERKLIST_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {raw!r}", details={"key": name})


@dataclass
class MerkleConfig:
    """Configuration for tree construction."""
    sort_pairs: bool = True
    odd_node_policy: str = OddNodePolicy.DUPLICATE.value
    sort_leaves: bool = False
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM

    def to_tree_options(self) -> TreeOptions:
        """
        Convert to TreeOptions.

        Raises:
            ConfigError: If the policy or algorithm is not recognised
        """
        try:
            return TreeOptions(
                sort_pairs=self.sort_pairs,
                odd_node_policy=self.odd_node_policy,
                sort_leaves=self.sort_leaves,
                hash_algorithm=self.hash_algorithm,
            )
        except MerklistException as e:
            raise ConfigError(e.message, details=e.details) from e
        except ValueError as e:
            raise ConfigError(str(e)) from e


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the Merkle engine.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    merkle: MerkleConfig = field(default_factory=MerkleConfig)
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLIST_SORT_PAIRS: Sort sibling pairs before hashing (true/false)
        - MERKLIST_ODD_NODE_POLICY: duplicate or promote
        - MERKLIST_SORT_LEAVES: Sort leaves before building (true/false)
        - MERKLIST_HASH_ALGORITHM: keccak256 or sha256
        - MERKLIST_LOG_LEVEL: Log level name
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}SORT_PAIRS"):
            overrides.setdefault("merkle", {})["sort_pairs"] = _parse_bool(
                f"{ENV_PREFIX}SORT_PAIRS", os.getenv(f"{ENV_PREFIX}SORT_PAIRS")
            )
        if os.getenv(f"{ENV_PREFIX}ODD_NODE_POLICY"):
            overrides.setdefault("merkle", {})["odd_node_policy"] = (
                os.getenv(f"{ENV_PREFIX}ODD_NODE_POLICY", "").lower()
            )
        if os.getenv(f"{ENV_PREFIX}SORT_LEAVES"):
            overrides.setdefault("merkle", {})["sort_leaves"] = _parse_bool(
                f"{ENV_PREFIX}SORT_LEAVES", os.getenv(f"{ENV_PREFIX}SORT_LEAVES")
            )
        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("merkle", {})["hash_algorithm"] = (
                os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM", "").lower()
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        merkle_data = dict(data.get("merkle", {}) or {})

        unknown = set(merkle_data) - set(MerkleConfig.__dataclass_fields__)
        if unknown:
            raise ConfigError(
                f"Unknown merkle config keys: {sorted(unknown)}",
                details={"keys": sorted(unknown)},
            )
        for key in ("sort_pairs", "sort_leaves"):
            if key in merkle_data:
                merkle_data[key] = _parse_bool(key, merkle_data[key])

        merkle = MerkleConfig(**merkle_data) if merkle_data else MerkleConfig()

        return cls(
            merkle=merkle,
            log_level=str(data.get("log_level", "INFO")).upper(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "merkle" in overrides:
            for key, value in overrides["merkle"].items():
                setattr(new_config.merkle, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def tree_options(self) -> TreeOptions:
        """TreeOptions for this configuration."""
        return self.merkle.to_tree_options()

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "merkle": {
                "sort_pairs": self.merkle.sort_pairs,
                "odd_node_policy": self.merkle.odd_node_policy,
                "sort_leaves": self.merkle.sort_leaves,
                "hash_algorithm": self.merkle.hash_algorithm,
            },
            "log_level": self.log_level,
            "extra": self.extra,
        }
