"""
Runtime Configuration Unit Tests
Tests for core/config/runtime.py and merklist_cli/config.py
"""
import json

import pytest

from core.config.runtime import MerkleConfig, RuntimeConfig
from core.merkle.merkle_tree import OddNodePolicy, TreeOptions
from core.schemas.errors import ConfigError
from merklist_cli.config import (
    CLIConfig,
    get_default_config_template,
    load_config,
    load_config_from_file,
)


class TestRuntimeConfigDefaults:
    """Defaults match TreeOptions defaults."""

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.merkle == MerkleConfig()
        assert config.log_level == "INFO"
        assert config.tree_options() == TreeOptions()

    def test_to_dict(self):
        data = RuntimeConfig().to_dict()

        assert data["merkle"] == {
            "sort_pairs": True,
            "odd_node_policy": "duplicate",
            "sort_leaves": False,
            "hash_algorithm": "keccak256",
        }


class TestRuntimeConfigFromEnv:
    """MERKLIST_* environment variables."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MERKLIST_SORT_PAIRS", "false")
        monkeypatch.setenv("MERKLIST_ODD_NODE_POLICY", "PROMOTE")
        monkeypatch.setenv("MERKLIST_SORT_LEAVES", "yes")
        monkeypatch.setenv("MERKLIST_HASH_ALGORITHM", "SHA256")
        monkeypatch.setenv("MERKLIST_LOG_LEVEL", "debug")

        config = RuntimeConfig.from_env()
        options = config.tree_options()

        assert options.sort_pairs is False
        assert options.odd_node_policy is OddNodePolicy.PROMOTE
        assert options.sort_leaves is True
        assert options.hash_algorithm == "sha256"
        assert config.log_level == "DEBUG"

    def test_invalid_bool(self, monkeypatch):
        monkeypatch.setenv("MERKLIST_SORT_PAIRS", "maybe")

        with pytest.raises(ConfigError, match="MERKLIST_SORT_PAIRS"):
            RuntimeConfig.from_env()

    def test_with_env_overrides(self, monkeypatch):
        base = RuntimeConfig.from_dict({"merkle": {"hash_algorithm": "sha256"}})
        monkeypatch.setenv("MERKLIST_ODD_NODE_POLICY", "promote")

        config = base.with_env_overrides()

        assert config.merkle.hash_algorithm == "sha256"
        assert config.merkle.odd_node_policy == "promote"
        assert base.merkle.odd_node_policy == "duplicate"

    def test_no_overrides_returns_same(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config


class TestRuntimeConfigFromDict:
    """Dictionary and YAML loading."""

    def test_partial_dict(self):
        config = RuntimeConfig.from_dict({"merkle": {"sort_pairs": "off"}, "log_level": "warning"})

        assert config.merkle.sort_pairs is False
        assert config.merkle.hash_algorithm == "keccak256"
        assert config.log_level == "WARNING"

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigError, match="Unknown merkle config keys"):
            RuntimeConfig.from_dict({"merkle": {"sort_nodes": True}})

    def test_bad_algorithm_surfaces_as_config_error(self):
        config = RuntimeConfig.from_dict({"merkle": {"hash_algorithm": "md5"}})

        with pytest.raises(ConfigError, match="md5"):
            config.tree_options()

    def test_bad_policy_surfaces_as_config_error(self):
        config = RuntimeConfig.from_dict({"merkle": {"odd_node_policy": "drop"}})

        with pytest.raises(ConfigError):
            config.tree_options()

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "merklist.yaml"
        path.write_text(
            "merkle:\n"
            "  sort_pairs: true\n"
            "  odd_node_policy: promote\n"
            "log_level: DEBUG\n"
        )

        config = RuntimeConfig.from_yaml(path)

        assert config.merkle.odd_node_policy == "promote"
        assert config.log_level == "DEBUG"

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_not_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            RuntimeConfig.from_yaml(path)


class TestCLIConfig:
    """CLI configuration file and environment handling."""

    def test_template_is_valid(self, tmp_path):
        path = tmp_path / "merklist.json"
        path.write_text(get_default_config_template())

        config = load_config_from_file(path)

        assert config.runtime.tree_options() == TreeOptions()
        assert config.default_output_format == "human"

    def test_defaults_without_files(self):
        config = load_config()

        assert isinstance(config, CLIConfig)
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_discovers_file_in_cwd(self, tmp_path):
        (tmp_path / "merklist.json").write_text(
            json.dumps({"merkle": {"hash_algorithm": "sha256"}, "default_output_format": "json"})
        )

        config = load_config()

        assert config.runtime.merkle.hash_algorithm == "sha256"
        assert config.default_output_format == "json"

    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"merkle": {"hash_algorithm": "sha256"}, "log_level": "ERROR"}))
        monkeypatch.setenv("MERKLIST_HASH_ALGORITHM", "keccak256")
        monkeypatch.setenv("MERKLIST_LOG_FILE", str(tmp_path / "merklist.log"))

        config = load_config(path)

        assert config.runtime.merkle.hash_algorithm == "keccak256"
        assert config.log_level == "ERROR"
        assert config.log_file == str(tmp_path / "merklist.log")

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            load_config_from_file(path)

    def test_invalid_output_format(self, tmp_path):
        path = tmp_path / "fmt.json"
        path.write_text(json.dumps({"default_output_format": "xml"}))

        with pytest.raises(ConfigError):
            load_config_from_file(path)
