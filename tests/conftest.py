"""
Pytest configuration and shared fixtures for Merklist tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_whitelist = importlib.import_module("fixtures.whitelist_fixtures")

make_leaves = _whitelist.make_leaves
make_tree = _whitelist.make_tree
write_whitelist = _whitelist.write_whitelist


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def whitelist():
    """The three-address whitelist."""
    return list(_whitelist.WHITELIST)


@pytest.fixture
def whitelist_tree():
    """Default-options tree over the whitelist."""
    return make_tree()


@pytest.fixture
def five_leaves():
    """Five SHA-256 leaves (odd count at two levels)."""
    return make_leaves(5)


@pytest.fixture
def whitelist_file(tmp_path):
    """Plain-text whitelist file in a temp directory."""
    return write_whitelist(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep MERKLIST_* variables and config files from leaking into tests."""
    import os

    for key in list(os.environ):
        if key.startswith("MERKLIST_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
