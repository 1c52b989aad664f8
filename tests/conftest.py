"""
Pytest configuration and shared fixtures for hash tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
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

_trees = importlib.import_module("fixtures.trees")

make_tree = _trees.make_tree
make_populated_tree = _trees.make_populated_tree
counting_nonces = _trees.counting_nonces
flip_hex_char = _trees.flip_hex_char
value_for = _trees.value_for


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def small_tree():
    """Height-3 tree (4 leaves, 7 nodes) with no keys."""
    return make_tree(height=3)


@pytest.fixture
def populated_tree():
    """Height-4 tree holding 20 keys, enough to force shared leaves."""
    return make_populated_tree(height=4, count=20)


@pytest.fixture
def eager_populated_tree():
    """Same content as populated_tree, maintained eagerly."""
    return make_populated_tree(height=4, count=20, eager=True)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep FBHT_* settings from the developer's shell out of the tests."""
    for name in ("FBHT_TREE_HEIGHT", "FBHT_EAGER", "FBHT_LOG_LEVEL", "FBHT_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
