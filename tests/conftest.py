"""
Pytest configuration and shared fixtures for SplitAudit tests.

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

_common = importlib.import_module("fixtures.common")

make_rules = _common.make_rules
make_request = _common.make_request
make_batch = _common.make_batch
make_receipt = _common.make_receipt
make_rpc_receipt = _common.make_rpc_receipt


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def rules():
    """Provide a default 50/30/20 rule set."""
    return make_rules()


@pytest.fixture
def allocation_request():
    """Provide a default 100 USDC AllocationRequest."""
    return make_request()


@pytest.fixture
def audit_batch():
    """Provide a finalized three-record AuditBatch."""
    return make_batch()


@pytest.fixture(autouse=True)
def clean_splitaudit_env(monkeypatch):
    """Keep SPLITAUDIT_* variables from the developer's shell out of tests."""
    import os
    for name in list(os.environ):
        if name.startswith("SPLITAUDIT_"):
            monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
