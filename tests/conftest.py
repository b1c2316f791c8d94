"""
Pytest configuration and global fixtures.

This module provides shared fixtures used across all tests.
"""

import os

import pytest

from rentrecon.reconciliation.config import MatcherConfig
from rentrecon.utils.logging import configure_logging
from tests.factories import build_invoice, build_payment

# Keep per-payment decision logs out of test output
configure_logging(log_level="WARNING")


@pytest.fixture
def make_payment():
    """Factory fixture for payments."""
    return build_payment


@pytest.fixture
def make_invoice():
    """Factory fixture for invoices."""
    return build_invoice


@pytest.fixture
def default_config() -> MatcherConfig:
    """Matcher configuration with all defaults."""
    return MatcherConfig()


@pytest.fixture(autouse=True)
def _clear_matcher_env(monkeypatch):
    """Keep matcher settings from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("RENTRECON_MATCHER_"):
            monkeypatch.delenv(key, raising=False)
