import logging
from unittest.mock import AsyncMock

import pytest

from riskcheck_rulesets.ruleset import RulesetStore


@pytest.fixture(scope="session")
def store():
    """Load the full RulesetStore from v1/ once for the entire test session."""
    s = RulesetStore()
    s.load()
    return s


@pytest.fixture
def default_questions(store):
    """Fresh copies of the default question pool."""
    return store.copy_defaults()


@pytest.fixture
def mock_db():
    """AsyncMock standing in for AsyncSession — flush/commit are no-ops."""
    return AsyncMock()


@pytest.fixture
def debug_logs(caplog):
    """Capture riskcheck DEBUG logs (dropped references, skipped answers)."""
    caplog.set_level(logging.DEBUG, logger="riskcheck_rulesets")
    return caplog
