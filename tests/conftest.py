"""Shared fixtures."""

from unittest.mock import Mock

import pytest

from configurable_list.settings import _reload_settings


@pytest.fixture
def settings(monkeypatch):
    """Settings loaded from a clean environment."""
    for name in ("DATABASE_URL", "QUERY_LOG_SQL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return _reload_settings()


@pytest.fixture
def mock_database():
    """Database collaborator returning no rows and doubling quotes when escaping."""
    database = Mock()
    database.escape_literal.side_effect = lambda value: str(value).replace("'", "''")
    database.execute.return_value = []
    return database
