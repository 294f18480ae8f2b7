"""Integration test configuration.

Integration tests run the production persistence stack against an in-memory
SQLite database through aiosqlite.
"""

import pytest

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def sqlite_env(monkeypatch):
    """Point Settings at the in-memory database before containers build."""
    monkeypatch.setenv("DATABASE__URL", TEST_DATABASE_URL)
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("OBSERVABILITY__SEND_TO_LOGFIRE", "false")
