"""
Shared fixtures: every test gets its own SQLite file.
"""

import pytest

from usersync.core.db import init_db


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point DB_PATH at a fresh database under tmp_path and create the schema."""
    db_path = tmp_path / "users.db"
    monkeypatch.setenv("DB_PATH", str(db_path))
    init_db()
    return db_path
