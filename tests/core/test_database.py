# File: tests/core/test_database.py

import pytest
from sqlalchemy import text

from vidshare.core.database.connection import SessionLocal, engine


def test_sessions_reach_the_configured_database():
    with SessionLocal() as db:
        assert db.execute(text("SELECT 1")).scalar() == 1


@pytest.mark.skipif(engine.dialect.name != "sqlite", reason="SQLite-only pragma")
def test_sqlite_connections_enforce_foreign_keys():
    with SessionLocal() as db:
        assert db.execute(text("PRAGMA foreign_keys")).scalar() == 1
