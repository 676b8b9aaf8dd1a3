# File: tests/conftest.py

import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest
import sqlalchemy
from sqlalchemy import create_engine, text
from sqlalchemy_utils import database_exists, create_database

# 1. Add project root to path
sys.path.append(os.getcwd())

# 2. Point Settings at throwaway storage BEFORE anything imports them.
#    Export USE_SQLITE=false to run the suite against PostgreSQL instead.
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="vidshare_tests_"))
os.environ.setdefault("USE_SQLITE", "true")
os.environ.setdefault("SQLITE_URL", f"sqlite:///{_TEST_ROOT / 'test_vidshare.db'}")
os.environ.setdefault("VIDSHARE_DATA_DIR", str(_TEST_ROOT / "data"))
os.environ.setdefault("TRANSCODE_ON_UPLOAD", "false")
os.environ["YOUTUBE_API_KEY"] = ""

from vidshare.core.config.settings import settings

# 3. Create Test Engine
TEST_ENGINE = create_engine(settings.DATABASE_URL)


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures DB exists and the data directories are in place.
    """
    if not database_exists(TEST_ENGINE.url):
        create_database(TEST_ENGINE.url)

    # Import all models to ensure they are registered
    from vidshare.core.database.base import Base
    import vidshare.core.jobs.models
    import vidshare.features.catalog.data.sql_models

    # Create tables once
    Base.metadata.create_all(bind=TEST_ENGINE)
    settings.ensure_dirs()

    yield

    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test.
    Detects DB type and cleans tables appropriately.
    """
    from vidshare.core.database.base import Base

    # 1. Safety Check: Ensure tables exist
    Base.metadata.create_all(bind=TEST_ENGINE)

    # 2. Clean Data
    with TEST_ENGINE.connect() as conn:
        trans = conn.begin()

        is_sqlite = "sqlite" in str(TEST_ENGINE.url)

        inspector = sqlalchemy.inspect(TEST_ENGINE)
        table_names = inspector.get_table_names()

        if table_names:
            if is_sqlite:
                # SQLite: no TRUNCATE; delete in any order with FK checks off
                conn.execute(text("PRAGMA foreign_keys = OFF;"))
                for table in table_names:
                    conn.execute(text(f'DELETE FROM "{table}";'))
                conn.execute(text("PRAGMA foreign_keys = ON;"))
            else:
                # PostgreSQL: fast truncate with FK triggers disabled
                conn.execute(text("SET session_replication_role = 'replica';"))
                for table in table_names:
                    conn.execute(text(f'TRUNCATE TABLE "{table}" CASCADE;'))
                conn.execute(text("SET session_replication_role = 'origin';"))

        trans.commit()

    yield


@pytest.fixture
def owner():
    """A user who owns one channel."""
    from vidshare.features.catalog.service.api import catalog

    user = catalog.upsert_user("owner-1", email="owner@example.com", first_name="Olive")
    channel = catalog.create_channel(user.id, {"name": "Olive's Channel", "description": "Cooking"})
    return user, channel


@pytest.fixture
def sample_video_file(tmp_path):
    """Bytes that only need to look like an upload; nothing decodes them."""
    path = tmp_path / "upload.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 1024)
    return path
