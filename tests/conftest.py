import os
import sys
from datetime import datetime, timezone

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("PROGRESS_DATABASE_URL", "sqlite://")

from progress.app.db.session import init_db, make_engine, make_session_factory
from progress.app.services.session_cache import SessionProgressCache
from progress.app.services.storage import MemoryStore, SqlStore, StorageError

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def cache(store):
    return SessionProgressCache(store, clock=lambda: FIXED_NOW)


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'progress.db'}"


@pytest.fixture
def sql_store(db_url):
    engine = make_engine(db_url)
    init_db(engine)
    yield SqlStore(make_session_factory(engine))
    engine.dispose()


class BrokenStore:
    """Every call fails, like a browser with storage disabled."""

    def get(self, key):
        raise StorageError("storage disabled")

    def set(self, key, value):
        raise StorageError("storage disabled")

    def remove(self, key):
        raise StorageError("storage disabled")
