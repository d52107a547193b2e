"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path, so tests never share
state and never need a database server.
"""

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient

from million_meters.config.settings import Settings
from million_meters.core.tracking.service import MeterTracker
from million_meters.infrastructure.database import (
    SchemaManager,
    SQLiteDatabase,
    StorageUnavailableError,
)
from million_meters.infrastructure.database.repositories import (
    MeterLogRepository,
    SwimmerRepository,
)
from million_meters.main import create_app


class FlakyDatabase(SQLiteDatabase):
    """SQLite adapter that can be switched into failing every transaction."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fail = False

    @contextmanager
    def transaction(self):
        if self.fail:
            raise StorageUnavailableError("connection refused")
        with super().transaction() as tx:
            yield tx


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "swimming.db"


@pytest.fixture
def database(db_path):
    db = SQLiteDatabase(db_path)
    SchemaManager(db).initialize()
    yield db
    db.close()


@pytest.fixture
def swimmer_repository(database):
    return SwimmerRepository(database)


@pytest.fixture
def meter_log_repository(database):
    return MeterLogRepository(database)


@pytest.fixture
def tracker(swimmer_repository, meter_log_repository):
    return MeterTracker(swimmers=swimmer_repository, meter_log=meter_log_repository)


@pytest.fixture
def settings(db_path):
    return Settings(_env_file=None, storage_backend="sqlite", database_path=str(db_path))


@pytest.fixture
def flaky_database(db_path):
    return FlakyDatabase(db_path)


@pytest.fixture
def client(settings, flaky_database):
    app = create_app(settings=settings, database=flaky_database)
    with TestClient(app) as test_client:
        yield test_client
