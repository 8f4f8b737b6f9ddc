import os
import sys

import pytest

# Ensure project root is on sys.path so 'music_library_api' and the client import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from music_library_api.app.core.db import init_db
from music_library_api.app.services.song_repository import SongRepository
from music_library_api.app.services.song_service import SongService
from tests.support.helpers import FakeClock


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Point the default database at a per-test file."""
    monkeypatch.setenv("DATABASE_URL", str(tmp_path / "env.sqlite"))
    monkeypatch.delenv("UPDATE_CLEARS_EMPTY_FIELDS", raising=False)
    yield


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "songs.sqlite")
    init_db(path)
    return path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repository(db_path, clock):
    return SongRepository(db_path, clock=clock)


@pytest.fixture
def service(repository, clock):
    return SongService(repository, clock=clock)


@pytest.fixture
def app(tmp_path, clock):
    from music_library_api.app.core.config import Settings
    from music_library_api.app.main import create_app

    database = str(tmp_path / "api.sqlite")
    application = create_app(Settings(database_url=database))
    application.state.song_service = SongService(SongRepository(database, clock=clock), clock=clock)
    return application


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    # Entering the context runs the lifespan, which creates the schema.
    with TestClient(app) as test_client:
        yield test_client
