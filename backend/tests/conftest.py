import pytest
from fastapi.testclient import TestClient

from notes_api.main import create_app
from notes_api.storage.db import init_db, make_engine, make_session_factory
from notes_api.storage.notes_store import NotesStore


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate the database per test
    monkeypatch.setenv("JWT_SECRET", "dev-secret-for-tests")
    monkeypatch.setenv("JWT_EXP_MINUTES", "15")
    monkeypatch.delenv("NOTES_MAX_LIMIT", raising=False)

    app = create_app(database_url=f"sqlite:///{tmp_path / 'notes.db'}")
    # entering the client runs the lifespan, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'store.db'}")
    init_db(engine)
    yield NotesStore(make_session_factory(engine))
    engine.dispose()
