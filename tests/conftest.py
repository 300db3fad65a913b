# tests/conftest.py
# PURPOSE: build a fresh app per test against a temp SQLite file, plus helpers to register users.

# Ensure project root is on sys.path so `import todo_api` works when running pytest.
import sys, os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import tempfile
import pytest
from fastapi.testclient import TestClient

from todo_api import db_models  # noqa: F401 (register tables on Base.metadata)
from todo_api.config import Settings
from todo_api.db import Base  # DB metadata
from todo_api.main import create_app  # FastAPI app factory
from todo_api.rate_limit import limiter


@pytest.fixture()
def settings():
    # 1) Create a temporary SQLite file (so data is isolated per test)
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    yield Settings(_env_file=None, DATABASE_URL=f"sqlite:///{tmp.name}")
    os.unlink(tmp.name)


@pytest.fixture()
def app(settings):
    # 2) Build the app; its context owns the engine for the temp database
    application = create_app(settings)
    engine = application.state.context.engine

    # 3) Create tables for tests
    Base.metadata.create_all(bind=engine)
    # rate limit counters live in the module-level limiter; start every test clean
    limiter.reset()

    yield application

    # 4) Cleanup: drop tables, dispose engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def client(app):
    # TestClient as context manager runs startup/shutdown
    with TestClient(app) as c:
        yield c


def register(client, email: str = "jane@example.com") -> str:
    """Helper: register a user and return the plaintext API key."""
    r = client.post("/v1/users/register", json={"email_address": email})
    assert r.status_code == 201
    return r.json()["api_key"]


@pytest.fixture()
def api_key(client) -> str:
    return register(client)


@pytest.fixture()
def auth(api_key) -> dict:
    return {"X-Api-Key": api_key}
