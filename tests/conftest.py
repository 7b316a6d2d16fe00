"""
Shared fixtures: a seeded SQLite file per test and a TestClient.

A file database is used instead of ":memory:" because unified search opens a
separate session per worker thread.
"""

import pytest
from fastapi.testclient import TestClient

import database
from database import configure_engine, init_db, session_scope
from main import app
from scripts.seed import seed


@pytest.fixture
def client(tmp_path):
    configure_engine(f"sqlite:///{tmp_path / 'biblemap-test.db'}")
    init_db()
    with session_scope() as db:
        seed(db)

    yield TestClient(app)

    app.dependency_overrides.clear()
    database.engine.dispose()


@pytest.fixture
def find_person(client):
    """Look up a seeded person's id by exact name."""

    def _find(name):
        response = client.get("/api/persons", params={"search": name, "limit": 100})
        matches = [p for p in response.json()["data"] if p["name"] == name]
        assert matches, f"no person named {name}"
        return matches[0]["id"]

    return _find


@pytest.fixture
def find_location(client):
    """Look up a seeded location's id by exact name."""

    def _find(name):
        response = client.get("/api/locations", params={"search": name, "limit": 100})
        matches = [loc for loc in response.json()["data"] if loc["name"] == name]
        assert matches, f"no location named {name}"
        return matches[0]["id"]

    return _find
