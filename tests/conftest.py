"""
Shared fixtures.

- match: a fresh Match per test
- client: FastAPI TestClient bound to that same Match
"""
import pytest
from fastapi.testclient import TestClient

from main import app
from models import Match
from store import get_match


@pytest.fixture
def match():
    return Match()


@pytest.fixture
def client(match):
    app.dependency_overrides[get_match] = lambda: match
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def join(client):
    """Join through the API from a given address and return the response JSON."""
    def _join(code, ip):
        res = client.post(
            "/api/player/join",
            json={"code": code},
            headers={"X-Forwarded-For": ip},
        )
        assert res.status_code == 200, res.text
        return res.json()
    return _join
