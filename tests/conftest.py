"""Shared fixtures: every test gets a fresh application over in-memory SQLite."""

import pytest
from fastapi.testclient import TestClient

from tracker.app import create_app
from tracker.config import Settings
from tracker.database import create_db_engine, create_session_factory, init_db


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, database_url="sqlite://", log_level="WARNING")


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(settings, engine):
    return create_app(settings, engine=engine)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def incident_payload():
    return {
        "title": "Payment processing errors",
        "service": "Payment Service",
        "severity": "SEV2",
        "owner": "sarah@example.com",
        "summary": "Payment gateway returning errors for credit card transactions.",
    }


@pytest.fixture
def make_incident(client):
    def _make(**overrides):
        payload = {"title": "High latency detected", "service": "API Gateway", "severity": "SEV3"}
        payload.update(overrides)
        response = client.post("/api/incidents", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
