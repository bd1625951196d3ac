"""
Pytest configuration and fixtures for the identity registry tests.

Every test gets a fresh in-memory SQLite database; the API client overrides
the ``get_db`` dependency so requests share that database.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("APP_ENV", "test")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from identity_registry.core.database import Base, build_engine, connect, get_db
from identity_registry.main import app


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Pure tests with no database")
    config.addinivalue_line("markers", "integration: Tests against the SQLite-backed store")
    config.addinivalue_line("markers", "e2e: Tests through the HTTP API")


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    connect(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine) -> Generator[TestClient, None, None]:
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def valid_payload() -> dict:
    return {
        "name": "John Doe",
        "email": "john.doe@mailbox.org",
        "primary_mobile": "9876543210",
        "secondary_mobile": "9876543211",
        "aadhaar_number": "123456789012",
        "pan_number": "ABCDE1234F",
        "date_of_birth": "1990-01-15",
        "place_of_birth": "Mumbai",
        "current_address": "123 Main St, Mumbai, Maharashtra",
        "permanent_address": "456 Oak Ave, Mumbai, Maharashtra",
    }


@pytest.fixture
def make_payload(valid_payload):
    """Build a payload whose unique fields derive from ``index``."""

    def _make(index: int, **overrides) -> dict:
        payload = dict(valid_payload)
        payload.update({
            "name": f"User {index:03d}",
            "email": f"user{index}@mailbox.org",
            "aadhaar_number": f"{index:012d}",
            "pan_number": f"ABCDE{index:04d}F",
        })
        payload.update(overrides)
        return payload

    return _make
