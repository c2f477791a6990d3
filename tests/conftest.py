# tests/conftest.py
"""
Pytest configuration and fixtures.

Points the app at an in-memory SQLite database before anything from
jobboard_api is imported, and recreates the schema for every test.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from jobboard_api.config import settings
from jobboard_api.db import Base, SessionLocal, engine, init_db
from jobboard_api.main import app


def iso_in(days: float) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


@pytest.fixture(autouse=True)
def fresh_db(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """Register a user and return (user_json, auth_headers)."""

    def _register(role: str = "employee", email: str = "worker@example.com", **extra):
        payload = {
            "full_name": extra.pop("full_name", "Test User"),
            "email": email,
            "password": extra.pop("password", "s3cret-pass"),
            "role": role,
        }
        if role == "employer":
            payload.update(company_name="Acme Pty Ltd", business_registration_number="ABN-123")
        else:
            payload.update(resume_url="https://files.example.com/cv.pdf")
        payload.update(extra)
        resp = client.post("/api/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _register


@pytest.fixture
def employer(register):
    return register("employer", email="boss@example.com")


@pytest.fixture
def employee(register):
    return register("employee", email="worker@example.com")


@pytest.fixture
def post_job(client, employer):
    """POST a job as `employer` (or `headers`) and return the raw response."""

    def _post(headers=None, files=None, **fields):
        data = {
            "title": "Backend Engineer",
            "description": "Build and run APIs",
            "category": "engineering",
            "deadline": iso_in(1),
            "tags": "python, fastapi",
        }
        data.update(fields)
        return client.post("/api/jobs", data=data, files=files, headers=headers or employer[1])

    return _post


@pytest.fixture
def job(post_job):
    resp = post_job()
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
