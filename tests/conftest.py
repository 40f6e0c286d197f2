import os
import sys
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="jobportal-tests-"))

# Must be set before jobportal.config is imported
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pytest
from fastapi.testclient import TestClient

from jobportal.api.app import app
from jobportal.db import Base, Role, User, get_session_factory
from jobportal.db.base import get_engine


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=get_engine())
    Base.metadata.create_all(bind=get_engine())
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(client):
    """Register a user through the API and return its id and auth headers."""
    counter = {"n": 0}

    def _make(role=Role.JOB_SEEKER, name=None, password="secret123"):
        counter["n"] += 1
        email = f"user{counter['n']}@example.com"
        register_role = Role.JOB_SEEKER.value if role == Role.ADMIN else str(role)
        resp = client.post(
            "/auth/register",
            json={"email": email, "password": password, "name": name or f"User {counter['n']}", "role": register_role},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()

        if role == Role.ADMIN:
            session = get_session_factory()()
            try:
                session.query(User).filter(User.id == body["user"]["id"]).update({"role": Role.ADMIN.value})
                session.commit()
            finally:
                session.close()

        return {
            "id": body["user"]["id"],
            "email": email,
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _make


@pytest.fixture
def seeker(make_user):
    return make_user(Role.JOB_SEEKER, name="Sam Seeker")


@pytest.fixture
def recruiter(make_user):
    return make_user(Role.RECRUITER, name="Rita Recruiter")


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN, name="Ada Admin")


@pytest.fixture
def make_job(client):
    """Create a job as the given recruiter and return its JSON."""

    def _make(recruiter, **overrides):
        payload = {
            "title": "Engineer",
            "company": "Acme",
            "location": "Remote",
            "salary": "100k",
            "description": "Build things",
        }
        payload.update(overrides)
        resp = client.post("/jobs", json=payload, headers=recruiter["headers"])
        assert resp.status_code == 201, resp.text
        return resp.json()["job"]

    return _make
