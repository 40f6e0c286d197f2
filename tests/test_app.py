from fastapi.testclient import TestClient

from jobportal.api.app import app
from jobportal.api.routes import jobs


def test_root_lists_endpoints(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.json()["message"] == "Job Portal API"
    assert "jobs" in resp.json()["endpoints"]


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_unknown_route_returns_404(client):
    assert client.get("/no-such-route").status_code == 404


def test_malformed_body_is_bad_request(client, recruiter):
    resp = client.post("/jobs", json={"title": "x", "type": "GIG"}, headers=recruiter["headers"])

    assert resp.status_code == 400


def test_unexpected_error_is_generic_500(monkeypatch):
    def boom(value):
        raise RuntimeError("database exploded at 10.0.0.3")

    monkeypatch.setattr(jobs, "normalize_category", boom)

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/jobs", params={"category": "frontend"})

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
