from pathlib import Path

from starlette.datastructures import UploadFile

from jobportal.api.routes import profile as profile_routes
from jobportal.config import settings
from jobportal.db import Profile, Role


def _disk_path(url: str) -> Path:
    return Path(settings.upload_dir) / url.removeprefix("/uploads/")


def test_get_profile_creates_once(client, seeker, db):
    first = client.get("/profile", headers=seeker["headers"])
    second = client.get("/profile", headers=seeker["headers"])

    assert first.status_code == 200
    assert first.json()["profile"]["id"] == second.json()["profile"]["id"]
    assert first.json()["profile"]["name"] == "Sam Seeker"
    assert first.json()["profile"]["user"]["email"] == seeker["email"]
    assert db.query(Profile).filter(Profile.user_id == seeker["id"]).count() == 1


def test_concurrent_profile_creation_returns_existing_row(client, seeker, db, monkeypatch):
    existing = client.get("/profile", headers=seeker["headers"]).json()["profile"]

    # The first lookup misses, as if another request created the row in between
    real_find = profile_routes._find_profile
    calls = []

    def racing_find(session, user_id):
        calls.append(user_id)
        if len(calls) == 1:
            return None
        return real_find(session, user_id)

    monkeypatch.setattr(profile_routes, "_find_profile", racing_find)
    resp = client.get("/profile", headers=seeker["headers"])

    assert resp.status_code == 200
    assert resp.json()["profile"]["id"] == existing["id"]
    assert len(calls) == 2
    assert db.query(Profile).filter(Profile.user_id == seeker["id"]).count() == 1


def test_public_profile_does_not_create(client, seeker, db):
    assert client.get(f"/profile/{seeker['id']}").status_code == 404
    assert db.query(Profile).count() == 0

    client.get("/profile", headers=seeker["headers"])
    resp = client.get(f"/profile/{seeker['id']}")

    assert resp.status_code == 200
    assert resp.json()["profile"]["user_id"] == seeker["id"]


def test_get_profile_requires_auth(client):
    assert client.get("/profile").status_code == 401


def test_update_basic_merges_fields(client, seeker):
    client.put("/profile/basic", json={"headline": "Backend dev", "location": "Berlin"}, headers=seeker["headers"])

    resp = client.put("/profile/basic", json={"phone": "+49 123"}, headers=seeker["headers"])

    assert resp.status_code == 200
    profile = resp.json()["profile"]
    assert profile["headline"] == "Backend dev"
    assert profile["location"] == "Berlin"
    assert profile["phone"] == "+49 123"


def test_update_about(client, seeker):
    resp = client.put("/profile/about", json={"about": "I like APIs"}, headers=seeker["headers"])

    assert resp.status_code == 200
    assert resp.json()["profile"]["about"] == "I like APIs"


def test_update_skills(client, seeker):
    resp = client.put("/profile/skills", json={"skills": ["python", "sql", "fastapi"]}, headers=seeker["headers"])

    assert resp.status_code == 200
    assert resp.json()["profile"]["skills"] == ["python", "sql", "fastapi"]


def test_update_skills_must_be_list(client, seeker):
    resp = client.put("/profile/skills", json={"skills": "python"}, headers=seeker["headers"])

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Skills must be an array"


def test_experience_lifecycle(client, seeker):
    resp = client.post(
        "/profile/experience",
        json={"title": "Dev", "company": "Acme", "start_date": "2020-01-01", "end_date": "2021-01-01"},
        headers=seeker["headers"],
    )
    assert resp.status_code == 201
    experience_id = resp.json()["experience"]["id"]

    updated = client.put(
        f"/profile/experience/{experience_id}",
        json={"current": True, "description": "Still here"},
        headers=seeker["headers"],
    )
    assert updated.status_code == 200
    assert updated.json()["experience"]["end_date"] is None
    assert updated.json()["experience"]["current"] is True
    assert updated.json()["experience"]["title"] == "Dev"

    assert client.delete(f"/profile/experience/{experience_id}", headers=seeker["headers"]).status_code == 200
    assert client.get("/profile", headers=seeker["headers"]).json()["profile"]["experiences"] == []


def test_current_experience_drops_end_date(client, seeker):
    resp = client.post(
        "/profile/experience",
        json={"title": "Dev", "company": "Acme", "start_date": "2020-01-01", "end_date": "2021-01-01", "current": True},
        headers=seeker["headers"],
    )

    assert resp.json()["experience"]["end_date"] is None


def test_experience_requires_fields(client, seeker):
    resp = client.post("/profile/experience", json={"title": "Dev"}, headers=seeker["headers"])

    assert resp.status_code == 400


def test_experiences_ordered_newest_start_first(client, seeker):
    for start in ("2015-06-01", "2022-03-01", "2018-09-01"):
        client.post(
            "/profile/experience",
            json={"title": f"Job {start}", "company": "Acme", "start_date": start},
            headers=seeker["headers"],
        )

    experiences = client.get("/profile", headers=seeker["headers"]).json()["profile"]["experiences"]

    assert [e["start_date"] for e in experiences] == ["2022-03-01", "2018-09-01", "2015-06-01"]


def test_experience_of_other_user_is_forbidden(client, seeker, make_user):
    created = client.post(
        "/profile/experience",
        json={"title": "Dev", "company": "Acme", "start_date": "2020-01-01"},
        headers=seeker["headers"],
    ).json()
    other = make_user(Role.JOB_SEEKER)
    url = f"/profile/experience/{created['experience']['id']}"

    assert client.put(url, json={"title": "Hacked"}, headers=other["headers"]).status_code == 403
    assert client.delete(url, headers=other["headers"]).status_code == 403


def test_missing_experience(client, seeker):
    assert client.delete("/profile/experience/missing", headers=seeker["headers"]).status_code == 404


def test_education_lifecycle(client, seeker, make_user):
    payload = {"institution": "TU", "degree": "BSc", "field_of_study": "CS", "start_year": 2015}
    older = client.post("/profile/education", json=payload, headers=seeker["headers"])
    newer = client.post("/profile/education", json={**payload, "degree": "MSc", "start_year": 2019}, headers=seeker["headers"])
    assert older.status_code == 201
    assert newer.status_code == 201

    education = client.get("/profile", headers=seeker["headers"]).json()["profile"]["education"]
    assert [e["degree"] for e in education] == ["MSc", "BSc"]

    education_id = older.json()["education"]["id"]
    updated = client.put(f"/profile/education/{education_id}", json={"grade": "1.3"}, headers=seeker["headers"])
    assert updated.json()["education"]["grade"] == "1.3"
    assert updated.json()["education"]["institution"] == "TU"

    other = make_user(Role.JOB_SEEKER)
    assert client.delete(f"/profile/education/{education_id}", headers=other["headers"]).status_code == 403
    assert client.delete(f"/profile/education/{education_id}", headers=seeker["headers"]).status_code == 200


def test_education_requires_fields(client, seeker):
    resp = client.post("/profile/education", json={"institution": "TU"}, headers=seeker["headers"])

    assert resp.status_code == 400


def test_resume_upload_and_delete(client, seeker):
    resp = client.post(
        "/profile/resume",
        files={"resume": ("My CV.pdf", b"%PDF-1.4 fake", "application/pdf")},
        headers=seeker["headers"],
    )

    assert resp.status_code == 200
    resume = resp.json()["resume"]
    assert resume["name"] == "My CV.pdf"
    assert resume["url"].startswith(f"/uploads/resumes/{seeker['id']}-")
    assert resume["url"].endswith(".pdf")
    assert _disk_path(resume["url"]).read_bytes() == b"%PDF-1.4 fake"

    served = client.get(resume["url"])
    assert served.status_code == 200
    assert served.content == b"%PDF-1.4 fake"

    profile = client.get("/profile", headers=seeker["headers"]).json()["profile"]
    assert profile["resume"] == resume["url"]
    assert profile["resume_name"] == "My CV.pdf"

    assert client.delete("/profile/resume", headers=seeker["headers"]).status_code == 200
    assert not _disk_path(resume["url"]).exists()
    assert client.get("/profile", headers=seeker["headers"]).json()["profile"]["resume"] is None
    assert client.delete("/profile/resume", headers=seeker["headers"]).status_code == 404


def test_resume_rejects_other_extensions(client, seeker):
    resp = client.post(
        "/profile/resume",
        files={"resume": ("cv.exe", b"MZ", "application/octet-stream")},
        headers=seeker["headers"],
    )

    assert resp.status_code == 400
    assert "PDF" in resp.json()["detail"]


def test_upload_without_file(client, seeker):
    resp = client.post("/profile/resume", headers=seeker["headers"])

    assert resp.status_code == 400
    assert resp.json()["detail"] == "No file uploaded"


def test_upload_size_limit(client, seeker, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_size", 10)

    resp = client.post(
        "/profile/avatar",
        files={"avatar": ("me.png", b"x" * 11, "image/png")},
        headers=seeker["headers"],
    )

    assert resp.status_code == 400


def test_avatar_replace_removes_previous_file(client, seeker):
    first = client.post(
        "/profile/avatar",
        files={"avatar": ("me.png", b"first", "image/png")},
        headers=seeker["headers"],
    ).json()["avatar"]
    second = client.post(
        "/profile/avatar",
        files={"avatar": ("me.JPG", b"second", "image/jpeg")},
        headers=seeker["headers"],
    ).json()["avatar"]

    assert first != second
    assert second.endswith(".jpg")
    assert not _disk_path(first).exists()
    assert _disk_path(second).read_bytes() == b"second"

    assert client.delete("/profile/avatar", headers=seeker["headers"]).status_code == 200
    assert not _disk_path(second).exists()
    assert client.delete("/profile/avatar", headers=seeker["headers"]).status_code == 404


def test_avatar_rejects_documents(client, seeker):
    resp = client.post(
        "/profile/avatar",
        files={"avatar": ("me.pdf", b"%PDF", "application/pdf")},
        headers=seeker["headers"],
    )

    assert resp.status_code == 400


def test_upload_read_stops_past_size_limit(client, seeker, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_size", 10)
    real_read = UploadFile.read
    read_sizes = []

    async def recording_read(self, size=-1):
        data = await real_read(self, size)
        read_sizes.append(len(data))
        return data

    monkeypatch.setattr(UploadFile, "read", recording_read)
    resp = client.post(
        "/profile/resume",
        files={"resume": ("cv.pdf", b"x" * 1000, "application/pdf")},
        headers=seeker["headers"],
    )

    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("File too large")
    assert read_sizes and max(read_sizes) <= 11
