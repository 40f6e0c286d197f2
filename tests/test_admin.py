from jobportal.db import Application, Education, Experience, Job, Profile, Role, SavedJob, User


def test_admin_routes_require_admin(client, seeker, recruiter):
    for headers in (seeker["headers"], recruiter["headers"]):
        assert client.get("/admin/stats", headers=headers).status_code == 403
        assert client.get("/admin/users", headers=headers).status_code == 403
    assert client.get("/admin/stats").status_code == 401


def test_stats(client, admin, seeker, recruiter, make_job):
    job = make_job(recruiter)
    client.post(f"/applications/job/{job['id']}", json={}, headers=seeker["headers"])

    resp = client.get("/admin/stats", headers=admin["headers"])

    assert resp.status_code == 200
    stats = resp.json()["stats"]
    assert stats["total_users"] == 3
    assert stats["total_jobs"] == 1
    assert stats["total_applications"] == 1
    assert stats["users_by_role"] == {"JOB_SEEKER": 1, "RECRUITER": 1, "ADMIN": 1}


def test_list_users_with_counts(client, admin, seeker, recruiter, make_job):
    make_job(recruiter)

    users = client.get("/admin/users", headers=admin["headers"]).json()["users"]

    by_id = {u["id"]: u for u in users}
    assert by_id[recruiter["id"]]["job_count"] == 1
    assert by_id[seeker["id"]]["application_count"] == 0
    # Fixtures register admin, then seeker, then recruiter
    assert [u["id"] for u in users] == [recruiter["id"], seeker["id"], admin["id"]]


def test_update_user_role(client, admin, seeker):
    resp = client.patch(f"/admin/users/{seeker['id']}/role", json={"role": "RECRUITER"}, headers=admin["headers"])

    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "RECRUITER"
    # Role gates use the stored role, so the old token now acts as a recruiter
    assert client.get("/jobs/my-jobs", headers=seeker["headers"]).status_code == 200


def test_update_user_role_invalid(client, admin, seeker):
    resp = client.patch(f"/admin/users/{seeker['id']}/role", json={"role": "OWNER"}, headers=admin["headers"])

    assert resp.status_code == 400


def test_update_role_of_missing_user(client, admin):
    resp = client.patch("/admin/users/missing/role", json={"role": "ADMIN"}, headers=admin["headers"])

    assert resp.status_code == 404


def test_delete_recruiter_leaves_no_orphans(client, admin, recruiter, seeker, make_job, db):
    job = make_job(recruiter)
    client.post(f"/applications/job/{job['id']}", json={}, headers=seeker["headers"])
    client.post(f"/saved-jobs/{job['id']}", headers=seeker["headers"])
    client.post(
        "/profile/experience",
        json={"title": "Lead", "company": "Acme", "start_date": "2019-01-01"},
        headers=recruiter["headers"],
    )

    resp = client.delete(f"/admin/users/{recruiter['id']}", headers=admin["headers"])

    assert resp.status_code == 200
    assert db.query(User).filter(User.id == recruiter["id"]).count() == 0
    assert db.query(Job).filter(Job.recruiter_id == recruiter["id"]).count() == 0
    assert db.query(Application).filter(Application.job_id == job["id"]).count() == 0
    assert db.query(SavedJob).filter(SavedJob.job_id == job["id"]).count() == 0
    assert db.query(Profile).filter(Profile.user_id == recruiter["id"]).count() == 0
    assert db.query(Experience).count() == 0


def test_delete_seeker_removes_their_rows(client, admin, recruiter, seeker, make_job, db):
    job = make_job(recruiter)
    client.post(f"/applications/job/{job['id']}", json={}, headers=seeker["headers"])
    client.post(f"/saved-jobs/{job['id']}", headers=seeker["headers"])
    client.post(
        "/profile/education",
        json={"institution": "TU", "degree": "BSc", "field_of_study": "CS", "start_year": 2015},
        headers=seeker["headers"],
    )

    assert client.delete(f"/admin/users/{seeker['id']}", headers=admin["headers"]).status_code == 200

    assert db.query(Application).filter(Application.user_id == seeker["id"]).count() == 0
    assert db.query(SavedJob).filter(SavedJob.user_id == seeker["id"]).count() == 0
    assert db.query(Education).count() == 0
    assert client.get(f"/jobs/{job['id']}").status_code == 200


def test_delete_missing_user(client, admin):
    assert client.delete("/admin/users/missing", headers=admin["headers"]).status_code == 404


def test_list_and_delete_jobs(client, admin, recruiter, seeker, make_job):
    job = make_job(recruiter)
    client.post(f"/applications/job/{job['id']}", json={}, headers=seeker["headers"])

    jobs = client.get("/admin/jobs", headers=admin["headers"]).json()["jobs"]
    assert jobs[0]["application_count"] == 1
    assert jobs[0]["recruiter"]["id"] == recruiter["id"]

    assert client.delete(f"/admin/jobs/{job['id']}", headers=admin["headers"]).status_code == 200
    assert client.get("/admin/jobs", headers=admin["headers"]).json()["jobs"] == []
    assert client.delete(f"/admin/jobs/{job['id']}", headers=admin["headers"]).status_code == 404


def test_list_applications(client, admin, recruiter, seeker, make_user, make_job):
    job = make_job(recruiter, title="Platform Engineer")
    other = make_user(Role.JOB_SEEKER)
    client.post(f"/applications/job/{job['id']}", json={}, headers=seeker["headers"])
    client.post(f"/applications/job/{job['id']}", json={}, headers=other["headers"])

    applications = client.get("/admin/applications", headers=admin["headers"]).json()["applications"]

    assert [a["user"]["id"] for a in applications] == [other["id"], seeker["id"]]
    assert applications[0]["job"] == {"id": job["id"], "title": "Platform Engineer", "company": "Acme"}
