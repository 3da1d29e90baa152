from tests.conftest import auth_headers, upload_document


def test_student_dashboard(client, seed_project):
    pid = seed_project.project_id
    s1 = auth_headers(client, "s1@uni.edu")
    upload_document(client, pid, s1)
    client.put(
        f"/api/projects/{pid}/deadlines/phase2",
        json={"deadline_date": "2099-01-01"},
        headers=auth_headers(client, "advisor@uni.edu"),
    )

    resp = client.get("/api/dashboard", headers=s1)
    assert resp.status_code == 200
    data = resp.json()
    assert data["role"] == "student"
    assert data["unread_notifications"] == 1
    assert len(data["projects"]) == 1
    card = data["projects"][0]
    assert card["progress_rate"] == 0
    assert card["pending_documents"] == 1
    assert card["next_deadline_phase"] == "phase2"
    assert card["next_deadline_date"] == "2099-01-01"


def test_advisor_dashboard_counts_pending_reviews(client, seed_project):
    pid = seed_project.project_id
    upload_document(client, pid, auth_headers(client, "s1@uni.edu"))
    upload_document(client, pid, auth_headers(client, "s2@uni.edu"), title="Second")

    data = client.get("/api/dashboard", headers=auth_headers(client, "advisor@uni.edu")).json()
    assert data["pending_reviews"] == 2
    assert data["unread_notifications"] == 2

    other = client.get("/api/dashboard", headers=auth_headers(client, "advisor2@uni.edu")).json()
    assert other["projects"] == []
    assert other["pending_reviews"] == 0


def test_officer_dashboard_groups_by_status(client, seed_project):
    upload_document(client, seed_project.project_id, auth_headers(client, "s1@uni.edu"))
    data = client.get("/api/dashboard", headers=auth_headers(client, "officer@uni.edu")).json()
    assert data["role"] == "project_officer"
    assert data["projects_by_status"] == {"active": 1, "completed": 0, "suspended": 0}
    assert data["pending_reviews"] == 1
