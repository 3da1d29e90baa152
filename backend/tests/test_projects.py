"""Project creation, membership rules and progress."""

from app.models.notification import Notification
from tests.conftest import auth_headers, upload_document


def _notifications(db, user_id):
    db.expire_all()
    return db.query(Notification).filter(Notification.user_id == user_id).all()


def _create_payload(seed_users, students=("s1", "s2"), **extra):
    payload = {
        "title": "Campus Navigation",
        "description": "Indoor wayfinding",
        "advisor_id": seed_users["advisor"].user_id,
        "student_ids": [seed_users[k].user_id for k in students],
    }
    payload.update(extra)
    return payload


def test_officer_creates_project_and_notifies(client, db, seed_users):
    headers = auth_headers(client, "officer@uni.edu")
    resp = client.post("/api/projects", json=_create_payload(seed_users), headers=headers)
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["project_officer_id"] == seed_users["officer"].user_id
    assert sorted(data["student_ids"]) == sorted([seed_users["s1"].user_id, seed_users["s2"].user_id])
    assert data["advisor_name"] == "Dr. Advisor"

    s1_notes = _notifications(db, seed_users["s1"].user_id)
    assert [n.noti_type for n in s1_notes] == ["project_assignment"]
    advisor_notes = _notifications(db, seed_users["advisor"].user_id)
    assert [n.title for n in advisor_notes] == ["New Project Assignment"]
    # The creating officer is the actor and hears nothing; the other officer is told.
    assert _notifications(db, seed_users["officer"].user_id) == []
    assert [n.title for n in _notifications(db, seed_users["officer2"].user_id)] == ["New Project Created"]


def test_non_officer_cannot_create_project(client, seed_users):
    headers = auth_headers(client, "advisor@uni.edu")
    resp = client.post("/api/projects", json=_create_payload(seed_users), headers=headers)
    assert resp.status_code == 403


def test_project_requires_two_to_four_students(client, seed_users):
    headers = auth_headers(client, "officer@uni.edu")
    too_few = client.post("/api/projects", json=_create_payload(seed_users, students=("s1",)), headers=headers)
    assert too_few.status_code == 400


def test_project_rejects_non_student_members(client, seed_users):
    headers = auth_headers(client, "officer@uni.edu")
    payload = _create_payload(seed_users)
    payload["student_ids"].append(seed_users["advisor2"].user_id)
    resp = client.post("/api/projects", json=payload, headers=headers)
    assert resp.status_code == 400


def test_project_rejects_student_as_advisor(client, seed_users):
    headers = auth_headers(client, "officer@uni.edu")
    payload = _create_payload(seed_users, advisor_id=seed_users["s3"].user_id)
    resp = client.post("/api/projects", json=payload, headers=headers)
    assert resp.status_code == 400


def test_project_list_is_scoped(client, seed_project, seed_users):
    assert len(client.get("/api/projects", headers=auth_headers(client, "s1@uni.edu")).json()) == 1
    assert client.get("/api/projects", headers=auth_headers(client, "s3@uni.edu")).json() == []
    assert len(client.get("/api/projects", headers=auth_headers(client, "advisor@uni.edu")).json()) == 1
    assert client.get("/api/projects", headers=auth_headers(client, "advisor2@uni.edu")).json() == []
    assert len(client.get("/api/projects", headers=auth_headers(client, "officer2@uni.edu")).json()) == 1


def test_project_detail_access(client, seed_project):
    pid = seed_project.project_id
    assert client.get(f"/api/projects/{pid}", headers=auth_headers(client, "s2@uni.edu")).status_code == 200
    denied = client.get(f"/api/projects/{pid}", headers=auth_headers(client, "s3@uni.edu"))
    assert denied.status_code == 403
    assert denied.json()["detail"] == "You do not have permission to perform this action."
    assert client.get("/api/projects/9999", headers=auth_headers(client, "s1@uni.edu")).status_code == 404


def test_advisor_updates_status_but_cannot_reassign(client, db, seed_project, seed_users):
    pid = seed_project.project_id
    headers = auth_headers(client, "advisor@uni.edu")

    resp = client.put(f"/api/projects/{pid}", json={"status": "completed"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"
    assert [n.title for n in _notifications(db, seed_users["s1"].user_id)] == ["Project Status Updated"]

    reassign = client.put(
        f"/api/projects/{pid}",
        json={"advisor_id": seed_users["advisor2"].user_id},
        headers=headers,
    )
    assert reassign.status_code == 403


def test_student_cannot_update_project(client, seed_project):
    resp = client.put(
        f"/api/projects/{seed_project.project_id}",
        json={"title": "Hijacked"},
        headers=auth_headers(client, "s1@uni.edu"),
    )
    assert resp.status_code == 403


def test_officer_reassigns_advisor(client, db, seed_project, seed_users):
    resp = client.put(
        f"/api/projects/{seed_project.project_id}",
        json={"advisor_id": seed_users["advisor2"].user_id},
        headers=auth_headers(client, "officer@uni.edu"),
    )
    assert resp.status_code == 200
    assert resp.json()["advisor_id"] == seed_users["advisor2"].user_id
    assert [n.noti_type for n in _notifications(db, seed_users["advisor2"].user_id)] == ["project_assignment"]


def test_student_membership_lifecycle(client, db, seed_project, seed_users):
    pid = seed_project.project_id
    officer = auth_headers(client, "officer@uni.edu")
    s3 = seed_users["s3"].user_id

    added = client.post(f"/api/projects/{pid}/students", json={"student_id": s3}, headers=officer)
    assert added.status_code == 201
    assert added.json()["student_name"] == "Student Three"
    assert [n.noti_type for n in _notifications(db, s3)] == ["project_assignment"]

    dup = client.post(f"/api/projects/{pid}/students", json={"student_id": s3}, headers=officer)
    assert dup.status_code == 409

    removed = client.delete(f"/api/projects/{pid}/students/{s3}", headers=officer)
    assert removed.status_code == 200
    assert client.delete(f"/api/projects/{pid}/students/{s3}", headers=officer).status_code == 404


def test_project_capacity_is_enforced(client, db, seed_project, seed_users):
    from app.models.user import User

    pid = seed_project.project_id
    officer = auth_headers(client, "officer@uni.edu")
    extra = [User(email=f"extra{i}@uni.edu", full_name=f"Extra {i}", role="student") for i in range(3)]
    db.add_all(extra)
    db.commit()

    assert client.post(f"/api/projects/{pid}/students", json={"student_id": extra[0].user_id}, headers=officer).status_code == 201
    assert client.post(f"/api/projects/{pid}/students", json={"student_id": extra[1].user_id}, headers=officer).status_code == 201
    full = client.post(f"/api/projects/{pid}/students", json={"student_id": extra[2].user_id}, headers=officer)
    assert full.status_code == 409


def test_move_student_between_projects(client, db, seed_project, seed_users):
    officer = auth_headers(client, "officer@uni.edu")
    other = client.post(
        "/api/projects",
        json={
            "title": "Second Project",
            "student_ids": [seed_users["s3"].user_id, seed_users["s2"].user_id],
        },
        headers=officer,
    )
    assert other.status_code == 201
    other_id = other.json()["project_id"]

    conflict = client.put(
        f"/api/projects/{seed_project.project_id}/students/{seed_users['s2'].user_id}",
        json={"project_id": other_id},
        headers=officer,
    )
    assert conflict.status_code == 409

    moved = client.put(
        f"/api/projects/{seed_project.project_id}/students/{seed_users['s1'].user_id}",
        json={"project_id": other_id},
        headers=officer,
    )
    assert moved.status_code == 200
    assert moved.json()["project_id"] == other_id
    s1_headers = auth_headers(client, "s1@uni.edu")
    assert client.get(f"/api/projects/{seed_project.project_id}", headers=s1_headers).status_code == 403


def test_student_sees_only_own_membership_row(client, seed_project, seed_users):
    pid = seed_project.project_id
    student_rows = client.get(f"/api/projects/{pid}/students", headers=auth_headers(client, "s1@uni.edu")).json()
    assert [r["student_id"] for r in student_rows] == [seed_users["s1"].user_id]

    advisor_rows = client.get(f"/api/projects/{pid}/students", headers=auth_headers(client, "advisor@uni.edu")).json()
    assert len(advisor_rows) == 2


def test_progress_counts_approved_phases(client, seed_project):
    pid = seed_project.project_id
    s1 = auth_headers(client, "s1@uni.edu")
    doc = upload_document(client, pid, s1).json()
    client.post(
        f"/api/documents/{doc['doc_id']}/review",
        json={"status": "approved"},
        headers=auth_headers(client, "advisor@uni.edu"),
    )
    upload_document(client, pid, s1, phase="phase2", title="Survey")

    resp = client.get(f"/api/projects/{pid}/progress", headers=s1)
    assert resp.status_code == 200
    data = resp.json()
    assert data["progress_rate"] == 25
    phases = {p["phase"]: p for p in data["phases"]}
    assert phases["phase1"]["latest_status"] == "approved"
    assert phases["phase1"]["phase_title"] == "Project Proposal"
    assert phases["phase2"]["latest_status"] == "pending"
    assert phases["phase4"]["document_count"] == 0


def _enroll_behind_the_check(monkeypatch, student_id):
    from app.models.project import ProjectStudent
    from app.services import project_service
    from tests.conftest import TestingSession

    def ensure_capacity_then_lose_race(session, project_id):
        other = TestingSession()
        try:
            other.add(ProjectStudent(project_id=project_id, student_id=student_id))
            other.commit()
        finally:
            other.close()

    monkeypatch.setattr(project_service, "_ensure_capacity", ensure_capacity_then_lose_race)


def test_concurrent_student_add_conflicts(client, db, seed_project, seed_users, monkeypatch):
    pid = seed_project.project_id
    s3 = seed_users["s3"].user_id
    _enroll_behind_the_check(monkeypatch, s3)

    resp = client.post(
        f"/api/projects/{pid}/students",
        json={"student_id": s3},
        headers=auth_headers(client, "officer@uni.edu"),
    )
    assert resp.status_code == 409
    assert _notifications(db, s3) == []


def test_concurrent_student_move_conflicts(client, db, seed_project, seed_users, monkeypatch):
    from app.models.project import Project, ProjectStudent

    target = Project(title="Overflow Team", status="active")
    db.add(target)
    db.commit()
    s1 = seed_users["s1"].user_id
    _enroll_behind_the_check(monkeypatch, s1)

    resp = client.put(
        f"/api/projects/{seed_project.project_id}/students/{s1}",
        json={"project_id": target.project_id},
        headers=auth_headers(client, "officer@uni.edu"),
    )
    assert resp.status_code == 409
    db.expire_all()
    original = db.query(ProjectStudent).filter(
        ProjectStudent.project_id == seed_project.project_id,
        ProjectStudent.student_id == s1,
    ).first()
    assert original is not None
