"""Phase document submission and review, including notification fan-out."""

from fastapi.testclient import TestClient

from app.config import settings
from app.main import app
from app.models.document import Document
from app.models.notification import Notification
from tests.conftest import auth_headers, upload_document


def _notifications(db, user_id):
    db.expire_all()
    return db.query(Notification).filter(Notification.user_id == user_id).all()


def test_submit_and_review_scenario(client, db, seed_project, seed_users, storage_dir):
    pid = seed_project.project_id
    s1 = auth_headers(client, "s1@uni.edu")
    advisor = auth_headers(client, "advisor@uni.edu")

    created = upload_document(client, pid, s1)
    assert created.status_code == 201, created.text
    doc = created.json()
    assert doc["status"] == "pending"
    assert doc["has_file"] is True
    assert doc["submitter_name"] == "Student One"

    advisor_notes = _notifications(db, seed_users["advisor"].user_id)
    assert len(advisor_notes) == 1
    assert advisor_notes[0].noti_type == "document_submission"
    assert _notifications(db, seed_users["s1"].user_id) == []

    reviewed = client.post(
        f"/api/documents/{doc['doc_id']}/review",
        json={"status": "approved", "feedback": "Looks good"},
        headers=advisor,
    )
    assert reviewed.status_code == 200
    assert reviewed.json()["status"] == "approved"
    assert reviewed.json()["advisor_feedback"] == "Looks good"
    assert reviewed.json()["reviewed_by"] == seed_users["advisor"].user_id

    s1_notes = _notifications(db, seed_users["s1"].user_id)
    assert [(n.title, n.noti_type) for n in s1_notes] == [("Document Review Complete", "document_review")]
    for key in ("officer", "officer2"):
        officer_notes = _notifications(db, seed_users[key].user_id)
        assert [(n.title, n.noti_type) for n in officer_notes] == [("Document Approved", "document_review")]
    assert _notifications(db, seed_users["s2"].user_id) == []

    again = client.post(
        f"/api/documents/{doc['doc_id']}/review",
        json={"status": "rejected"},
        headers=advisor,
    )
    assert again.status_code == 409
    db.expire_all()
    assert db.get(Document, doc["doc_id"]).status == "approved"


def test_rejection_notifies_officers_once(client, db, seed_project, seed_users):
    doc = upload_document(client, seed_project.project_id, auth_headers(client, "s2@uni.edu")).json()
    resp = client.post(
        f"/api/documents/{doc['doc_id']}/review",
        json={"status": "rejected", "feedback": "Needs references"},
        headers=auth_headers(client, "officer2@uni.edu"),
    )
    assert resp.status_code == 200
    assert [n.title for n in _notifications(db, seed_users["officer"].user_id)] == ["Document Reviewed"]
    # The reviewing officer is the actor.
    assert _notifications(db, seed_users["officer2"].user_id) == []


def test_review_denied_for_non_reviewers(client, seed_project, seed_users):
    doc = upload_document(client, seed_project.project_id, auth_headers(client, "s1@uni.edu")).json()
    for email in ("s1@uni.edu", "s2@uni.edu", "advisor2@uni.edu"):
        resp = client.post(
            f"/api/documents/{doc['doc_id']}/review",
            json={"status": "approved"},
            headers=auth_headers(client, email),
        )
        assert resp.status_code == 403


def test_review_rejects_non_terminal_status(client, seed_project):
    doc = upload_document(client, seed_project.project_id, auth_headers(client, "s1@uni.edu")).json()
    resp = client.post(
        f"/api/documents/{doc['doc_id']}/review",
        json={"status": "pending"},
        headers=auth_headers(client, "advisor@uni.edu"),
    )
    assert resp.status_code == 422


def test_only_enrolled_students_submit(client, seed_project, storage_dir):
    pid = seed_project.project_id
    assert upload_document(client, pid, auth_headers(client, "s3@uni.edu")).status_code == 403
    assert upload_document(client, pid, auth_headers(client, "advisor@uni.edu")).status_code == 403
    assert upload_document(client, pid, auth_headers(client, "officer@uni.edu")).status_code == 403
    bucket = storage_dir / settings.DOCUMENTS_BUCKET
    assert not bucket.exists() or not any(p.is_file() for p in bucket.rglob("*"))


def test_disallowed_extension_rejected(client, seed_project):
    resp = client.post(
        f"/api/projects/{seed_project.project_id}/documents",
        data={"phase": "phase1", "title": "Script"},
        files={"file": ("run.exe", b"MZ", "application/octet-stream")},
        headers=auth_headers(client, "s1@uni.edu"),
    )
    assert resp.status_code == 400


def test_document_visibility(client, seed_project):
    pid = seed_project.project_id
    doc = upload_document(client, pid, auth_headers(client, "s1@uni.edu")).json()
    url = f"/api/documents/{doc['doc_id']}"

    assert client.get(url, headers=auth_headers(client, "s1@uni.edu")).status_code == 200
    assert client.get(url, headers=auth_headers(client, "advisor@uni.edu")).status_code == 200
    assert client.get(url, headers=auth_headers(client, "officer2@uni.edu")).status_code == 200
    assert client.get(url, headers=auth_headers(client, "s2@uni.edu")).status_code == 403
    assert client.get(url, headers=auth_headers(client, "advisor2@uni.edu")).status_code == 403

    listed = client.get(f"/api/projects/{pid}/documents", headers=auth_headers(client, "s2@uni.edu"))
    assert listed.status_code == 200
    assert listed.json() == []


def test_list_documents_filters(client, seed_project):
    pid = seed_project.project_id
    s1 = auth_headers(client, "s1@uni.edu")
    upload_document(client, pid, s1, phase="phase1")
    upload_document(client, pid, s1, phase="phase2", title="Review")
    advisor = auth_headers(client, "advisor@uni.edu")
    resp = client.get(f"/api/projects/{pid}/documents", params={"phase": "phase2"}, headers=advisor)
    assert [d["title"] for d in resp.json()] == ["Review"]
    resp = client.get(f"/api/projects/{pid}/documents", params={"status": "approved"}, headers=advisor)
    assert resp.json() == []


def test_submitter_edits_only_while_pending(client, seed_project):
    pid = seed_project.project_id
    s1 = auth_headers(client, "s1@uni.edu")
    doc = upload_document(client, pid, s1).json()
    url = f"/api/documents/{doc['doc_id']}"

    assert client.put(url, json={"title": "Other"}, headers=auth_headers(client, "s2@uni.edu")).status_code == 403
    edited = client.put(url, json={"title": "Revised Proposal"}, headers=s1)
    assert edited.status_code == 200
    assert edited.json()["title"] == "Revised Proposal"
    assert edited.json()["submitted_by"] == doc["submitted_by"]

    client.post(f"{url}/review", json={"status": "rejected"}, headers=auth_headers(client, "advisor@uni.edu"))
    assert client.put(url, json={"title": "Too late"}, headers=s1).status_code == 409


def test_download_document_file(client, seed_project):
    s1 = auth_headers(client, "s1@uni.edu")
    doc = upload_document(client, seed_project.project_id, s1).json()
    resp = client.get(f"/api/documents/{doc['doc_id']}/file", headers=auth_headers(client, "advisor@uni.edu"))
    assert resp.status_code == 200
    assert resp.content == b"%PDF-1.4 test"
    assert client.get(f"/api/documents/{doc['doc_id']}/file", headers=auth_headers(client, "s2@uni.edu")).status_code == 403


def test_failed_dispatch_rolls_back_document_and_blob(client, db, seed_project, storage_dir, monkeypatch):
    from app.services import dispatch_service

    def boom(db, event):
        raise RuntimeError("dispatch failed")

    monkeypatch.setattr(dispatch_service, "publish", boom)
    test_client = TestClient(app, raise_server_exceptions=False)
    resp = upload_document(test_client, seed_project.project_id, auth_headers(test_client, "s1@uni.edu"))
    assert resp.status_code == 500
    db.expire_all()
    assert db.query(Document).count() == 0
    stored = [p for p in (storage_dir / settings.DOCUMENTS_BUCKET).rglob("*") if p.is_file()]
    assert stored == []


def test_submission_without_advisor_notifies_nobody(client, db, advisorless_project):
    resp = upload_document(client, advisorless_project.project_id, auth_headers(client, "s1@uni.edu"))
    assert resp.status_code == 201
    assert resp.json()["status"] == "pending"
    db.expire_all()
    assert db.query(Notification).count() == 0
