from tests.conftest import auth_headers, upload_document


def test_document_comment_thread(client, seed_project):
    doc = upload_document(client, seed_project.project_id, auth_headers(client, "s1@uni.edu")).json()
    url = f"/api/documents/{doc['doc_id']}/comments"

    advisor = auth_headers(client, "advisor@uni.edu")
    created = client.post(url, json={"comment": "Tighten the scope"}, headers=advisor)
    assert created.status_code == 201
    assert created.json()["author_name"] == "Dr. Advisor"
    reply = client.post(url, json={"comment": "Will do"}, headers=auth_headers(client, "s2@uni.edu"))
    assert reply.status_code == 201

    thread = client.get(url, headers=auth_headers(client, "s1@uni.edu")).json()
    assert [c["comment"] for c in thread] == ["Tighten the scope", "Will do"]

    outsider = auth_headers(client, "s3@uni.edu")
    assert client.get(url, headers=outsider).status_code == 403
    assert client.post(url, json={"comment": "hi"}, headers=outsider).status_code == 403


def test_document_comment_author_only(client, seed_project):
    doc = upload_document(client, seed_project.project_id, auth_headers(client, "s1@uni.edu")).json()
    comment = client.post(
        f"/api/documents/{doc['doc_id']}/comments",
        json={"comment": "first pass"},
        headers=auth_headers(client, "advisor@uni.edu"),
    ).json()
    url = f"/api/document-comments/{comment['comment_id']}"

    assert client.put(url, json={"comment": "edited"}, headers=auth_headers(client, "officer@uni.edu")).status_code == 403
    edited = client.put(url, json={"comment": "second pass"}, headers=auth_headers(client, "advisor@uni.edu"))
    assert edited.json()["comment"] == "second pass"
    assert client.delete(url, headers=auth_headers(client, "s1@uni.edu")).status_code == 403
    assert client.delete(url, headers=auth_headers(client, "advisor@uni.edu")).status_code == 200


def test_project_comment_thread(client, seed_project):
    url = f"/api/projects/{seed_project.project_id}/comments"
    created = client.post(url, json={"comment": "Kickoff on Monday"}, headers=auth_headers(client, "officer@uni.edu"))
    assert created.status_code == 201
    assert created.json()["project_id"] == seed_project.project_id

    # Readable by any signed-in account, writable only with project access.
    outsider = auth_headers(client, "s3@uni.edu")
    assert [c["comment"] for c in client.get(url, headers=outsider).json()] == ["Kickoff on Monday"]
    assert client.post(url, json={"comment": "me too"}, headers=outsider).status_code == 403

    comment_url = f"/api/project-comments/{created.json()['comment_id']}"
    assert client.delete(comment_url, headers=auth_headers(client, "officer2@uni.edu")).status_code == 403
    assert client.put(comment_url, json={"comment": "Kickoff moved"}, headers=auth_headers(client, "officer@uni.edu")).status_code == 200
    assert client.delete(comment_url, headers=auth_headers(client, "officer@uni.edu")).status_code == 200


def test_empty_comment_rejected(client, seed_project):
    resp = client.post(
        f"/api/projects/{seed_project.project_id}/comments",
        json={"comment": ""},
        headers=auth_headers(client, "s1@uni.edu"),
    )
    assert resp.status_code == 422
