import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.models.project import Project, ProjectStudent

TEST_DB_URL = "sqlite:///./test_fyp.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def storage_dir(tmp_path, monkeypatch):
    root = tmp_path / "storage"
    root.mkdir()
    monkeypatch.setattr(settings, "STORAGE_DIR", str(root))
    return root


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "s1": User(email="s1@uni.edu", full_name="Student One", role="student"),
        "s2": User(email="s2@uni.edu", full_name="Student Two", role="student"),
        "s3": User(email="s3@uni.edu", full_name="Student Three", role="student"),
        "advisor": User(email="advisor@uni.edu", full_name="Dr. Advisor", role="advisor"),
        "advisor2": User(email="advisor2@uni.edu", full_name="Dr. Other", role="advisor"),
        "officer": User(email="officer@uni.edu", full_name="Officer One", role="project_officer"),
        "officer2": User(email="officer2@uni.edu", full_name="Officer Two", role="project_officer"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_project(db, seed_users):
    project = Project(
        title="Smart Irrigation",
        description="Soil moisture driven watering",
        status="active",
        advisor_id=seed_users["advisor"].user_id,
        project_officer_id=seed_users["officer"].user_id,
    )
    db.add(project)
    db.flush()
    for key in ("s1", "s2"):
        db.add(ProjectStudent(project_id=project.project_id, student_id=seed_users[key].user_id))
    db.commit()
    db.refresh(project)
    return project


@pytest.fixture
def advisorless_project(db, seed_users):
    project = Project(
        title="Unassigned Capstone",
        status="active",
        advisor_id=None,
        project_officer_id=seed_users["officer"].user_id,
    )
    db.add(project)
    db.flush()
    for key in ("s1", "s2"):
        db.add(ProjectStudent(project_id=project.project_id, student_id=seed_users[key].user_id))
    db.commit()
    db.refresh(project)
    return project


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}


def upload_document(client, project_id: int, headers: dict, phase: str = "phase1", title: str = "Proposal"):
    return client.post(
        f"/api/projects/{project_id}/documents",
        data={"phase": phase, "title": title},
        files={"file": ("proposal.pdf", b"%PDF-1.4 test", "application/pdf")},
        headers=headers,
    )
