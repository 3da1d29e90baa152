"""Project service layer. Projects, student enrollment and progress summaries."""

from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.deadline import PhaseDeadline
from app.models.document import Document
from app.models.enums import DocumentStatus, Phase, ProjectStatus, Role
from app.models.project import Project, ProjectStudent
from app.models.user import User
from app.schemas.project import ProjectCreate, ProjectStudentCreate, ProjectStudentMove, ProjectUpdate
from app.services import dispatch_service
from app.services.dispatch_service import DomainEvent, EventKind
from app.utils.permissions import (
    can_create_project,
    can_manage_membership,
    can_reassign_project,
    can_update_project,
    can_view_membership,
    enrolled_project_ids,
    has_project_access,
    is_project_officer,
)

FORBIDDEN = "You do not have permission to perform this action."


def _forbidden() -> HTTPException:
    return HTTPException(status_code=403, detail=FORBIDDEN)


def get_project_row(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.project_id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found.")
    return project


def get_accessible_project(db: Session, project_id: int, current_user: User) -> Project:
    project = get_project_row(db, project_id)
    if not has_project_access(db, project, current_user):
        raise _forbidden()
    return project


def list_projects(db: Session, current_user: User, status: Optional[ProjectStatus] = None) -> List[Project]:
    q = db.query(Project)
    if not is_project_officer(current_user):
        member_ids = enrolled_project_ids(db, current_user.user_id)
        clauses = [
            Project.advisor_id == current_user.user_id,
            Project.project_officer_id == current_user.user_id,
        ]
        if member_ids:
            clauses.append(Project.project_id.in_(member_ids))
        q = q.filter(or_(*clauses))
    if status is not None:
        q = q.filter(Project.status == status)
    return q.order_by(Project.created_at.desc(), Project.project_id.desc()).all()


def _require_user_with_role(db: Session, user_id: int, role: Role, label: str) -> User:
    user = db.query(User).filter(User.user_id == user_id, User.is_active == True).first()  # noqa: E712
    if not user or user.role != role:
        raise HTTPException(status_code=400, detail=f"{label} must reference an active {role.value} account.")
    return user


def create_project(db: Session, data: ProjectCreate, current_user: User) -> Project:
    if not can_create_project(current_user):
        raise _forbidden()

    student_ids = list(dict.fromkeys(data.student_ids))
    if not settings.MIN_STUDENTS_PER_PROJECT <= len(student_ids) <= settings.MAX_STUDENTS_PER_PROJECT:
        raise HTTPException(
            status_code=400,
            detail=(
                f"A project needs between {settings.MIN_STUDENTS_PER_PROJECT} and "
                f"{settings.MAX_STUDENTS_PER_PROJECT} students."
            ),
        )
    for student_id in student_ids:
        _require_user_with_role(db, student_id, Role.STUDENT, "student_ids")
    if data.advisor_id is not None:
        _require_user_with_role(db, data.advisor_id, Role.ADVISOR, "advisor_id")

    project = Project(
        title=data.title.strip(),
        description=data.description,
        status=data.status,
        advisor_id=data.advisor_id,
        project_officer_id=current_user.user_id,
    )
    db.add(project)
    db.flush()
    for student_id in student_ids:
        db.add(ProjectStudent(project_id=project.project_id, student_id=student_id))
    db.flush()

    dispatch_service.publish(db, DomainEvent(EventKind.PROJECT_CREATED, current_user, project))
    db.commit()
    db.refresh(project)
    return project


def update_project(db: Session, project_id: int, data: ProjectUpdate, current_user: User) -> Project:
    project = get_project_row(db, project_id)
    if not can_update_project(project, current_user):
        raise _forbidden()

    payload = data.model_dump(exclude_unset=True)
    reassigning = {"advisor_id", "project_officer_id"} & set(payload)
    if reassigning and not can_reassign_project(current_user):
        raise _forbidden()
    if payload.get("advisor_id") is not None:
        _require_user_with_role(db, payload["advisor_id"], Role.ADVISOR, "advisor_id")
    if payload.get("project_officer_id") is not None:
        _require_user_with_role(db, payload["project_officer_id"], Role.PROJECT_OFFICER, "project_officer_id")
    for key in ("title", "status"):
        if key in payload and payload[key] is None:
            payload.pop(key)

    previous_status = project.status
    previous_advisor = project.advisor_id
    for k, v in payload.items():
        setattr(project, k, v)
    db.flush()

    if project.advisor_id is not None and project.advisor_id != previous_advisor:
        dispatch_service.publish(db, DomainEvent(EventKind.ADVISOR_ASSIGNED, current_user, project))
    if project.status != previous_status:
        dispatch_service.publish(db, DomainEvent(EventKind.PROJECT_STATUS_CHANGED, current_user, project))
    db.commit()
    db.refresh(project)
    return project


def get_progress(db: Session, project_id: int, current_user: User) -> dict:
    get_accessible_project(db, project_id, current_user)
    deadlines = {
        Phase(d.phase): d.deadline_date
        for d in db.query(PhaseDeadline).filter(PhaseDeadline.project_id == project_id).all()
    }
    documents = (
        db.query(Document)
        .filter(Document.project_id == project_id)
        .order_by(Document.submitted_at.asc(), Document.doc_id.asc())
        .all()
    )
    phases = []
    approved_phases = 0
    for phase in Phase:
        phase_docs = [d for d in documents if d.phase == phase]
        if any(d.status == DocumentStatus.APPROVED for d in phase_docs):
            approved_phases += 1
        phases.append({
            "phase": phase,
            "phase_title": phase.display_name,
            "deadline_date": deadlines.get(phase),
            "latest_status": phase_docs[-1].status if phase_docs else None,
            "document_count": len(phase_docs),
        })
    return {
        "project_id": project_id,
        "progress_rate": int(approved_phases / len(Phase) * 100),
        "phases": phases,
    }


def progress_rate(db: Session, project_id: int) -> int:
    approved = {
        Phase(row[0])
        for row in db.query(Document.phase)
        .filter(Document.project_id == project_id, Document.status == DocumentStatus.APPROVED)
        .all()
    }
    return int(len(approved) / len(Phase) * 100)


def list_students(db: Session, project_id: int, current_user: User) -> List[ProjectStudent]:
    project = get_accessible_project(db, project_id, current_user)
    members = (
        db.query(ProjectStudent)
        .filter(ProjectStudent.project_id == project_id)
        .order_by(ProjectStudent.member_id.asc())
        .all()
    )
    return [m for m in members if can_view_membership(project, m, current_user)]


def _student_count(db: Session, project_id: int) -> int:
    return db.query(ProjectStudent).filter(ProjectStudent.project_id == project_id).count()


def _ensure_capacity(db: Session, project_id: int) -> None:
    if _student_count(db, project_id) >= settings.MAX_STUDENTS_PER_PROJECT:
        raise HTTPException(
            status_code=409,
            detail=f"A project can have at most {settings.MAX_STUDENTS_PER_PROJECT} students.",
        )


def _flush_membership(db: Session, detail: str) -> None:
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=detail)


def _get_membership(db: Session, project_id: int, student_id: int) -> ProjectStudent:
    member = db.query(ProjectStudent).filter(
        ProjectStudent.project_id == project_id,
        ProjectStudent.student_id == student_id,
    ).first()
    if not member:
        raise HTTPException(status_code=404, detail="Student is not enrolled in this project.")
    return member


def add_student(db: Session, project_id: int, data: ProjectStudentCreate, current_user: User) -> ProjectStudent:
    if not can_manage_membership(current_user):
        raise _forbidden()
    project = get_project_row(db, project_id)
    _require_user_with_role(db, data.student_id, Role.STUDENT, "student_id")
    existing = db.query(ProjectStudent).filter(
        ProjectStudent.project_id == project_id,
        ProjectStudent.student_id == data.student_id,
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="Student is already enrolled in this project.")
    _ensure_capacity(db, project_id)

    member = ProjectStudent(project_id=project_id, student_id=data.student_id)
    db.add(member)
    _flush_membership(db, "Student is already enrolled in this project.")
    dispatch_service.publish(
        db,
        DomainEvent(EventKind.STUDENTS_ASSIGNED, current_user, project, student_ids=[data.student_id]),
    )
    db.commit()
    db.refresh(member)
    return member


def move_student(
    db: Session,
    project_id: int,
    student_id: int,
    data: ProjectStudentMove,
    current_user: User,
) -> ProjectStudent:
    if not can_manage_membership(current_user):
        raise _forbidden()
    member = _get_membership(db, project_id, student_id)
    if data.project_id == project_id:
        return member
    target = get_project_row(db, data.project_id)
    already = db.query(ProjectStudent).filter(
        ProjectStudent.project_id == target.project_id,
        ProjectStudent.student_id == student_id,
    ).first()
    if already:
        raise HTTPException(status_code=409, detail="Student is already enrolled in the target project.")
    _ensure_capacity(db, target.project_id)

    member.project = target
    _flush_membership(db, "Student is already enrolled in the target project.")
    dispatch_service.publish(
        db,
        DomainEvent(EventKind.STUDENTS_ASSIGNED, current_user, target, student_ids=[student_id]),
    )
    db.commit()
    db.refresh(member)
    return member


def remove_student(db: Session, project_id: int, student_id: int, current_user: User) -> None:
    if not can_manage_membership(current_user):
        raise _forbidden()
    get_project_row(db, project_id)
    member = _get_membership(db, project_id, student_id)
    db.delete(member)
    db.commit()
