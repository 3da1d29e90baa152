"""Dashboard service layer. Builds the per-role landing summaries."""

from datetime import date
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.deadline import PhaseDeadline
from app.models.document import Document
from app.models.enums import DocumentStatus, Phase, ProjectStatus
from app.models.project import Project
from app.models.user import User
from app.services import notification_service, project_service
from app.utils.permissions import is_advisor, is_project_officer


def _pending_count(db: Session, project_ids: List[int]) -> int:
    if not project_ids:
        return 0
    return db.query(Document).filter(
        Document.project_id.in_(project_ids),
        Document.status == DocumentStatus.PENDING,
    ).count()


def _next_deadline(db: Session, project_id: int, today: date):
    return (
        db.query(PhaseDeadline)
        .filter(PhaseDeadline.project_id == project_id, PhaseDeadline.deadline_date >= today)
        .order_by(PhaseDeadline.deadline_date.asc())
        .first()
    )


def _project_card(db: Session, project: Project, today: date) -> dict:
    upcoming = _next_deadline(db, project.project_id, today)
    return {
        "project_id": project.project_id,
        "title": project.title,
        "status": project.status,
        "progress_rate": project_service.progress_rate(db, project.project_id),
        "pending_documents": _pending_count(db, [project.project_id]),
        "next_deadline_phase": Phase(upcoming.phase) if upcoming else None,
        "next_deadline_date": upcoming.deadline_date if upcoming else None,
    }


def get_dashboard(db: Session, current_user: User, today: date = None) -> dict:
    today = today or date.today()
    projects = project_service.list_projects(db, current_user)
    summary = {
        "role": current_user.role,
        "unread_notifications": notification_service.count_unread(db, current_user.user_id),
        "projects": [],
        "pending_reviews": 0,
        "projects_by_status": {},
    }

    if is_project_officer(current_user):
        counts = {
            ProjectStatus(status).value: int(total)
            for status, total in db.query(Project.status, func.count(Project.project_id)).group_by(Project.status).all()
        }
        summary["projects_by_status"] = {status.value: counts.get(status.value, 0) for status in ProjectStatus}
        summary["pending_reviews"] = db.query(Document).filter(
            Document.status == DocumentStatus.PENDING
        ).count()
        return summary

    summary["projects"] = [_project_card(db, p, today) for p in projects]
    if is_advisor(current_user):
        advised = [p.project_id for p in projects if p.advisor_id == current_user.user_id]
        summary["pending_reviews"] = _pending_count(db, advised)
    return summary
