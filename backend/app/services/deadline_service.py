"""Phase deadline service layer."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.deadline import PhaseDeadline
from app.models.enums import Phase
from app.models.user import User
from app.schemas.deadline import PhaseDeadlineCreate, PhaseDeadlineUpdate
from app.services import dispatch_service
from app.services.dispatch_service import DomainEvent, EventKind
from app.services.project_service import FORBIDDEN, get_accessible_project, get_project_row
from app.utils.permissions import can_manage_deadline


def list_deadlines(db: Session, project_id: int, current_user: User) -> List[PhaseDeadline]:
    get_accessible_project(db, project_id, current_user)
    rows = db.query(PhaseDeadline).filter(PhaseDeadline.project_id == project_id).all()
    order = list(Phase)
    return sorted(rows, key=lambda d: order.index(Phase(d.phase)))


def _find(db: Session, project_id: int, phase: Phase):
    return db.query(PhaseDeadline).filter(
        PhaseDeadline.project_id == project_id,
        PhaseDeadline.phase == phase,
    ).first()


def _managed_project(db: Session, project_id: int, current_user: User):
    project = get_project_row(db, project_id)
    if not can_manage_deadline(project, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    return project


DUPLICATE_DEADLINE = "A deadline for this phase already exists."


def _flush_or_conflict(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=DUPLICATE_DEADLINE)


def _commit_or_conflict(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=DUPLICATE_DEADLINE)


def create_deadline(db: Session, project_id: int, data: PhaseDeadlineCreate, current_user: User) -> PhaseDeadline:
    project = _managed_project(db, project_id, current_user)
    if _find(db, project_id, data.phase):
        raise HTTPException(status_code=409, detail=DUPLICATE_DEADLINE)
    deadline = PhaseDeadline(project_id=project_id, phase=data.phase, deadline_date=data.deadline_date)
    db.add(deadline)
    _flush_or_conflict(db)
    dispatch_service.publish(db, DomainEvent(EventKind.DEADLINE_SET, current_user, project, deadline=deadline))
    _commit_or_conflict(db)
    db.refresh(deadline)
    return deadline


def set_deadline(
    db: Session,
    project_id: int,
    phase: Phase,
    data: PhaseDeadlineUpdate,
    current_user: User,
) -> PhaseDeadline:
    project = _managed_project(db, project_id, current_user)
    deadline = _find(db, project_id, phase)
    if deadline is None:
        deadline = PhaseDeadline(project_id=project_id, phase=phase, deadline_date=data.deadline_date)
        db.add(deadline)
    else:
        deadline.deadline_date = data.deadline_date
    _flush_or_conflict(db)
    dispatch_service.publish(db, DomainEvent(EventKind.DEADLINE_SET, current_user, project, deadline=deadline))
    _commit_or_conflict(db)
    db.refresh(deadline)
    return deadline


def delete_deadline(db: Session, project_id: int, phase: Phase, current_user: User) -> None:
    _managed_project(db, project_id, current_user)
    deadline = _find(db, project_id, phase)
    if not deadline:
        raise HTTPException(status_code=404, detail="Deadline not found.")
    db.delete(deadline)
    db.commit()
