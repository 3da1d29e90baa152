from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.models.enums import Phase
from app.schemas.deadline import PhaseDeadlineCreate, PhaseDeadlineOut, PhaseDeadlineUpdate
from app.services import deadline_service
from app.middleware.auth_middleware import get_current_user
from app.models.user import User

router = APIRouter(prefix="/api/projects/{project_id}/deadlines", tags=["deadlines"])


@router.get("", response_model=List[PhaseDeadlineOut])
def list_deadlines(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return deadline_service.list_deadlines(db, project_id, current_user)


@router.post("", response_model=PhaseDeadlineOut, status_code=201)
def create_deadline(
    project_id: int,
    data: PhaseDeadlineCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return deadline_service.create_deadline(db, project_id, data, current_user)


@router.put("/{phase}", response_model=PhaseDeadlineOut)
def set_deadline(
    project_id: int,
    phase: Phase,
    data: PhaseDeadlineUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return deadline_service.set_deadline(db, project_id, phase, data, current_user)


@router.delete("/{phase}")
def delete_deadline(
    project_id: int,
    phase: Phase,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deadline_service.delete_deadline(db, project_id, phase, current_user)
    return {"message": "Deadline removed."}
