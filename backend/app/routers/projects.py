"""Projects API router. Projects, student membership and phase progress."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.models.enums import ProjectStatus
from app.schemas.project import (
    ProjectCreate, ProjectUpdate, ProjectOut, ProjectProgressOut,
    ProjectStudentCreate, ProjectStudentMove, ProjectStudentOut,
)
from app.services import project_service
from app.middleware.auth_middleware import get_current_user
from app.models.user import User

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=List[ProjectOut])
def list_projects(
    status: Optional[ProjectStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return project_service.list_projects(db, current_user, status)


@router.post("", response_model=ProjectOut, status_code=201)
def create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return project_service.create_project(db, data, current_user)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return project_service.get_accessible_project(db, project_id, current_user)


@router.put("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: int,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return project_service.update_project(db, project_id, data, current_user)


@router.get("/{project_id}/progress", response_model=ProjectProgressOut)
def get_progress(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return project_service.get_progress(db, project_id, current_user)


@router.get("/{project_id}/students", response_model=List[ProjectStudentOut])
def list_students(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return project_service.list_students(db, project_id, current_user)


@router.post("/{project_id}/students", response_model=ProjectStudentOut, status_code=201)
def add_student(
    project_id: int,
    data: ProjectStudentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return project_service.add_student(db, project_id, data, current_user)


@router.put("/{project_id}/students/{student_id}", response_model=ProjectStudentOut)
def move_student(
    project_id: int,
    student_id: int,
    data: ProjectStudentMove,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return project_service.move_student(db, project_id, student_id, data, current_user)


@router.delete("/{project_id}/students/{student_id}")
def remove_student(
    project_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project_service.remove_student(db, project_id, student_id, current_user)
    return {"message": "Student removed from project."}
