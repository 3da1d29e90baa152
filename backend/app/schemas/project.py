"""Pydantic schemas for projects and their student enrollment."""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from app.models.enums import DocumentStatus, Phase, ProjectStatus


class ProjectBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None


class ProjectCreate(ProjectBase):
    status: ProjectStatus = ProjectStatus.ACTIVE
    advisor_id: Optional[int] = None
    student_ids: List[int] = Field(default_factory=list)


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    advisor_id: Optional[int] = None
    project_officer_id: Optional[int] = None


class ProjectOut(ProjectBase):
    project_id: int
    status: ProjectStatus
    advisor_id: Optional[int]
    advisor_name: Optional[str] = None
    project_officer_id: Optional[int]
    student_ids: List[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ProjectStudentCreate(BaseModel):
    student_id: int


class ProjectStudentMove(BaseModel):
    project_id: int


class ProjectStudentOut(BaseModel):
    member_id: int
    project_id: int
    student_id: int
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PhaseProgressOut(BaseModel):
    phase: Phase
    phase_title: str
    deadline_date: Optional[date] = None
    latest_status: Optional[DocumentStatus] = None
    document_count: int = 0


class ProjectProgressOut(BaseModel):
    project_id: int
    progress_rate: int
    phases: List[PhaseProgressOut]
