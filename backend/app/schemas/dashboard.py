"""Pydantic schemas for the role-specific dashboard summaries."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date

from app.models.enums import Phase, ProjectStatus, Role


class DashboardProject(BaseModel):
    project_id: int
    title: str
    status: ProjectStatus
    progress_rate: int
    pending_documents: int = 0
    next_deadline_phase: Optional[Phase] = None
    next_deadline_date: Optional[date] = None


class DashboardOut(BaseModel):
    role: Role
    unread_notifications: int
    projects: List[DashboardProject] = Field(default_factory=list)
    pending_reviews: int = 0
    projects_by_status: Dict[str, int] = Field(default_factory=dict)
