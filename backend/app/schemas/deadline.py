"""Pydantic schemas for phase deadlines."""

from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime

from app.models.enums import Phase


class PhaseDeadlineCreate(BaseModel):
    phase: Phase
    deadline_date: date


class PhaseDeadlineUpdate(BaseModel):
    deadline_date: date


class PhaseDeadlineOut(BaseModel):
    deadline_id: int
    project_id: int
    phase: Phase
    deadline_date: date
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
