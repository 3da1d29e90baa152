"""Pydantic schemas for phase documents and their review."""

from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

from app.models.enums import DocumentStatus, Phase


class DocumentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phase: Optional[Phase] = None


class DocumentReview(BaseModel):
    status: Literal["approved", "rejected"]
    feedback: Optional[str] = None


class DocumentOut(BaseModel):
    doc_id: int
    project_id: int
    phase: Phase
    title: str
    file_name: Optional[str] = None
    has_file: bool = False
    submitted_by: int
    submitter_name: Optional[str] = None
    status: DocumentStatus
    reviewed_by: Optional[int] = None
    advisor_feedback: Optional[str] = None
    submitted_at: Optional[datetime]
    reviewed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
