"""Pydantic schemas for phase chat messages."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.enums import Phase, Role


class ChatMessageCreate(BaseModel):
    message: str = Field(min_length=1)


class ChatMessageOut(BaseModel):
    message_id: int
    project_id: int
    phase: Phase
    author_id: int
    author_name: Optional[str] = None
    author_role: Optional[Role] = None
    message: str
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
