"""Pydantic schemas for document and project comment threads."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CommentCreate(BaseModel):
    comment: str = Field(min_length=1)


class CommentUpdate(BaseModel):
    comment: str = Field(min_length=1)


class DocumentCommentOut(BaseModel):
    comment_id: int
    doc_id: int
    author_id: int
    author_name: Optional[str] = None
    comment: str
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ProjectCommentOut(BaseModel):
    comment_id: int
    project_id: int
    author_id: int
    author_name: Optional[str] = None
    comment: str
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
