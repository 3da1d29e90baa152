"""Pydantic schemas for general resources."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ResourceUpdate(BaseModel):
    file_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class ResourceOut(BaseModel):
    resource_id: int
    uploaded_by: int
    uploader_name: Optional[str] = None
    file_name: str
    file_url: str
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
