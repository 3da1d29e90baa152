"""Pydantic schemas for account requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.enums import Role


class UserBase(BaseModel):
    email: str
    full_name: str
    role: Role


class UserOut(UserBase):
    user_id: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    # No role field; role changes go through RoleUpdate.
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = None


class RoleUpdate(BaseModel):
    role: Role


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    # Only read when the login creates the profile.
    full_name: Optional[str] = None
    role: Optional[Role] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
    created: bool = False
