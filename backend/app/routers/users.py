"""Users API router. Account directory, profile edits and role changes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.enums import Role
from app.models.user import User
from app.schemas.user import ProfileUpdate, RoleUpdate, UserOut
from app.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(
    role: Optional[Role] = None,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return user_service.list_users(db, role)


@router.put("/me", response_model=UserOut)
def update_me(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, current_user.user_id, data, current_user)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), _current_user: User = Depends(get_current_user)):
    return user_service.get_user(db, user_id)


@router.put("/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: int,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.change_role(db, user_id, data, current_user)
