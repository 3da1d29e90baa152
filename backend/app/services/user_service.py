"""User service layer. Account reads, self-service profile edits and role changes."""

import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.enums import Role
from app.models.user import User
from app.schemas.user import ProfileUpdate, RoleUpdate
from app.utils.permissions import can_change_role, can_update_profile

logger = logging.getLogger(__name__)


def list_users(db: Session, role: Optional[Role] = None) -> List[User]:
    q = db.query(User).filter(User.is_active == True)  # noqa: E712
    if role is not None:
        q = q.filter(User.role == role)
    return q.order_by(User.full_name.asc(), User.user_id.asc()).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return user


def update_profile(db: Session, user_id: int, data: ProfileUpdate, current_user: User) -> User:
    user = get_user(db, user_id)
    if not can_update_profile(user, current_user):
        raise HTTPException(status_code=403, detail="You do not have permission to perform this action.")
    payload = data.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in payload:
        email = payload["email"].strip().lower()
        taken = db.query(User).filter(User.email == email, User.user_id != user.user_id).first()
        if taken:
            raise HTTPException(status_code=409, detail="This email is already in use.")
        payload["email"] = email
    if "full_name" in payload:
        payload["full_name"] = payload["full_name"].strip()
    for k, v in payload.items():
        setattr(user, k, v)
    db.commit()
    db.refresh(user)
    return user


def change_role(db: Session, user_id: int, data: RoleUpdate, current_user: User) -> User:
    if not can_change_role(current_user):
        raise HTTPException(status_code=403, detail="You do not have permission to perform this action.")
    user = get_user(db, user_id)
    if user.role != data.role:
        logger.info(
            "user %s changed role of %s: %s -> %s",
            current_user.user_id,
            user.user_id,
            Role(user.role).value,
            data.role.value,
        )
        user.role = data.role
        db.commit()
        db.refresh(user)
    return user
