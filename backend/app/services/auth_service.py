"""Auth service layer. Issues tokens and creates the profile on first login."""

import logging
from datetime import datetime, timedelta
from typing import Tuple

from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from app.models.enums import Role
from app.models.user import User
from app.schemas.user import LoginRequest
from app.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_access_token(user_id: int) -> str:
    expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def _normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def mock_sso_login(db: Session, data: LoginRequest) -> Tuple[User, bool]:
    email = _normalize_email(data.email)
    user = db.query(User).filter(User.email == email).first()
    if user:
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="This account is inactive.",
            )
        return user, False

    if not settings.SIGNUP_ENABLED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No active account matches this email.",
        )

    # First login creates the profile row.
    user = User(
        email=email,
        full_name=(data.full_name or "").strip() or "New User",
        role=data.role or Role(settings.DEFAULT_SIGNUP_ROLE),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("created profile %s with role %s", user.user_id, Role(user.role).value)
    return user, True
