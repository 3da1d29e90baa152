"""Notification feed service layer. Owns every write to the notification table."""

import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.config import settings
from app.models.enums import NotificationType, Role
from app.models.notification import Notification
from app.models.user import User
from app.services import realtime_service
from app.services.realtime_service import RealtimeEventType

logger = logging.getLogger(__name__)


def get_notifications(db: Session, user_id: int, unread_only: bool = False) -> List[Notification]:
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.is_read == False)  # noqa: E712
    return (
        q.order_by(Notification.created_at.desc(), Notification.noti_id.desc())
        .limit(settings.NOTIFICATION_FEED_LIMIT)
        .all()
    )


def count_unread(db: Session, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False,  # noqa: E712
    ).count()


def mark_read(db: Session, noti_id: int, user_id: int) -> Notification:
    noti = db.query(Notification).filter(Notification.noti_id == noti_id).first()
    if not noti:
        raise HTTPException(status_code=404, detail="Notification not found.")
    if noti.user_id != user_id:
        raise HTTPException(status_code=403, detail="You do not have permission to perform this action.")
    if not noti.is_read:
        noti.is_read = True
        db.commit()
        db.refresh(noti)
    return noti


def mark_all_read(db: Session, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False,  # noqa: E712
    ).update({"is_read": True}, synchronize_session=False)
    db.commit()
    return updated


def create_notification(
    db: Session,
    user_id: int,
    title: str,
    message: str,
    noti_type: NotificationType = NotificationType.SYSTEM_ANNOUNCEMENT,
    target_role: Optional[Role] = None,
    commit: bool = True,
) -> Notification:
    noti = Notification(
        user_id=user_id,
        noti_type=noti_type,
        target_role=target_role,
        title=title,
        message=message,
        is_read=False,
    )
    db.add(noti)
    db.flush()
    realtime_service.stage(
        db,
        RealtimeEventType.NOTIFICATION_CREATED,
        [user_id],
        {
            "noti_id": noti.noti_id,
            "noti_type": NotificationType(noti_type).value,
            "title": title,
            "message": message,
        },
    )
    if commit:
        db.commit()
        db.refresh(noti)
    return noti


def active_user_ids_with_role(db: Session, role: Role) -> List[int]:
    return [
        int(row[0])
        for row in db.query(User.user_id)
        .filter(User.role == role, User.is_active == True)  # noqa: E712
        .order_by(User.user_id.asc())
        .all()
    ]


def notify_role(
    db: Session,
    role: Role,
    title: str,
    message: str,
    noti_type: NotificationType = NotificationType.SYSTEM_ANNOUNCEMENT,
    commit: bool = True,
) -> int:
    # Membership is read at dispatch time; accounts created later are not backfilled.
    count = 0
    for user_id in active_user_ids_with_role(db, role):
        create_notification(db, user_id, title, message, noti_type, target_role=role, commit=False)
        count += 1
    if commit:
        db.commit()
    logger.info("role broadcast to %s: %d notification(s)", Role(role).value, count)
    return count
