"""Notifications API router. Personal feed, read state and role broadcast."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.notification import NotificationOut, RoleBroadcastRequest, RoleBroadcastResult, UnreadCountOut
from app.services import notification_service
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.utils.permissions import can_broadcast

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationOut])
def list_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.get_notifications(db, current_user.user_id, unread_only)


@router.get("/unread-count", response_model=UnreadCountOut)
def unread_count(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return UnreadCountOut(unread=notification_service.count_unread(db, current_user.user_id))


@router.patch("/{noti_id}/read", response_model=NotificationOut)
def mark_read(noti_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return notification_service.mark_read(db, noti_id, current_user.user_id)


@router.post("/read-all")
def mark_all_read(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    updated = notification_service.mark_all_read(db, current_user.user_id)
    return {"message": "All notifications marked as read.", "updated": updated}


@router.post("/broadcast", response_model=RoleBroadcastResult)
def broadcast(
    data: RoleBroadcastRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not can_broadcast(current_user):
        raise HTTPException(status_code=403, detail="You do not have permission to perform this action.")
    count = notification_service.notify_role(db, data.role, data.title, data.message, data.noti_type)
    return RoleBroadcastResult(role=data.role, count=count)
