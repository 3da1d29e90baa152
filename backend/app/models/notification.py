"""SQLAlchemy model for per-recipient notifications."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import NotificationType, Role, enum_type


class Notification(Base):
    __tablename__ = "notification"

    noti_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    noti_type = Column(
        enum_type(NotificationType, "notification_type"),
        nullable=False,
        default=NotificationType.SYSTEM_ANNOUNCEMENT,
    )
    target_role = Column(enum_type(Role, "user_role"), nullable=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="notifications")

    __table_args__ = (
        Index("idx_notification_user", "user_id", "is_read", "created_at"),
    )
