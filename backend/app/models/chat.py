"""SQLAlchemy model for phase-scoped project chat."""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import Phase, enum_type


class ChatMessage(Base):
    __tablename__ = "phase_chat_message"

    message_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    phase = Column(enum_type(Phase, "fyp_phase"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="chat_messages")
    author = relationship("User")

    __table_args__ = (
        Index("idx_chat_project_phase", "project_id", "phase", "created_at"),
    )

    @property
    def author_name(self):
        return self.author.full_name if self.author else None

    @property
    def author_role(self):
        return self.author.role if self.author else None
