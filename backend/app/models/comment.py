"""Comment models. Document-scoped and project-level threads are separate tables."""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class DocumentComment(Base):
    __tablename__ = "document_comment"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    doc_id = Column(Integer, ForeignKey("document.doc_id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    document = relationship("Document", back_populates="comments")
    author = relationship("User")

    __table_args__ = (
        Index("idx_document_comment_doc", "doc_id", "created_at"),
    )

    @property
    def author_name(self):
        return self.author.full_name if self.author else None


class ProjectComment(Base):
    __tablename__ = "project_comment"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="comments")
    author = relationship("User")

    __table_args__ = (
        Index("idx_project_comment_project", "project_id", "created_at"),
    )

    @property
    def author_name(self):
        return self.author.full_name if self.author else None
