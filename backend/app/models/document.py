from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import DocumentStatus, Phase, enum_type


class Document(Base):
    __tablename__ = "document"

    doc_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    phase = Column(enum_type(Phase, "fyp_phase"), nullable=False)
    title = Column(String(200), nullable=False)
    file_name = Column(String(255))
    file_path = Column(String(500))  # blob key inside the documents bucket
    submitted_by = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    status = Column(enum_type(DocumentStatus, "document_status"), nullable=False, default=DocumentStatus.PENDING)
    reviewed_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    advisor_feedback = Column(Text)
    submitted_at = Column(DateTime, server_default=func.now())
    reviewed_at = Column(DateTime)

    project = relationship("Project", back_populates="documents")
    submitter = relationship("User", foreign_keys=[submitted_by], back_populates="submitted_documents")
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    comments = relationship("DocumentComment", back_populates="document", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_document_project", "project_id", "phase"),
        Index("idx_document_submitter", "submitted_by"),
    )

    @property
    def has_file(self):
        return bool(self.file_path)

    @property
    def submitter_name(self):
        return self.submitter.full_name if self.submitter else None
