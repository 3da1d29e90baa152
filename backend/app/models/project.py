"""SQLAlchemy models for projects and their student enrollment."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import ProjectStatus, enum_type


class Project(Base):
    __tablename__ = "projects"

    project_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(enum_type(ProjectStatus, "project_status"), nullable=False, default=ProjectStatus.ACTIVE)
    advisor_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    project_officer_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    advisor = relationship("User", foreign_keys=[advisor_id], back_populates="advised_projects")
    project_officer = relationship("User", foreign_keys=[project_officer_id], back_populates="managed_projects")
    students = relationship("ProjectStudent", back_populates="project", cascade="all, delete-orphan")
    deadlines = relationship("PhaseDeadline", back_populates="project", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="project", cascade="all, delete-orphan")
    chat_messages = relationship("ChatMessage", back_populates="project", cascade="all, delete-orphan")
    comments = relationship("ProjectComment", back_populates="project", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_project_advisor", "advisor_id"),
        Index("idx_project_officer", "project_officer_id"),
    )

    @property
    def advisor_name(self):
        return self.advisor.full_name if self.advisor else None

    @property
    def student_ids(self):
        return [m.student_id for m in self.students]


class ProjectStudent(Base):
    __tablename__ = "project_student"

    member_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="students")
    student = relationship("User", back_populates="project_memberships")

    __table_args__ = (
        UniqueConstraint("project_id", "student_id", name="uq_project_student"),
        Index("idx_project_student_student", "student_id"),
    )

    @property
    def student_name(self):
        return self.student.full_name if self.student else None

    @property
    def student_email(self):
        return self.student.email if self.student else None
