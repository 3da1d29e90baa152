"""SQLAlchemy model for user accounts (profiles)."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import Role, enum_type


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(100), nullable=False, default="New User")
    role = Column(enum_type(Role, "user_role"), nullable=False, default=Role.STUDENT)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    project_memberships = relationship(
        "ProjectStudent", back_populates="student", cascade="all, delete-orphan"
    )
    advised_projects = relationship(
        "Project", foreign_keys="Project.advisor_id", back_populates="advisor"
    )
    managed_projects = relationship(
        "Project", foreign_keys="Project.project_officer_id", back_populates="project_officer"
    )
    submitted_documents = relationship(
        "Document", foreign_keys="Document.submitted_by", back_populates="submitter"
    )
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    resources = relationship("Resource", back_populates="uploader", cascade="all, delete-orphan")
