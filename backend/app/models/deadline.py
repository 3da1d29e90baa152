"""SQLAlchemy model for per-phase project deadlines."""

from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.enums import Phase, enum_type


class PhaseDeadline(Base):
    __tablename__ = "phase_deadline"

    deadline_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    phase = Column(enum_type(Phase, "fyp_phase"), nullable=False)
    deadline_date = Column(Date, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="deadlines")

    __table_args__ = (
        UniqueConstraint("project_id", "phase", name="uq_phase_deadline"),
    )
