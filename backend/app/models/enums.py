"""Closed value sets shared by the ORM models and the request schemas."""

from enum import Enum

from sqlalchemy import Enum as SAEnum


class Role(str, Enum):
    STUDENT = "student"
    ADVISOR = "advisor"
    PROJECT_OFFICER = "project_officer"


class Phase(str, Enum):
    PHASE1 = "phase1"
    PHASE2 = "phase2"
    PHASE3 = "phase3"
    PHASE4 = "phase4"

    @property
    def label(self) -> str:
        return f"Phase {self.value[-1]}"

    @property
    def display_name(self) -> str:
        return PHASE_TITLES[self]


PHASE_TITLES = {
    Phase.PHASE1: "Project Proposal",
    Phase.PHASE2: "Literature Review",
    Phase.PHASE3: "Implementation",
    Phase.PHASE4: "Final Report",
}


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    SUSPENDED = "suspended"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    PROJECT_ASSIGNMENT = "project_assignment"
    DOCUMENT_SUBMISSION = "document_submission"
    DOCUMENT_REVIEW = "document_review"
    DEADLINE_REMINDER = "deadline_reminder"
    PROJECT_UPDATE = "project_update"
    SYSTEM_ANNOUNCEMENT = "system_announcement"


def enum_type(enum_cls, name: str) -> SAEnum:
    # Store the lowercase values, not the member names.
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=False,
        validate_strings=True,
        values_callable=lambda members: [m.value for m in members],
    )
