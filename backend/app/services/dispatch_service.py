"""Domain-event publication for notification fan-out.

A service that mutates a row builds a :class:`DomainEvent` and calls
:func:`publish` before it commits. The handler registered for the event kind
computes the recipients, and one notification row per recipient is added to
the same session. Nothing is committed here: if dispatch raises, the caller's
transaction (primary change included) is rolled back.

Recipients are de-duplicated per event and the acting user never receives a
notification about their own action.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.models.chat import ChatMessage
from app.models.deadline import PhaseDeadline
from app.models.document import Document
from app.models.enums import DocumentStatus, NotificationType, Phase, ProjectStatus, Role
from app.models.notification import Notification
from app.models.project import Project, ProjectStudent
from app.models.user import User
from app.services import notification_service

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    DOCUMENT_SUBMITTED = "document_submitted"
    DOCUMENT_REVIEWED = "document_reviewed"
    CHAT_MESSAGE_POSTED = "chat_message_posted"
    DEADLINE_SET = "deadline_set"
    PROJECT_CREATED = "project_created"
    STUDENTS_ASSIGNED = "students_assigned"
    ADVISOR_ASSIGNED = "advisor_assigned"
    PROJECT_STATUS_CHANGED = "project_status_changed"


@dataclass
class DomainEvent:
    kind: EventKind
    actor: User
    project: Project
    document: Optional[Document] = None
    chat_message: Optional[ChatMessage] = None
    deadline: Optional[PhaseDeadline] = None
    student_ids: Sequence[int] = field(default_factory=tuple)


@dataclass
class Delivery:
    user_id: int
    title: str
    message: str
    noti_type: NotificationType
    target_role: Optional[Role] = None


Handler = Callable[[Session, DomainEvent], List[Delivery]]
_HANDLERS: Dict[EventKind, Handler] = {}


def handles(kind: EventKind):
    def register(fn: Handler) -> Handler:
        _HANDLERS[kind] = fn
        return fn
    return register


def enrolled_student_ids(db: Session, project_id: int) -> List[int]:
    return [
        int(row[0])
        for row in db.query(ProjectStudent.student_id)
        .filter(ProjectStudent.project_id == project_id)
        .order_by(ProjectStudent.member_id.asc())
        .all()
    ]


def plan(db: Session, event: DomainEvent) -> List[Delivery]:
    handler = _HANDLERS.get(event.kind)
    if handler is None:
        raise ValueError(f"no notification handler registered for {event.kind}")
    seen = {event.actor.user_id}
    deliveries = []
    for delivery in handler(db, event):
        if delivery.user_id in seen:
            continue
        seen.add(delivery.user_id)
        deliveries.append(delivery)
    return deliveries


def publish(db: Session, event: DomainEvent) -> List[Notification]:
    deliveries = plan(db, event)
    created = [
        notification_service.create_notification(
            db,
            d.user_id,
            d.title,
            d.message,
            d.noti_type,
            target_role=d.target_role,
            commit=False,
        )
        for d in deliveries
    ]
    logger.info(
        "dispatched %s for project %s: %d notification(s)",
        event.kind.value,
        event.project.project_id,
        len(created),
    )
    return created


def _officers(db: Session, title: str, message: str, noti_type: NotificationType) -> List[Delivery]:
    return [
        Delivery(user_id, title, message, noti_type, Role.PROJECT_OFFICER)
        for user_id in notification_service.active_user_ids_with_role(db, Role.PROJECT_OFFICER)
    ]


@handles(EventKind.DOCUMENT_SUBMITTED)
def _document_submitted(db: Session, event: DomainEvent) -> List[Delivery]:
    project, document = event.project, event.document
    if project.advisor_id is None:
        return []
    return [
        Delivery(
            project.advisor_id,
            "New Document Submitted",
            f'A student has uploaded "{document.title}" for project "{project.title}" '
            f"and is awaiting your review.",
            NotificationType.DOCUMENT_SUBMISSION,
            Role.ADVISOR,
        )
    ]


@handles(EventKind.DOCUMENT_REVIEWED)
def _document_reviewed(db: Session, event: DomainEvent) -> List[Delivery]:
    project, document = event.project, event.document
    status = DocumentStatus(document.status).value
    deliveries = [
        Delivery(
            document.submitted_by,
            "Document Review Complete",
            f'Your document "{document.title}" has been {status} for project "{project.title}"',
            NotificationType.DOCUMENT_REVIEW,
            Role.STUDENT,
        )
    ]
    reviewer = event.actor.full_name
    if document.status == DocumentStatus.APPROVED:
        deliveries += _officers(
            db,
            "Document Approved",
            f'Document "{document.title}" has been approved by {reviewer} for project "{project.title}"',
            NotificationType.DOCUMENT_REVIEW,
        )
    else:
        deliveries += _officers(
            db,
            "Document Reviewed",
            f'Document "{document.title}" for project "{project.title}" has been {status} by {reviewer}',
            NotificationType.DOCUMENT_REVIEW,
        )
    return deliveries


@handles(EventKind.CHAT_MESSAGE_POSTED)
def _chat_message_posted(db: Session, event: DomainEvent) -> List[Delivery]:
    project, chat = event.project, event.chat_message
    phase = Phase(chat.phase)
    message = f'{event.actor.full_name} sent a message in project "{project.title}" ({phase.label})'
    if project.advisor_id is not None and chat.author_id == project.advisor_id:
        return [
            Delivery(student_id, "New Chat Message", message, NotificationType.PROJECT_UPDATE, Role.STUDENT)
            for student_id in enrolled_student_ids(db, project.project_id)
        ]
    if project.advisor_id is None:
        return []
    return [Delivery(project.advisor_id, "New Chat Message", message, NotificationType.PROJECT_UPDATE, Role.ADVISOR)]


@handles(EventKind.DEADLINE_SET)
def _deadline_set(db: Session, event: DomainEvent) -> List[Delivery]:
    project, deadline = event.project, event.deadline
    phase = Phase(deadline.phase)
    message = (
        f'The deadline for {phase.label} of project "{project.title}" '
        f"has been updated to {deadline.deadline_date.isoformat()}"
    )
    return [
        Delivery(student_id, "Deadline Updated", message, NotificationType.DEADLINE_REMINDER, Role.STUDENT)
        for student_id in enrolled_student_ids(db, project.project_id)
    ]


def _student_assignment(project: Project, student_ids: Sequence[int]) -> List[Delivery]:
    return [
        Delivery(
            student_id,
            "New Project Assignment",
            f"You have been assigned to the project: {project.title}",
            NotificationType.PROJECT_ASSIGNMENT,
            Role.STUDENT,
        )
        for student_id in student_ids
    ]


def _advisor_assignment(project: Project) -> List[Delivery]:
    if project.advisor_id is None:
        return []
    return [
        Delivery(
            project.advisor_id,
            "New Project Assignment",
            f"You have been assigned as advisor for the project: {project.title}",
            NotificationType.PROJECT_ASSIGNMENT,
            Role.ADVISOR,
        )
    ]


@handles(EventKind.PROJECT_CREATED)
def _project_created(db: Session, event: DomainEvent) -> List[Delivery]:
    project = event.project
    return (
        _student_assignment(project, enrolled_student_ids(db, project.project_id))
        + _advisor_assignment(project)
        + _officers(
            db,
            "New Project Created",
            f'A new project "{project.title}" has been created and assigned',
            NotificationType.PROJECT_UPDATE,
        )
    )


@handles(EventKind.STUDENTS_ASSIGNED)
def _students_assigned(db: Session, event: DomainEvent) -> List[Delivery]:
    return _student_assignment(event.project, event.student_ids)


@handles(EventKind.ADVISOR_ASSIGNED)
def _advisor_assigned(db: Session, event: DomainEvent) -> List[Delivery]:
    return _advisor_assignment(event.project)


@handles(EventKind.PROJECT_STATUS_CHANGED)
def _project_status_changed(db: Session, event: DomainEvent) -> List[Delivery]:
    project = event.project
    title = "Project Status Updated"
    message = f'Project "{project.title}" is now {ProjectStatus(project.status).value}'
    deliveries = [
        Delivery(student_id, title, message, NotificationType.PROJECT_UPDATE, Role.STUDENT)
        for student_id in enrolled_student_ids(db, project.project_id)
    ]
    if project.advisor_id is not None:
        deliveries.append(Delivery(project.advisor_id, title, message, NotificationType.PROJECT_UPDATE, Role.ADVISOR))
    return deliveries + _officers(db, title, message, NotificationType.PROJECT_UPDATE)
