"""SQLAlchemy model package. Importing it registers every table on the metadata."""

from app.models.user import User
from app.models.project import Project, ProjectStudent
from app.models.deadline import PhaseDeadline
from app.models.document import Document
from app.models.comment import DocumentComment, ProjectComment
from app.models.chat import ChatMessage
from app.models.notification import Notification
from app.models.resource import Resource

__all__ = [
    "User",
    "Project", "ProjectStudent",
    "PhaseDeadline",
    "Document",
    "DocumentComment", "ProjectComment",
    "ChatMessage",
    "Notification",
    "Resource",
]
