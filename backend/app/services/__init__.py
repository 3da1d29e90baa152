"""Service layer package."""

from app.services import (
    realtime_service,
    notification_service,
    dispatch_service,
    auth_service,
    user_service,
    project_service,
    deadline_service,
    document_service,
    comment_service,
    chat_service,
    resource_service,
    dashboard_service,
)
