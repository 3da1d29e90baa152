"""Phase chat service layer."""

from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from app.models.chat import ChatMessage
from app.models.enums import Phase, Role
from app.models.project import Project
from app.models.user import User
from app.schemas.chat import ChatMessageCreate
from app.services import dispatch_service, notification_service, realtime_service
from app.services.dispatch_service import DomainEvent, EventKind
from app.services.project_service import get_accessible_project
from app.services.realtime_service import RealtimeEventType
from app.utils.permissions import is_author


def list_messages(
    db: Session,
    project_id: int,
    phase: Phase,
    current_user: User,
    after_id: Optional[int] = None,
) -> List[ChatMessage]:
    get_accessible_project(db, project_id, current_user)
    q = (
        db.query(ChatMessage)
        .options(joinedload(ChatMessage.author))
        .filter(ChatMessage.project_id == project_id, ChatMessage.phase == phase)
    )
    if after_id is not None:
        q = q.filter(ChatMessage.message_id > after_id)
    return q.order_by(ChatMessage.created_at.asc(), ChatMessage.message_id.asc()).all()


def _participant_ids(db: Session, project: Project) -> List[int]:
    ids = dispatch_service.enrolled_student_ids(db, project.project_id)
    ids += [uid for uid in (project.advisor_id, project.project_officer_id) if uid is not None]
    ids += notification_service.active_user_ids_with_role(db, Role.PROJECT_OFFICER)
    return list(dict.fromkeys(ids))


def post_message(
    db: Session,
    project_id: int,
    phase: Phase,
    data: ChatMessageCreate,
    current_user: User,
) -> ChatMessage:
    project = get_accessible_project(db, project_id, current_user)
    chat = ChatMessage(
        project_id=project_id,
        phase=phase,
        author_id=current_user.user_id,
        message=data.message,
    )
    db.add(chat)
    db.flush()
    dispatch_service.publish(db, DomainEvent(EventKind.CHAT_MESSAGE_POSTED, current_user, project, chat_message=chat))
    realtime_service.stage(
        db,
        RealtimeEventType.CHAT_MESSAGE,
        _participant_ids(db, project),
        {
            "message_id": chat.message_id,
            "project_id": project_id,
            "phase": phase.value,
            "author_id": current_user.user_id,
        },
    )
    db.commit()
    db.refresh(chat)
    return chat


def _own_message(db: Session, message_id: int, current_user: User) -> ChatMessage:
    chat = db.query(ChatMessage).filter(ChatMessage.message_id == message_id).first()
    if not chat:
        raise HTTPException(status_code=404, detail="Message not found.")
    if not is_author(chat, current_user):
        raise HTTPException(status_code=403, detail="Only the author can change this message.")
    return chat


def update_message(db: Session, message_id: int, data: ChatMessageCreate, current_user: User) -> ChatMessage:
    chat = _own_message(db, message_id, current_user)
    chat.message = data.message
    db.commit()
    db.refresh(chat)
    return chat


def delete_message(db: Session, message_id: int, current_user: User) -> None:
    chat = _own_message(db, message_id, current_user)
    db.delete(chat)
    db.commit()
