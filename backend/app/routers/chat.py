"""Phase chat API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.models.enums import Phase
from app.schemas.chat import ChatMessageCreate, ChatMessageOut
from app.services import chat_service
from app.middleware.auth_middleware import get_current_user
from app.models.user import User

router = APIRouter(tags=["chat"])


@router.get("/api/projects/{project_id}/phases/{phase}/messages", response_model=List[ChatMessageOut])
def list_messages(
    project_id: int,
    phase: Phase,
    after_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return chat_service.list_messages(db, project_id, phase, current_user, after_id)


@router.post("/api/projects/{project_id}/phases/{phase}/messages", response_model=ChatMessageOut, status_code=201)
def post_message(
    project_id: int,
    phase: Phase,
    data: ChatMessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return chat_service.post_message(db, project_id, phase, data, current_user)


@router.put("/api/chat-messages/{message_id}", response_model=ChatMessageOut)
def update_message(
    message_id: int,
    data: ChatMessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return chat_service.update_message(db, message_id, data, current_user)


@router.delete("/api/chat-messages/{message_id}")
def delete_message(message_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    chat_service.delete_message(db, message_id, current_user)
    return {"message": "Message deleted."}
