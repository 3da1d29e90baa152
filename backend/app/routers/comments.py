"""Comment API router. Document review threads and project-level threads."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.comment import CommentCreate, CommentUpdate, DocumentCommentOut, ProjectCommentOut
from app.services import comment_service
from app.middleware.auth_middleware import get_current_user
from app.models.user import User

router = APIRouter(tags=["comments"])


@router.get("/api/documents/{doc_id}/comments", response_model=List[DocumentCommentOut])
def list_document_comments(doc_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return comment_service.list_document_comments(db, doc_id, current_user)


@router.post("/api/documents/{doc_id}/comments", response_model=DocumentCommentOut, status_code=201)
def create_document_comment(
    doc_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.create_document_comment(db, doc_id, data, current_user)


@router.put("/api/document-comments/{comment_id}", response_model=DocumentCommentOut)
def update_document_comment(
    comment_id: int,
    data: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.update_document_comment(db, comment_id, data, current_user)


@router.delete("/api/document-comments/{comment_id}")
def delete_document_comment(comment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    comment_service.delete_document_comment(db, comment_id, current_user)
    return {"message": "Comment deleted."}


@router.get("/api/projects/{project_id}/comments", response_model=List[ProjectCommentOut])
def list_project_comments(project_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return comment_service.list_project_comments(db, project_id, current_user)


@router.post("/api/projects/{project_id}/comments", response_model=ProjectCommentOut, status_code=201)
def create_project_comment(
    project_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.create_project_comment(db, project_id, data, current_user)


@router.put("/api/project-comments/{comment_id}", response_model=ProjectCommentOut)
def update_project_comment(
    comment_id: int,
    data: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.update_project_comment(db, comment_id, data, current_user)


@router.delete("/api/project-comments/{comment_id}")
def delete_project_comment(comment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    comment_service.delete_project_comment(db, comment_id, current_user)
    return {"message": "Comment deleted."}
