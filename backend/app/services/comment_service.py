"""Comment service layer for document threads and project-level threads."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from app.models.comment import DocumentComment, ProjectComment
from app.models.document import Document
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentUpdate
from app.services.project_service import FORBIDDEN, get_project_row
from app.utils.permissions import (
    can_comment_on_project,
    can_view_document_comments,
    can_view_project_comments,
    is_author,
)


def _get_document_in_reach(db: Session, doc_id: int, current_user: User) -> Document:
    doc = db.query(Document).filter(Document.doc_id == doc_id).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found.")
    if not can_view_document_comments(db, doc, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    return doc


def list_document_comments(db: Session, doc_id: int, current_user: User) -> List[DocumentComment]:
    _get_document_in_reach(db, doc_id, current_user)
    return (
        db.query(DocumentComment)
        .options(joinedload(DocumentComment.author))
        .filter(DocumentComment.doc_id == doc_id)
        .order_by(DocumentComment.created_at.asc(), DocumentComment.comment_id.asc())
        .all()
    )


def create_document_comment(db: Session, doc_id: int, data: CommentCreate, current_user: User) -> DocumentComment:
    _get_document_in_reach(db, doc_id, current_user)
    comment = DocumentComment(doc_id=doc_id, author_id=current_user.user_id, comment=data.comment)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def _own_document_comment(db: Session, comment_id: int, current_user: User) -> DocumentComment:
    comment = db.query(DocumentComment).filter(DocumentComment.comment_id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found.")
    if not is_author(comment, current_user):
        raise HTTPException(status_code=403, detail="Only the author can change this comment.")
    return comment


def update_document_comment(db: Session, comment_id: int, data: CommentUpdate, current_user: User) -> DocumentComment:
    comment = _own_document_comment(db, comment_id, current_user)
    comment.comment = data.comment
    db.commit()
    db.refresh(comment)
    return comment


def delete_document_comment(db: Session, comment_id: int, current_user: User) -> None:
    comment = _own_document_comment(db, comment_id, current_user)
    db.delete(comment)
    db.commit()


def list_project_comments(db: Session, project_id: int, current_user: User) -> List[ProjectComment]:
    get_project_row(db, project_id)
    if not can_view_project_comments(current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    return (
        db.query(ProjectComment)
        .options(joinedload(ProjectComment.author))
        .filter(ProjectComment.project_id == project_id)
        .order_by(ProjectComment.created_at.asc(), ProjectComment.comment_id.asc())
        .all()
    )


def create_project_comment(db: Session, project_id: int, data: CommentCreate, current_user: User) -> ProjectComment:
    project = get_project_row(db, project_id)
    if not can_comment_on_project(db, project, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    comment = ProjectComment(project_id=project_id, author_id=current_user.user_id, comment=data.comment)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def _own_project_comment(db: Session, comment_id: int, current_user: User) -> ProjectComment:
    comment = db.query(ProjectComment).filter(ProjectComment.comment_id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found.")
    if not is_author(comment, current_user):
        raise HTTPException(status_code=403, detail="Only the author can change this comment.")
    return comment


def update_project_comment(db: Session, comment_id: int, data: CommentUpdate, current_user: User) -> ProjectComment:
    comment = _own_project_comment(db, comment_id, current_user)
    comment.comment = data.comment
    db.commit()
    db.refresh(comment)
    return comment


def delete_project_comment(db: Session, comment_id: int, current_user: User) -> None:
    comment = _own_project_comment(db, comment_id, current_user)
    db.delete(comment)
    db.commit()
