"""Document service layer. Submission, submitter edits and the review transition."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.config import settings
from app.models.document import Document
from app.models.enums import DocumentStatus, Phase
from app.models.project import Project
from app.models.user import User
from app.schemas.document import DocumentReview, DocumentUpdate
from app.services import dispatch_service
from app.services.dispatch_service import DomainEvent, EventKind
from app.services.project_service import FORBIDDEN, get_accessible_project, get_project_row
from app.utils.helpers import StoredBlob, blob_location, remove_blob
from app.utils.permissions import (
    can_create_document,
    can_edit_document,
    can_review_document,
    can_view_document,
)

logger = logging.getLogger(__name__)


def list_documents(
    db: Session,
    project_id: int,
    current_user: User,
    phase: Optional[Phase] = None,
    status: Optional[DocumentStatus] = None,
) -> List[Document]:
    project = get_accessible_project(db, project_id, current_user)
    q = db.query(Document).filter(Document.project_id == project_id)
    if phase is not None:
        q = q.filter(Document.phase == phase)
    if status is not None:
        q = q.filter(Document.status == status)
    rows = q.order_by(Document.submitted_at.desc(), Document.doc_id.desc()).all()
    return [d for d in rows if can_view_document(project, d, current_user)]


def get_document(db: Session, doc_id: int, current_user: User) -> Document:
    doc = db.query(Document).filter(Document.doc_id == doc_id).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found.")
    if not can_view_document(doc.project, doc, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    return doc


def ensure_can_submit(db: Session, project_id: int, current_user: User) -> Project:
    """Checked before any bytes are written to storage."""
    project = get_project_row(db, project_id)
    if not can_create_document(db, project, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    return project


def create_document(
    db: Session,
    project: Project,
    phase: Phase,
    title: str,
    blob: Optional[StoredBlob],
    current_user: User,
) -> Document:
    doc = Document(
        project_id=project.project_id,
        phase=phase,
        title=title.strip(),
        file_name=blob.filename if blob else None,
        file_path=blob.path if blob else None,
        submitted_by=current_user.user_id,
        status=DocumentStatus.PENDING,
    )
    try:
        db.add(doc)
        db.flush()
        dispatch_service.publish(db, DomainEvent(EventKind.DOCUMENT_SUBMITTED, current_user, project, document=doc))
        db.commit()
    except Exception:
        db.rollback()
        if blob is not None:
            remove_blob(blob.bucket, blob.path)
        raise
    db.refresh(doc)
    return doc


def update_document(db: Session, doc_id: int, data: DocumentUpdate, current_user: User) -> Document:
    doc = db.query(Document).filter(Document.doc_id == doc_id).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found.")
    if not can_edit_document(doc, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    if doc.status != DocumentStatus.PENDING:
        raise HTTPException(status_code=409, detail="Only pending documents can be edited.")
    payload = data.model_dump(exclude_unset=True, exclude_none=True)
    if "title" in payload:
        payload["title"] = payload["title"].strip()
    for k, v in payload.items():
        setattr(doc, k, v)
    db.commit()
    db.refresh(doc)
    return doc


def review_document(db: Session, doc_id: int, data: DocumentReview, current_user: User) -> Document:
    doc = db.query(Document).filter(Document.doc_id == doc_id).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found.")
    project = doc.project
    if not can_review_document(project, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)

    # Check-and-set in one statement so two reviewers cannot both win.
    updated = (
        db.query(Document)
        .filter(Document.doc_id == doc_id, Document.status == DocumentStatus.PENDING)
        .update(
            {
                Document.status: DocumentStatus(data.status),
                Document.advisor_feedback: data.feedback,
                Document.reviewed_by: current_user.user_id,
                Document.reviewed_at: datetime.utcnow(),
            },
            synchronize_session=False,
        )
    )
    if updated == 0:
        db.rollback()
        raise HTTPException(status_code=409, detail="This document has already been reviewed.")

    db.expire(doc)
    dispatch_service.publish(db, DomainEvent(EventKind.DOCUMENT_REVIEWED, current_user, project, document=doc))
    db.commit()
    db.refresh(doc)
    logger.info("document %s %s by user %s", doc.doc_id, DocumentStatus(doc.status).value, current_user.user_id)
    return doc


def get_document_file(db: Session, doc_id: int, current_user: User):
    doc = get_document(db, doc_id, current_user)
    if not doc.file_path:
        raise HTTPException(status_code=404, detail="This document has no file attached.")
    return blob_location(settings.DOCUMENTS_BUCKET, doc.file_path), doc.file_name
