"""Documents API router. Phase submissions, file download and advisor review."""

from fastapi import APIRouter, Depends, UploadFile, File, Form
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from app.config import settings
from app.database import get_db
from app.models.enums import DocumentStatus, Phase
from app.schemas.document import DocumentOut, DocumentReview, DocumentUpdate
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.services import document_service
from app.utils.helpers import save_blob

router = APIRouter(tags=["documents"])


@router.get("/api/projects/{project_id}/documents", response_model=List[DocumentOut])
def list_documents(
    project_id: int,
    phase: Optional[Phase] = None,
    status: Optional[DocumentStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return document_service.list_documents(db, project_id, current_user, phase, status)


@router.post("/api/projects/{project_id}/documents", response_model=DocumentOut, status_code=201)
async def create_document(
    project_id: int,
    phase: Phase = Form(...),
    title: str = Form(..., min_length=1, max_length=300),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = document_service.ensure_can_submit(db, project_id, current_user)
    blob = None
    if file and file.filename:
        blob = await save_blob(file, settings.DOCUMENTS_BUCKET, prefix=f"projects/{project_id}/{phase.value}")
    return document_service.create_document(db, project, phase, title, blob, current_user)


@router.get("/api/documents/{doc_id}", response_model=DocumentOut)
def get_document(doc_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return document_service.get_document(db, doc_id, current_user)


@router.put("/api/documents/{doc_id}", response_model=DocumentOut)
def update_document(
    doc_id: int,
    data: DocumentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return document_service.update_document(db, doc_id, data, current_user)


@router.get("/api/documents/{doc_id}/file")
def download_document(doc_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    location, file_name = document_service.get_document_file(db, doc_id, current_user)
    return FileResponse(location, filename=file_name)


@router.post("/api/documents/{doc_id}/review", response_model=DocumentOut)
def review_document(
    doc_id: int,
    data: DocumentReview,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return document_service.review_document(db, doc_id, data, current_user)
