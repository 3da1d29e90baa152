"""Resource service layer for general, non-project files."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.models.resource import Resource
from app.models.user import User
from app.schemas.resource import ResourceUpdate
from app.services.project_service import FORBIDDEN
from app.utils.helpers import StoredBlob, remove_blob
from app.utils.permissions import can_create_resource, can_delete_resource, can_update_resource


def list_resources(db: Session) -> List[Resource]:
    return (
        db.query(Resource)
        .options(joinedload(Resource.uploader))
        .order_by(Resource.created_at.desc(), Resource.resource_id.desc())
        .all()
    )


def ensure_can_upload(current_user: User) -> None:
    if not can_create_resource(current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)


def create_resource(db: Session, blob: StoredBlob, description, current_user: User) -> Resource:
    resource = Resource(
        uploaded_by=current_user.user_id,
        file_name=blob.filename,
        file_path=blob.path,
        file_url=blob.url,
        file_size=blob.size,
        file_type=blob.content_type,
        description=description,
    )
    try:
        db.add(resource)
        db.commit()
    except Exception:
        db.rollback()
        remove_blob(blob.bucket, blob.path)
        raise
    db.refresh(resource)
    return resource


def _get_resource(db: Session, resource_id: int) -> Resource:
    resource = db.query(Resource).filter(Resource.resource_id == resource_id).first()
    if not resource:
        raise HTTPException(status_code=404, detail="Resource not found.")
    return resource


def update_resource(db: Session, resource_id: int, data: ResourceUpdate, current_user: User) -> Resource:
    resource = _get_resource(db, resource_id)
    if not can_update_resource(resource, current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    for k, v in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(resource, k, v)
    db.commit()
    db.refresh(resource)
    return resource


def delete_resource(db: Session, resource_id: int, current_user: User) -> None:
    if not can_delete_resource(current_user):
        raise HTTPException(status_code=403, detail=FORBIDDEN)
    resource = _get_resource(db, resource_id)
    path = resource.file_path
    db.delete(resource)
    db.commit()
    remove_blob(settings.RESOURCES_BUCKET, path)
