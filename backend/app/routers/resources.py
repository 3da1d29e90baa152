"""General resources API router. Officers publish files every user can read."""

from fastapi import APIRouter, Depends, UploadFile, File, Form
from sqlalchemy.orm import Session
from typing import List, Optional
from app.config import settings
from app.database import get_db
from app.schemas.resource import ResourceOut, ResourceUpdate
from app.services import resource_service
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.utils.helpers import save_blob

router = APIRouter(prefix="/api/resources", tags=["resources"])


@router.get("", response_model=List[ResourceOut])
def list_resources(db: Session = Depends(get_db), _current_user: User = Depends(get_current_user)):
    return resource_service.list_resources(db)


@router.post("", response_model=ResourceOut, status_code=201)
async def upload_resource(
    file: UploadFile = File(...),
    description: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    resource_service.ensure_can_upload(current_user)
    blob = await save_blob(file, settings.RESOURCES_BUCKET)
    return resource_service.create_resource(db, blob, description, current_user)


@router.put("/{resource_id}", response_model=ResourceOut)
def update_resource(
    resource_id: int,
    data: ResourceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return resource_service.update_resource(db, resource_id, data, current_user)


@router.delete("/{resource_id}")
def delete_resource(resource_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    resource_service.delete_resource(db, resource_id, current_user)
    return {"message": "Resource deleted."}
