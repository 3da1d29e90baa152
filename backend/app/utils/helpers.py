"""Local blob storage addressed by (bucket, path).

Files are written under ``settings.STORAGE_DIR/<bucket>/<path>``. Callers get a
:class:`StoredBlob` back and only create their metadata row after the write has
succeeded.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile, HTTPException
from app.config import settings

logger = logging.getLogger(__name__)


@dataclass
class StoredBlob:
    bucket: str
    path: str
    filename: str
    size: int
    content_type: Optional[str] = None

    @property
    def url(self) -> str:
        return f"/storage/{self.bucket}/{self.path}"


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def validate_file(file: UploadFile) -> None:
    if not file.filename:
        raise HTTPException(status_code=400, detail="A file name is required.")
    ext = _extension(file.filename)
    if ext not in settings.ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"File type '{ext}' not allowed. Allowed: {', '.join(settings.ALLOWED_EXTENSIONS)}",
        )


def bucket_root(bucket: str) -> str:
    return os.path.join(settings.STORAGE_DIR, bucket)


def blob_location(bucket: str, path: str) -> str:
    root = os.path.abspath(bucket_root(bucket))
    location = os.path.abspath(os.path.join(root, path))
    if os.path.commonpath([root, location]) != root:
        raise HTTPException(status_code=400, detail="Invalid storage path.")
    return location


async def save_blob(file: UploadFile, bucket: str, prefix: str = "") -> StoredBlob:
    validate_file(file)
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="File exceeds the upload size limit")

    name = f"{uuid.uuid4().hex}.{_extension(file.filename)}"
    path = f"{prefix.strip('/')}/{name}" if prefix.strip("/") else name
    location = blob_location(bucket, path)
    os.makedirs(os.path.dirname(location), exist_ok=True)

    with open(location, "wb") as f:
        f.write(content)

    logger.info("stored blob %s/%s (%d bytes)", bucket, path, len(content))
    return StoredBlob(
        bucket=bucket,
        path=path,
        filename=file.filename,
        size=len(content),
        content_type=file.content_type,
    )


def remove_blob(bucket: str, path: Optional[str]) -> bool:
    if not path:
        return False
    location = blob_location(bucket, path)
    try:
        os.remove(location)
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("failed to remove blob %s/%s: %s", bucket, path, exc)
        return False
    logger.info("removed blob %s/%s", bucket, path)
    return True
