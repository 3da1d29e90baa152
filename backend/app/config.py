"""Centralizes application settings loaded from environment variables."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./fyp_tracker.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8000"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # First login creates the profile row
    SIGNUP_ENABLED: bool = True
    DEFAULT_SIGNUP_ROLE: str = "student"

    # Blob storage
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50 MB
    ALLOWED_EXTENSIONS: List[str] = [
        "pdf", "doc", "docx", "ppt", "pptx", "xls", "xlsx", "csv",
        "txt", "md", "zip", "jpg", "jpeg", "png",
    ]
    STORAGE_DIR: str = "storage"
    DOCUMENTS_BUCKET: str = "project-documents"
    RESOURCES_BUCKET: str = "general-resources"

    # Business rules
    MIN_STUDENTS_PER_PROJECT: int = 2
    MAX_STUDENTS_PER_PROJECT: int = 4
    NOTIFICATION_FEED_LIMIT: int = 50

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
