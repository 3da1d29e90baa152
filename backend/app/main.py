"""FastAPI application entry point. Registers middleware, API routers and the resource file mount."""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - registers model metadata
from app.routers import (
    auth, users, projects, deadlines, documents, comments, chat,
    notifications, resources, dashboard, realtime,
)
from app.utils.helpers import bucket_root

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="FYP Management System",
    description="Final-year project supervision: phase submissions, reviews, chat and notifications",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(deadlines.router)
app.include_router(documents.router)
app.include_router(comments.router)
app.include_router(chat.router)
app.include_router(notifications.router)
app.include_router(resources.router)
app.include_router(dashboard.router)
app.include_router(realtime.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "FYP Management System"}


# Resources are readable by URL; project documents only through /api/documents/{id}/file.
resources_dir = bucket_root(settings.RESOURCES_BUCKET)
os.makedirs(resources_dir, exist_ok=True)
app.mount(f"/storage/{settings.RESOURCES_BUCKET}", StaticFiles(directory=resources_dir), name="resources")
