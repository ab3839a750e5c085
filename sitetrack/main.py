import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from sitetrack.core.config import settings
from sitetrack.core.logging import setup_logging
from sitetrack.database import engine, Base
from sitetrack.models import *

from sitetrack.routers import auth, organizations, project, permissions
from sitetrack.routers import tasks, unit_progress, dashboard, reports
from sitetrack.routers import logs, notes, supplies, documents, photos, weather, notifications

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(organizations.router, prefix="/organizations", tags=["Organizations"])
app.include_router(project.router)
app.include_router(permissions.router)
app.include_router(tasks.router)
app.include_router(unit_progress.router)
app.include_router(dashboard.router)
app.include_router(reports.router)
app.include_router(logs.router)
app.include_router(notes.router)
app.include_router(supplies.router)
app.include_router(documents.router)
app.include_router(photos.router)
app.include_router(weather.router)
app.include_router(notifications.router, prefix="/notifications")

# Uploaded files (avatars, logos, documents, photos, attachments)
app.mount(settings.public_media_url, StaticFiles(directory=settings.storage_dir, check_dir=False), name="media")


@app.on_event("startup")
def create_tables():
    logger.info("Creating database tables if not exist...")
    Base.metadata.create_all(bind=engine)
    Path(settings.storage_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Database ready. Media stored in %s", settings.storage_dir)


@app.get("/")
def health():
    return {"app": settings.app_name, "environment": settings.environment, "status": "ok"}
