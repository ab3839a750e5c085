"""
Photo gallery router.

The gallery also holds the execution photos uploaded onto unit subtasks;
editing or deleting one here keeps the subtask copy in step.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import ProjectPhoto
from sitetrack.schemas.media import ProjectPhoto as ProjectPhotoSchema, ProjectPhotoUpdate
from sitetrack.utils import storage
from sitetrack.utils.access import (
    ProjectAccess,
    guest_can_see_photo,
    guest_unit_name,
    require_project_access,
    require_staff,
)
from sitetrack.utils.unit_progress import describe_execution_photo, detach_execution_photo, execution_photos

router = APIRouter(tags=["Photos"])

PHOTO_CATEGORIES = {"evolution", "structural", "installations", "finishing", "inspection", "other"}


def _get_photo(db: Session, project_id: int, photo_id: int) -> ProjectPhoto:
    photo = db.query(ProjectPhoto).filter(
        ProjectPhoto.id == photo_id,
        ProjectPhoto.project_id == project_id,
    ).first()
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    return photo


@router.get("/projects/{project_id}/photos", response_model=List[ProjectPhotoSchema])
def list_photos(
    category: Optional[str] = None,
    ctx: ProjectAccess = Depends(require_project_access),
    db: Session = Depends(get_db),
):
    """
    Gallery, newest first.

    Guests see photos labelled with their unit's name plus untagged and
    'Geral' ones, followed by the execution photos of their unit that are
    not already in that list (matched by URL).
    """
    query = db.query(ProjectPhoto).filter(ProjectPhoto.project_id == ctx.project.id)
    if category:
        query = query.filter(ProjectPhoto.category == category)
    photos = query.order_by(ProjectPhoto.created_at.desc()).all()

    if not ctx.access.is_staff:
        unit_name = guest_unit_name(ctx.project, ctx.access)
        photos = [
            ProjectPhotoSchema.model_validate(photo)
            for photo in photos
            if guest_can_see_photo(photo.location_label, unit_name)
        ]
        seen = {photo.url for photo in photos}
        for extra in execution_photos(db, ctx.project.id, ctx.access.unit_id, unit_name):
            if extra["url"] in seen or (category and extra["category"] != category):
                continue
            seen.add(extra["url"])
            photos.append(ProjectPhotoSchema.model_validate(extra))
    return photos


@router.post("/projects/{project_id}/photos", response_model=ProjectPhotoSchema)
def upload_photo(
    description: str = Form(...),
    category: str = Form("evolution"),
    location_label: str = Form("Geral"),
    phase_id: Optional[str] = Form(None),
    file: UploadFile = File(...),
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    if not description.strip():
        raise HTTPException(status_code=400, detail="Photo description cannot be empty")
    if category not in PHOTO_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unknown photo category '{category}'")

    url = storage.upload(file, f"gallery/{ctx.project.id}")
    photo = ProjectPhoto(
        project_id=ctx.project.id,
        url=url,
        description=description.strip(),
        category=category,
        location_label=location_label,
        phase_id=phase_id or None,
        created_by=ctx.user.email,
    )
    db.add(photo)
    try:
        commit_or_500(db, "save photo")
    except HTTPException:
        storage.delete(url)
        raise
    db.refresh(photo)
    return photo


@router.put("/projects/{project_id}/photos/{photo_id}", response_model=ProjectPhotoSchema)
def update_photo(
    photo_id: int,
    data: ProjectPhotoUpdate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    photo = _get_photo(db, ctx.project.id, photo_id)
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(photo, field, value)
    if changes.get("description"):
        describe_execution_photo(db, ctx.project.id, photo.url, photo.description)
    commit_or_500(db, "update photo")
    db.refresh(photo)
    return photo


@router.delete("/projects/{project_id}/photos/{photo_id}")
def delete_photo(
    photo_id: int,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    photo = _get_photo(db, ctx.project.id, photo_id)
    url = photo.url
    detach_execution_photo(db, ctx.project.id, url)
    db.delete(photo)
    commit_or_500(db, "delete photo")
    storage.delete(url)
    return {"message": "Photo deleted successfully"}
