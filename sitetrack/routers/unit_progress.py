"""
Execution (unit progress) router.

The matrix is the project structure (levels and their units) with the
saved progress of every phase on every unit. Saves happen per (unit, phase)
from the subtask checklist, or in bulk for many units at once. Subtasks can
carry execution photos, which are mirrored into the project gallery.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session
from typing import List

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import ProjectPhoto, UnitProgress
from sitetrack.schemas.media import ExecutionPhotoUpdate, ProjectPhoto as ProjectPhotoSchema
from sitetrack.schemas.unit import MassUpdate, ProgressMatrix, UnitPhaseSave, UnitProgress as UnitProgressSchema
from sitetrack.utils.access import ProjectAccess, require_staff
from sitetrack.utils.progress import active_phases, phase_applies, project_levels
from sitetrack.utils import storage
from sitetrack.utils.unit_progress import (
    add_subtask_photo,
    describe_execution_photo,
    detach_execution_photo,
    mass_update,
    save_unit_phase,
)

router = APIRouter(tags=["Unit Progress"])


@router.get("/projects/{project_id}/progress", response_model=ProgressMatrix)
def progress_matrix(
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    project = ctx.project
    rows = db.query(UnitProgress).filter(UnitProgress.project_id == project.id).all()
    by_unit = {}
    for row in rows:
        by_unit.setdefault(row.unit_id, {})[row.phase_id] = {
            "percentage": row.percentage,
            "subtasks": row.subtasks or {},
            "updated_at": row.updated_at,
        }

    phases = active_phases(project.phases)
    levels = []
    for level in project_levels(project.structure):
        applicable = [phase["id"] for phase in phases if phase_applies(level, phase["id"])]
        units = []
        for unit in level.get("units") or []:
            saved = by_unit.get(unit["id"], {})
            units.append({
                "id": unit["id"],
                "name": unit.get("name") or unit["id"],
                "type": unit.get("type") or "unit",
                "phases": {
                    phase_id: saved.get(phase_id, {"percentage": 0, "subtasks": {}, "updated_at": None})
                    for phase_id in applicable
                },
            })
        levels.append({
            "id": level["id"],
            "label": level["label"],
            "type": level.get("type") or "apartments",
            "active_phases": level.get("active_phases"),
            "units": units,
        })

    return {"project_id": project.id, "global_progress": project.progress or 0, "levels": levels}


@router.put("/projects/{project_id}/progress/{unit_id}/{phase_id}", response_model=UnitProgressSchema)
def save_progress(
    unit_id: str,
    phase_id: str,
    data: UnitPhaseSave,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Save one unit/phase checklist.

    The phase percentage is derived from the subtasks, linked schedule tasks
    take the new value and the project's global progress is recomputed.
    """
    try:
        row = save_unit_phase(db, ctx.project, unit_id, phase_id, data.subtasks, data.percentage)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    commit_or_500(db, "save unit progress")
    db.refresh(row)
    return row


@router.post("/projects/{project_id}/progress/mass-update", response_model=List[UnitProgressSchema])
def mass_update_progress(
    data: MassUpdate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        rows = mass_update(db, ctx.project, data.phase_id, data.unit_ids, data.progress, data.subtasks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    commit_or_500(db, "mass update unit progress")
    for row in rows:
        db.refresh(row)
    return rows


def _get_execution_photo(db: Session, project_id: int, phase_id: str, photo_id: int) -> ProjectPhoto:
    photo = db.query(ProjectPhoto).filter(
        ProjectPhoto.id == photo_id,
        ProjectPhoto.project_id == project_id,
        ProjectPhoto.phase_id == phase_id,
    ).first()
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    return photo


@router.post("/projects/{project_id}/progress/{unit_id}/{phase_id}/photos", response_model=ProjectPhotoSchema)
def upload_subtask_photo(
    unit_id: str,
    phase_id: str,
    subtask: str = Form(...),
    description: str = Form(""),
    file: UploadFile = File(...),
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Upload a photo onto one subtask; it also appears in the project gallery."""
    url = storage.upload(file, f"execution/{ctx.project.id}/{unit_id}")
    try:
        photo = add_subtask_photo(db, ctx.project, unit_id, phase_id, subtask, url, ctx.user.email, description)
    except ValueError as e:
        db.rollback()
        storage.delete(url)
        raise HTTPException(status_code=400, detail=str(e))

    try:
        commit_or_500(db, "save execution photo")
    except HTTPException:
        storage.delete(url)
        raise
    db.refresh(photo)
    return photo


@router.put("/projects/{project_id}/progress/{unit_id}/{phase_id}/photos/{photo_id}", response_model=ProjectPhotoSchema)
def update_subtask_photo(
    unit_id: str,
    phase_id: str,
    photo_id: int,
    data: ExecutionPhotoUpdate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    photo = _get_execution_photo(db, ctx.project.id, phase_id, photo_id)
    description = data.description.strip()
    if not description:
        raise HTTPException(status_code=400, detail="Photo description cannot be empty")

    photo.description = description
    describe_execution_photo(db, ctx.project.id, photo.url, description)
    commit_or_500(db, "update execution photo")
    db.refresh(photo)
    return photo


@router.delete("/projects/{project_id}/progress/{unit_id}/{phase_id}/photos/{photo_id}")
def delete_subtask_photo(
    unit_id: str,
    phase_id: str,
    photo_id: int,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    photo = _get_execution_photo(db, ctx.project.id, phase_id, photo_id)
    url = photo.url
    detach_execution_photo(db, ctx.project.id, url)
    db.delete(photo)
    commit_or_500(db, "delete execution photo")
    storage.delete(url)
    return {"message": "Photo deleted successfully"}
