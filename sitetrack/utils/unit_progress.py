"""
Writes to unit_progress: single (unit, phase) saves from the execution
matrix, mass updates, the shared upsert on (project, unit, phase) and the
execution photos attached to subtasks.

Execution photos live in two places: as a project_photos row (so they show
up in the gallery) and as an entry under subtasks[name]["photos"] keyed by
the same URL.
"""
import copy
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from sitetrack.models import Project, ProjectPhoto, Task, UnitProgress
from sitetrack.utils.progress import (
    active_phases,
    find_unit,
    phase_percentage_from_subtasks,
    project_global_progress,
    project_levels,
)


def _progress_row(db: Session, project_id: int, unit_id: str, phase_id: str) -> Optional[UnitProgress]:
    return db.query(UnitProgress).filter(
        UnitProgress.project_id == project_id,
        UnitProgress.unit_id == unit_id,
        UnitProgress.phase_id == phase_id,
    ).first()

def upsert_unit_progress(
    db: Session,
    project_id: int,
    unit_id: str,
    phase_id: str,
    percentage: int,
    subtasks: Optional[Dict[str, Any]] = None,
) -> UnitProgress:
    """
    Insert or overwrite the row for (project, unit, phase).

    Does not commit; callers decide the transaction boundary.
    """
    row = _progress_row(db, project_id, unit_id, phase_id)

    if row:
        row.percentage = percentage
        row.subtasks = subtasks if subtasks is not None else {}
        row.updated_at = datetime.utcnow()
    else:
        row = UnitProgress(
            project_id=project_id,
            unit_id=unit_id,
            phase_id=phase_id,
            percentage=percentage,
            subtasks=subtasks if subtasks is not None else {},
            updated_at=datetime.utcnow(),
        )
        db.add(row)
    return row


def _phase_config(project: Project, phase_id: str) -> Dict[str, Any]:
    for phase in active_phases(project.phases):
        if phase["id"] == phase_id:
            return phase
    raise ValueError(f"Unknown phase '{phase_id}' for this project")


def _require_unit(project: Project, unit_id: str) -> Dict[str, Any]:
    unit = find_unit(project_levels(project.structure), unit_id)
    if unit is None:
        raise ValueError(f"Unknown unit '{unit_id}' for this project")
    return unit


def refresh_project_progress(db: Session, project: Project) -> int:
    """Recompute projects.progress from every unit_progress row of the project."""
    db.flush()
    rows = db.query(UnitProgress).filter(UnitProgress.project_id == project.id).all()
    project.progress = project_global_progress(
        project_levels(project.structure), rows, active_phases(project.phases)
    )
    return project.progress


def save_unit_phase(
    db: Session,
    project: Project,
    unit_id: str,
    phase_id: str,
    subtasks: Dict[str, Dict[str, Any]],
    percentage: Optional[int] = None,
) -> UnitProgress:
    """
    Save the subtask checklist of one unit/phase.

    The phase percentage is the mean of the phase's template subtasks; phases
    without a template keep the percentage sent by the caller. Linked tasks
    follow the new percentage and the project's global progress is refreshed.
    Nothing is committed here.
    """
    _require_unit(project, unit_id)
    phase = _phase_config(project, phase_id)

    value = phase_percentage_from_subtasks(subtasks, phase.get("subtasks") or [], fallback=percentage or 0)
    previous = _progress_row(db, project.id, unit_id, phase_id)
    subtasks = _keep_photos(previous.subtasks if previous else None, subtasks)
    row = upsert_unit_progress(db, project.id, unit_id, phase_id, value, subtasks)

    from sitetrack.utils.tasks import sync_tasks_from_unit_progress
    sync_tasks_from_unit_progress(db, project.id, unit_id, phase_id, value)

    refresh_project_progress(db, project)
    return row


def mass_update(
    db: Session,
    project: Project,
    phase_id: str,
    unit_ids: List[str],
    progress: int,
    subtasks: List[str],
) -> List[UnitProgress]:
    """
    Set one phase to the same percentage on many units at once.

    The selected subtasks are written at that progress; the rest of each
    unit's checklist is replaced. Nothing is committed here.
    """
    if not unit_ids:
        raise ValueError("Select at least one unit")
    _phase_config(project, phase_id)
    for unit_id in unit_ids:
        _require_unit(project, unit_id)

    payload = {name: {"progress": progress} for name in subtasks}
    rows = [
        upsert_unit_progress(db, project.id, unit_id, phase_id, progress, dict(payload))
        for unit_id in unit_ids
    ]
    refresh_project_progress(db, project)
    return rows


def unit_tasks(db: Session, project_id: int, unit_id: str) -> List[Task]:
    return (
        db.query(Task)
        .filter(Task.project_id == project_id, Task.linked_unit_id == unit_id)
        .order_by(Task.start)
        .all()
    )


def _keep_photos(previous: Optional[Dict[str, Any]], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """Carry stored subtask photos over when a checklist save does not send them."""
    merged = copy.deepcopy(incoming or {})
    for name, entry in (previous or {}).items():
        photos = entry.get("photos") if isinstance(entry, dict) else None
        if not photos:
            continue
        target = merged.get(name)
        if target is None:
            merged[name] = {"progress": entry.get("progress") or 0, "photos": photos}
        elif isinstance(target, dict):
            target.setdefault("photos", photos)
        else:
            merged[name] = {"progress": target, "photos": photos}
    return merged


def unit_location_label(project: Project, unit_id: str) -> str:
    """'<level label> • <unit name>', the label execution photos carry in the gallery."""
    for level in project_levels(project.structure):
        for unit in level.get("units") or []:
            if unit["id"] == unit_id:
                return f"{level.get('label') or level['id']} • {unit.get('name') or unit['id']}"
    raise ValueError(f"Unknown unit '{unit_id}' for this project")


def add_subtask_photo(
    db: Session,
    project: Project,
    unit_id: str,
    phase_id: str,
    subtask: str,
    url: str,
    created_by: str,
    description: Optional[str] = None,
) -> ProjectPhoto:
    """
    Attach an uploaded photo to one subtask of a unit/phase.

    Creates the gallery row and appends the photo to the subtask's list,
    creating the unit_progress row at 0% when the phase was never saved.
    Nothing is committed here.

    Raises:
        ValueError: unknown unit, phase or subtask
    """
    location = unit_location_label(project, unit_id)
    phase = _phase_config(project, phase_id)
    subtask = (subtask or "").strip()
    template = phase.get("subtasks") or []
    if not subtask or (template and subtask not in template):
        raise ValueError(f"Unknown subtask '{subtask}' for phase '{phase_id}'")

    photo = ProjectPhoto(
        project_id=project.id,
        url=url,
        description=(description or "").strip() or subtask,
        category="inspection",
        location_label=location,
        phase_id=phase_id,
        created_by=created_by,
        created_at=datetime.utcnow(),
    )
    db.add(photo)
    db.flush()

    row = _progress_row(db, project.id, unit_id, phase_id)
    if row is None:
        row = upsert_unit_progress(db, project.id, unit_id, phase_id, 0, {})

    subtasks = copy.deepcopy(row.subtasks or {})
    entry = subtasks.get(subtask)
    if not isinstance(entry, dict):
        entry = {"progress": entry or 0}
    entry["photos"] = list(entry.get("photos") or []) + [{
        "id": photo.id,
        "url": url,
        "description": photo.description,
        "created_at": photo.created_at.isoformat(),
    }]
    subtasks[subtask] = entry
    row.subtasks = subtasks
    return photo


def _rewrite_photo_entries(db: Session, project_id: int, url: str, change) -> int:
    """Apply change(photos) -> photos to every subtask list of the project; returns rows touched."""
    touched = 0
    for row in db.query(UnitProgress).filter(UnitProgress.project_id == project_id).all():
        subtasks = copy.deepcopy(row.subtasks or {})
        dirty = False
        for entry in subtasks.values():
            if not isinstance(entry, dict) or not entry.get("photos"):
                continue
            if any(photo.get("url") == url for photo in entry["photos"]):
                entry["photos"] = change(entry["photos"])
                dirty = True
        if dirty:
            row.subtasks = subtasks
            touched += 1
    return touched


def detach_execution_photo(db: Session, project_id: int, url: str) -> int:
    """Drop every subtask reference to the photo URL. Nothing is committed here."""
    return _rewrite_photo_entries(
        db, project_id, url,
        lambda photos: [photo for photo in photos if photo.get("url") != url],
    )


def describe_execution_photo(db: Session, project_id: int, url: str, description: str) -> int:
    """Keep subtask copies of a photo description in step with its gallery row."""
    def change(photos):
        return [dict(photo, description=description) if photo.get("url") == url else photo for photo in photos]

    return _rewrite_photo_entries(db, project_id, url, change)


def execution_photos(db: Session, project_id: int, unit_id: str, unit_name: str) -> List[Dict[str, Any]]:
    """Photos stored on the unit's subtasks, shaped like gallery rows."""
    result = []
    rows = db.query(UnitProgress).filter(
        UnitProgress.project_id == project_id,
        UnitProgress.unit_id == unit_id,
    ).all()
    for row in rows:
        for name, entry in (row.subtasks or {}).items():
            if not isinstance(entry, dict):
                continue
            for photo in entry.get("photos") or []:
                result.append({
                    "id": photo.get("id") or 0,
                    "project_id": project_id,
                    "url": photo["url"],
                    "description": photo.get("description") or f"{name} - {unit_name}",
                    "category": "evolution",
                    "location_label": unit_name,
                    "phase_id": row.phase_id,
                    "created_by": "Execução",
                    "created_at": photo.get("created_at") or row.updated_at,
                })
    return result
