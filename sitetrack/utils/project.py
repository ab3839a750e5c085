"""
Utility functions for managing projects.

Creation fills in the defaults a new site needs (phase catalogue, empty
structure) and keeps the structure's derived counters consistent with its
levels whenever the structure is saved.
"""
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional

from sitetrack.core.constants import DEFAULT_PHASES
from sitetrack.models import Profile, Project
from sitetrack.schemas.project import ProjectCreate, ProjectUpdate

FLOOR_LEVEL_TYPES = {"apartments", "common", "garage"}


def normalize_structure(structure: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Order levels by their 'order' key and recompute the summary counters
    (floors, basements, has_foundation) from the levels themselves.
    """
    structure = dict(structure or {})
    levels = sorted(structure.get("levels") or [], key=lambda level: level.get("order", 0))
    structure["levels"] = levels
    if levels:
        structure["has_foundation"] = any(level.get("type") == "foundation" for level in levels)
        structure["basements"] = len([level for level in levels if level.get("type") == "basement"])
        structure["floors"] = len([level for level in levels if level.get("type") in FLOOR_LEVEL_TYPES])
    structure.setdefault("floors", 0)
    structure.setdefault("units_per_floor", 0)
    return structure


def create_project(db: Session, data: ProjectCreate, owner: Profile) -> Project:
    """
    Create a project owned by the given user.

    Args:
        db: Database session
        data: Validated create payload
        owner: Current user, recorded as the project owner

    Returns:
        The new Project (flushed, not committed)
    """
    if not data.name or not data.name.strip():
        raise ValueError("Project name cannot be empty")

    payload = data.model_dump(exclude={"structure", "phases"})
    project = Project(**payload, user_id=owner.id)
    project.structure = normalize_structure(data.structure.model_dump() if data.structure else None)
    project.phases = [phase.model_dump() for phase in data.phases] if data.phases else list(DEFAULT_PHASES)
    if not project.resident_engineer:
        project.resident_engineer = owner.full_name

    db.add(project)
    db.flush()
    return project


def apply_project_update(project: Project, data: ProjectUpdate) -> Project:
    """Copy every field the client sent onto the project."""
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValueError("Project name cannot be empty")

    structure = changes.pop("structure", None)
    phases = changes.pop("phases", None)
    for field, value in changes.items():
        setattr(project, field, value)

    if "structure" in data.model_fields_set:
        project.structure = normalize_structure(structure)
    if "phases" in data.model_fields_set:
        project.phases = phases or list(DEFAULT_PHASES)
    return project


def get_project_by_id(db: Session, project_id: int) -> Optional[Project]:
    """
    Get a project by its unique ID.

    Args:
        db: Database session
        project_id: Unique project ID

    Returns:
        Project instance if found, None otherwise
    """
    return db.query(Project).filter(Project.id == project_id).first()


def unit_name_lookup(project: Project) -> Dict[str, str]:
    """unit_id -> display name for every unit of the project."""
    names: Dict[str, str] = {}
    for level in (project.structure or {}).get("levels") or []:
        for unit in level.get("units") or []:
            names[unit["id"]] = unit.get("name") or unit["id"]
    return names


def phase_ids(project: Project) -> List[str]:
    return [phase["id"] for phase in (project.phases or DEFAULT_PHASES)]
