"""
Data shaping for the two dashboards.

The staff dashboard mixes database aggregates with the weather forecast;
the forecast runs on a worker thread while the rows are aggregated. The
customer dashboard is scoped to one unit plus the common areas the
guest's invite opened up.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from sitetrack.core.constants import COMMON_AREA_TYPES
from sitetrack.models import LogEntry, Note, Profile, Project, SupplyOrder, Task, UnitProgress
from sitetrack.utils.access import AccessContext
from sitetrack.utils.progress import (
    active_phases,
    all_units,
    find_unit,
    overall_percentage,
    phase_averages,
    project_levels,
    summarize_phases,
)
from sitetrack.utils.schedule import bottleneck_phases, bucket_tasks
from sitetrack.utils.unit_progress import unit_tasks
from sitetrack.utils.weather import fetch_weather_forecast

logger = logging.getLogger(__name__)

RECENT_LOG_LIMIT = 6
RECENT_SUPPLY_LIMIT = 5


def split_notes(notes: List[Note], email: str) -> Dict[str, List[Note]]:
    """Open notes assigned to me, posted by me, and unassigned ones."""
    email = (email or "").lower()
    return {
        "for_me": [note for note in notes if (note.assigned_to or "").lower() == email],
        "my_posts": [note for note in notes if (note.created_by or "").lower() == email],
        "general": [note for note in notes if not note.assigned_to],
    }


def _weather_or_none(fetch: Callable[..., Optional[Dict[str, Any]]], project: Project):
    try:
        return fetch(project.latitude, project.longitude)
    except Exception as e:
        logger.warning("Weather section unavailable for project %s: %s", project.id, e)
        return None


def build_staff_dashboard(
    db: Session,
    project: Project,
    user: Profile,
    weather_fetcher: Callable[..., Optional[Dict[str, Any]]] = fetch_weather_forecast,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    today = today or date.today()

    with ThreadPoolExecutor(max_workers=1) as pool:
        weather_future = pool.submit(_weather_or_none, weather_fetcher, project)

        rows = db.query(UnitProgress).filter(UnitProgress.project_id == project.id).all()
        phase_progress = summarize_phases(
            project_levels(project.structure), rows, active_phases(project.phases)
        )

        recent_logs = (
            db.query(LogEntry)
            .filter(LogEntry.project_id == project.id, LogEntry.category == "unit")
            .order_by(LogEntry.date.desc())
            .limit(RECENT_LOG_LIMIT)
            .all()
        )

        open_notes = (
            db.query(Note)
            .filter(Note.project_id == project.id, Note.status != "completed")
            .order_by(Note.created_at.desc())
            .all()
        )

        recent_supplies = (
            db.query(SupplyOrder)
            .filter(SupplyOrder.project_id == project.id)
            .order_by(SupplyOrder.updated_at.desc())
            .limit(RECENT_SUPPLY_LIMIT)
            .all()
        )

        tasks = db.query(Task).filter(Task.project_id == project.id).order_by(Task.start).all()

        weather = weather_future.result()

    return {
        "phase_progress": phase_progress,
        "bottlenecks": bottleneck_phases(tasks, today),
        "recent_logs": recent_logs,
        "notes": split_notes(open_notes, user.email),
        "recent_supplies": recent_supplies,
        "weather": weather,
        "tasks": bucket_tasks(tasks, today),
    }


def visible_common_units(levels: List[Dict[str, Any]], common_areas: List[str]) -> List[Dict[str, Any]]:
    """Common/garage units whose level type or own type was granted to the guest."""
    granted = set(common_areas or [])
    return [
        unit for unit in all_units(levels)
        if unit.get("type") in COMMON_AREA_TYPES
        and (unit.get("level_type") in granted or unit.get("type") in granted)
    ]


def build_customer_dashboard(
    db: Session,
    project: Project,
    access: AccessContext,
    unit_id: Optional[str],
) -> Dict[str, Any]:
    """
    Unit-scoped view for clients and architects.

    Staff may preview any unit; their common-area scope is every common or
    garage unit of the building.
    """
    levels = project_levels(project.structure)
    rows = db.query(UnitProgress).filter(UnitProgress.project_id == project.id).all()

    unit_summary = None
    tasks: List[Task] = []
    if unit_id:
        unit = find_unit(levels, unit_id)
        unit_rows = [row for row in rows if row.unit_id == unit_id]
        percentage = round(sum(row.percentage or 0 for row in unit_rows) / len(unit_rows)) if unit_rows else 0
        unit_summary = {
            "unit_id": unit_id,
            "unit_name": unit.get("name") if unit else None,
            "percentage": percentage,
            "phases": unit_rows,
        }
        tasks = unit_tasks(db, project.id, unit_id)

    common_areas = access.common_areas if not access.is_staff else sorted(COMMON_AREA_TYPES)
    common_units = {unit["id"]: unit for unit in visible_common_units(levels, common_areas)}
    common_progress = [
        {
            "unit_id": row.unit_id,
            "unit_name": common_units[row.unit_id].get("name") or row.unit_id,
            "unit_type": common_units[row.unit_id].get("type"),
            "phase_id": row.phase_id,
            "percentage": row.percentage or 0,
        }
        for row in rows
        if row.unit_id in common_units
    ]

    return {
        "role": access.role,
        "unit": unit_summary,
        "building_progress": phase_averages(rows),
        "building_overall": overall_percentage(rows),
        "common_areas": common_progress,
        "unit_tasks": tasks,
    }
