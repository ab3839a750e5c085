"""
Progress aggregation over unit_progress rows.

Rows are (unit_id, phase_id, percentage, updated_at) records; levels and
phases are the JSON documents stored on the project. Everything here is a
pure function so dashboards and tests can feed plain rows in.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sitetrack.core.constants import DEFAULT_PHASES

NO_COMPLETION_LABEL = "Início"


def active_phases(project_phases: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Phases configured on the project, or the default catalogue when none are."""
    return project_phases if project_phases else DEFAULT_PHASES


def project_levels(structure: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    levels = (structure or {}).get("levels") or []
    return sorted(levels, key=lambda level: level.get("order", 0))


def phase_applies(level: Dict[str, Any], phase_id: str) -> bool:
    """A level without an explicit allow-list takes every phase."""
    allowed = level.get("active_phases")
    return not allowed or phase_id in allowed


def _progress_map(rows: Iterable[Any]) -> Dict[str, Dict[str, Dict[str, Any]]]:
    result: Dict[str, Dict[str, Dict[str, Any]]] = {}
    for row in rows:
        result.setdefault(row.unit_id, {})[row.phase_id] = {
            "percentage": row.percentage or 0,
            "updated_at": row.updated_at,
        }
    return result


def phase_averages(rows: Iterable[Any]) -> Dict[str, Dict[str, int]]:
    """Building-wide mean per phase: {phase_id: {"avg": int, "count": int}}."""
    totals: Dict[str, List[int]] = {}
    for row in rows:
        bucket = totals.setdefault(row.phase_id, [0, 0])
        bucket[0] += row.percentage or 0
        bucket[1] += 1
    return {
        phase_id: {"avg": round(total / count), "count": count}
        for phase_id, (total, count) in totals.items()
    }


def overall_percentage(rows: Iterable[Any]) -> int:
    """
    Simple mean of every (unit, phase) row.

    Not weighted by how many units each phase covers; phases recorded on
    few units weigh as much per row as phases recorded everywhere.
    """
    values = [row.percentage or 0 for row in rows]
    if not values:
        return 0
    return round(sum(values) / len(values))


def summarize_phases(
    levels: List[Dict[str, Any]],
    rows: Iterable[Any],
    phases: List[Dict[str, Any]],
) -> Dict[str, Dict[str, Any]]:
    """
    Per-phase floor states for the dashboard sector grid.

    For every phase, each applicable floor with at least one unit is:
    - complete: every unit at 100
    - pending: every unit at 0 (units without a row count as 0)
    - active: anything else, reported with its rounded mean
    """
    progress = _progress_map(rows)
    result: Dict[str, Dict[str, Any]] = {}

    for phase in phases:
        phase_id = phase["id"]
        total_count = 0
        active_fronts = []
        completed_floors = []
        pending_floors = []

        for level in levels:
            if not phase_applies(level, phase_id):
                continue
            units = level.get("units") or []
            if not units:
                continue
            total_count += 1

            floor_total = 0
            all_complete = True
            all_pending = True
            latest_completion: Optional[datetime] = None

            for unit in units:
                unit_data = progress.get(unit["id"], {}).get(phase_id) or {}
                pct = unit_data.get("percentage", 0)
                floor_total += pct
                if pct < 100:
                    all_complete = False
                if pct > 0:
                    all_pending = False
                updated_at = unit_data.get("updated_at")
                if pct == 100 and updated_at is not None:
                    if latest_completion is None or updated_at > latest_completion:
                        latest_completion = updated_at

            if all_complete:
                completed_floors.append({"id": level["id"], "label": level["label"], "date": latest_completion})
            elif all_pending:
                pending_floors.append(level["label"])
            else:
                active_fronts.append({
                    "id": level["id"],
                    "label": level["label"],
                    "progress": round(floor_total / len(units)),
                })

        last_completed = NO_COMPLETION_LABEL
        latest: Optional[datetime] = None
        for floor in completed_floors:
            stamp = floor["date"] or datetime.min
            if latest is None or stamp >= latest:
                latest = stamp
                last_completed = floor["label"]

        result[phase_id] = {
            "last_completed": last_completed,
            "active_fronts": active_fronts,
            "completed_floors": sorted(
                completed_floors,
                key=lambda floor: floor["date"] or datetime.min,
                reverse=True,
            ),
            "pending_floors": pending_floors,
            "completed_count": len(completed_floors),
            "total_count": total_count,
        }

    return result


def phase_percentage_from_subtasks(
    subtasks: Dict[str, Any],
    template: List[str],
    fallback: int = 0,
) -> int:
    """Mean progress of the phase's template subtasks; missing ones count as 0."""
    if not template:
        return fallback
    total = 0
    for name in template:
        entry = subtasks.get(name)
        if isinstance(entry, dict):
            total += entry.get("progress") or 0
        elif isinstance(entry, (int, float)):
            total += entry
    return round(total / len(template))


def project_global_progress(
    levels: List[Dict[str, Any]],
    rows: Iterable[Any],
    phases: List[Dict[str, Any]],
) -> int:
    """Mean over every (unit, applicable phase) pair of the structure."""
    progress = _progress_map(rows)
    total = 0
    count = 0
    for level in levels:
        for unit in level.get("units") or []:
            for phase in phases:
                if not phase_applies(level, phase["id"]):
                    continue
                total += progress.get(unit["id"], {}).get(phase["id"], {}).get("percentage", 0)
                count += 1
    return 0 if count == 0 else round(total / count)


def find_unit(levels: List[Dict[str, Any]], unit_id: str) -> Optional[Dict[str, Any]]:
    """The unit config plus its level's label/type, or None."""
    for level in levels:
        for unit in level.get("units") or []:
            if unit["id"] == unit_id:
                return {**unit, "level_id": level["id"], "level_label": level["label"], "level_type": level.get("type")}
    return None


def all_units(levels: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {**unit, "level_id": level["id"], "level_label": level["label"], "level_type": level.get("type")}
        for level in levels
        for unit in level.get("units") or []
    ]
