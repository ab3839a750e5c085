"""
Schedule helpers for the Gantt and list views: unit date conflicts and
the task rows laid out over a day window.
"""
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set

from sitetrack.core.constants import TaskStatus

# Default Gantt window: one week back, 45 days in total
DEFAULT_LOOKBACK_DAYS = 7
DEFAULT_WINDOW_DAYS = 45


def overlaps(start: date, end: date, other_start: date, other_end: date) -> bool:
    """Inclusive on both ends: a task ending the day another starts overlaps it."""
    return start <= other_end and end >= other_start


def has_conflict(task: Any, tasks: Iterable[Any]) -> bool:
    """True when another task on the same linked unit overlaps this one's dates."""
    if not task.linked_unit_id:
        return False
    for other in tasks:
        if other.id == task.id or other.linked_unit_id != task.linked_unit_id:
            continue
        if overlaps(task.start, task.end, other.start, other.end):
            return True
    return False


def find_conflicts(tasks: Iterable[Any]) -> Set[int]:
    tasks = list(tasks)
    by_unit: Dict[str, List[Any]] = {}
    for task in tasks:
        if task.linked_unit_id:
            by_unit.setdefault(task.linked_unit_id, []).append(task)

    conflicting: Set[int] = set()
    for unit_tasks in by_unit.values():
        for task in unit_tasks:
            if has_conflict(task, unit_tasks):
                conflicting.add(task.id)
    return conflicting


def is_completed(task: Any) -> bool:
    return task.status == TaskStatus.COMPLETED.value or task.progress == 100


def pending_tasks(tasks: Iterable[Any]) -> List[Any]:
    """Open tasks, earliest start first."""
    return sorted((task for task in tasks if not is_completed(task)), key=lambda task: task.start)


def completed_tasks(tasks: Iterable[Any]) -> List[Any]:
    """Finished tasks, most recently ended first."""
    return sorted((task for task in tasks if is_completed(task)), key=lambda task: task.end, reverse=True)


def default_window_start(today: Optional[date] = None) -> date:
    return (today or date.today()) - timedelta(days=DEFAULT_LOOKBACK_DAYS)


def build_gantt(tasks: Iterable[Any], window_start: date, days: int = DEFAULT_WINDOW_DAYS) -> Dict[str, Any]:
    """
    Lay tasks out over [window_start, window_start + days - 1].

    Each row carries the day offset of the bar and its span, both clipped to
    the window. Tasks entirely outside the window are kept with visible=False
    so list views can still show them.
    """
    if days < 1:
        raise ValueError("Gantt window must cover at least one day")

    tasks = sorted(tasks, key=lambda task: task.start)
    window_end = window_start + timedelta(days=days - 1)
    conflicts = find_conflicts(tasks)

    rows = []
    for task in tasks:
        visible = overlaps(task.start, task.end, window_start, window_end)
        if visible:
            bar_start = max(task.start, window_start)
            bar_end = min(task.end, window_end)
            offset_days = (bar_start - window_start).days
            span_days = (bar_end - bar_start).days + 1
        else:
            offset_days = 0
            span_days = 0
        rows.append({
            "task": task,
            "offset_days": offset_days,
            "span_days": span_days,
            "visible": visible,
            "has_conflict": task.id in conflicts,
        })

    return {
        "window_start": window_start,
        "window_end": window_end,
        "days": days,
        "rows": rows,
        "pending": pending_tasks(tasks),
        "completed": completed_tasks(tasks),
        "conflicts": sorted(conflicts),
    }


def bucket_tasks(tasks: Iterable[Any], today: Optional[date] = None) -> Dict[str, List[Any]]:
    """
    Split tasks for the dashboard:
    - delayed: not completed and already past their end date
    - active: in progress, or running today and not completed
    - upcoming: untouched tasks starting within the next two days
    """
    today = today or date.today()
    soon = today + timedelta(days=2)
    delayed, active, upcoming = [], [], []

    for task in tasks:
        done = task.status == TaskStatus.COMPLETED.value
        overdue = not done and task.end < today
        if overdue:
            delayed.append(task)
        if task.status == TaskStatus.IN_PROGRESS.value or (task.start <= today <= task.end and not done):
            active.append(task)
        if task.progress == 0 and not overdue and task.start <= soon:
            upcoming.append(task)

    return {"delayed": delayed, "active": active, "upcoming": upcoming}


def bottleneck_phases(tasks: Iterable[Any], today: Optional[date] = None) -> List[str]:
    """Phase ids with at least one overdue linked task, in first-seen order."""
    today = today or date.today()
    phases: List[str] = []
    for task in tasks:
        if task.status == TaskStatus.COMPLETED.value or task.end >= today:
            continue
        if task.linked_phase_id and task.linked_phase_id not in phases:
            phases.append(task.linked_phase_id)
    return phases
