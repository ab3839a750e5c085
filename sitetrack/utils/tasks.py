"""
Task side effects: status normalization, dependency cascades and the
two-way sync between linked tasks and unit_progress.
"""
import logging
from datetime import timedelta
from typing import Iterable, List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitetrack.core.constants import TaskStatus
from sitetrack.models import Task, UnitProgress
from sitetrack.utils.unit_progress import upsert_unit_progress

logger = logging.getLogger(__name__)


def normalize_status(progress: int) -> str:
    if progress >= 100:
        return TaskStatus.COMPLETED.value
    if progress <= 0:
        return TaskStatus.NOT_STARTED.value
    return TaskStatus.IN_PROGRESS.value


def cascade_shift(
    db: Session,
    tasks: Iterable[Task],
    task_id: int,
    days: int,
    visited: Optional[Set[int]] = None,
) -> List[Task]:
    """
    Move every task depending on task_id (directly or transitively) by the
    given number of days.

    Args:
        db: Database session (changes are flushed, not committed)
        tasks: All tasks of the project
        task_id: Task whose end date moved
        days: Shift to apply, negative to pull dependents earlier
        visited: Ids already handled; guards against dependency cycles

    Returns:
        The shifted tasks
    """
    if days == 0:
        return []
    tasks = list(tasks)
    visited = visited if visited is not None else {task_id}
    shifted: List[Task] = []

    for dependent in tasks:
        if task_id not in (dependent.dependencies or []) or dependent.id in visited:
            continue
        visited.add(dependent.id)
        dependent.start = dependent.start + timedelta(days=days)
        dependent.end = dependent.end + timedelta(days=days)
        shifted.append(dependent)
        shifted.extend(cascade_shift(db, tasks, dependent.id, days, visited))

    if shifted:
        db.flush()
    return shifted


def sync_unit_progress_from_task(db: Session, task: Task) -> Optional[UnitProgress]:
    """
    Mirror a linked task's progress onto unit_progress.

    Runs after the task itself is committed. Failures are logged and rolled
    back here; the task update stays in place.
    """
    if not task.linked_unit_id or not task.linked_phase_id:
        return None

    subtasks = {name: {"progress": task.progress} for name in (task.linked_subtasks or [])}
    try:
        row = upsert_unit_progress(
            db,
            task.project_id,
            task.linked_unit_id,
            task.linked_phase_id,
            task.progress,
            subtasks,
        )
        db.commit()
        return row
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(
            "Unit progress sync failed for task %s (unit %s, phase %s): %s",
            task.id, task.linked_unit_id, task.linked_phase_id, e,
        )
        return None


def sync_tasks_from_unit_progress(
    db: Session,
    project_id: int,
    unit_id: str,
    phase_id: str,
    percentage: int,
) -> List[Task]:
    """Tasks linked to (unit, phase) take the saved percentage and its status. No commit."""
    tasks = db.query(Task).filter(
        Task.project_id == project_id,
        Task.linked_unit_id == unit_id,
        Task.linked_phase_id == phase_id,
    ).all()
    status = normalize_status(percentage)
    for task in tasks:
        task.progress = percentage
        task.status = status
    return tasks
