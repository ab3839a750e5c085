"""
Schedule (Gantt) router.

Tasks may be linked to a (unit, phase) pair of the project structure.
Writes keep three things consistent:
- the task status always follows its progress
- moving a task's end date shifts every dependent task by the same amount
- linked tasks mirror their progress into unit_progress
"""
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import Task
from sitetrack.schemas.task import GanttView, Task as TaskSchema, TaskCreate, TaskUpdate
from sitetrack.utils.access import ProjectAccess, require_project_access, require_staff
from sitetrack.utils.schedule import DEFAULT_WINDOW_DAYS, build_gantt, default_window_start
from sitetrack.utils.tasks import cascade_shift, normalize_status, sync_unit_progress_from_task

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tasks"])


def _visible_tasks(db: Session, ctx: ProjectAccess) -> List[Task]:
    """Staff see the whole schedule; guests only the tasks of their unit."""
    query = db.query(Task).filter(Task.project_id == ctx.project.id)
    if not ctx.access.is_staff:
        query = query.filter(Task.linked_unit_id == ctx.access.unit_id)
    return query.order_by(Task.start, Task.id).all()


def _get_task(db: Session, project_id: int, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.project_id == project_id).first()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _clean_dependencies(db: Session, project_id: int, dependencies: Optional[List[int]], task_id: Optional[int] = None):
    if not dependencies:
        return []
    ids = [dep for dep in dict.fromkeys(dependencies) if dep != task_id]
    if not ids:
        return []
    found = {
        row.id for row in db.query(Task.id).filter(Task.project_id == project_id, Task.id.in_(ids)).all()
    }
    missing = [dep for dep in ids if dep not in found]
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown predecessor task(s): {missing}")
    return ids


def _apply(task: Task, data: TaskCreate) -> None:
    task.name = data.name
    task.custom_id = data.custom_id
    task.description = data.description
    task.start = data.start
    task.end = data.end
    task.progress = data.progress
    task.status = normalize_status(data.progress)
    task.assigned_to = data.assigned_to
    task.image_url = data.image_url
    # Empty strings from the form mean "not linked"
    task.linked_unit_id = data.linked_unit_id or None
    task.linked_phase_id = data.linked_phase_id or None
    task.linked_subtasks = data.linked_subtasks or None


@router.get("/projects/{project_id}/tasks", response_model=List[TaskSchema])
def list_tasks(
    ctx: ProjectAccess = Depends(require_project_access),
    db: Session = Depends(get_db),
):
    return _visible_tasks(db, ctx)


@router.get("/projects/{project_id}/tasks/gantt", response_model=GanttView)
def gantt_view(
    start: Optional[date] = None,
    days: int = Query(DEFAULT_WINDOW_DAYS, ge=1, le=366),
    ctx: ProjectAccess = Depends(require_project_access),
    db: Session = Depends(get_db),
):
    """
    Tasks laid out over a day window (default: a week back, 45 days).

    Also returns the pending/completed lists of the list view and the ids of
    tasks whose dates clash with another task on the same unit.
    """
    window_start = start or default_window_start()
    return build_gantt(_visible_tasks(db, ctx), window_start, days)


@router.post("/projects/{project_id}/tasks", response_model=TaskSchema)
def create_task(
    data: TaskCreate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    task = Task(project_id=ctx.project.id)
    _apply(task, data)
    task.dependencies = _clean_dependencies(db, ctx.project.id, data.dependencies)
    db.add(task)
    commit_or_500(db, "create task")
    db.refresh(task)

    sync_unit_progress_from_task(db, task)
    db.refresh(task)
    return task


@router.put("/projects/{project_id}/tasks/{task_id}", response_model=TaskSchema)
def update_task(
    task_id: int,
    data: TaskUpdate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Replace a task's fields.

    When the end date moves, dependents (and their dependents) move by the
    same number of days in the same transaction.
    """
    task = _get_task(db, ctx.project.id, task_id)
    shift_days = (data.end - task.end).days

    _apply(task, data)
    task.dependencies = _clean_dependencies(db, ctx.project.id, data.dependencies, task.id)

    if shift_days:
        project_tasks = db.query(Task).filter(Task.project_id == ctx.project.id).all()
        shifted = cascade_shift(db, project_tasks, task.id, shift_days)
        if shifted:
            logger.info(
                "Task %s moved %+d day(s); shifted dependents %s",
                task.id, shift_days, [t.id for t in shifted],
            )

    commit_or_500(db, "update task")
    db.refresh(task)

    sync_unit_progress_from_task(db, task)
    db.refresh(task)
    return task


@router.delete("/projects/{project_id}/tasks/{task_id}")
def delete_task(
    task_id: int,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    task = _get_task(db, ctx.project.id, task_id)
    for other in db.query(Task).filter(Task.project_id == ctx.project.id, Task.id != task.id).all():
        if task.id in (other.dependencies or []):
            other.dependencies = [dep for dep in other.dependencies if dep != task.id]
    db.delete(task)
    commit_or_500(db, "delete task")
    return {"message": "Task deleted successfully"}
