from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime

from sitetrack.core.constants import TaskStatus


class TaskBase(BaseModel):
    name: str
    custom_id: Optional[str] = None
    description: Optional[str] = None
    start: date
    end: date
    progress: int = Field(default=0, ge=0, le=100)
    dependencies: Optional[List[int]] = None
    assigned_to: Optional[str] = None
    image_url: Optional[str] = None
    linked_unit_id: Optional[str] = None
    linked_phase_id: Optional[str] = None
    linked_subtasks: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end < self.start:
            raise ValueError("Task end date must not be before its start date")
        return self


class TaskCreate(TaskBase):
    pass


class TaskUpdate(TaskBase):
    """Full replacement of a task's editable fields (the edit form sends everything)."""
    pass


class Task(BaseModel):
    id: int
    project_id: int
    name: str
    custom_id: Optional[str] = None
    description: Optional[str] = None
    start: date
    end: date
    progress: int
    status: TaskStatus
    dependencies: Optional[List[int]] = None
    assigned_to: Optional[str] = None
    image_url: Optional[str] = None
    linked_unit_id: Optional[str] = None
    linked_phase_id: Optional[str] = None
    linked_subtasks: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GanttRow(BaseModel):
    task: Task
    offset_days: int
    span_days: int
    visible: bool
    has_conflict: bool


class GanttView(BaseModel):
    window_start: date
    window_end: date
    days: int
    rows: List[GanttRow]
    pending: List[Task]
    completed: List[Task]
    conflicts: List[int]
