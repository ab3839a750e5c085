from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime

PermissionRole = Literal["client", "architect", "admin"]


class UnitProgress(BaseModel):
    id: int
    project_id: int
    unit_id: str
    phase_id: str
    percentage: int
    subtasks: Optional[Dict[str, Any]] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class UnitPhaseSave(BaseModel):
    """Per-subtask progress for one unit/phase; the phase percentage is derived from it."""
    subtasks: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    percentage: Optional[int] = Field(default=None, ge=0, le=100)


class MassUpdate(BaseModel):
    phase_id: str
    unit_ids: List[str]
    progress: int = Field(ge=0, le=100)
    subtasks: List[str] = Field(default_factory=list)


class MatrixUnit(BaseModel):
    id: str
    name: str
    type: str
    phases: Dict[str, Dict[str, Any]]


class MatrixLevel(BaseModel):
    id: str
    label: str
    type: str
    active_phases: Optional[List[str]] = None
    units: List[MatrixUnit]


class ProgressMatrix(BaseModel):
    project_id: int
    global_progress: int
    levels: List[MatrixLevel]


class PermissionInvite(BaseModel):
    """Bulk invite: emails separated by newlines, commas or semicolons."""
    emails: str
    unit_id: str
    role: PermissionRole = "client"
    job_title: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    common_areas: List[str] = Field(default_factory=list)


class PermissionInviteResult(BaseModel):
    processed: int
    emails: List[str]


class UnitPermission(BaseModel):
    id: int
    project_id: int
    unit_id: str
    unit_name: Optional[str] = None
    user_id: Optional[int] = None
    email: str
    role: str
    job_title: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    common_areas: Optional[List[str]] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
