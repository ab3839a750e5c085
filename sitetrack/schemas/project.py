from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import date, datetime

LevelType = Literal["foundation", "basement", "garage", "common", "apartments", "roof"]
UnitType = Literal["unit", "common", "garage", "commercial"]
ProjectStatus = Literal["green", "yellow", "red"]


class UnitConfig(BaseModel):
    id: str
    name: str
    type: UnitType = "unit"


class LevelConfig(BaseModel):
    """A floor/level of the building; active_phases limits which phases apply to it."""
    id: str
    label: str
    type: LevelType = "apartments"
    order: int = 0
    units: List[UnitConfig] = Field(default_factory=list)
    active_phases: Optional[List[str]] = None


class ProjectStructure(BaseModel):
    floors: int = 0
    units_per_floor: int = 0
    has_foundation: Optional[bool] = None
    basements: Optional[int] = None
    levels: List[LevelConfig] = Field(default_factory=list)


class PhaseConfig(BaseModel):
    id: str
    label: str
    code: str = ""
    color: str = "slate"
    icon: str = "Box"
    subtasks: List[str] = Field(default_factory=list)


class ProjectCreate(BaseModel):
    """Schema for creating a new project"""
    name: str
    address: str
    organization_id: Optional[int] = None
    progress: int = Field(default=0, ge=0, le=100)
    budget_consumed: Optional[float] = 0.0
    status: ProjectStatus = "green"
    resident_engineer: Optional[str] = None
    image_url: Optional[str] = None
    theme_color: Optional[str] = "blue"
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    structure: Optional[ProjectStructure] = None
    phases: Optional[List[PhaseConfig]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProjectUpdate(BaseModel):
    """Schema for updating a project"""
    name: Optional[str] = None
    address: Optional[str] = None
    organization_id: Optional[int] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    budget_consumed: Optional[float] = None
    status: Optional[ProjectStatus] = None
    resident_engineer: Optional[str] = None
    image_url: Optional[str] = None
    theme_color: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    structure: Optional[ProjectStructure] = None
    phases: Optional[List[PhaseConfig]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProjectResponse(BaseModel):
    """Schema for project response"""
    id: int
    organization_id: Optional[int] = None
    user_id: int
    name: str
    address: Optional[str] = None
    progress: int
    budget_consumed: Optional[float] = None
    status: str
    resident_engineer: Optional[str] = None
    image_url: Optional[str] = None
    theme_color: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    structure: Optional[ProjectStructure] = None
    phases: Optional[List[PhaseConfig]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    """Schema for listing projects with summary"""
    id: int
    organization_id: Optional[int] = None
    name: str
    address: Optional[str] = None
    progress: int
    status: str
    image_url: Optional[str] = None
    theme_color: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class AccessResponse(BaseModel):
    """Resolved visibility of the current user on one project"""
    project_id: int
    role: str
    is_owner: bool
    is_org_member: bool
    is_staff: bool
    is_guest: bool
    unit_id: Optional[str] = None
    common_areas: List[str] = Field(default_factory=list)
    claimed: bool = False


class ClaimInviteResponse(BaseModel):
    ok: bool
    claimed: bool
    permission_id: Optional[int] = None
    reason: Optional[str] = None
