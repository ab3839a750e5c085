from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date, datetime

from sitetrack.schemas.log import LogEntry
from sitetrack.schemas.note import Note
from sitetrack.schemas.supply import SupplyOrder
from sitetrack.schemas.task import Task
from sitetrack.schemas.unit import UnitProgress


class ActiveFront(BaseModel):
    id: str
    label: str
    progress: int


class CompletedFloor(BaseModel):
    id: str
    label: str
    date: Optional[datetime] = None


class PhaseDetail(BaseModel):
    last_completed: str
    active_fronts: List[ActiveFront]
    completed_floors: List[CompletedFloor]
    pending_floors: List[str]
    completed_count: int
    total_count: int


class PhaseAverage(BaseModel):
    avg: int
    count: int


class CurrentWeather(BaseModel):
    temperature: int
    condition: str
    is_day: bool
    wind_speed: float


class DailyForecast(BaseModel):
    time: List[date]
    weather_code: List[int]
    max_temp: List[float]
    min_temp: List[float]
    rain_prob: List[Optional[int]]


class WeatherData(BaseModel):
    current: CurrentWeather
    daily: DailyForecast
    insights: List[str]


class NotesOverview(BaseModel):
    for_me: List[Note] = Field(default_factory=list)
    my_posts: List[Note] = Field(default_factory=list)
    general: List[Note] = Field(default_factory=list)


class TaskBuckets(BaseModel):
    delayed: List[Task]
    active: List[Task]
    upcoming: List[Task]


class StaffDashboard(BaseModel):
    load_status: str
    phase_progress: Dict[str, PhaseDetail]
    bottlenecks: List[str]
    recent_logs: List[LogEntry]
    notes: NotesOverview
    recent_supplies: List[SupplyOrder]
    weather: Optional[WeatherData] = None
    tasks: TaskBuckets


class UnitSummary(BaseModel):
    unit_id: str
    unit_name: Optional[str] = None
    percentage: int
    phases: List[UnitProgress]


class CommonAreaProgress(BaseModel):
    unit_id: str
    unit_name: str
    unit_type: str
    phase_id: str
    percentage: int


class CustomerDashboard(BaseModel):
    load_status: str
    role: str
    unit: Optional[UnitSummary] = None
    building_progress: Dict[str, PhaseAverage]
    building_overall: int
    common_areas: List[CommonAreaProgress]
    unit_tasks: List[Task]
