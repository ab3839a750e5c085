from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from sitetrack.core.constants import WeatherCondition
from sitetrack.schemas.media import ProjectPhoto


class DailyReportSave(BaseModel):
    date: date
    weather: WeatherCondition = WeatherCondition.SUNNY
    workforce_count: int = Field(default=0, ge=0)
    observations: Optional[str] = None


class DailyReport(BaseModel):
    id: int
    project_id: int
    date: date
    weather: WeatherCondition
    workforce_count: int
    observations: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class Productivity(BaseModel):
    total_days: int
    work_days: int
    rainy_days: int
    avg_workforce: int
    score: int


class Milestones(BaseModel):
    completed: List[str]
    upcoming: List[str]


class Highlights(BaseModel):
    photos: List[ProjectPhoto]
    notes: List[str]


class ProgressDelta(BaseModel):
    start: int
    current: int
    delta: int


class MonthlyInsight(BaseModel):
    period: str
    productivity: Productivity
    milestones: Milestones
    highlights: Highlights
    progress: ProgressDelta


class DailyLogRequest(BaseModel):
    weather: WeatherCondition
    workforce: int = Field(ge=0)
    engineer_name: Optional[str] = None


class RiskAnalysisRequest(BaseModel):
    context: Optional[str] = None


class AIText(BaseModel):
    text: str
