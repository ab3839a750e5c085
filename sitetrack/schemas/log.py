from pydantic import BaseModel
from typing import Optional, List, Literal, Dict
from datetime import datetime


class LogEntryCreate(BaseModel):
    category: Literal["unit", "macro", "system"] = "unit"
    title: str
    details: Optional[str] = None
    previous_value: Optional[float] = None
    new_value: Optional[float] = None
    observation: Optional[str] = None
    image_url: Optional[str] = None
    date: Optional[datetime] = None


class LogEntry(BaseModel):
    id: int
    project_id: int
    category: str
    title: str
    details: Optional[str] = None
    previous_value: Optional[float] = None
    new_value: Optional[float] = None
    observation: Optional[str] = None
    user_name: Optional[str] = None
    user_avatar: Optional[str] = None
    image_url: Optional[str] = None
    date: datetime

    class Config:
        from_attributes = True


class CalendarMonth(BaseModel):
    year: int
    month: int
    days_in_month: int
    first_weekday: int  # 0 = Sunday, matching the calendar grid
    logs_by_date: Dict[str, List[LogEntry]]
