from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class Notification(BaseModel):
    id: int
    project_id: int
    unit_id: Optional[str] = None
    content: str
    is_read: bool
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationBatchResult(BaseModel):
    count: int
