from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import date, datetime

NoteStatus = Literal["pending", "in_progress", "blocked", "completed"]
Priority = Literal["low", "medium", "high"]


class NoteCreate(BaseModel):
    title: Optional[str] = None
    content: str = Field(min_length=1)
    priority: Priority = "medium"
    status: NoteStatus = "pending"
    assigned_to: Optional[str] = None
    due_date: Optional[date] = None
    context: Optional[str] = None


class NoteUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[NoteStatus] = None
    assigned_to: Optional[str] = None
    due_date: Optional[date] = None
    context: Optional[str] = None


class NoteStatusChange(BaseModel):
    status: NoteStatus


class NoteReplyCreate(BaseModel):
    content: str = Field(min_length=1)


class NoteReply(BaseModel):
    id: int
    note_id: int
    content: str
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class Note(BaseModel):
    id: int
    project_id: int
    title: Optional[str] = None
    content: str
    priority: str
    status: str
    assigned_to: Optional[str] = None
    created_by: str
    due_date: Optional[date] = None
    context: Optional[str] = None
    attachments: Optional[List[str]] = None
    is_completed: bool
    created_at: datetime
    replies: List[NoteReply] = Field(default_factory=list)

    class Config:
        from_attributes = True
