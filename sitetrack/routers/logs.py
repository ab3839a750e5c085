"""
Project activity log router: the execution feed and its calendar view.
"""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import LogEntry
from sitetrack.schemas.log import CalendarMonth, LogEntry as LogEntrySchema, LogEntryCreate
from sitetrack.utils.access import ProjectAccess, require_staff
from sitetrack.utils.calendar_view import build_calendar, fetch_window

router = APIRouter(tags=["Logs"])


@router.get("/projects/{project_id}/logs", response_model=List[LogEntrySchema])
def list_logs(
    category: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    query = db.query(LogEntry).filter(LogEntry.project_id == ctx.project.id)
    if category:
        query = query.filter(LogEntry.category == category)
    return query.order_by(LogEntry.date.desc()).limit(limit).all()


@router.post("/projects/{project_id}/logs", response_model=LogEntrySchema)
def create_log(
    data: LogEntryCreate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    if not data.title.strip():
        raise HTTPException(status_code=400, detail="Log title cannot be empty")

    entry = LogEntry(
        project_id=ctx.project.id,
        user_name=ctx.user.full_name or ctx.user.email,
        user_avatar=ctx.user.avatar_url,
        **data.model_dump(exclude_none=True),
    )
    db.add(entry)
    commit_or_500(db, "create log entry")
    db.refresh(entry)
    return entry


@router.get("/projects/{project_id}/logs/calendar", response_model=CalendarMonth)
def logs_calendar(
    month: int = Query(..., ge=1, le=12),
    year: Optional[int] = None,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Logs grouped by day (YYYY-MM-DD keys) for the month grid.

    The previous and next months are included so the client can move
    one month either way without another request.
    """
    year = year or date.today().year
    window_start, window_end = fetch_window(year, month)
    logs = (
        db.query(LogEntry)
        .filter(
            LogEntry.project_id == ctx.project.id,
            LogEntry.date >= window_start,
            LogEntry.date <= window_end,
        )
        .order_by(LogEntry.date)
        .all()
    )
    return build_calendar(logs, year, month)
