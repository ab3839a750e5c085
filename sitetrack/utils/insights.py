"""
Monthly insight ("smart report") for a project.

Aggregates the month's daily reports, the project's tasks and the photos
taken in the month into one summary: productivity, milestones, a curated
photo selection and notable report observations.
"""
import calendar
from datetime import date, datetime, time
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from sitetrack.models import DailyReport, Project, ProjectPhoto, Task

MONTH_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]

RAINY_WEATHER = {"rainy", "storm"}
NOTE_KEYWORDS = ("concluído", "iniciado")
DEFAULT_PHOTO_LOCATION = "Geral"

MAX_COMPLETED_MILESTONES = 5
MAX_UPCOMING_MILESTONES = 3
MAX_HIGHLIGHT_PHOTOS = 6
MAX_HIGHLIGHT_NOTES = 3
NOTE_EXCERPT_LENGTH = 80
# Weekends are roughly 8 days of a month; the score is work days over the rest
NON_WORKING_DAYS = 8
PROGRESS_DELTA = 2


def month_window(month: int, year: int):
    """First and last calendar day of the month (month is 1-12)."""
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def productivity_score(work_days: int, total_days: int) -> int:
    return min(100, round(work_days / (total_days - NON_WORKING_DAYS) * 100))


def curate_photos(photos: List[ProjectPhoto]) -> List[ProjectPhoto]:
    """Keep the first photo per (day, location) and at most six overall."""
    selected: Dict[str, ProjectPhoto] = {}
    for photo in photos:
        if photo.created_at is None:
            continue
        location = photo.location_label or DEFAULT_PHOTO_LOCATION
        key = f"{photo.created_at.date().isoformat()}-{location}"
        if key not in selected:
            selected[key] = photo
    return list(selected.values())[:MAX_HIGHLIGHT_PHOTOS]


def _is_relevant_observation(report: DailyReport) -> bool:
    text = report.observations or ""
    if len(text) <= 10:
        return False
    lowered = text.lower()
    return report.weather == "storm" or any(keyword in lowered for keyword in NOTE_KEYWORDS)


def relevant_notes(reports: List[DailyReport], month: int) -> List[str]:
    """Up to three observation excerpts, newest report first."""
    notes = []
    candidates = sorted(
        (report for report in reports if _is_relevant_observation(report)),
        key=lambda report: report.date,
        reverse=True,
    )
    for report in candidates[:MAX_HIGHLIGHT_NOTES]:
        text = report.observations
        excerpt = text[:NOTE_EXCERPT_LENGTH]
        if len(text) > NOTE_EXCERPT_LENGTH:
            excerpt += "..."
        notes.append(f"{report.date.day}/{month}: {excerpt}")
    return notes


def generate_monthly_insight(db: Session, project: Project, month: int, year: int) -> Dict[str, Any]:
    """
    Build the monthly insight for a project.

    Args:
        db: Database session
        project: Project the insight is about
        month: Month number, 1-12
        year: Four digit year

    Returns:
        Dict shaped like schemas.MonthlyInsight

    Raises:
        ValueError: month out of range
        SQLAlchemyError: propagated untouched, no partial insight is built
    """
    start_date, end_date = month_window(month, year)

    reports = db.query(DailyReport).filter(
        DailyReport.project_id == project.id,
        DailyReport.date >= start_date,
        DailyReport.date <= end_date,
    ).order_by(DailyReport.date).all()

    tasks = db.query(Task).filter(Task.project_id == project.id).order_by(Task.id).all()

    photos = db.query(ProjectPhoto).filter(
        ProjectPhoto.project_id == project.id,
        ProjectPhoto.created_at >= datetime.combine(start_date, time.min),
        ProjectPhoto.created_at <= datetime.combine(end_date, time.max),
    ).order_by(ProjectPhoto.created_at).all()

    total_days = end_date.day
    work_days = len(reports)
    rainy_days = len([report for report in reports if report.weather in RAINY_WEATHER])
    total_workforce = sum(report.workforce_count or 0 for report in reports)
    avg_workforce = round(total_workforce / work_days) if work_days > 0 else 0

    completed = [
        task.name for task in tasks
        if task.progress == 100 and start_date <= task.end <= end_date
    ][:MAX_COMPLETED_MILESTONES]
    upcoming = [
        task.name for task in tasks
        if task.progress < 100 and start_date <= task.start <= end_date
    ][:MAX_UPCOMING_MILESTONES]

    current = project.progress or 0

    return {
        "period": f"{MONTH_NAMES[month - 1]} {year}",
        "productivity": {
            "total_days": total_days,
            "work_days": work_days,
            "rainy_days": rainy_days,
            "avg_workforce": avg_workforce,
            "score": productivity_score(work_days, total_days),
        },
        "milestones": {"completed": completed, "upcoming": upcoming},
        "highlights": {
            "photos": curate_photos(photos),
            "notes": relevant_notes(reports, month),
        },
        "progress": {
            "start": max(0, current - PROGRESS_DELTA),
            "current": current,
            "delta": PROGRESS_DELTA,
        },
    }
