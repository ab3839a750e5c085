"""
Daily reports (RDO) and reporting router.

One daily report per project per day (saving the same day again updates
it), the monthly insight built from those reports, and the AI helpers
that draft report text and risk analyses.
"""
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import DailyReport, Task
from sitetrack.schemas.daily_report import (
    AIText,
    DailyLogRequest,
    DailyReport as DailyReportSchema,
    DailyReportSave,
    MonthlyInsight,
    RiskAnalysisRequest,
)
from sitetrack.utils import ai
from sitetrack.utils.access import ProjectAccess, require_staff
from sitetrack.utils.insights import generate_monthly_insight, month_window
from sitetrack.utils.schedule import bucket_tasks

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reports"])


@router.put("/projects/{project_id}/daily-reports", response_model=DailyReportSchema)
def save_daily_report(
    data: DailyReportSave,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Create or update the report of data.date (unique per project and day)."""
    report = db.query(DailyReport).filter(
        DailyReport.project_id == ctx.project.id,
        DailyReport.date == data.date,
    ).first()

    if report:
        report.weather = data.weather.value
        report.workforce_count = data.workforce_count
        report.observations = data.observations
    else:
        report = DailyReport(
            project_id=ctx.project.id,
            date=data.date,
            weather=data.weather.value,
            workforce_count=data.workforce_count,
            observations=data.observations,
        )
        db.add(report)

    commit_or_500(db, "save daily report")
    db.refresh(report)
    return report


@router.get("/projects/{project_id}/daily-reports", response_model=List[DailyReportSchema])
def list_daily_reports(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = None,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    query = db.query(DailyReport).filter(DailyReport.project_id == ctx.project.id)
    if month is not None:
        start, end = month_window(month, year or date.today().year)
        query = query.filter(DailyReport.date >= start, DailyReport.date <= end)
    return query.order_by(DailyReport.date.desc()).all()


@router.get("/projects/{project_id}/daily-reports/{report_date}", response_model=DailyReportSchema)
def get_daily_report(
    report_date: date,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    report = db.query(DailyReport).filter(
        DailyReport.project_id == ctx.project.id,
        DailyReport.date == report_date,
    ).first()
    if not report:
        raise HTTPException(status_code=404, detail="No daily report for this date")
    return report


@router.get("/projects/{project_id}/insights/monthly", response_model=MonthlyInsight)
def monthly_insight(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Monthly summary: productivity, milestones, curated photos and notable
    report observations. A database failure aborts the whole insight.
    """
    try:
        return generate_monthly_insight(db, ctx.project, month, year)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("Monthly insight failed for project %s (%s/%s): %s", ctx.project.id, month, year, e)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/projects/{project_id}/ai/daily-log", response_model=AIText)
def ai_daily_log(
    data: DailyLogRequest,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    tasks = db.query(Task).filter(Task.project_id == ctx.project.id).order_by(Task.start).all()
    engineer = data.engineer_name or ctx.project.resident_engineer or ctx.user.full_name
    text = ai.generate_daily_log(tasks, data.weather.value, data.workforce, engineer)
    return AIText(text=text)


def _risk_context(db: Session, ctx: ProjectAccess) -> str:
    project = ctx.project
    tasks = db.query(Task).filter(Task.project_id == project.id).all()
    buckets = bucket_tasks(tasks)
    lines = [
        f"Obra: {project.name}",
        f"Endereço: {project.address or '-'}",
        f"Progresso global: {project.progress or 0}%",
        f"Tarefas: {len(tasks)} no total, {len(buckets['delayed'])} atrasadas, {len(buckets['active'])} em andamento",
    ]
    lines.extend(f"- Atrasada: {task.name} (fim {task.end.isoformat()}, {task.progress}%)" for task in buckets["delayed"])
    return "\n".join(lines)


@router.post("/projects/{project_id}/ai/risk-analysis", response_model=AIText)
def ai_risk_analysis(
    data: RiskAnalysisRequest,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Risk analysis over the given context, or a summary of the schedule when none is sent."""
    context = data.context or _risk_context(db, ctx)
    return AIText(text=ai.analyze_project_risk(context))
