"""
Dashboard router.

Both dashboards report the load status of the request: 'loading' the first
time a user opens the project, 'refreshing' afterwards.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional

from sitetrack.database import get_db
from sitetrack.schemas.dashboard import CustomerDashboard, StaffDashboard
from sitetrack.utils import weather as weather_service
from sitetrack.utils.access import ProjectAccess, require_project_access, require_staff
from sitetrack.utils.dashboard import build_customer_dashboard, build_staff_dashboard
from sitetrack.utils.load_state import load_tracker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dashboard"])


@router.get("/projects/{project_id}/dashboard", response_model=StaffDashboard)
def staff_dashboard(
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Site overview for staff: per-phase floor states, bottlenecks, recent
    unit logs, the notes board, latest supply requests, weather and the
    delayed/active/upcoming task lists.
    """
    status = load_tracker.begin(ctx.user.id, ctx.project.id)
    try:
        data = build_staff_dashboard(
            db, ctx.project, ctx.user,
            weather_fetcher=weather_service.fetch_weather_forecast,
        )
    except SQLAlchemyError as e:
        load_tracker.finish(ctx.user.id, ctx.project.id, ok=False)
        logger.error("Dashboard failed for project %s: %s", ctx.project.id, e)
        raise HTTPException(status_code=500, detail=str(e))

    load_tracker.finish(ctx.user.id, ctx.project.id)
    data["load_status"] = status.value
    return data


@router.get("/projects/{project_id}/customer-dashboard", response_model=CustomerDashboard)
def customer_dashboard(
    unit_id: Optional[str] = None,
    ctx: ProjectAccess = Depends(require_project_access),
    db: Session = Depends(get_db),
):
    """
    Unit view for clients and architects.

    Guests always get their own unit; staff may pass unit_id to preview
    what a given unit's client sees.
    """
    access = ctx.access
    target_unit = unit_id if access.is_staff else access.unit_id

    status = load_tracker.begin(ctx.user.id, ctx.project.id)
    try:
        data = build_customer_dashboard(db, ctx.project, access, target_unit)
    except SQLAlchemyError as e:
        load_tracker.finish(ctx.user.id, ctx.project.id, ok=False)
        logger.error("Customer dashboard failed for project %s: %s", ctx.project.id, e)
        raise HTTPException(status_code=500, detail=str(e))

    load_tracker.finish(ctx.user.id, ctx.project.id)
    data["load_status"] = status.value
    return data
