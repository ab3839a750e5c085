"""
Notification feed router. Clients poll it; there is no push channel.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from sitetrack.core.security import get_current_user
from sitetrack.database import commit_or_500, get_db
from sitetrack.models import Profile
from sitetrack.schemas.notification import Notification as NotificationSchema, NotificationBatchResult
from sitetrack.utils.notifications import clear_all, get_visible_notification, mark_all_read, recent_notifications

router = APIRouter(tags=["Notifications"])


def _get_notification(db: Session, user: Profile, notification_id: int):
    item = get_visible_notification(db, user, notification_id)
    if not item:
        raise HTTPException(status_code=404, detail="Notification not found")
    return item


@router.get("", response_model=List[NotificationSchema])
def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """Newest first, without the items the user created."""
    return recent_notifications(db, current_user, limit)


@router.post("/read-all", response_model=NotificationBatchResult)
def read_all(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    count = mark_all_read(db, current_user)
    commit_or_500(db, "mark notifications read")
    return NotificationBatchResult(count=count)


@router.post("/{notification_id}/read", response_model=NotificationSchema)
def read_one(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    item = _get_notification(db, current_user, notification_id)
    item.is_read = True
    commit_or_500(db, "mark notification read")
    db.refresh(item)
    return item


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    item = _get_notification(db, current_user, notification_id)
    db.delete(item)
    commit_or_500(db, "delete notification")
    return {"message": "Notification deleted"}


@router.delete("", response_model=NotificationBatchResult)
def delete_all(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    count = clear_all(db, current_user)
    commit_or_500(db, "clear notifications")
    return NotificationBatchResult(count=count)
