"""
In-app notification feed.

Writes happen next to the action that triggers them (a new mural note, a
reply, a supply order or its status change) and share that action's
commit. Reads are scoped the way projects are: staff see every item of
their projects, guests only the items of their own unit, and nobody sees
the items they created themselves.
"""
import logging
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session

from sitetrack.models import Notification, Profile
from sitetrack.utils.access import list_visible_projects, resolve_access

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 80


def preview(text: Optional[str]) -> str:
    text = " ".join((text or "").split())
    if len(text) <= PREVIEW_LENGTH:
        return text
    return text[:PREVIEW_LENGTH - 1].rstrip() + "…"


def notify(
    db: Session,
    project_id: int,
    content: str,
    created_by: Optional[str],
    unit_id: Optional[str] = None,
) -> Notification:
    """Queue a notification on the session; the caller commits."""
    item = Notification(project_id=project_id, unit_id=unit_id, content=content, created_by=created_by)
    db.add(item)
    return item


def visible_query(db: Session, user: Profile) -> Optional[Query]:
    """
    Notifications the user may see, or None when they see no project at all.

    Args:
        db: database session
        user: current user

    Returns:
        Query over Notification, not yet ordered or limited
    """
    conditions = []
    for project in list_visible_projects(db, user):
        access = resolve_access(db, project, user)
        if access.is_staff:
            conditions.append(Notification.project_id == project.id)
        elif access.is_guest and access.unit_id:
            conditions.append(and_(
                Notification.project_id == project.id,
                Notification.unit_id == access.unit_id,
            ))
    if not conditions:
        return None

    return db.query(Notification).filter(
        or_(*conditions),
        or_(Notification.created_by.is_(None), Notification.created_by != user.email),
    )


def recent_notifications(db: Session, user: Profile, limit: int = 20) -> List[Notification]:
    query = visible_query(db, user)
    if query is None:
        return []
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def get_visible_notification(db: Session, user: Profile, notification_id: int) -> Optional[Notification]:
    query = visible_query(db, user)
    if query is None:
        return None
    return query.filter(Notification.id == notification_id).first()


def mark_all_read(db: Session, user: Profile) -> int:
    """Flag every visible unread item as read. Nothing is committed here."""
    query = visible_query(db, user)
    if query is None:
        return 0
    items = query.filter(Notification.is_read == False).all()
    for item in items:
        item.is_read = True
    return len(items)


def clear_all(db: Session, user: Profile) -> int:
    """Delete every visible item. Nothing is committed here."""
    query = visible_query(db, user)
    if query is None:
        return 0
    items = query.all()
    for item in items:
        db.delete(item)
    logger.info("User %s cleared %d notification(s)", user.id, len(items))
    return len(items)
