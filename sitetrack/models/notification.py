from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index
from datetime import datetime
from sitetrack.database import Base


class Notification(Base):
    """
    In-app activity item ("nova nota no mural", supply status changes...).

    unit_id scopes the item to one unit's mural; guests only ever see items
    of their own unit, staff see every item of the project.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_id = Column(String, nullable=True)
    content = Column(String, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_notification_project_created', 'project_id', 'created_at'),
    )
