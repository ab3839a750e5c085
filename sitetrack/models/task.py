from sqlalchemy import Column, Integer, String, Date, DateTime, JSON, ForeignKey, Index
from datetime import datetime
from sitetrack.database import Base


class Task(Base):
    """
    Schedule entry for the Gantt/list views.

    A task may be linked to one (unit, phase) pair of the project structure;
    linked tasks mirror their progress into unit_progress and are checked
    for date conflicts against other tasks on the same unit.
    """
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    custom_id = Column(String, nullable=True)
    description = Column(String, nullable=True)
    start = Column(Date, nullable=False)
    end = Column(Date, nullable=False)
    progress = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="not_started")  # not_started, in_progress, completed
    dependencies = Column(JSON, nullable=True)  # predecessor task ids
    assigned_to = Column(String, nullable=True)
    image_url = Column(String, nullable=True)

    linked_unit_id = Column(String, nullable=True, index=True)
    linked_phase_id = Column(String, nullable=True)
    linked_subtasks = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_task_unit_phase', 'project_id', 'linked_unit_id', 'linked_phase_id'),
    )
