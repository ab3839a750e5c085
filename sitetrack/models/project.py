from sqlalchemy import Column, Integer, String, Float, Date, DateTime, JSON, Index, ForeignKey
from datetime import datetime
from sitetrack.database import Base


class Project(Base):
    """
    Central project table - single source of truth for a construction site.

    Besides display metadata this table stores two JSON documents:
    - structure: {floors, units_per_floor, levels: [{id, label, type, order, units, active_phases}]}
    - phases: ordered list of construction stages ({id, label, code, color, icon, subtasks})

    Unit, level and phase ids referenced by tasks, unit_progress and
    unit_permissions are the string ids found inside these documents.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)  # owner

    name = Column(String, nullable=False, index=True)
    address = Column(String, nullable=True)
    progress = Column(Integer, nullable=False, default=0)  # 0-100, rewritten when execution progress is saved
    budget_consumed = Column(Float, nullable=True, default=0.0)
    status = Column(String, nullable=False, default="green")  # green, yellow, red
    resident_engineer = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    theme_color = Column(String, nullable=True, default="blue")

    # Optional site coordinates for the weather widget
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    structure = Column(JSON, nullable=True)
    phases = Column(JSON, nullable=True)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_project_name', 'name'),
        Index('idx_project_updated', 'updated_at'),
    )
