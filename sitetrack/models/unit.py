from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, ForeignKey, UniqueConstraint
from datetime import datetime
from sitetrack.database import Base


class UnitProgress(Base):
    """
    Execution progress of one unit for one construction phase.

    subtasks holds {subtask_name: {"progress": int, "photos": [...]}}.
    One row per project/unit/phase; writes go through an upsert on that key.
    """
    __tablename__ = "unit_progress"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_id = Column(String, nullable=False, index=True)
    phase_id = Column(String, nullable=False)
    percentage = Column(Integer, nullable=False, default=0)
    subtasks = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('project_id', 'unit_id', 'phase_id', name='uq_unit_phase'),
    )


class UnitPermission(Base):
    """
    Grants a client/architect/admin access scoped to one unit.

    Rows are created from an email invite (user_id empty) and claimed on the
    invitee's first access. Pausing and revoking both set is_active=False
    and keep the row.
    """
    __tablename__ = "unit_permissions"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_id = Column(String, nullable=False)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True, index=True)
    email = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False, default="client")  # client, architect, admin
    job_title = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    common_areas = Column(JSON, nullable=True)  # level/unit types the guest may also see
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('project_id', 'unit_id', 'email', name='uq_unit_permission_email'),
    )
