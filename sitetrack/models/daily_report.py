from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime
from sitetrack.database import Base


class DailyReport(Base):
    """Daily construction report (RDO): one row per project per day."""
    __tablename__ = "daily_reports"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    weather = Column(String, nullable=False, default="sunny")  # sunny, cloudy, rainy, storm
    workforce_count = Column(Integer, nullable=False, default=0)
    observations = Column(String, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('project_id', 'date', name='uq_daily_report_day'),
    )
