from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index
from datetime import datetime
from sitetrack.database import Base


class LogEntry(Base):
    __tablename__ = "project_logs"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String, nullable=False, default="unit")  # unit, macro, system
    title = Column(String, nullable=False)
    details = Column(String, nullable=True)
    previous_value = Column(Float, nullable=True)
    new_value = Column(Float, nullable=True)
    observation = Column(String, nullable=True)
    user_name = Column(String, nullable=True)
    user_avatar = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    date = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_log_project_date', 'project_id', 'date'),
    )
