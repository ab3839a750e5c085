from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from datetime import datetime
from sitetrack.database import Base


class ProjectDocument(Base):
    __tablename__ = "project_documents"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False, default="others")
    context = Column(String, nullable=True)  # unit/area the document belongs to
    file_url = Column(String, nullable=False)
    file_type = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ProjectPhoto(Base):
    __tablename__ = "project_photos"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=False, default="evolution")
    location_label = Column(String, nullable=True)
    phase_id = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_photo_project_created', 'project_id', 'created_at'),
    )
