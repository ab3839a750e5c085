from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from sitetrack.database import Base


class Note(Base):
    """Mural note. assigned_to / created_by hold user emails."""
    __tablename__ = "project_notes"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=True)
    content = Column(String, nullable=False)
    priority = Column(String, nullable=False, default="medium")  # low, medium, high
    status = Column(String, nullable=False, default="pending")  # pending, in_progress, blocked, completed
    assigned_to = Column(String, nullable=True)
    created_by = Column(String, nullable=False)
    due_date = Column(Date, nullable=True)
    context = Column(String, nullable=True)
    attachments = Column(JSON, nullable=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    replies = relationship(
        "NoteReply",
        back_populates="note",
        cascade="all, delete-orphan",
        order_by="NoteReply.created_at",
    )


class NoteReply(Base):
    __tablename__ = "project_note_replies"

    id = Column(Integer, primary_key=True, index=True)
    note_id = Column(Integer, ForeignKey("project_notes.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String, nullable=False)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    note = relationship("Note", back_populates="replies")
