from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from sitetrack.database import Base


class SupplyOrder(Base):
    """
    Material request for the site.

    items is a JSON list of {id, name, quantity, unit, checked}.
    Status flow: requested -> approved -> separating -> delivering -> delivered
    (or cancelled at any point).
    """
    __tablename__ = "supply_orders"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    priority = Column(String, nullable=False, default="medium")
    items = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False, default="requested")
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    comments = relationship(
        "SupplyComment",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="SupplyComment.created_at",
    )


class SupplyComment(Base):
    __tablename__ = "supply_comments"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("supply_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String, nullable=False)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    order = relationship("SupplyOrder", back_populates="comments")
