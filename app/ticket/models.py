# app/ticket/models.py
import enum

from sqlalchemy import Column, DateTime, ForeignKey, String
from app.core.database import Base, new_id, utcnow


class TicketStatus(str, enum.Enum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"
    closed = "closed"


class TicketPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), index=True, nullable=False)
    # copied from the parent project so authorization needs no join
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    status = Column(String, default=TicketStatus.open.value, index=True, nullable=False)
    priority = Column(String, default=TicketPriority.medium.value, nullable=False)
    reporter_id = Column(String(64), nullable=False)
    assignee_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
