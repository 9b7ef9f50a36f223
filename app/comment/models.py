# app/comment/models.py
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from app.core.database import Base, new_id, utcnow


class Comment(Base):
    __tablename__ = "ticket_comments"

    id = Column(String(36), primary_key=True, default=new_id)
    ticket_id = Column(String(36), ForeignKey("tickets.id", ondelete="CASCADE"), index=True, nullable=False)
    # copied from the parent ticket
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False)
    body = Column(Text, nullable=False)
    author_id = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)
