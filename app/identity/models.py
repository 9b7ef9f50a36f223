# app/identity/models.py
from sqlalchemy import Column, DateTime, String
from app.core.database import Base, utcnow


class User(Base):
    """Identities seen through the identity provider. Not owned here, only referenced."""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_seen_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
