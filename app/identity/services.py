# app/identity/services.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.database import utcnow
from app.identity.models import User
from app.identity.schemas import Identity

logger = logging.getLogger(__name__)


def remember_identity(db: Session, identity: Identity) -> None:
    user = db.get(User, identity.id)
    if user is None:
        db.add(User(id=identity.id, email=identity.email))
    else:
        user.email = identity.email
        user.last_seen_at = utcnow()
    try:
        db.commit()
    except IntegrityError:
        # a parallel request recorded the same subject first
        db.rollback()
        logger.warning("Identity %s already recorded by a concurrent request", identity.id)


def find_identity_by_email(db: Session, email: str) -> Identity | None:
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user:
        return None
    return Identity.model_validate(user)
