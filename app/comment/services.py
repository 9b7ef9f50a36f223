# app/comment/services.py
import logging

from sqlalchemy.orm import Session
from app.comment.models import Comment
from app.core.errors import NotFound
from app.identity.schemas import Identity
from app.ticket import services as ticket_service
from app.ticket.models import Ticket

logger = logging.getLogger(__name__)


def _require_ticket(db: Session, tenant_id: str, ticket_id: str) -> Ticket:
    ticket = ticket_service.get_ticket(db, tenant_id, ticket_id)
    if not ticket:
        raise NotFound("Ticket not found")
    return ticket


def list_comments(db: Session, tenant_id: str, ticket_id: str) -> list[Comment]:
    _require_ticket(db, tenant_id, ticket_id)
    return (
        db.query(Comment)
        .filter(Comment.ticket_id == ticket_id)
        .filter(Comment.tenant_id == tenant_id)
        .order_by(Comment.created_at.asc())
        .all()
    )


def add_comment(db: Session, tenant_id: str, ticket_id: str, author: Identity, body: str) -> Comment:
    ticket = _require_ticket(db, tenant_id, ticket_id)
    comment = Comment(ticket_id=ticket.id, tenant_id=ticket.tenant_id, body=body, author_id=author.id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("Comment added id=%s ticket_id=%s", comment.id, ticket.id)
    return comment
