# app/ticket/services.py
import logging

from sqlalchemy.orm import Session
from app.core.database import utcnow
from app.core.errors import BadRequest, NotFound
from app.identity.schemas import Identity
from app.project import services as project_service
from app.ticket.models import Ticket
from app.ticket.schemas import TicketCreate, TicketUpdate

logger = logging.getLogger(__name__)


def list_tickets(db: Session, tenant_id: str, project_id: str | None = None) -> list[Ticket]:
    query = db.query(Ticket).filter(Ticket.tenant_id == tenant_id)
    if project_id:
        query = query.filter(Ticket.project_id == project_id)
    return query.order_by(Ticket.created_at.desc()).all()


def get_ticket(db: Session, tenant_id: str, ticket_id: str) -> Ticket | None:
    return (
        db.query(Ticket)
        .filter(Ticket.id == ticket_id)
        .filter(Ticket.tenant_id == tenant_id)
        .first()
    )


def create_ticket(db: Session, reporter: Identity, payload: TicketCreate) -> Ticket:
    project = project_service.get_project(db, payload.tenant_id, payload.project_id)
    if not project:
        raise NotFound("Project not found")

    db_ticket = Ticket(
        tenant_id=project.tenant_id,
        project_id=project.id,
        title=payload.title,
        description=payload.description or None,
        priority=payload.priority.value,
        reporter_id=reporter.id,
        assignee_id=payload.assignee_id,
    )
    db.add(db_ticket)
    db.commit()
    db.refresh(db_ticket)
    logger.info("Ticket created id=%s project_id=%s tenant_id=%s", db_ticket.id, project.id, project.tenant_id)
    return db_ticket


def update_ticket(db: Session, ticket_id: str, payload: TicketUpdate) -> Ticket:
    changes = payload.changes()
    if not changes:
        raise BadRequest("No updates supplied")

    db_ticket = get_ticket(db, payload.tenant_id, ticket_id)
    if not db_ticket:
        raise NotFound("Ticket not found")

    for field, value in changes.items():
        setattr(db_ticket, field, value)
    db_ticket.updated_at = utcnow()
    db.commit()
    db.refresh(db_ticket)
    return db_ticket
