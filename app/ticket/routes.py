# app/ticket/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.guard import authenticate, authorize_tenant_member
from app.identity.schemas import Identity
from app.ticket import services as ticket_service
from app.ticket.schemas import TicketCreate, TicketEnvelope, TicketList, TicketUpdate

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


@router.get("", response_model=TicketList)
def list_all(
    tenant_id: str = Query(..., alias="tenantId", min_length=1),
    project_id: str | None = Query(default=None, alias="projectId"),
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
):
    authorize_tenant_member(db, identity, tenant_id)
    return {"tickets": ticket_service.list_tickets(db, tenant_id, project_id)}


@router.post("", response_model=TicketEnvelope, status_code=201)
def create(payload: TicketCreate, identity: Identity = Depends(authenticate), db: Session = Depends(get_db)):
    authorize_tenant_member(db, identity, payload.tenant_id)
    return {"ticket": ticket_service.create_ticket(db, identity, payload)}


@router.patch("/{ticket_id}", response_model=TicketEnvelope)
def update(
    ticket_id: str,
    payload: TicketUpdate,
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
):
    authorize_tenant_member(db, identity, payload.tenant_id)
    return {"ticket": ticket_service.update_ticket(db, ticket_id, payload)}
