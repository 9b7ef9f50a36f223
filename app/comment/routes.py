# app/comment/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.comment import services as comment_service
from app.comment.schemas import CommentCreate, CommentEnvelope, CommentList
from app.core.database import get_db
from app.core.guard import authenticate, authorize_tenant_member
from app.identity.schemas import Identity

router = APIRouter(prefix="/api/tickets", tags=["Comments"])


@router.get("/{ticket_id}/comments", response_model=CommentList)
def list_all(
    ticket_id: str,
    tenant_id: str = Query(..., alias="tenantId", min_length=1),
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
):
    authorize_tenant_member(db, identity, tenant_id)
    return {"comments": comment_service.list_comments(db, tenant_id, ticket_id)}


@router.post("/{ticket_id}/comments", response_model=CommentEnvelope, status_code=201)
def create(
    ticket_id: str,
    payload: CommentCreate,
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
):
    authorize_tenant_member(db, identity, payload.tenant_id)
    comment = comment_service.add_comment(db, payload.tenant_id, ticket_id, identity, payload.body)
    return {"comment": comment}
