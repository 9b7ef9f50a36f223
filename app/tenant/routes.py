# app/tenant/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.errors import NotFound
from app.core.guard import authenticate, authorize_elevated, authorize_tenant_member
from app.identity.schemas import Identity
from app.identity.services import find_identity_by_email
from app.tenant import services as tenant_service
from app.tenant.schemas import (
    MemberInvite,
    MemberInvited,
    TenantCreate,
    TenantEnvelope,
    TenantList,
    TenantWithRole,
)

router = APIRouter(prefix="/api/tenants", tags=["Tenants"])


@router.get("", response_model=TenantList)
def list_tenants(identity: Identity = Depends(authenticate), db: Session = Depends(get_db)):
    rows = tenant_service.list_tenants_for_user(db, identity.id)
    tenants = [
        TenantWithRole(id=t.id, name=t.name, slug=t.slug, created_at=t.created_at, role=role)
        for t, role in rows
    ]
    return {"tenants": tenants}


@router.post("", response_model=TenantEnvelope, status_code=201)
def create(payload: TenantCreate, identity: Identity = Depends(authenticate), db: Session = Depends(get_db)):
    tenant = tenant_service.create_tenant(db, identity, payload)
    return {"tenant": tenant}


@router.post("/{tenant_id}/members", response_model=MemberInvited, status_code=201)
def invite_member(
    tenant_id: str,
    payload: MemberInvite,
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
):
    membership = authorize_tenant_member(db, identity, tenant_id)
    authorize_elevated(membership)

    invitee = find_identity_by_email(db, payload.email)
    if not invitee:
        raise NotFound("User with that email does not exist yet. Ask them to sign up first.")

    member = tenant_service.add_member(db, tenant_id, invitee.id, payload.role)
    return MemberInvited(user_id=member.user_id, role=member.role)
