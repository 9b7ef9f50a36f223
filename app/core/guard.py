# app/core/guard.py
"""
Access Guard.

Every tenant-scoped route resolves the caller with ``authenticate`` and then
calls ``authorize_tenant_member`` with the ``tenantId`` the caller supplied,
before any tenant data is read or written. Entity queries additionally
filter on their own ``tenant_id`` column, so a member of tenant B passing
an id that belongs to tenant A still finds nothing.
"""
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import Forbidden, Internal, Unauthorized
from app.identity.provider import IdentityProvider, get_identity_provider
from app.identity.schemas import Identity
from app.identity.services import remember_identity
from app.tenant.models import Role, TenantMember

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)

ELEVATED_ROLES = {Role.owner.value, Role.admin.value}


def authenticate(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    provider: IdentityProvider = Depends(get_identity_provider),
    db: Session = Depends(get_db),
) -> Identity:
    if not creds or (creds.scheme or "").lower() != "bearer" or not creds.credentials.strip():
        raise Unauthorized("Authorization token is missing")

    identity = provider.verify_token(creds.credentials.strip())
    remember_identity(db, identity)
    request.state.identity = identity
    return identity


def authorize_tenant_member(db: Session, identity: Identity, tenant_id: str) -> TenantMember:
    try:
        membership = (
            db.query(TenantMember)
            .filter(TenantMember.tenant_id == tenant_id)
            .filter(TenantMember.user_id == identity.id)
            .first()
        )
    except SQLAlchemyError as exc:
        logger.exception("Membership lookup failed tenant_id=%s user_id=%s", tenant_id, identity.id)
        raise Internal(details=str(exc))

    if not membership:
        logger.warning("Denied user_id=%s access to tenant_id=%s", identity.id, tenant_id)
        raise Forbidden("You are not a member of this tenant")
    return membership


def authorize_elevated(membership: TenantMember) -> None:
    if membership.role not in ELEVATED_ROLES:
        raise Forbidden("Only admins can invite members")
