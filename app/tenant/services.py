# app/tenant/services.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.errors import Conflict
from app.identity.schemas import Identity
from app.tenant.models import Role, Tenant, TenantMember
from app.tenant.schemas import TenantCreate

logger = logging.getLogger(__name__)


def list_tenants_for_user(db: Session, user_id: str) -> list[tuple[Tenant, str]]:
    rows = (
        db.query(TenantMember, Tenant)
        .join(Tenant, Tenant.id == TenantMember.tenant_id)
        .filter(TenantMember.user_id == user_id)
        .order_by(TenantMember.created_at.asc())
        .all()
    )
    return [(tenant, member.role) for member, tenant in rows]


def create_tenant(db: Session, owner: Identity, payload: TenantCreate) -> Tenant:
    """Insert the tenant and its owner membership in a single transaction.

    A slug collision is rejected by the unique index and surfaces as
    ``Conflict``; any failure leaves neither row behind.
    """
    tenant = Tenant(name=payload.name, slug=payload.slug, created_by=owner.id)
    try:
        db.add(tenant)
        db.flush()
        db.add(TenantMember(tenant_id=tenant.id, user_id=owner.id, role=Role.owner.value))
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(f"A tenant with slug '{payload.slug}' already exists")
    except Exception:
        db.rollback()
        raise
    db.refresh(tenant)
    logger.info("Tenant created id=%s slug=%s owner=%s", tenant.id, tenant.slug, owner.id)
    return tenant


def get_membership(db: Session, tenant_id: str, user_id: str) -> TenantMember | None:
    return (
        db.query(TenantMember)
        .filter(TenantMember.tenant_id == tenant_id)
        .filter(TenantMember.user_id == user_id)
        .first()
    )


def add_member(db: Session, tenant_id: str, user_id: str, role: Role) -> TenantMember:
    if get_membership(db, tenant_id, user_id):
        raise Conflict("User is already a member of this tenant")

    member = TenantMember(tenant_id=tenant_id, user_id=user_id, role=role.value)
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User is already a member of this tenant")
    db.refresh(member)
    logger.info("Member added tenant_id=%s user_id=%s role=%s", tenant_id, user_id, role.value)
    return member
