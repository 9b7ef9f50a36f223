# app/tenant/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field
from app.tenant.models import Role


class TenantCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)

    model_config = {"str_strip_whitespace": True}


class TenantOut(BaseModel):
    id: str
    name: str
    slug: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TenantWithRole(TenantOut):
    role: Role


class TenantList(BaseModel):
    tenants: list[TenantWithRole]


class TenantEnvelope(BaseModel):
    tenant: TenantOut


class MemberInvite(BaseModel):
    email: str = Field(..., min_length=1)
    role: Role = Role.member

    model_config = {"str_strip_whitespace": True}


class MemberInvited(BaseModel):
    message: str = "Member invited successfully"
    user_id: str
    role: Role
