# app/project/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    name: str = Field(..., min_length=1)
    description: str | None = None

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}


class ProjectOut(BaseModel):
    id: str
    tenant_id: str
    name: str
    description: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProjectList(BaseModel):
    projects: list[ProjectOut]


class ProjectEnvelope(BaseModel):
    project: ProjectOut
