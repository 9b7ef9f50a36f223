# app/comment/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    body: str = Field(..., min_length=1)

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}


class CommentOut(BaseModel):
    id: str
    ticket_id: str
    tenant_id: str
    body: str
    author_id: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CommentList(BaseModel):
    comments: list[CommentOut]


class CommentEnvelope(BaseModel):
    comment: CommentOut
