# app/ticket/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from app.ticket.models import TicketPriority, TicketStatus
from app.ticket.priority import coerce_priority


class TicketCreate(BaseModel):
    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    project_id: str = Field(..., alias="projectId", min_length=1)
    title: str = Field(..., min_length=1)
    description: str | None = None
    priority: TicketPriority = TicketPriority.medium
    assignee_id: str | None = Field(default=None, alias="assigneeId")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value):
        if value is None:
            return TicketPriority.medium
        return coerce_priority(value)


class TicketUpdate(BaseModel):
    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    status: TicketStatus | None = None
    assignee_id: str | None = Field(default=None, alias="assigneeId")
    title: str | None = None
    description: str | None = None
    priority: TicketPriority | None = None

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("status", "priority", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value):
        return coerce_priority(value)

    def changes(self) -> dict:
        """Fields the caller actually supplied.

        Empty values are ignored except ``assignee_id``, where an explicit
        null unassigns the ticket.
        """
        supplied = self.model_dump(mode="json", exclude_unset=True, exclude={"tenant_id"})
        return {
            field: value
            for field, value in supplied.items()
            if field == "assignee_id" or value not in (None, "")
        }


class TicketOut(BaseModel):
    id: str
    project_id: str
    tenant_id: str
    title: str
    description: str | None = None
    status: str
    priority: TicketPriority
    reporter_id: str
    assignee_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class TicketList(BaseModel):
    tickets: list[TicketOut]


class TicketEnvelope(BaseModel):
    ticket: TicketOut
