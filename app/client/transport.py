# app/client/transport.py
"""
HTTP transport used by the selection cascade.

The bearer token travels in an explicit ``Credentials`` object handed to
``ApiClient``; nothing is stored on module-level client defaults.
"""
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.comment.schemas import CommentOut
from app.core.config import get_settings
from app.identity.schemas import Identity
from app.project.schemas import ProjectOut
from app.tenant.schemas import TenantOut, TenantWithRole
from app.ticket.schemas import TicketOut

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    access_token: str

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# request-body keys the API expects for ticket updates
_TICKET_FIELDS = {
    "status": "status",
    "assignee_id": "assigneeId",
    "title": "title",
    "description": "description",
    "priority": "priority",
}


class ApiClient:
    def __init__(
        self,
        credentials: Credentials,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_URL,
            headers=credentials.headers(),
            timeout=timeout or settings.API_TIMEOUT_S,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Request failed: {exc}") from exc

        if response.is_error:
            try:
                message = response.json().get("message") or response.reason_phrase
            except ValueError:
                message = response.text or response.reason_phrase
            raise ApiError(message, status_code=response.status_code)
        return response.json()

    async def me(self) -> Identity:
        return Identity.model_validate(await self._request("GET", "/api/me"))

    async def list_tenants(self) -> list[TenantWithRole]:
        data = await self._request("GET", "/api/tenants")
        return [TenantWithRole.model_validate(t) for t in data["tenants"]]

    async def create_tenant(self, name: str, slug: str) -> TenantOut:
        data = await self._request("POST", "/api/tenants", json={"name": name, "slug": slug})
        return TenantOut.model_validate(data["tenant"])

    async def invite_member(self, tenant_id: str, email: str, role: str = "member") -> dict[str, Any]:
        return await self._request("POST", f"/api/tenants/{tenant_id}/members", json={"email": email, "role": role})

    async def list_projects(self, tenant_id: str) -> list[ProjectOut]:
        data = await self._request("GET", "/api/projects", params={"tenantId": tenant_id})
        return [ProjectOut.model_validate(p) for p in data["projects"]]

    async def create_project(self, tenant_id: str, name: str, description: str | None = None) -> ProjectOut:
        body = {"tenantId": tenant_id, "name": name, "description": description}
        data = await self._request("POST", "/api/projects", json=body)
        return ProjectOut.model_validate(data["project"])

    async def list_tickets(self, tenant_id: str, project_id: str | None = None) -> list[TicketOut]:
        params = {"tenantId": tenant_id}
        if project_id:
            params["projectId"] = project_id
        data = await self._request("GET", "/api/tickets", params=params)
        return [TicketOut.model_validate(t) for t in data["tickets"]]

    async def create_ticket(
        self,
        tenant_id: str,
        project_id: str,
        title: str,
        description: str | None = None,
        priority: str = "medium",
        assignee_id: str | None = None,
    ) -> TicketOut:
        body = {
            "tenantId": tenant_id,
            "projectId": project_id,
            "title": title,
            "description": description,
            "priority": priority,
            "assigneeId": assignee_id,
        }
        data = await self._request("POST", "/api/tickets", json=body)
        return TicketOut.model_validate(data["ticket"])

    async def update_ticket(self, tenant_id: str, ticket_id: str, **changes: Any) -> TicketOut:
        unknown = set(changes) - set(_TICKET_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported ticket fields: {', '.join(sorted(unknown))}")
        body = {"tenantId": tenant_id}
        body.update({_TICKET_FIELDS[k]: v for k, v in changes.items()})
        data = await self._request("PATCH", f"/api/tickets/{ticket_id}", json=body)
        return TicketOut.model_validate(data["ticket"])

    async def list_comments(self, tenant_id: str, ticket_id: str) -> list[CommentOut]:
        data = await self._request("GET", f"/api/tickets/{ticket_id}/comments", params={"tenantId": tenant_id})
        return [CommentOut.model_validate(c) for c in data["comments"]]

    async def add_comment(self, tenant_id: str, ticket_id: str, body: str) -> CommentOut:
        data = await self._request("POST", f"/api/tickets/{ticket_id}/comments", json={"tenantId": tenant_id, "body": body})
        return CommentOut.model_validate(data["comment"])
