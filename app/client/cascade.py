# app/client/cascade.py
"""
Selection cascade: tenant -> project -> ticket -> comments.

``SelectionCascade`` is the only writer of ``CascadeState``. Callers dispatch
selection changes and creations through its coroutines and read the
immutable ``state`` snapshot. Every load remembers the generation of the
level that started it and is dropped if that level changed while the
request was in flight.
"""
import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Protocol, TypeVar

from app.client.transport import ApiError
from app.comment.schemas import CommentOut
from app.identity.schemas import Identity
from app.project.schemas import ProjectOut
from app.tenant.models import Role
from app.tenant.schemas import TenantOut, TenantWithRole
from app.ticket.schemas import TicketOut

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Transport(Protocol):
    async def list_tenants(self) -> list[TenantWithRole]: ...

    async def create_tenant(self, name: str, slug: str) -> TenantOut: ...

    async def list_projects(self, tenant_id: str) -> list[ProjectOut]: ...

    async def create_project(self, tenant_id: str, name: str, description: str | None = None) -> ProjectOut: ...

    async def list_tickets(self, tenant_id: str, project_id: str | None = None) -> list[TicketOut]: ...

    async def create_ticket(
        self,
        tenant_id: str,
        project_id: str,
        title: str,
        description: str | None = None,
        priority: str = "medium",
        assignee_id: str | None = None,
    ) -> TicketOut: ...

    async def update_ticket(self, tenant_id: str, ticket_id: str, **changes: Any) -> TicketOut: ...

    async def list_comments(self, tenant_id: str, ticket_id: str) -> list[CommentOut]: ...

    async def add_comment(self, tenant_id: str, ticket_id: str, body: str) -> CommentOut: ...


class CascadeError(Exception):
    """A creation or update failed; meant to be shown to the user."""


@dataclass(frozen=True)
class CascadeState:
    identity: Identity | None = None
    tenants: tuple[TenantWithRole, ...] = ()
    projects: tuple[ProjectOut, ...] = ()
    tickets: tuple[TicketOut, ...] = ()
    comments: tuple[CommentOut, ...] = ()
    selected_tenant_id: str | None = None
    selected_project_id: str | None = None
    selected_ticket_id: str | None = None
    loading_tenants: bool = False
    error: str | None = None

    @property
    def selected_tenant(self) -> TenantWithRole | None:
        return _find(self.tenants, self.selected_tenant_id)

    @property
    def selected_project(self) -> ProjectOut | None:
        return _find(self.projects, self.selected_project_id)

    @property
    def selected_ticket(self) -> TicketOut | None:
        return _find(self.tickets, self.selected_ticket_id)


def _find(items: Iterable[Any], item_id: str | None) -> Any:
    if item_id is None:
        return None
    return next((item for item in items if item.id == item_id), None)


def reconcile_selection(
    items: Iterable[T],
    current_id: str | None,
    prefer: Callable[[T], bool] | None = None,
) -> str | None:
    """Keep ``current_id`` if it is still among the candidates, else take the first one.

    ``prefer`` narrows the candidates; with no candidate left the selection
    is cleared.
    """
    candidates = [item for item in items if prefer is None or prefer(item)]
    if current_id is not None and any(item.id == current_id for item in candidates):
        return current_id
    return candidates[0].id if candidates else None


def _in_project(project_id: str | None) -> Callable[[TicketOut], bool] | None:
    if project_id is None:
        return None
    return lambda ticket: ticket.project_id == project_id


class SelectionCascade:
    def __init__(self, transport: Transport):
        self._transport = transport
        self._state = CascadeState()
        self._listeners: list[Callable[[CascadeState], None]] = []
        # one generation counter per level
        self._tenants_gen = 0
        self._tenant_data_gen = 0
        self._comments_gen = 0
        # bumped on sign-out and user switch
        self._session_gen = 0

    @property
    def state(self) -> CascadeState:
        return self._state

    def subscribe(self, listener: Callable[[CascadeState], None]) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _set(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    # level 1: identity -> tenants

    async def set_identity(self, identity: Identity | None) -> None:
        previous = self._state.identity
        if identity is None or (previous is not None and previous != identity):
            # signed out or switched user: nothing of the old session survives
            self._session_gen += 1
            self._tenants_gen += 1
            self._tenant_data_gen += 1
            self._comments_gen += 1
            self._set(**vars(CascadeState()))
        if identity is None:
            return
        if self._state.identity != identity:
            self._set(identity=identity)
        await self.refresh_tenants()

    async def refresh_tenants(self) -> None:
        if self._state.identity is None:
            return
        self._tenants_gen += 1
        gen = self._tenants_gen
        self._set(loading_tenants=True, error=None)

        try:
            tenants = await self._transport.list_tenants()
        except ApiError as exc:
            if gen != self._tenants_gen:
                return
            logger.error("Unable to load tenants: %s", exc.message)
            self._set(tenants=(), loading_tenants=False, error=exc.message or "Unable to load tenants")
            await self._change_tenant(None)
            return

        if gen != self._tenants_gen:
            return
        self._set(tenants=tuple(tenants), loading_tenants=False)
        next_id = reconcile_selection(tenants, self._state.selected_tenant_id)
        if next_id != self._state.selected_tenant_id:
            await self._change_tenant(next_id)

    async def select_tenant(self, tenant_id: str | None) -> None:
        if tenant_id is not None and _find(self._state.tenants, tenant_id) is None:
            raise CascadeError(f"Unknown tenant {tenant_id}")
        if tenant_id == self._state.selected_tenant_id:
            return
        await self._change_tenant(tenant_id)

    # level 2: tenant -> projects and tickets

    async def _change_tenant(self, tenant_id: str | None) -> None:
        self._tenant_data_gen += 1
        self._comments_gen += 1
        previous_project = self._state.selected_project_id
        previous_ticket = self._state.selected_ticket_id
        self._set(
            selected_tenant_id=tenant_id,
            projects=(),
            tickets=(),
            comments=(),
            selected_project_id=None,
            selected_ticket_id=None,
        )
        if tenant_id is None:
            return
        await self._load_tenant_data(tenant_id, previous_project, previous_ticket)

    async def refresh_tenant_data(self) -> None:
        tenant_id = self._state.selected_tenant_id
        if tenant_id is None:
            return
        self._tenant_data_gen += 1
        await self._load_tenant_data(tenant_id, self._state.selected_project_id, self._state.selected_ticket_id)

    async def _load_tenant_data(self, tenant_id: str, previous_project: str | None, previous_ticket: str | None) -> None:
        gen = self._tenant_data_gen
        projects, tickets = await asyncio.gather(
            self._best_effort("projects", self._transport.list_projects(tenant_id)),
            self._best_effort("tickets", self._transport.list_tickets(tenant_id)),
        )
        if gen != self._tenant_data_gen or self._state.selected_tenant_id != tenant_id:
            logger.debug("Dropping stale project/ticket load for tenant %s", tenant_id)
            return

        project_id = reconcile_selection(projects, previous_project)
        ticket_id = reconcile_selection(tickets, previous_ticket, _in_project(project_id))
        ticket_changed = ticket_id != self._state.selected_ticket_id
        self._set(
            projects=tuple(projects),
            tickets=tuple(tickets),
            selected_project_id=project_id,
            selected_ticket_id=ticket_id,
        )
        if ticket_id is None:
            self._comments_gen += 1
            self._set(comments=())
        elif ticket_changed or not self._state.comments:
            await self._load_comments()

    async def _best_effort(self, what: str, load) -> list:
        try:
            return list(await load)
        except ApiError as exc:
            logger.error("Unable to load %s: %s", what, exc.message)
            return []

    async def select_project(self, project_id: str | None) -> None:
        if project_id is not None and _find(self._state.projects, project_id) is None:
            raise CascadeError(f"Unknown project {project_id}")
        if project_id == self._state.selected_project_id:
            return
        ticket_id = reconcile_selection(self._state.tickets, self._state.selected_ticket_id, _in_project(project_id))
        self._set(selected_project_id=project_id)
        await self._change_ticket(ticket_id)

    # level 3: ticket -> comments

    async def select_ticket(self, ticket_id: str | None) -> None:
        if ticket_id is not None and _find(self._state.tickets, ticket_id) is None:
            raise CascadeError(f"Unknown ticket {ticket_id}")
        await self._change_ticket(ticket_id)

    async def _change_ticket(self, ticket_id: str | None) -> None:
        if ticket_id == self._state.selected_ticket_id:
            return
        self._comments_gen += 1
        self._set(selected_ticket_id=ticket_id, comments=())
        if ticket_id is not None:
            await self._load_comments()

    async def _load_comments(self) -> None:
        self._comments_gen += 1
        gen = self._comments_gen
        tenant_id = self._state.selected_tenant_id
        ticket_id = self._state.selected_ticket_id
        if tenant_id is None or ticket_id is None:
            self._set(comments=())
            return

        comments = await self._best_effort("comments", self._transport.list_comments(tenant_id, ticket_id))
        if gen != self._comments_gen:
            logger.debug("Dropping stale comment load for ticket %s", ticket_id)
            return
        self._set(comments=tuple(comments))

    # user-initiated creation

    async def create_tenant(self, name: str, slug: str) -> TenantWithRole:
        session = self._session_gen
        try:
            created = await self._transport.create_tenant(name, slug)
        except ApiError as exc:
            raise CascadeError(exc.message or "Unable to create tenant") from exc

        tenant = TenantWithRole(**created.model_dump(), role=Role.owner)
        if session != self._session_gen:
            logger.debug("Dropping tenant %s created before the identity changed", tenant.id)
            return tenant
        self._set(tenants=self._state.tenants + (tenant,))
        await self._change_tenant(tenant.id)
        return tenant

    async def create_project(self, name: str, description: str | None = None) -> ProjectOut:
        tenant_id = self._require("selected_tenant_id", "Select a tenant first")
        try:
            project = await self._transport.create_project(tenant_id, name, description)
        except ApiError as exc:
            raise CascadeError(exc.message or "Unable to create project") from exc

        if self._state.selected_tenant_id == tenant_id:
            self._set(projects=self._state.projects + (project,))
            await self.select_project(project.id)
        return project

    async def create_ticket(
        self,
        title: str,
        description: str | None = None,
        priority: str = "medium",
        assignee_id: str | None = None,
    ) -> TicketOut:
        tenant_id = self._require("selected_tenant_id", "Select a tenant first")
        project_id = self._require("selected_project_id", "Select a project first")
        try:
            ticket = await self._transport.create_ticket(
                tenant_id, project_id, title, description, priority, assignee_id
            )
        except ApiError as exc:
            raise CascadeError(exc.message or "Unable to create ticket") from exc

        if self._state.selected_tenant_id == tenant_id:
            # newest first
            self._set(tickets=(ticket,) + self._state.tickets)
            if self._state.selected_project_id == project_id:
                self._comments_gen += 1
                self._set(selected_ticket_id=ticket.id, comments=())
        return ticket

    async def update_ticket(self, ticket_id: str, **changes: Any) -> TicketOut:
        tenant_id = self._require("selected_tenant_id", "Select a tenant first")
        try:
            updated = await self._transport.update_ticket(tenant_id, ticket_id, **changes)
        except ApiError as exc:
            raise CascadeError(exc.message or "Unable to update ticket") from exc

        if self._state.selected_tenant_id == tenant_id:
            self._set(tickets=tuple(updated if t.id == ticket_id else t for t in self._state.tickets))
        return updated

    async def add_comment(self, body: str) -> CommentOut:
        tenant_id = self._require("selected_tenant_id", "Select a tenant first")
        ticket_id = self._require("selected_ticket_id", "Select a ticket first")
        try:
            comment = await self._transport.add_comment(tenant_id, ticket_id, body)
        except ApiError as exc:
            raise CascadeError(exc.message or "Unable to add comment") from exc

        if self._state.selected_tenant_id == tenant_id and self._state.selected_ticket_id == ticket_id:
            self._set(comments=self._state.comments + (comment,))
        return comment

    def _require(self, field: str, message: str) -> str:
        value = getattr(self._state, field)
        if value is None:
            raise CascadeError(message)
        return value
