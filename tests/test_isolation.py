# tests/test_isolation.py
"""A caller without a membership row for a tenant can never touch its data."""
import pytest


def _requests(ws):
    t, p, k = ws.tenant_id, ws.project_id, ws.ticket_id
    return [
        ("get", "/api/projects", {"params": {"tenantId": t}}),
        ("post", "/api/projects", {"json": {"tenantId": t, "name": "Intruder"}}),
        ("get", "/api/tickets", {"params": {"tenantId": t}}),
        ("get", "/api/tickets", {"params": {"tenantId": t, "projectId": p}}),
        ("post", "/api/tickets", {"json": {"tenantId": t, "projectId": p, "title": "x"}}),
        ("patch", f"/api/tickets/{k}", {"json": {"tenantId": t, "status": "closed"}}),
        ("get", f"/api/tickets/{k}/comments", {"params": {"tenantId": t}}),
        ("post", f"/api/tickets/{k}/comments", {"json": {"tenantId": t, "body": "hi"}}),
        ("post", f"/api/tenants/{t}/members", {"json": {"email": ws.owner.email}}),
    ]


@pytest.mark.parametrize("index", range(9))
def test_outsider_is_forbidden_everywhere(client, make_user, workspace, index):
    outsider = make_user()
    method, url, kwargs = _requests(workspace)[index]

    r = client.request(method.upper(), url, headers=outsider.headers, **kwargs)
    assert r.status_code == 403
    assert r.json()["message"] == "You are not a member of this tenant"


def test_outsider_with_own_tenant_cannot_reach_foreign_entities(client, make_user, workspace):
    """Membership of tenant B plus an id from tenant A must not leak A's data."""
    intruder = make_user()
    own = client.post("/api/tenants", json={"name": "B", "slug": "b-intruder"}, headers=intruder.headers)
    own_id = own.json()["tenant"]["id"]

    r = client.patch(
        f"/api/tickets/{workspace.ticket_id}",
        json={"tenantId": own_id, "status": "closed"},
        headers=intruder.headers,
    )
    assert r.status_code == 404

    r = client.get(f"/api/tickets/{workspace.ticket_id}/comments", params={"tenantId": own_id}, headers=intruder.headers)
    assert r.status_code == 404

    r = client.post(
        f"/api/tickets/{workspace.ticket_id}/comments",
        json={"tenantId": own_id, "body": "sneaky"},
        headers=intruder.headers,
    )
    assert r.status_code == 404

    r = client.post(
        "/api/tickets",
        json={"tenantId": own_id, "projectId": workspace.project_id, "title": "planted"},
        headers=intruder.headers,
    )
    assert r.status_code == 404

    r = client.get("/api/tickets", params={"tenantId": own_id, "projectId": workspace.project_id}, headers=intruder.headers)
    assert r.status_code == 200
    assert r.json()["tickets"] == []

    # the victim's data is untouched
    owner = workspace.owner
    ticket = client.get("/api/tickets", params={"tenantId": workspace.tenant_id}, headers=owner.headers).json()["tickets"][0]
    assert ticket["status"] == "open"
    comments = client.get(
        f"/api/tickets/{workspace.ticket_id}/comments",
        params={"tenantId": workspace.tenant_id},
        headers=owner.headers,
    ).json()["comments"]
    assert comments == []


def test_member_of_tenant_can_read(client, make_user, workspace):
    member = make_user()
    client.post(
        f"/api/tenants/{workspace.tenant_id}/members",
        json={"email": member.email},
        headers=workspace.owner.headers,
    )

    r = client.get("/api/tickets", params={"tenantId": workspace.tenant_id}, headers=member.headers)
    assert r.status_code == 200
    assert [t["id"] for t in r.json()["tickets"]] == [workspace.ticket_id]
