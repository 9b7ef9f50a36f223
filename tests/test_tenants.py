# tests/test_tenants.py
from app.tenant.models import Tenant, TenantMember


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_create_tenant_makes_caller_owner(client, make_user):
    user = make_user()
    r = client.post("/api/tenants", json={"name": "Acme", "slug": "acme"}, headers=user.headers)
    assert r.status_code == 201
    tenant = r.json()["tenant"]
    assert tenant["name"] == "Acme"
    assert tenant["slug"] == "acme"

    r2 = client.get("/api/tenants", headers=user.headers)
    assert r2.status_code == 200
    tenants = r2.json()["tenants"]
    assert [(t["id"], t["role"]) for t in tenants] == [(tenant["id"], "owner")]


def test_tenant_list_only_contains_own_memberships(client, make_user):
    alice, bob = make_user(), make_user()
    client.post("/api/tenants", json={"name": "A", "slug": "a"}, headers=alice.headers)
    client.post("/api/tenants", json={"name": "B", "slug": "b"}, headers=bob.headers)

    names = [t["name"] for t in client.get("/api/tenants", headers=alice.headers).json()["tenants"]]
    assert names == ["A"]


def test_tenant_list_follows_membership_order(client, make_user):
    user = make_user()
    for slug in ("first", "second", "third"):
        client.post("/api/tenants", json={"name": slug.title(), "slug": slug}, headers=user.headers)

    slugs = [t["slug"] for t in client.get("/api/tenants", headers=user.headers).json()["tenants"]]
    assert slugs == ["first", "second", "third"]


def test_create_tenant_requires_name_and_slug(client, make_user):
    user = make_user()
    r1 = client.post("/api/tenants", json={"name": "No slug"}, headers=user.headers)
    assert r1.status_code == 400
    assert "slug" in r1.json()["message"]

    r2 = client.post("/api/tenants", json={"slug": "no-name"}, headers=user.headers)
    assert r2.status_code == 400

    r3 = client.post("/api/tenants", json={"name": "  ", "slug": "blank"}, headers=user.headers)
    assert r3.status_code == 400


def test_duplicate_slug_is_conflict_without_orphan(client, make_user, db_session_factory):
    alice, bob = make_user(), make_user()
    r1 = client.post("/api/tenants", json={"name": "Acme", "slug": "acme"}, headers=alice.headers)
    r2 = client.post("/api/tenants", json={"name": "Acme too", "slug": "acme"}, headers=bob.headers)

    assert r1.status_code == 201
    assert r2.status_code == 409

    db = db_session_factory()
    try:
        assert db.query(Tenant).count() == 1
        assert db.query(TenantMember).count() == 1
    finally:
        db.close()
    assert client.get("/api/tenants", headers=bob.headers).json()["tenants"] == []


def test_owner_invites_member(client, make_user):
    owner, invitee = make_user(), make_user("Invitee@Example.com")
    tenant_id = client.post("/api/tenants", json={"name": "Acme", "slug": "acme"}, headers=owner.headers).json()["tenant"]["id"]

    r = client.post(f"/api/tenants/{tenant_id}/members", json={"email": "invitee@example.com"}, headers=owner.headers)
    assert r.status_code == 201
    assert r.json()["role"] == "member"

    tenants = client.get("/api/tenants", headers=invitee.headers).json()["tenants"]
    assert [(t["id"], t["role"]) for t in tenants] == [(tenant_id, "member")]

    again = client.post(f"/api/tenants/{tenant_id}/members", json={"email": invitee.email}, headers=owner.headers)
    assert again.status_code == 409


def test_invite_unknown_email_is_not_found(client, make_user):
    owner = make_user()
    tenant_id = client.post("/api/tenants", json={"name": "Acme", "slug": "acme"}, headers=owner.headers).json()["tenant"]["id"]

    r = client.post(f"/api/tenants/{tenant_id}/members", json={"email": "ghost@example.com"}, headers=owner.headers)
    assert r.status_code == 404
    assert "sign up" in r.json()["message"]


def test_invite_requires_elevated_role(client, make_user):
    owner, member, third = make_user(), make_user(), make_user()
    tenant_id = client.post("/api/tenants", json={"name": "Acme", "slug": "acme"}, headers=owner.headers).json()["tenant"]["id"]
    client.post(f"/api/tenants/{tenant_id}/members", json={"email": member.email}, headers=owner.headers)

    r = client.post(f"/api/tenants/{tenant_id}/members", json={"email": third.email}, headers=member.headers)
    assert r.status_code == 403
    assert r.json()["message"] == "Only admins can invite members"


def test_admin_can_invite(client, make_user):
    owner, admin, third = make_user(), make_user(), make_user()
    tenant_id = client.post("/api/tenants", json={"name": "Acme", "slug": "acme"}, headers=owner.headers).json()["tenant"]["id"]
    client.post(f"/api/tenants/{tenant_id}/members", json={"email": admin.email, "role": "admin"}, headers=owner.headers)

    r = client.post(f"/api/tenants/{tenant_id}/members", json={"email": third.email}, headers=admin.headers)
    assert r.status_code == 201


def test_invite_rejects_unknown_role(client, make_user):
    owner, invitee = make_user(), make_user()
    tenant_id = client.post("/api/tenants", json={"name": "Acme", "slug": "acme"}, headers=owner.headers).json()["tenant"]["id"]

    r = client.post(
        f"/api/tenants/{tenant_id}/members",
        json={"email": invitee.email, "role": "superuser"},
        headers=owner.headers,
    )
    assert r.status_code == 400


def test_non_member_cannot_invite(client, make_user):
    owner, outsider = make_user(), make_user()
    tenant_id = client.post("/api/tenants", json={"name": "Acme", "slug": "acme"}, headers=owner.headers).json()["tenant"]["id"]

    r = client.post(f"/api/tenants/{tenant_id}/members", json={"email": outsider.email}, headers=outsider.headers)
    assert r.status_code == 403
    assert r.json()["message"] == "You are not a member of this tenant"
