# tests/conftest.py
import os
import uuid
from types import SimpleNamespace

# keep the module-level engine off the developer database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings
from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.identity.provider import IdentityProvider
from app.main import app


@pytest.fixture(scope="session")
def engine(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "test.db"
    engine = create_engine(f"sqlite:///{path}", connect_args={"check_same_thread": False})
    enable_sqlite_foreign_keys(engine)
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def db_session_factory(engine):
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestingSessionLocal
    app.dependency_overrides.pop(get_db, None)
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def provider():
    settings = get_settings()
    return IdentityProvider(settings.AUTH_JWT_SECRET, settings.AUTH_JWT_ALGORITHM)


@pytest.fixture
def make_user(client, provider):
    """Mint a token for a fresh identity and let the API see it once."""

    def _make(email: str | None = None):
        user_id = str(uuid.uuid4())
        email = email or f"{user_id[:8]}@example.com"
        token = provider.create_access_token(user_id, email)
        headers = {"Authorization": f"Bearer {token}"}
        r = client.get("/api/me", headers=headers)
        assert r.status_code == 200
        return SimpleNamespace(id=user_id, email=email, token=token, headers=headers)

    return _make


@pytest.fixture
def workspace(client, make_user):
    """An owner with one tenant, one project and one ticket."""
    owner = make_user()
    tenant = client.post("/api/tenants", json={"name": "Acme", "slug": f"acme-{owner.id[:8]}"}, headers=owner.headers)
    assert tenant.status_code == 201
    tenant_id = tenant.json()["tenant"]["id"]

    project = client.post("/api/projects", json={"tenantId": tenant_id, "name": "Web"}, headers=owner.headers)
    assert project.status_code == 201
    project_id = project.json()["project"]["id"]

    ticket = client.post(
        "/api/tickets",
        json={"tenantId": tenant_id, "projectId": project_id, "title": "Broken login"},
        headers=owner.headers,
    )
    assert ticket.status_code == 201

    return SimpleNamespace(
        owner=owner,
        tenant_id=tenant_id,
        project_id=project_id,
        ticket_id=ticket.json()["ticket"]["id"],
    )
