# app/project/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.guard import authenticate, authorize_tenant_member
from app.identity.schemas import Identity
from app.project import services as project_service
from app.project.schemas import ProjectCreate, ProjectEnvelope, ProjectList

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.get("", response_model=ProjectList)
def list_all(
    tenant_id: str = Query(..., alias="tenantId", min_length=1),
    identity: Identity = Depends(authenticate),
    db: Session = Depends(get_db),
):
    authorize_tenant_member(db, identity, tenant_id)
    return {"projects": project_service.list_projects(db, tenant_id)}


@router.post("", response_model=ProjectEnvelope, status_code=201)
def create(payload: ProjectCreate, identity: Identity = Depends(authenticate), db: Session = Depends(get_db)):
    authorize_tenant_member(db, identity, payload.tenant_id)
    return {"project": project_service.create_project(db, identity, payload)}
