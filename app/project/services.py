# app/project/services.py
import logging

from sqlalchemy.orm import Session
from app.identity.schemas import Identity
from app.project.models import Project
from app.project.schemas import ProjectCreate

logger = logging.getLogger(__name__)


def list_projects(db: Session, tenant_id: str) -> list[Project]:
    return (
        db.query(Project)
        .filter(Project.tenant_id == tenant_id)
        .order_by(Project.created_at.asc())
        .all()
    )


def get_project(db: Session, tenant_id: str, project_id: str) -> Project | None:
    return (
        db.query(Project)
        .filter(Project.id == project_id)
        .filter(Project.tenant_id == tenant_id)
        .first()
    )


def create_project(db: Session, author: Identity, payload: ProjectCreate) -> Project:
    project = Project(
        tenant_id=payload.tenant_id,
        name=payload.name,
        description=payload.description or None,
        created_by=author.id,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Project created id=%s tenant_id=%s", project.id, project.tenant_id)
    return project
