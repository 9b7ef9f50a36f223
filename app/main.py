# app/main.py
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.database import Base, engine
from app.core.errors import register_error_handlers
from app.core.guard import authenticate
from app.core.logging import configure_logging
from app.identity.schemas import Identity
from app.comment.routes import router as comment_router
from app.project.routes import router as project_router
from app.tenant.routes import router as tenant_router
from app.ticket.routes import router as ticket_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESC,
    version=settings.APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(tenant_router)
app.include_router(project_router)
app.include_router(ticket_router)
app.include_router(comment_router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}


@app.get("/api/me", response_model=Identity, tags=["Identity"])
def me(identity: Identity = Depends(authenticate)):
    return identity
