"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from visitdesk.config import settings
from visitdesk.database import init_db
from visitdesk.exceptions import StorageError, WorkflowError

# Import routers
from visitdesk.routers import (
    dashboard,
    deletion_requests,
    edit_requests,
    users,
    visitor_actions,
    visitor_management,
    visitors,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Visitor Desk",
    description="Visitor management back office: check-in/out and the edit/deletion approval workflow",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def add_exception_handlers(app: FastAPI) -> None:
    """Translate service-layer errors into JSON responses."""

    def handler(request: Request, exc: WorkflowError):
        if isinstance(exc, StorageError):
            logger.error("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    app.add_exception_handler(WorkflowError, handler)


add_exception_handlers(app)

# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(visitors.router, prefix="/api/visitors", tags=["Visitors"])
app.include_router(visitor_management.router, prefix="/api/visitor-management", tags=["VisitorManagement"])
app.include_router(visitor_actions.router, prefix="/api/visitor-actions", tags=["VisitorActions"])
app.include_router(deletion_requests.router, prefix="/api/deletion-requests", tags=["DeletionRequests"])
app.include_router(edit_requests.router, prefix="/api/edit-requests", tags=["EditRequests"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode); otherwise run Alembic."""
    if settings.DATABASE_URL.startswith("sqlite"):
        init_db()


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
