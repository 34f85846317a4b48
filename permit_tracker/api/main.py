"""
FastAPI Application — Permit Package Tracker.

Architecture:
  - SQLite (dev) / PostgreSQL (prod) through one SQLAlchemy repository
  - Local upload directory for checklist files
  - Status machine enforced server-side on every status change

Run with:
    uvicorn permit_tracker.api.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from permit_tracker.api.auth import get_current_user
from permit_tracker.api.container import build_container
from permit_tracker.api.errors import register_exception_handlers
from permit_tracker.api.routes.documents import router as documents_router
from permit_tracker.api.routes.packages import router as packages_router
from permit_tracker.api.routes.system import router as system_router
from permit_tracker.api.routes.system_settings import router as settings_router
from permit_tracker.api.routes.users import router as users_router
from permit_tracker.config.settings import APP_VERSION, Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app and its container. Tables and default settings are created at startup."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    container = build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container.startup()
        logger.info(f"Permit Tracker started ({settings.env}, db={container.database.display_url})")
        yield
        container.shutdown()

    app = FastAPI(
        title="Permit Package Tracker",
        description="Track permit packages, their document checklists and submission status.",
        version=APP_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ── Routes ──
    authenticated = [Depends(get_current_user)]
    app.include_router(packages_router, prefix="/api", tags=["Packages"], dependencies=authenticated)
    app.include_router(documents_router, prefix="/api", tags=["Documents"], dependencies=authenticated)
    app.include_router(settings_router, prefix="/api", tags=["Settings"], dependencies=authenticated)
    app.include_router(system_router, prefix="/api", tags=["System"])
    app.include_router(users_router, prefix="/api", tags=["Users"])

    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "permit_tracker.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and settings.env == "development",
    )


if __name__ == "__main__":
    main()
