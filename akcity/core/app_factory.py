from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..presentation.api.errors import register_exception_handlers
from ..presentation.api.responses import envelope
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import permissions as permissions_router
from ..presentation.api.routers import projects as projects_router
from ..presentation.api.routers import tasks as tasks_router
from .config import Settings
from .container import ApplicationContainer, build_container
from .logging import configure_logging

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    configure_logging()
    settings = settings or Settings()
    # Built eagerly so in-process transports that skip lifespan events still see it.
    container = build_container(settings)

    app = FastAPI(title="AKCity Construction API", lifespan=_create_lifespan(container))
    app.state.container = container  # type: ignore[attr-defined]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(permissions_router.router)
    app.include_router(projects_router.router)
    app.include_router(tasks_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        current: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        return envelope(
            {"ok": True, "users": current.user_repository.count(), "email_enabled": current.email_service.enabled},
            "Service is healthy",
        )

    return app


def _create_lifespan(container: ApplicationContainer):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("AKCity API started (database: %s)", container.settings.database_path)
        try:
            yield
        finally:
            container.close()
            logger.info("AKCity API stopped")

    return lifespan
