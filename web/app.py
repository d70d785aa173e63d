"""FastAPI application factory and main app.

This module creates the FastAPI application with all routers and
the workspace dependency configured.

Web routes are thin proxies to the sweethosts core modules.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sweethosts import __version__
from sweethosts.workspace import open_workspace
from web.routers import config, health, history, hosts, prefs, profiles, trash


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager.

    Opens the workspace for the configured data directory on startup.
    """
    app.state.workspace = open_workspace()
    yield


def include_routers(application: FastAPI) -> None:
    application.include_router(health.router, tags=["health"])
    application.include_router(config.router, prefix="/config", tags=["config"])
    application.include_router(profiles.router, tags=["profiles"])
    application.include_router(hosts.router, prefix="/hosts", tags=["hosts"])
    application.include_router(trash.router, prefix="/trash", tags=["trash"])
    application.include_router(history.router, prefix="/history", tags=["history"])
    application.include_router(prefs.router, prefix="/prefs", tags=["prefs"])


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application.
    """
    application = FastAPI(
        title="SweetHosts API",
        description="HTTP API for managing hosts profiles and applying them "
        "to the system hosts file",
        version=__version__,
        lifespan=lifespan,
    )
    include_routers(application)
    return application


# Create the default application instance
app = create_app()
