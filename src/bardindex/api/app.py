"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bardindex import __version__
from bardindex.api.deps import set_index_client
from bardindex.api.v1.router import router as v1_router
from bardindex.config.settings import Settings
from bardindex.core.index_client import PlayIndexClient
from bardindex.observability.logging import setup_logging
from bardindex.typesense.exceptions import ConnectionError

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "BARDINDEX_CONFIG_FILE"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment
            (and ``bardindex-config.yaml`` when present).

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        yaml_path = Path(os.environ.get(CONFIG_FILE_ENV, "bardindex-config.yaml"))
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Build the shared index client on startup and close it on shutdown."""
        setup_logging(settings.observability)
        logger.info("Starting Bardindex v%s", __version__)

        # Missing credentials abort startup here
        client = PlayIndexClient.from_settings(settings)
        try:
            await client.transport.initialize()
        except ConnectionError:
            logger.warning("Typesense is not reachable yet; requests will fail until it is", exc_info=True)

        set_index_client(client)
        app.state.settings = settings
        app.state.index_client = client

        logger.info("Bardindex is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down Bardindex...")
        await client.close()
        set_index_client(None)

    app = FastAPI(
        title="Bardindex",
        description="Read-only access to Shakespeare plays, scenes and speeches stored in Typesense.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app
