"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from marketboard.config import Config
from marketboard.datasources import DataSource, RestDataSource
from marketboard.api import router
from marketboard.api.dependencies import set_config, set_datasource

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None, datasource: DataSource | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.
        datasource: Data source to serve from. If None, a RestDataSource
            is built from config.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()

    if datasource is None:
        datasource = RestDataSource.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting marketboard API")
        logger.info(f"Using prediction market API: {config.api_url}")
        if not config.api_token:
            logger.info("No API token configured, requests are anonymous")

        set_config(config)
        set_datasource(datasource)

        yield

        # Shutdown
        logger.info("Shutting down...")
        await datasource.close()
        set_datasource(None)
        set_config(None)

    app = FastAPI(
        title="marketboard API",
        description="Leaderboards and trade statistics for the prediction market",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
