"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nutrition_insights.api.analytics import router as analytics_router
from nutrition_insights.api.users import router as users_router
from nutrition_insights.api.weights import router as weights_router
from nutrition_insights.app_logging import configure_logging
from nutrition_insights.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting nutrition insights API",
            extra={
                "environment": container.settings.environment,
                "ai_enabled": container.settings.ai_enabled,
            },
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Nutrition Insights", lifespan=lifespan)
    app.state.container = container

    app.include_router(analytics_router)
    app.include_router(weights_router)
    app.include_router(users_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
