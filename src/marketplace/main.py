from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.marketplace.api.middlewares import setup_middlewares
from src.marketplace.core.config import get_settings
from src.marketplace.core.db import dispose_engine, run_migrations_async
from src.marketplace.core.exceptions import setup_exception_handlers
from src.marketplace.core.health import setup_health_endpoint, setup_metrics
from src.marketplace.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    if settings.run_migrations_on_startup:
        await run_migrations_async()
        logger.info("Migrations applied")

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Freelance marketplace core: projects, proposals, contracts and reviews",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Domain failures and HTTP errors include request_id in responses
    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
