from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from finance_insights.api.routes import analysis, classify, health, statement
from finance_insights.core import settings
from finance_insights.engine import FinanceEngine
from finance_insights.logger import get_logger, setup_logging
from finance_insights.taxonomy import load_taxonomy

logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing engine...")
        settings.log_environment()

        if settings.TAXONOMY_FILE:
            logger.info(f"Using taxonomy overrides from {settings.TAXONOMY_FILE}")
        taxonomy = load_taxonomy(settings.TAXONOMY_FILE)

        app.state.engine = FinanceEngine(taxonomy=taxonomy)

        logger.info("Engine initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Finance Insights", lifespan=lifespan)

    app.include_router(classify.router)
    app.include_router(analysis.router)
    app.include_router(statement.router)
    app.include_router(health.router)

    return app


app = create_app()
