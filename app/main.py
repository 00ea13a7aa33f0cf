"""
FastAPI Main Application
Drawdown-triggered capital deployment assistant
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from app.config import settings
from app.core.logging import setup_logging
from app.infrastructure.db.database import init_db, close_db
from app.api.routes import ammo, health, market_data, portfolio, strategy_settings

# Configure logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown of the database
    """
    logger.info("=" * 60)
    logger.info("Starting Ammo Assistant (%s)", settings.APP_ENV)
    logger.info("=" * 60)

    await init_db()
    logger.info("Database initialized")
    logger.info(
        "Market data: provider=%s broad=%s domestic=%s window=%sd",
        settings.MARKET_DATA_PROVIDER,
        settings.BROAD_MARKET_TICKER,
        settings.DOMESTIC_MARKET_TICKER,
        settings.PRICE_HISTORY_DAYS,
    )

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ammo Assistant",
        description="Drawdown-triggered capital deployment recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(market_data.router, prefix="/api/v1/market-data", tags=["Market Data"])
    app.include_router(strategy_settings.router, prefix="/api/v1/users", tags=["Settings"])
    app.include_router(ammo.router, prefix="/api/v1/users", tags=["Ammo"])
    app.include_router(portfolio.router, prefix="/api/v1/users", tags=["Portfolio"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
