"""
Shared FastAPI dependencies.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.infrastructure.db.database import get_db
from app.infrastructure.market_data.provider_factory import get_price_history_provider
from app.services.market_data_service import MarketDataService
from app.services.portfolio_update_service import PortfolioUpdateService


def get_market_data_service() -> MarketDataService:
    return MarketDataService(
        provider=get_price_history_provider(),
        history_days=settings.PRICE_HISTORY_DAYS,
    )


def get_update_service(
    db: AsyncSession = Depends(get_db),
    market_data_service: MarketDataService = Depends(get_market_data_service),
) -> PortfolioUpdateService:
    return PortfolioUpdateService(
        session=db,
        market_data_service=market_data_service,
        market_ticker=settings.BROAD_MARKET_TICKER,
    )
