"""
Market data provider factory (config-driven).
"""

from __future__ import annotations

from functools import lru_cache

from app.config import settings
from app.infrastructure.market_data.types import PriceHistoryProvider
from app.infrastructure.market_data.yfinance_provider import YFinanceProvider


def build_price_history_provider(name: str) -> PriceHistoryProvider:
    name = (name or "").lower()
    if name == "yfinance":
        return YFinanceProvider(
            cache_ttl_seconds=settings.MARKET_DATA_CACHE_TTL_SECONDS,
            retries=settings.MARKET_DATA_RETRIES,
        )
    raise ValueError(f"Unknown market data provider: {name}")


@lru_cache(maxsize=1)
def get_price_history_provider() -> PriceHistoryProvider:
    """Process-wide provider so its response cache is shared"""
    return build_price_history_provider(settings.MARKET_DATA_PROVIDER)
