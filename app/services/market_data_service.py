import asyncio
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional

from app.domain.models import MarketState, TimeSeriesResult
from app.domain.services.time_series_engine import TimeSeriesEngine
from app.infrastructure.market_data.types import PriceHistoryProvider
from app.utils.time import now_utc_naive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickerMarketData:
    """Analytics for one ticker, or an unavailable entry with the reason"""
    ticker: str
    analytics: TimeSeriesResult
    error: Optional[str] = None

    @property
    def summary(self) -> MarketState:
        return self.analytics.summary

    @property
    def is_available(self) -> bool:
        return self.error is None and self.summary.is_available


@dataclass(frozen=True)
class MarketDataSnapshot:
    as_of_date: date
    tickers: Dict[str, TickerMarketData]


class MarketDataService:
    """
    Read-only market data service.
    Fetches trailing-year bars and runs the time-series analytics per ticker,
    degrading to an unavailable entry instead of raising.
    """

    def __init__(
        self,
        provider: PriceHistoryProvider,
        history_days: int = 365,
        engine: Optional[TimeSeriesEngine] = None,
    ):
        self.provider = provider
        self.history_days = history_days
        self.engine = engine or TimeSeriesEngine()

    async def get_ticker_data(self, ticker: str, as_of: Optional[date] = None) -> TickerMarketData:
        end_date = as_of or now_utc_naive().date()
        start_date = end_date - timedelta(days=self.history_days)

        try:
            bars = await self.provider.get_price_bars(ticker, start_date, end_date)
            analytics = self.engine.compute(bars)
        except ValueError as e:
            logger.error("Invalid price data for %s: %s", ticker, e)
            return self._unavailable(ticker, f"Failed to process {ticker} data")

        if not analytics.points:
            return self._unavailable(ticker, f"No data available for {ticker}")
        if not analytics.summary.is_available:
            return TickerMarketData(
                ticker=ticker,
                analytics=analytics,
                error=f"No 52-week high available for {ticker}",
            )

        logger.info(
            "%s: last=%s high_52w=%s drawdown=%.2f%% (%s bars)",
            ticker,
            analytics.summary.last_price,
            analytics.summary.high_52w,
            analytics.summary.drawdown_percent,
            len(analytics.points),
        )
        return TickerMarketData(ticker=ticker, analytics=analytics)

    async def get_market_data(
        self,
        tickers: List[str],
        as_of: Optional[date] = None,
    ) -> MarketDataSnapshot:
        """Fetch all tickers concurrently"""
        as_of = as_of or now_utc_naive().date()
        results = await asyncio.gather(
            *(self.get_ticker_data(ticker, as_of) for ticker in tickers)
        )
        return MarketDataSnapshot(
            as_of_date=as_of,
            tickers={item.ticker: item for item in results},
        )

    @staticmethod
    def _unavailable(ticker: str, error: str) -> TickerMarketData:
        return TickerMarketData(
            ticker=ticker,
            analytics=TimeSeriesResult(points=[], summary=MarketState.unavailable()),
            error=error,
        )
