"""
YFinance Market Data Provider
Async-safe Yahoo Finance daily bars for the market proxies
"""

import asyncio
import logging
import os
import random
import time
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

import pandas as pd
import yfinance as yf

from app.domain.models import PriceBar

logger = logging.getLogger(__name__)


class YFinanceProvider:
    """
    Yahoo Finance data provider for daily price history
    Async-safe via thread offloading
    """

    def __init__(
        self,
        cache_ttl_seconds: int = 300,
        retries: int = 2,
    ):
        self.symbol_mapping: Dict[str, str] = {
            "SPY": "SPY",
            "EIS": "EIS",
            "TA125": "^TA125.TA",
        }
        self.cache_ttl_seconds = cache_ttl_seconds
        self.retries = retries
        self._cache: Dict[str, tuple[float, List[PriceBar]]] = {}
        self._apply_symbol_overrides()

    def _apply_symbol_overrides(self) -> None:
        """
        Apply Yahoo symbol mapping overrides from env.

        Format: YF_SYMBOL_OVERRIDES="TA125=^TA125.TA,FOO=FOO.L"
        """
        raw = os.getenv("YF_SYMBOL_OVERRIDES", "").strip()
        if not raw:
            return
        overrides: Dict[str, str] = {}
        for pair in raw.split(","):
            pair = pair.strip()
            if not pair or "=" not in pair:
                continue
            key, value = pair.split("=", 1)
            key = key.strip().upper()
            value = value.strip()
            if key and value:
                overrides[key] = value
        if overrides:
            self.symbol_mapping.update(overrides)

    # ------------------------------------------------------------------
    # INTERNAL HELPERS
    # ------------------------------------------------------------------

    async def _history(self, ticker: yf.Ticker, **kwargs) -> pd.DataFrame:
        """
        Async-safe wrapper around yfinance history()
        """
        return await asyncio.to_thread(ticker.history, **kwargs)

    async def _history_with_retry(self, ticker: yf.Ticker, **kwargs) -> pd.DataFrame:
        """
        Retry wrapper around history() to handle transient failures.
        """
        last_exc: Optional[Exception] = None
        for attempt in range(self.retries + 1):
            try:
                return await self._history(ticker, **kwargs)
            except Exception as exc:
                last_exc = exc
                logger.warning(
                    "history() attempt %s/%s failed: %s",
                    attempt + 1, self.retries + 1, exc,
                )
                if attempt < self.retries:
                    await asyncio.sleep(0.4 * (2 ** attempt) + random.random() * 0.2)
        raise last_exc

    def _cache_get(self, key: str) -> Optional[List[PriceBar]]:
        cached = self._cache.get(key)
        if not cached:
            return None
        ts, value = cached
        if time.time() - ts > self.cache_ttl_seconds:
            return None
        return value

    def _cache_set(self, key: str, value: List[PriceBar]) -> None:
        self._cache[key] = (time.time(), value)

    @staticmethod
    def _to_decimal(value: float) -> Decimal:
        return Decimal(str(float(value)))

    def _frame_to_bars(self, hist: pd.DataFrame) -> List[PriceBar]:
        if hist is None or hist.empty:
            return []

        frame = hist[["High", "Close"]].dropna()
        bars: List[PriceBar] = []
        seen: set[date] = set()
        for idx, row in frame.iterrows():
            bar_date = pd.Timestamp(idx).date()
            if bar_date in seen:
                continue
            seen.add(bar_date)
            bars.append(
                PriceBar(
                    date=bar_date,
                    high=self._to_decimal(row["High"]),
                    close=self._to_decimal(row["Close"]),
                )
            )
        return bars

    # ------------------------------------------------------------------
    # DAILY BARS
    # ------------------------------------------------------------------

    async def get_price_bars(
        self,
        symbol: str,
        start_date: date,
        end_date: date,
    ) -> List[PriceBar]:
        """
        Daily bars for a symbol, oldest first

        Returns an empty list (and logs) when Yahoo has no data or fails.
        """
        cache_key = f"bars:{symbol}:{start_date.isoformat()}:{end_date.isoformat()}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        yf_symbol = self.symbol_mapping.get(symbol.upper(), symbol)
        try:
            ticker = yf.Ticker(yf_symbol)
            hist = await self._history_with_retry(
                ticker,
                start=start_date,
                end=end_date + timedelta(days=1),
                interval="1d",
                auto_adjust=False,
            )
            bars = self._frame_to_bars(hist)
        except Exception as e:
            logger.error(f"Error fetching daily bars for {symbol} ({yf_symbol}): {e}")
            return []

        if not bars:
            logger.warning("No daily bars returned for %s (%s)", symbol, yf_symbol)
            return []

        self._cache_set(cache_key, bars)
        return bars
