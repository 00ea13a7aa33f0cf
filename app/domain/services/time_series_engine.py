"""
TIME-SERIES ENGINE (ENGINE-1)
Turn a trailing year of daily bars into chart analytics

RESPONSIBILITIES:
- Order bars chronologically
- Track the 52-week high (of `high`) and the running peak (of `close`)
- Compute cumulative return and series drawdown per bar
- Summarise the latest market state

RULES:
❌ No I/O
❌ No recommendations
✅ Pure calculation
✅ Deterministic output
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from app.domain.models import (
    MarketState,
    PriceBar,
    TimeSeriesPoint,
    TimeSeriesResult,
)


_CENT = Decimal('0.01')
_ZERO = Decimal('0')
_HUNDRED = Decimal('100')


class TimeSeriesEngine:
    """
    Time-Series Engine
    Computes return/drawdown series, does NOT make decisions
    """

    def compute(self, bars: Iterable[PriceBar]) -> TimeSeriesResult:
        """
        Compute the analytics series for a set of daily bars

        Args:
            bars: Daily bars in any order (dates must be unique)

        Returns:
            TimeSeriesResult with ascending points and a MarketState summary.
            Empty input yields no points and an unavailable summary.
        """
        ordered = sorted(bars, key=lambda bar: bar.date)
        if not ordered:
            return TimeSeriesResult(points=[], summary=MarketState.unavailable())

        first_close = ordered[0].close
        high_52w = _ZERO
        running_high = _ZERO
        points: list[TimeSeriesPoint] = []

        for bar in ordered:
            high_52w = max(high_52w, bar.high)
            running_high = max(running_high, bar.close)

            points.append(
                TimeSeriesPoint(
                    date=bar.date,
                    close=bar.close,
                    return_pct=self._round(
                        self._return_pct(first_close, bar.close)
                    ),
                    drawdown_pct=self._round(
                        self._series_drawdown(running_high, bar.close)
                    ),
                )
            )

        last = points[-1]
        if high_52w <= _ZERO:
            summary = MarketState.unavailable()
        else:
            summary = MarketState.from_prices(
                last_price=last.close,
                high_52w=high_52w,
                series_drawdown=last.drawdown_pct,
            )

        return TimeSeriesResult(points=points, summary=summary)

    @staticmethod
    def _return_pct(first_close: Decimal, close: Decimal) -> Decimal:
        """
        Cumulative change from the first bar of the window

        Formula: ((close - first) / first) * 100
        """
        if first_close <= _ZERO:
            return _ZERO
        return ((close - first_close) / first_close) * _HUNDRED

    @staticmethod
    def _series_drawdown(running_high: Decimal, close: Decimal) -> Decimal:
        """
        Distance below the running peak close

        Formula: ((peak - close) / peak) * 100
        """
        if running_high <= _ZERO:
            return _ZERO
        return ((running_high - close) / running_high) * _HUNDRED

    @staticmethod
    def _round(value: Decimal) -> Decimal:
        return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def compute_time_series(bars: Iterable[PriceBar]) -> TimeSeriesResult:
    """Module-level shortcut for TimeSeriesEngine().compute()"""
    return TimeSeriesEngine().compute(bars)
