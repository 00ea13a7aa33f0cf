"""
Tests for Time-Series Engine
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from app.domain.models import PriceBar
from app.domain.services.time_series_engine import TimeSeriesEngine, compute_time_series


def _bar(day: int, close: str, high: str = None) -> PriceBar:
    return PriceBar(
        date=date(2026, 1, 1) + timedelta(days=day),
        high=Decimal(high or close),
        close=Decimal(close),
    )


class TestTimeSeriesEngine:
    """Test suite for TimeSeriesEngine"""

    @pytest.fixture
    def engine(self):
        return TimeSeriesEngine()

    def test_empty_input_is_unavailable(self, engine):
        result = engine.compute([])

        assert result.points == []
        assert result.summary.is_available is False
        assert result.summary.high_52w == Decimal('0')
        assert result.current_drawdown == Decimal('0')

    def test_single_bar(self, engine):
        result = engine.compute([_bar(0, "100")])

        assert len(result.points) == 1
        assert result.points[0].return_pct == Decimal('0.00')
        assert result.points[0].drawdown_pct == Decimal('0.00')
        assert result.summary.last_price == Decimal('100')
        assert result.summary.drawdown_percent == Decimal('0')

    def test_unordered_bars_are_sorted(self, engine):
        bars = [_bar(2, "90"), _bar(0, "100"), _bar(1, "110")]

        result = engine.compute(bars)

        assert [p.date for p in result.points] == sorted(b.date for b in bars)
        assert result.summary.last_price == Decimal('90')

    def test_returns_against_first_close(self, engine):
        result = engine.compute([_bar(0, "100"), _bar(1, "110"), _bar(2, "95")])

        assert [p.return_pct for p in result.points] == [
            Decimal('0.00'), Decimal('10.00'), Decimal('-5.00')
        ]

    def test_drawdown_against_running_peak(self, engine):
        result = engine.compute([
            _bar(0, "100"), _bar(1, "120"), _bar(2, "90"), _bar(3, "120"),
        ])

        drawdowns = [p.drawdown_pct for p in result.points]
        assert drawdowns == [
            Decimal('0.00'), Decimal('0.00'), Decimal('25.00'), Decimal('0.00')
        ]
        assert all(d >= 0 for d in drawdowns)
        assert result.current_drawdown == Decimal('0.00')

    def test_rounding_is_half_up(self, engine):
        # 1/8 of 100 = 12.5 -> drop of 0.125% rounds to 0.13
        result = engine.compute([_bar(0, "800"), _bar(1, "799")])

        assert result.points[1].drawdown_pct == Decimal('0.13')
        assert result.points[1].return_pct == Decimal('-0.13')

    def test_trigger_drawdown_uses_high_not_close(self, engine):
        # Intraday high of 450 never closed there
        result = engine.compute([
            _bar(0, "420", high="450"),
            _bar(1, "400", high="410"),
        ])

        summary = result.summary
        assert summary.high_52w == Decimal('450')
        assert summary.last_price == Decimal('400')
        assert round(summary.drawdown_percent, 2) == Decimal('11.11')
        # Series drawdown is measured from the 420 close
        assert summary.series_drawdown == Decimal('4.76')

    def test_zero_first_close_gives_zero_return(self, engine):
        result = engine.compute([_bar(0, "0", high="1"), _bar(1, "5")])

        assert result.points[1].return_pct == Decimal('0.00')

    def test_all_zero_prices_are_unavailable(self, engine):
        result = engine.compute([_bar(0, "0"), _bar(1, "0")])

        assert len(result.points) == 2
        assert result.summary.is_available is False

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            _bar(0, "-1")

    def test_deterministic(self, engine):
        bars = [_bar(0, "100"), _bar(1, "80"), _bar(2, "95")]

        assert engine.compute(bars) == engine.compute(list(reversed(bars)))

    def test_module_shortcut(self):
        result = compute_time_series([_bar(0, "10"), _bar(1, "5")])

        assert result.current_drawdown == Decimal('50.00')
