import pytest
from datetime import date, timedelta
from decimal import Decimal

from app.domain.models import PriceBar
from app.services.market_data_service import MarketDataService


class DummyProvider:
    def __init__(self, bars=None, error=None):
        self._bars = bars or {}
        self._error = error
        self.windows = []

    async def get_price_bars(self, symbol, start_date, end_date):
        self.windows.append((symbol, start_date, end_date))
        if self._error is not None:
            raise self._error
        return self._bars.get(symbol, [])


def _bars(*closes):
    start = date(2026, 3, 1)
    return [
        PriceBar(date=start + timedelta(days=i), high=Decimal(c), close=Decimal(c))
        for i, c in enumerate(closes)
    ]


@pytest.mark.asyncio
async def test_ticker_analytics():
    service = MarketDataService(DummyProvider({"SPY": _bars("450", "400")}))

    data = await service.get_ticker_data("SPY", date(2026, 3, 2))

    assert data.is_available
    assert data.error is None
    assert data.summary.high_52w == Decimal("450")
    assert data.analytics.current_drawdown == Decimal("11.11")


@pytest.mark.asyncio
async def test_trailing_window_ends_on_as_of():
    provider = DummyProvider({"SPY": _bars("450")})
    service = MarketDataService(provider, history_days=365)

    await service.get_ticker_data("SPY", date(2026, 3, 31))

    assert provider.windows == [("SPY", date(2025, 3, 31), date(2026, 3, 31))]


@pytest.mark.asyncio
async def test_no_data_is_unavailable_not_an_error():
    service = MarketDataService(DummyProvider())

    data = await service.get_ticker_data("EIS", date(2026, 3, 2))

    assert data.is_available is False
    assert data.error == "No data available for EIS"
    assert data.summary.last_price == Decimal("0")
    assert data.analytics.points == []


@pytest.mark.asyncio
async def test_zero_high_is_unavailable():
    service = MarketDataService(DummyProvider({"SPY": _bars("0", "0")}))

    data = await service.get_ticker_data("SPY", date(2026, 3, 2))

    assert data.is_available is False
    assert data.error == "No 52-week high available for SPY"


@pytest.mark.asyncio
async def test_invalid_data_is_unavailable():
    service = MarketDataService(DummyProvider(error=ValueError("bad bar")))

    data = await service.get_ticker_data("SPY", date(2026, 3, 2))

    assert data.is_available is False
    assert data.error == "Failed to process SPY data"


@pytest.mark.asyncio
async def test_multiple_tickers_degrade_independently():
    service = MarketDataService(DummyProvider({"SPY": _bars("100", "90")}))

    snapshot = await service.get_market_data(["SPY", "EIS"], date(2026, 3, 2))

    assert snapshot.as_of_date == date(2026, 3, 2)
    assert set(snapshot.tickers) == {"SPY", "EIS"}
    assert snapshot.tickers["SPY"].is_available
    assert snapshot.tickers["EIS"].is_available is False
