"""
Market Data routes - trailing-year analytics per ticker.
"""

from fastapi import APIRouter, Depends
from datetime import date
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from app.api.dependencies import get_market_data_service
from app.config import settings
from app.services.market_data_service import MarketDataService, TickerMarketData

router = APIRouter()


class MarketDataRequest(BaseModel):
    tickers: Optional[List[str]] = Field(None, min_length=1, max_length=10)


class TimeSeriesPointResponse(BaseModel):
    date: str
    close: float
    return_pct: float
    drawdown_pct: float


class TickerDataResponse(BaseModel):
    last_price: float
    high_52w: float
    current_drawdown: float
    drawdown_percent: float
    time_series: List[TimeSeriesPointResponse]
    error: Optional[str] = None


class MarketDataResponse(BaseModel):
    tickers: Dict[str, TickerDataResponse]
    as_of_date: str


def _to_response(item: TickerMarketData) -> TickerDataResponse:
    summary = item.summary
    return TickerDataResponse(
        last_price=float(summary.last_price),
        high_52w=float(summary.high_52w),
        current_drawdown=float(item.analytics.current_drawdown),
        drawdown_percent=float(summary.drawdown_percent),
        time_series=[
            TimeSeriesPointResponse(
                date=point.date.isoformat(),
                close=float(point.close),
                return_pct=float(point.return_pct),
                drawdown_pct=float(point.drawdown_pct),
            )
            for point in item.analytics.points
        ],
        error=item.error,
    )


@router.post("", response_model=MarketDataResponse)
async def get_market_data(
    payload: Optional[MarketDataRequest] = None,
    as_of: Optional[date] = None,
    service: MarketDataService = Depends(get_market_data_service),
):
    """
    Trailing-year return and drawdown series for each requested ticker

    Defaults to the broad-market and domestic proxies. Tickers that fail are
    returned with zeroed figures and an error message.
    """
    tickers = (payload.tickers if payload and payload.tickers else None) or settings.default_tickers
    snapshot = await service.get_market_data([t.strip().upper() for t in tickers], as_of)

    return MarketDataResponse(
        tickers={ticker: _to_response(item) for ticker, item in snapshot.tickers.items()},
        as_of_date=snapshot.as_of_date.isoformat(),
    )
