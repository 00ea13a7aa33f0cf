"""
Market data provider protocol for type hints.
"""

from __future__ import annotations

from typing import Protocol, List
from datetime import date

from app.domain.models import PriceBar


class PriceHistoryProvider(Protocol):
    async def get_price_bars(self, symbol: str, start_date: date, end_date: date) -> List[PriceBar]:
        """Daily high/close bars in [start_date, end_date]; empty list when unavailable"""
        ...
