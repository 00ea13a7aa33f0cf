"""
Market State Log Repository
Append-only record of the market summary used for each saved update
"""

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import MarketState
from app.infrastructure.db.models import MarketStateLogModel


class MarketStateLogRepository:
    """Repository for market state audit logs"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(
        self,
        user_id: str,
        ticker: str,
        market: MarketState,
        as_of_date: date,
    ) -> int:
        model = MarketStateLogModel(
            user_id=user_id,
            ticker=ticker,
            last_price=market.last_price,
            high_52w=market.high_52w,
            drawdown_percent=market.drawdown_percent if market.is_available else None,
            as_of_date=as_of_date,
        )
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def get_latest(self, user_id: str) -> Optional[MarketStateLogModel]:
        result = await self.session.execute(
            select(MarketStateLogModel)
            .where(MarketStateLogModel.user_id == user_id)
            .order_by(MarketStateLogModel.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
