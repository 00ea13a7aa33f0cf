"""
Recommendation Log Repository
Append-only history of issued recommendations
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import StrategyResult
from app.infrastructure.db.models import RecommendationLogModel


class RecommendationLogRepository:
    """Repository for recommendation audit logs"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(
        self,
        user_id: str,
        result: StrategyResult,
        snapshot_id: Optional[int] = None,
    ) -> int:
        model = RecommendationLogModel(
            user_id=user_id,
            snapshot_id=snapshot_id,
            recommendation_type=result.recommendation_type.value,
            recommendation_text=result.recommendation_text,
            transfer_amount=result.transfer_amount,
            drawdown_percent=result.drawdown_percent,
            market_status=result.market_status.value,
            priority=result.priority,
            target_percent=result.target_percent,
            cash_contribution=result.cash_contribution,
            stocks_contribution=result.stocks_contribution,
            currency=result.currency.value,
        )
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def get_recent(
        self,
        user_id: str,
        limit: int = 50,
        max_priority: Optional[int] = None,
    ) -> List[RecommendationLogModel]:
        """
        Latest recommendations first

        Args:
            max_priority: Keep only rules at least this severe (1 = highest)
        """
        stmt = select(RecommendationLogModel).where(RecommendationLogModel.user_id == user_id)
        if max_priority is not None:
            stmt = stmt.where(RecommendationLogModel.priority <= max_priority)
        stmt = stmt.order_by(RecommendationLogModel.id.desc()).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
