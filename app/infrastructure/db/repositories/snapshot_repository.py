"""
Portfolio Snapshot Repository
One snapshot per user per calendar month, plus its contribution
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import ContributionType, Currency, PortfolioState
from app.infrastructure.db.models import ContributionModel, PortfolioSnapshotModel
from app.utils.time import month_start


class PortfolioSnapshotRepository:
    """Repository for monthly portfolio snapshots"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_latest(self, user_id: str) -> Optional[PortfolioSnapshotModel]:
        result = await self.session.execute(
            select(PortfolioSnapshotModel)
            .where(PortfolioSnapshotModel.user_id == user_id)
            .order_by(PortfolioSnapshotModel.snapshot_month.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_latest_portfolio(self, user_id: str) -> Optional[PortfolioState]:
        model = await self.get_latest(user_id)
        return self.to_portfolio(model) if model else None

    async def get_contribution(self, snapshot_id: int) -> Optional[ContributionModel]:
        result = await self.session.execute(
            select(ContributionModel).where(ContributionModel.snapshot_id == snapshot_id)
        )
        return result.scalar_one_or_none()

    async def delete_contribution(self, snapshot_id: int) -> None:
        model = await self.get_contribution(snapshot_id)
        if model is not None:
            await self.session.delete(model)
            await self.session.flush()

    async def get_recent(self, user_id: str, limit: int = 12) -> List[PortfolioSnapshotModel]:
        result = await self.session.execute(
            select(PortfolioSnapshotModel)
            .where(PortfolioSnapshotModel.user_id == user_id)
            .order_by(PortfolioSnapshotModel.snapshot_month.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def upsert_for_month(
        self,
        user_id: str,
        month: date,
        portfolio: PortfolioState,
    ) -> PortfolioSnapshotModel:
        """
        Save the month's snapshot, replacing any earlier one for that month

        Args:
            user_id: Owner
            month: Any day of the snapshot month
            portfolio: Bucket values to store

        Returns:
            Persisted snapshot model
        """
        snapshot_month = month_start(month)
        result = await self.session.execute(
            select(PortfolioSnapshotModel).where(
                PortfolioSnapshotModel.user_id == user_id,
                PortfolioSnapshotModel.snapshot_month == snapshot_month,
            )
        )
        model = result.scalar_one_or_none()
        if model is None:
            model = PortfolioSnapshotModel(user_id=user_id, snapshot_month=snapshot_month)
            self.session.add(model)

        model.value_sp = portfolio.value_sp
        model.value_ta = portfolio.value_ta
        model.value_cash = portfolio.value_cash
        model.total_value = portfolio.total_value
        model.percent_sp = portfolio.percent_sp
        model.percent_ta = portfolio.percent_ta
        model.percent_cash = portfolio.percent_cash

        await self.session.flush()
        return model

    async def upsert_contribution(
        self,
        user_id: str,
        snapshot_id: int,
        amount_sp: Decimal,
        amount_ta: Decimal,
        amount_cash: Decimal,
        currency: Currency,
        contribution_type: ContributionType,
    ) -> ContributionModel:
        """Record the snapshot's contribution, overwriting a previous one"""
        model = await self.get_contribution(snapshot_id)
        if model is None:
            model = ContributionModel(user_id=user_id, snapshot_id=snapshot_id)
            self.session.add(model)

        model.amount_sp = amount_sp
        model.amount_ta = amount_ta
        model.amount_cash = amount_cash
        model.amount = amount_sp + amount_ta + amount_cash
        model.currency = currency.value
        model.contribution_type = contribution_type.value

        await self.session.flush()
        return model

    @staticmethod
    def to_portfolio(model: PortfolioSnapshotModel) -> PortfolioState:
        return PortfolioState(
            value_sp=Decimal(model.value_sp),
            value_ta=Decimal(model.value_ta),
            value_cash=Decimal(model.value_cash),
        )
