"""
Strategy Settings Repository
Per-user thresholds with upsert-on-user semantics
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from decimal import Decimal
from typing import Optional

from app.infrastructure.db.models import StrategySettingsModel
from app.domain.models import Currency, StrategySettings


class StrategySettingsRepository:
    """Repository for StrategySettings data access"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def get_for_user(self, user_id: str) -> Optional[StrategySettings]:
        """
        Get settings for a user

        Returns:
            StrategySettings or None if the user never saved any
        """
        model = await self._get_model(user_id)
        return self._to_domain(model) if model else None

    async def get_or_default(self, user_id: str) -> StrategySettings:
        """Saved settings, or the defaults for a new user"""
        return await self.get_for_user(user_id) or StrategySettings()

    async def upsert(self, user_id: str, settings: StrategySettings) -> StrategySettings:
        """
        Create or replace a user's settings

        Args:
            user_id: Owner
            settings: Already validated settings

        Returns:
            Persisted StrategySettings
        """
        model = await self._get_model(user_id)
        if model is None:
            model = StrategySettingsModel(user_id=user_id)
            self.session.add(model)

        model.stocks_target_percent = settings.stocks_target_percent
        model.cash_target_percent = settings.cash_target_percent
        model.tranche_1_trigger = settings.tranche1_trigger
        model.tranche_2_trigger = settings.tranche2_trigger
        model.tranche_3_trigger = settings.tranche3_trigger
        model.rebuild_threshold = settings.rebuild_threshold
        model.cash_min_pct = settings.cash_min_pct
        model.cash_max_pct = settings.cash_max_pct
        model.contribution_split_cash_percent = settings.contribution_split_cash_percent
        model.contribution_split_stocks_percent = settings.contribution_split_stocks_percent
        model.monthly_contribution_total = settings.monthly_contribution_total
        model.currency = settings.currency.value

        await self.session.flush()
        return self._to_domain(model)

    async def _get_model(self, user_id: str) -> Optional[StrategySettingsModel]:
        result = await self.session.execute(
            select(StrategySettingsModel).where(StrategySettingsModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: StrategySettingsModel) -> StrategySettings:
        """Convert database model to domain entity"""
        return StrategySettings(
            tranche1_trigger=Decimal(model.tranche_1_trigger),
            tranche2_trigger=Decimal(model.tranche_2_trigger),
            tranche3_trigger=Decimal(model.tranche_3_trigger),
            rebuild_threshold=Decimal(model.rebuild_threshold),
            cash_min_pct=Decimal(model.cash_min_pct),
            cash_max_pct=Decimal(model.cash_max_pct),
            cash_target_percent=Decimal(model.cash_target_percent),
            stocks_target_percent=Decimal(model.stocks_target_percent),
            contribution_split_cash_percent=Decimal(model.contribution_split_cash_percent),
            contribution_split_stocks_percent=Decimal(model.contribution_split_stocks_percent),
            monthly_contribution_total=Decimal(model.monthly_contribution_total),
            currency=Currency(model.currency),
        )
