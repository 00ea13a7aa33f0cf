"""
Portfolio Update Service
Builds the evaluation inputs, previews recommendations and saves updates.

The engines stay pure; this is the caller that reads state, persists the
snapshot and logs, and applies the tranche latch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import (
    AmmoState,
    PortfolioState,
    StrategyResult,
    StrategySettings,
)
from app.domain.schemas.strategy import PortfolioUpdateRequest
from app.domain.services.ammo_service import apply_recommendation, is_ready_for_reset
from app.domain.services.recommendation_engine import RecommendationEngine
from app.domain.services.recommendation_formatter import notification_title
from app.infrastructure.db.repositories.ammo_state_repository import AmmoStateRepository
from app.infrastructure.db.repositories.market_state_repository import MarketStateLogRepository
from app.infrastructure.db.repositories.notification_repository import NotificationRepository
from app.infrastructure.db.repositories.recommendation_log_repository import RecommendationLogRepository
from app.infrastructure.db.repositories.settings_repository import StrategySettingsRepository
from app.infrastructure.db.repositories.snapshot_repository import PortfolioSnapshotRepository
from app.services.market_data_service import MarketDataService, TickerMarketData
from app.utils.time import month_start, now_utc_naive

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


@dataclass(frozen=True)
class UpdateOutcome:
    portfolio: PortfolioState
    market: TickerMarketData
    recommendation: Optional[StrategyResult]
    ammo: AmmoState
    ammo_reset_ready: bool
    snapshot_id: Optional[int] = None
    snapshot_month: Optional[date] = None


class PortfolioUpdateService:
    """Monthly update workflow for one user"""

    def __init__(
        self,
        session: AsyncSession,
        market_data_service: MarketDataService,
        market_ticker: str = "SPY",
        engine: Optional[RecommendationEngine] = None,
    ) -> None:
        self.session = session
        self.market_data_service = market_data_service
        self.market_ticker = market_ticker
        self.engine = engine or RecommendationEngine()

        self.settings_repo = StrategySettingsRepository(session)
        self.ammo_repo = AmmoStateRepository(session)
        self.snapshot_repo = PortfolioSnapshotRepository(session)
        self.market_log_repo = MarketStateLogRepository(session)
        self.recommendation_repo = RecommendationLogRepository(session)
        self.notification_repo = NotificationRepository(session)

    async def build_portfolio(
        self,
        user_id: str,
        request: PortfolioUpdateRequest,
        as_of: date,
    ) -> PortfolioState:
        """
        Latest snapshot values (unless overridden) plus pending contributions

        A snapshot already saved for the as_of month is replaced on save, so
        the contribution stored with it is taken back out of the base.
        """
        latest = await self.snapshot_repo.get_latest(user_id)
        if latest is None:
            base = PortfolioState(value_sp=_ZERO, value_ta=_ZERO, value_cash=_ZERO)
        else:
            base = self.snapshot_repo.to_portfolio(latest)
            if latest.snapshot_month == month_start(as_of):
                base = await self._without_contribution(latest.id, base)

        value_sp = request.value_sp if request.value_sp is not None else base.value_sp
        value_ta = request.value_ta if request.value_ta is not None else base.value_ta
        value_cash = request.value_cash if request.value_cash is not None else base.value_cash

        return PortfolioState(
            value_sp=value_sp + request.contribution_sp,
            value_ta=value_ta + request.contribution_ta,
            value_cash=value_cash + request.contribution_cash,
        )

    async def _without_contribution(self, snapshot_id: int, base: PortfolioState) -> PortfolioState:
        contribution = await self.snapshot_repo.get_contribution(snapshot_id)
        if contribution is None:
            return base
        return PortfolioState(
            value_sp=max(base.value_sp - Decimal(contribution.amount_sp), _ZERO),
            value_ta=max(base.value_ta - Decimal(contribution.amount_ta), _ZERO),
            value_cash=max(base.value_cash - Decimal(contribution.amount_cash), _ZERO),
        )

    def _evaluate(
        self,
        portfolio: PortfolioState,
        market: TickerMarketData,
        ammo: AmmoState,
        settings: StrategySettings,
    ) -> Optional[StrategyResult]:
        if not market.is_available:
            logger.warning(
                "Skipping recommendation, market data unavailable for %s: %s",
                market.ticker, market.error,
            )
            return None
        return self.engine.evaluate(portfolio, market.summary, ammo, settings)

    async def preview(
        self,
        user_id: str,
        request: PortfolioUpdateRequest,
        as_of: Optional[date] = None,
    ) -> UpdateOutcome:
        """Evaluate without persisting anything"""
        as_of = as_of or now_utc_naive().date()
        settings = await self.settings_repo.get_or_default(user_id)
        ammo = await self.ammo_repo.get_for_user(user_id)
        portfolio = await self.build_portfolio(user_id, request, as_of)
        market = await self.market_data_service.get_ticker_data(self.market_ticker, as_of)

        recommendation = self._evaluate(portfolio, market, ammo, settings)
        return UpdateOutcome(
            portfolio=portfolio,
            market=market,
            recommendation=recommendation,
            ammo=ammo,
            ammo_reset_ready=is_ready_for_reset(ammo, market.summary, portfolio, settings),
        )

    async def save(
        self,
        user_id: str,
        request: PortfolioUpdateRequest,
        as_of: Optional[date] = None,
    ) -> UpdateOutcome:
        """
        Persist the monthly update

        The snapshot and contribution are always saved. Market state,
        recommendation, ammo latch and notification are saved only when
        market data is available.
        """
        as_of = as_of or now_utc_naive().date()
        settings = await self.settings_repo.get_or_default(user_id)
        # Lock the latch row for the whole read-evaluate-apply sequence
        ammo = await self.ammo_repo.get_for_user(user_id, for_update=True)
        portfolio = await self.build_portfolio(user_id, request, as_of)
        market = await self.market_data_service.get_ticker_data(self.market_ticker, as_of)

        snapshot = await self.snapshot_repo.upsert_for_month(user_id, as_of, portfolio)
        if request.contribution_total > _ZERO:
            await self.snapshot_repo.upsert_contribution(
                user_id=user_id,
                snapshot_id=snapshot.id,
                amount_sp=request.contribution_sp,
                amount_ta=request.contribution_ta,
                amount_cash=request.contribution_cash,
                currency=request.contribution_currency,
                contribution_type=request.contribution_type,
            )
        else:
            # The replaced snapshot no longer includes an earlier contribution
            await self.snapshot_repo.delete_contribution(snapshot.id)

        recommendation = self._evaluate(portfolio, market, ammo, settings)
        if recommendation is not None:
            await self.market_log_repo.append(user_id, self.market_ticker, market.summary, as_of)
            await self.recommendation_repo.append(user_id, recommendation, snapshot_id=snapshot.id)

            updated_ammo = apply_recommendation(ammo, recommendation)
            if updated_ammo != ammo:
                ammo = await self.ammo_repo.upsert(user_id, updated_ammo)
                logger.info(
                    "User %s fired tranche %s (%s)",
                    user_id, recommendation.fires_tranche, recommendation.transfer_amount,
                )

            await self.notification_repo.create(
                user_id=user_id,
                title=notification_title(recommendation.recommendation_type),
                message=recommendation.recommendation_text,
                notification_type="recommendation",
                metadata={
                    "recommendation_type": recommendation.recommendation_type.value,
                    "drawdown_percent": float(recommendation.drawdown_percent),
                    "transfer_amount": (
                        float(recommendation.transfer_amount)
                        if recommendation.transfer_amount is not None else None
                    ),
                    "market_status": recommendation.market_status.value,
                },
            )

        return UpdateOutcome(
            portfolio=portfolio,
            market=market,
            recommendation=recommendation,
            ammo=ammo,
            ammo_reset_ready=is_ready_for_reset(ammo, market.summary, portfolio, settings),
            snapshot_id=snapshot.id,
            snapshot_month=snapshot.snapshot_month,
        )
