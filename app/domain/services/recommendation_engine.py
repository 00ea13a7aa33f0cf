"""
RECOMMENDATION ENGINE (ENGINE-2)
One recommendation per evaluation from drawdown + ammo state

RESPONSIBILITIES:
- Classify market status from the trigger drawdown
- Walk the priority chain and return the first matching rule
- Size tranche deployments and ammo rebuilds
- NO I/O, NO STATE MUTATION (callers persist tranche flags)

RULES:
❌ No rounding of money (presentation concern)
❌ No division by zero (empty portfolio falls through to NORMAL)
✅ Rule order is fixed: STOP_CASH_OVER_MAX, FIRE_AMMO_3/2/1, REBUILD_AMMO, NORMAL
✅ Deterministic output
"""

from dataclasses import replace
from decimal import Decimal
from typing import Optional

from app.domain.models import (
    AmmoState,
    MarketState,
    MarketStatus,
    PortfolioState,
    RecommendationType,
    StrategyResult,
    StrategySettings,
)
from app.domain.services.recommendation_formatter import render_recommendation


_ZERO = Decimal('0')
_HUNDRED = Decimal('100')
_TRANCHE_DIVISOR = Decimal('3')

_FIRE_RULES = (
    (3, RecommendationType.FIRE_AMMO_3),
    (2, RecommendationType.FIRE_AMMO_2),
    (1, RecommendationType.FIRE_AMMO_1),
)


def calculate_drawdown(last_price: Decimal, high_52w: Decimal) -> Decimal:
    """
    Trigger drawdown of the last price against the 52-week high

    Formula: ((high_52w - last_price) / high_52w) * 100

    Raises:
        ValueError: If high_52w is not positive (data unavailable)
    """
    return MarketState.from_prices(last_price, high_52w).drawdown_percent


def classify_market_status(
    drawdown_percent: Decimal,
    settings: StrategySettings
) -> MarketStatus:
    """
    Threshold ladder on the tranche triggers, no hysteresis

    - CRASH: drawdown >= tranche 3 trigger
    - BEAR: drawdown >= tranche 2 trigger
    - CORRECTION: drawdown >= tranche 1 trigger
    - NORMAL: otherwise
    """
    if drawdown_percent >= settings.tranche3_trigger:
        return MarketStatus.CRASH
    if drawdown_percent >= settings.tranche2_trigger:
        return MarketStatus.BEAR
    if drawdown_percent >= settings.tranche1_trigger:
        return MarketStatus.CORRECTION
    return MarketStatus.NORMAL


class RecommendationEngine:
    """
    Recommendation Engine
    Pure priority chain over portfolio, market, ammo and settings
    """

    def evaluate(
        self,
        portfolio: PortfolioState,
        market: MarketState,
        ammo: AmmoState,
        settings: StrategySettings
    ) -> StrategyResult:
        """
        Produce exactly one recommendation

        Args:
            portfolio: Current three-bucket holdings
            market: Market summary (drawdown_percent is the trigger drawdown)
            ammo: Tranche latches as persisted by the caller
            settings: Validated strategy thresholds

        Returns:
            StrategyResult of the first matching rule
        """
        drawdown = market.drawdown_percent
        status = classify_market_status(drawdown, settings)

        result = (
            self._check_cash_over_max(portfolio, settings)
            or self._check_fire_ammo(portfolio, drawdown, ammo, settings)
            or self._check_rebuild_ammo(portfolio, drawdown, ammo, settings)
            or self._normal_split(settings)
        )

        result = replace(
            result,
            market_status=status,
            drawdown_percent=drawdown,
            cash_percent=portfolio.percent_cash,
            currency=settings.currency,
        )
        return replace(result, recommendation_text=render_recommendation(result))

    @staticmethod
    def _result(
        recommendation_type: RecommendationType,
        transfer_amount: Optional[Decimal] = None,
        **fields
    ) -> StrategyResult:
        return StrategyResult(
            recommendation_type=recommendation_type,
            recommendation_text="",
            transfer_amount=transfer_amount,
            market_status=MarketStatus.NORMAL,
            priority=recommendation_type.priority,
            drawdown_percent=_ZERO,
            cash_percent=_ZERO,
            **fields
        )

    def _check_cash_over_max(
        self,
        portfolio: PortfolioState,
        settings: StrategySettings
    ) -> Optional[StrategyResult]:
        """Cash discipline overrides opportunistic buying"""
        if portfolio.percent_cash > settings.cash_max_pct:
            return self._result(
                RecommendationType.STOP_CASH_OVER_MAX,
                target_percent=settings.cash_max_pct,
            )
        return None

    def _check_fire_ammo(
        self,
        portfolio: PortfolioState,
        drawdown: Decimal,
        ammo: AmmoState,
        settings: StrategySettings
    ) -> Optional[StrategyResult]:
        """Deepest unused tranche whose trigger is reached fires first"""
        if portfolio.value_cash <= _ZERO:
            return None

        for tranche, recommendation_type in _FIRE_RULES:
            if ammo.is_used(tranche):
                continue
            if drawdown >= settings.trigger_for(tranche):
                return self._result(
                    recommendation_type,
                    transfer_amount=portfolio.value_cash / _TRANCHE_DIVISOR,
                    target_percent=settings.trigger_for(tranche),
                )
        return None

    def _check_rebuild_ammo(
        self,
        portfolio: PortfolioState,
        drawdown: Decimal,
        ammo: AmmoState,
        settings: StrategySettings
    ) -> Optional[StrategyResult]:
        """Refill cash toward target once the market is below the rebuild band"""
        if drawdown >= settings.rebuild_threshold:
            return None
        if not ammo.any_used:
            return None
        if portfolio.percent_cash >= settings.cash_target_percent:
            return None

        target_cash = (settings.cash_target_percent / _HUNDRED) * portfolio.total_value
        return self._result(
            RecommendationType.REBUILD_AMMO,
            transfer_amount=target_cash - portfolio.value_cash,
            target_percent=settings.cash_target_percent,
        )

    def _normal_split(self, settings: StrategySettings) -> StrategyResult:
        total = settings.monthly_contribution_total
        return self._result(
            RecommendationType.NORMAL,
            cash_contribution=(settings.contribution_split_cash_percent / _HUNDRED) * total,
            stocks_contribution=(settings.contribution_split_stocks_percent / _HUNDRED) * total,
        )


def evaluate(
    portfolio: PortfolioState,
    market: MarketState,
    ammo: AmmoState,
    settings: StrategySettings
) -> StrategyResult:
    """Module-level shortcut for RecommendationEngine().evaluate()"""
    return RecommendationEngine().evaluate(portfolio, market, ammo, settings)
