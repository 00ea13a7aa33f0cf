"""
Ammo state transitions.

Each tranche is a one-shot latch: READY -> USED only when a FIRE_AMMO
recommendation for that tranche is applied, USED -> READY only through an
explicit reset of all three.
"""

from dataclasses import replace

from app.domain.models import (
    AmmoState,
    MarketState,
    PortfolioState,
    StrategyResult,
    StrategySettings,
)


def apply_recommendation(ammo: AmmoState, result: StrategyResult) -> AmmoState:
    """
    Latch the tranche fired by a recommendation.

    Idempotent: applying the same result twice yields the same state, and
    results that fire nothing return the state unchanged.
    """
    tranche = result.fires_tranche
    if tranche is None:
        return ammo
    return replace(ammo, **{f"tranche{tranche}_used": True})


def reset_ammo() -> AmmoState:
    """Manual reset: every tranche back to ready"""
    return AmmoState()


def is_ready_for_reset(
    ammo: AmmoState,
    market: MarketState,
    portfolio: PortfolioState,
    settings: StrategySettings,
) -> bool:
    """
    Suggest a manual reset once the cycle is over.

    All tranches must be spent, the market must have recovered below the
    rebuild threshold and cash must be back at (or above) target.
    """
    if not ammo.all_used or not market.is_available:
        return False
    if market.drawdown_percent >= settings.rebuild_threshold:
        return False
    return portfolio.percent_cash >= settings.cash_target_percent
