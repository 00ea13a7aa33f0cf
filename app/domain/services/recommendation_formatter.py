"""
Recommendation text formatting.

Presentation only: every number comes from the structured StrategyResult
fields, nothing is parsed back out of previously rendered text.
"""

from decimal import Decimal
from typing import Optional

from app.domain.models import Currency, RecommendationType, StrategyResult


CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.ILS: "₪",
}

NOTIFICATION_TITLES = {
    RecommendationType.STOP_CASH_OVER_MAX: "Cash allocation alert",
    RecommendationType.FIRE_AMMO_3: "Tranche deployment recommended",
    RecommendationType.FIRE_AMMO_2: "Tranche deployment recommended",
    RecommendationType.FIRE_AMMO_1: "Tranche deployment recommended",
    RecommendationType.REBUILD_AMMO: "Ammo rebuild recommended",
    RecommendationType.NORMAL: "Strategy update",
}

_FIRE_HEADLINES = {
    RecommendationType.FIRE_AMMO_3: "CRASH ALERT!",
    RecommendationType.FIRE_AMMO_2: "BEAR MARKET!",
    RecommendationType.FIRE_AMMO_1: "CORRECTION!",
}


def currency_symbol(currency: Currency | str) -> str:
    try:
        return CURRENCY_SYMBOLS[Currency(currency)]
    except ValueError:
        return CURRENCY_SYMBOLS[Currency.USD]


def format_money(amount: Optional[Decimal], currency: Currency | str) -> str:
    """Render an amount with its currency symbol, e.g. $3,000.00"""
    if amount is None:
        return "N/A"
    return f"{currency_symbol(currency)}{amount:,.2f}"


def format_threshold(value: Decimal) -> str:
    """Render a configured percentage without trailing zeros (30, 12.5)"""
    return f"{value.normalize():f}"


def notification_title(recommendation_type: RecommendationType) -> str:
    return NOTIFICATION_TITLES[recommendation_type]


def render_recommendation(result: StrategyResult) -> str:
    """
    Build the human-readable recommendation sentence for a result.

    Args:
        result: Engine output (recommendation_text is ignored)

    Returns:
        English recommendation text in the result's currency
    """
    rtype = result.recommendation_type
    currency = result.currency
    drawdown = f"{result.drawdown_percent:.1f}%"

    if rtype == RecommendationType.STOP_CASH_OVER_MAX:
        return (
            f"Cash allocation ({result.cash_percent:.1f}%) exceeds "
            f"{format_threshold(result.target_percent)}%. "
            "Stop contributing to cash - direct all contributions to stocks."
        )

    if rtype in _FIRE_HEADLINES:
        return (
            f"{_FIRE_HEADLINES[rtype]} Market down {drawdown}. "
            f"Deploy tranche {rtype.tranche} - one third of cash "
            f"({format_money(result.transfer_amount, currency)}) to stocks."
        )

    if rtype == RecommendationType.REBUILD_AMMO:
        return (
            f"Market recovered (drawdown {drawdown}). "
            f"Rebuild cash reserves to {format_threshold(result.target_percent)}%. "
            f"Transfer {format_money(result.transfer_amount, currency)} from stocks to cash."
        )

    return (
        f"Market {result.market_status.value} (drawdown {drawdown}). Split contribution: "
        f"{format_money(result.cash_contribution, currency)} to cash, "
        f"{format_money(result.stocks_contribution, currency)} to stocks."
    )
