"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    ContributionType,
    Currency,
    MarketStatus,
    RecommendationType,

    # Entities
    AmmoState,
    MarketState,
    PortfolioState,
    PriceBar,
    StrategyResult,
    StrategySettings,
    TimeSeriesPoint,
    TimeSeriesResult,
)

__all__ = [
    # Enums
    "ContributionType",
    "Currency",
    "MarketStatus",
    "RecommendationType",

    # Entities
    "AmmoState",
    "MarketState",
    "PortfolioState",
    "PriceBar",
    "StrategyResult",
    "StrategySettings",
    "TimeSeriesPoint",
    "TimeSeriesResult",
]
