"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


HUNDRED = Decimal('100')
ZERO = Decimal('0')


class MarketStatus(str, Enum):
    """Coarse classification of the current drawdown"""
    NORMAL = "normal"
    CORRECTION = "correction"
    BEAR = "bear"
    CRASH = "crash"


class RecommendationType(str, Enum):
    """Closed set of recommendation tags, in priority order"""
    STOP_CASH_OVER_MAX = "STOP_CASH_OVER_MAX"
    FIRE_AMMO_3 = "FIRE_AMMO_3"
    FIRE_AMMO_2 = "FIRE_AMMO_2"
    FIRE_AMMO_1 = "FIRE_AMMO_1"
    REBUILD_AMMO = "REBUILD_AMMO"
    NORMAL = "NORMAL"

    @property
    def priority(self) -> int:
        """1-based position in the rule chain (1 = highest)"""
        return list(RecommendationType).index(self) + 1

    @property
    def tranche(self) -> Optional[int]:
        """Tranche number fired by this recommendation, if any"""
        return _TRANCHE_BY_TYPE.get(self)


_TRANCHE_BY_TYPE = {
    RecommendationType.FIRE_AMMO_1: 1,
    RecommendationType.FIRE_AMMO_2: 2,
    RecommendationType.FIRE_AMMO_3: 3,
}


class Currency(str, Enum):
    """Base currency used for presentation"""
    USD = "USD"
    ILS = "ILS"


class ContributionType(str, Enum):
    """Kind of money added alongside a snapshot"""
    MONTHLY = "monthly"
    BONUS = "bonus"
    ADJUSTMENT = "adjustment"


@dataclass(frozen=True)
class PriceBar:
    """One trading day of a single instrument - Immutable"""
    date: date
    high: Decimal
    close: Decimal

    def __post_init__(self):
        if self.high < ZERO:
            raise ValueError("High price cannot be negative")
        if self.close < ZERO:
            raise ValueError("Close price cannot be negative")


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Per-bar analytics, rounded for display"""
    date: date
    close: Decimal
    return_pct: Decimal
    drawdown_pct: Decimal


@dataclass(frozen=True)
class MarketState:
    """
    Market summary used by the recommendation engine.

    drawdown_percent is the trigger drawdown (52-week high of `high` vs last
    close). series_drawdown is the chart drawdown against the running peak
    close. The two are not interchangeable.
    """
    last_price: Decimal
    high_52w: Decimal
    drawdown_percent: Decimal
    series_drawdown: Decimal = ZERO

    @property
    def is_available(self) -> bool:
        """A zero 52-week high means the data could not be loaded"""
        return self.high_52w > ZERO

    @staticmethod
    def unavailable() -> "MarketState":
        return MarketState(
            last_price=ZERO,
            high_52w=ZERO,
            drawdown_percent=ZERO,
            series_drawdown=ZERO,
        )

    @staticmethod
    def from_prices(
        last_price: Decimal,
        high_52w: Decimal,
        series_drawdown: Decimal = ZERO,
    ) -> "MarketState":
        if high_52w <= ZERO:
            raise ValueError("52-week high must be positive")

        drawdown = ((high_52w - last_price) / high_52w) * HUNDRED
        return MarketState(
            last_price=last_price,
            high_52w=high_52w,
            drawdown_percent=drawdown,
            series_drawdown=series_drawdown,
        )


@dataclass(frozen=True)
class TimeSeriesResult:
    """Chronological analytics plus the series-ending summary"""
    points: list[TimeSeriesPoint]
    summary: MarketState

    @property
    def current_drawdown(self) -> Decimal:
        return self.points[-1].drawdown_pct if self.points else ZERO


@dataclass(frozen=True)
class PortfolioState:
    """Three-bucket holdings snapshot - Immutable"""
    value_sp: Decimal
    value_ta: Decimal
    value_cash: Decimal

    def __post_init__(self):
        for name in ("value_sp", "value_ta", "value_cash"):
            if getattr(self, name) < ZERO:
                raise ValueError(f"{name} cannot be negative")

    @property
    def total_value(self) -> Decimal:
        return self.value_sp + self.value_ta + self.value_cash

    @property
    def value_stocks(self) -> Decimal:
        return self.value_sp + self.value_ta

    def _percent_of_total(self, value: Decimal) -> Decimal:
        total = self.total_value
        if total <= ZERO:
            return ZERO
        return (value / total) * HUNDRED

    @property
    def percent_sp(self) -> Decimal:
        return self._percent_of_total(self.value_sp)

    @property
    def percent_ta(self) -> Decimal:
        return self._percent_of_total(self.value_ta)

    @property
    def percent_cash(self) -> Decimal:
        return self._percent_of_total(self.value_cash)

    @property
    def percent_stocks(self) -> Decimal:
        return self._percent_of_total(self.value_stocks)


@dataclass(frozen=True)
class AmmoState:
    """Three one-shot tranche latches"""
    tranche1_used: bool = False
    tranche2_used: bool = False
    tranche3_used: bool = False

    @property
    def any_used(self) -> bool:
        return self.tranche1_used or self.tranche2_used or self.tranche3_used

    @property
    def all_used(self) -> bool:
        return self.tranche1_used and self.tranche2_used and self.tranche3_used

    def is_used(self, tranche: int) -> bool:
        if tranche not in (1, 2, 3):
            raise ValueError(f"Unknown tranche: {tranche}")
        return getattr(self, f"tranche{tranche}_used")


@dataclass(frozen=True)
class StrategySettings:
    """User-configured strategy thresholds (all percentages)"""
    tranche1_trigger: Decimal = Decimal('10')
    tranche2_trigger: Decimal = Decimal('20')
    tranche3_trigger: Decimal = Decimal('30')
    rebuild_threshold: Decimal = Decimal('10')
    cash_min_pct: Decimal = Decimal('20')
    cash_max_pct: Decimal = Decimal('35')
    cash_target_percent: Decimal = Decimal('30')
    stocks_target_percent: Decimal = Decimal('70')
    contribution_split_cash_percent: Decimal = Decimal('30')
    contribution_split_stocks_percent: Decimal = Decimal('70')
    monthly_contribution_total: Decimal = ZERO
    currency: Currency = Currency.USD

    def __post_init__(self):
        if not self.tranche1_trigger <= self.tranche2_trigger <= self.tranche3_trigger:
            raise ValueError(
                "Tranche triggers must be ordered: "
                f"{self.tranche1_trigger} <= {self.tranche2_trigger} <= {self.tranche3_trigger}"
            )
        if self.monthly_contribution_total < ZERO:
            raise ValueError("Monthly contribution cannot be negative")

    def trigger_for(self, tranche: int) -> Decimal:
        if tranche not in (1, 2, 3):
            raise ValueError(f"Unknown tranche: {tranche}")
        return getattr(self, f"tranche{tranche}_trigger")


@dataclass(frozen=True)
class StrategyResult:
    """
    Single recommendation produced per evaluation.

    The structured fields carry every number the text mentions so that any
    presentation layer can render its own wording.
    """
    recommendation_type: RecommendationType
    recommendation_text: str
    transfer_amount: Optional[Decimal]
    market_status: MarketStatus
    priority: int
    drawdown_percent: Decimal
    cash_percent: Decimal
    target_percent: Optional[Decimal] = None
    cash_contribution: Optional[Decimal] = None
    stocks_contribution: Optional[Decimal] = None
    currency: Currency = field(default=Currency.USD)

    @property
    def fires_tranche(self) -> Optional[int]:
        return self.recommendation_type.tranche
