from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.domain.models import ContributionType, Currency, StrategyResult


class PortfolioUpdateRequest(BaseModel):
    """
    Monthly update as entered by the user.

    Bucket values default to the latest saved snapshot; contributions are
    added to their bucket before the strategy is evaluated.
    """
    value_sp: Optional[Decimal] = Field(None, ge=0)
    value_ta: Optional[Decimal] = Field(None, ge=0)
    value_cash: Optional[Decimal] = Field(None, ge=0)
    contribution_sp: Decimal = Field(Decimal("0"), ge=0)
    contribution_ta: Decimal = Field(Decimal("0"), ge=0)
    contribution_cash: Decimal = Field(Decimal("0"), ge=0)
    contribution_currency: Currency = Currency.USD
    contribution_type: ContributionType = ContributionType.MONTHLY

    @property
    def contribution_total(self) -> Decimal:
        return self.contribution_sp + self.contribution_ta + self.contribution_cash


def _optional_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class StrategyResultResponse(BaseModel):
    recommendation_type: str
    recommendation_text: str
    transfer_amount: Optional[float]
    market_status: str
    priority: int
    drawdown_percent: float
    cash_percent: float
    target_percent: Optional[float] = None
    cash_contribution: Optional[float] = None
    stocks_contribution: Optional[float] = None
    currency: str = Currency.USD.value

    @staticmethod
    def from_domain(result: StrategyResult) -> "StrategyResultResponse":
        return StrategyResultResponse(
            recommendation_type=result.recommendation_type.value,
            recommendation_text=result.recommendation_text,
            transfer_amount=_optional_float(result.transfer_amount),
            market_status=result.market_status.value,
            priority=result.priority,
            drawdown_percent=float(result.drawdown_percent),
            cash_percent=float(result.cash_percent),
            target_percent=_optional_float(result.target_percent),
            cash_contribution=_optional_float(result.cash_contribution),
            stocks_contribution=_optional_float(result.stocks_contribution),
            currency=result.currency.value,
        )


class PortfolioResponse(BaseModel):
    value_sp: float
    value_ta: float
    value_cash: float
    total_value: float
    percent_sp: float
    percent_ta: float
    percent_cash: float


class MarketSummaryResponse(BaseModel):
    ticker: str
    last_price: float
    high_52w: float
    drawdown_percent: float
    current_drawdown: float
    available: bool
    error: Optional[str] = None


class PreviewResponse(BaseModel):
    portfolio: PortfolioResponse
    market: MarketSummaryResponse
    recommendation: Optional[StrategyResultResponse]
    ammo_reset_ready: bool = False


class UpdateSavedResponse(PreviewResponse):
    snapshot_id: int
    snapshot_month: str
    tranches_used: List[int]
