from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from app.domain.models import Currency, StrategySettings


class StrategySettingsSchema(BaseModel):
    """Validated strategy settings as submitted by the user"""

    stocks_target_percent: Decimal = Field(Decimal("70"), ge=0, le=100)
    cash_target_percent: Decimal = Field(Decimal("30"), ge=0, le=100)
    tranche_1_trigger: Decimal = Field(Decimal("10"), ge=0, le=100)
    tranche_2_trigger: Decimal = Field(Decimal("20"), ge=0, le=100)
    tranche_3_trigger: Decimal = Field(Decimal("30"), ge=0, le=100)
    rebuild_threshold: Decimal = Field(Decimal("10"), ge=0, le=100)
    cash_min_pct: Decimal = Field(Decimal("20"), ge=0, le=100)
    cash_max_pct: Decimal = Field(Decimal("35"), ge=0, le=100)
    contribution_split_cash_percent: Decimal = Field(Decimal("30"), ge=0, le=100)
    contribution_split_stocks_percent: Decimal = Field(Decimal("70"), ge=0, le=100)
    monthly_contribution_total: Decimal = Field(Decimal("0"), ge=0)
    currency: Currency = Currency.USD

    @model_validator(mode="after")
    def check_consistency(self) -> "StrategySettingsSchema":
        if self.stocks_target_percent + self.cash_target_percent != 100:
            raise ValueError("Stocks and cash target must equal 100%")
        if self.cash_min_pct > self.cash_target_percent:
            raise ValueError("Min cannot exceed target")
        if self.cash_max_pct < self.cash_target_percent:
            raise ValueError("Max cannot be less than target")
        if self.tranche_1_trigger > self.tranche_2_trigger:
            raise ValueError("Tranche 1 must be <= Tranche 2")
        if self.tranche_2_trigger > self.tranche_3_trigger:
            raise ValueError("Tranche 2 must be <= Tranche 3")
        split = self.contribution_split_cash_percent + self.contribution_split_stocks_percent
        if split != 100:
            raise ValueError("Contribution split must equal 100%")
        return self

    def to_domain(self) -> StrategySettings:
        return StrategySettings(
            tranche1_trigger=self.tranche_1_trigger,
            tranche2_trigger=self.tranche_2_trigger,
            tranche3_trigger=self.tranche_3_trigger,
            rebuild_threshold=self.rebuild_threshold,
            cash_min_pct=self.cash_min_pct,
            cash_max_pct=self.cash_max_pct,
            cash_target_percent=self.cash_target_percent,
            stocks_target_percent=self.stocks_target_percent,
            contribution_split_cash_percent=self.contribution_split_cash_percent,
            contribution_split_stocks_percent=self.contribution_split_stocks_percent,
            monthly_contribution_total=self.monthly_contribution_total,
            currency=self.currency,
        )

    @staticmethod
    def from_domain(settings: StrategySettings) -> "StrategySettingsSchema":
        return StrategySettingsSchema(
            stocks_target_percent=settings.stocks_target_percent,
            cash_target_percent=settings.cash_target_percent,
            tranche_1_trigger=settings.tranche1_trigger,
            tranche_2_trigger=settings.tranche2_trigger,
            tranche_3_trigger=settings.tranche3_trigger,
            rebuild_threshold=settings.rebuild_threshold,
            cash_min_pct=settings.cash_min_pct,
            cash_max_pct=settings.cash_max_pct,
            contribution_split_cash_percent=settings.contribution_split_cash_percent,
            contribution_split_stocks_percent=settings.contribution_split_stocks_percent,
            monthly_contribution_total=settings.monthly_contribution_total,
            currency=settings.currency,
        )
