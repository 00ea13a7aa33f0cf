"""
Portfolio Update API Routes
Preview and save monthly updates, browse history
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date
from typing import Optional, List
from pydantic import BaseModel
import logging

from app.api.dependencies import get_update_service
from app.domain.schemas.strategy import (
    MarketSummaryResponse,
    PortfolioResponse,
    PortfolioUpdateRequest,
    PreviewResponse,
    StrategyResultResponse,
    UpdateSavedResponse,
)
from app.infrastructure.db.database import get_db
from app.infrastructure.db.repositories.notification_repository import NotificationRepository
from app.infrastructure.db.repositories.recommendation_log_repository import RecommendationLogRepository
from app.infrastructure.db.repositories.snapshot_repository import PortfolioSnapshotRepository
from app.services.portfolio_update_service import PortfolioUpdateService, UpdateOutcome

logger = logging.getLogger(__name__)
router = APIRouter()


# Response models
class RecommendationLogResponse(BaseModel):
    id: int
    recommendation_type: str
    recommendation_text: str
    transfer_amount: Optional[float]
    drawdown_percent: Optional[float]
    market_status: Optional[str]
    priority: int
    target_percent: Optional[float]
    cash_contribution: Optional[float]
    stocks_contribution: Optional[float]
    currency: str
    snapshot_id: Optional[int]
    created_at: str


class SnapshotResponse(BaseModel):
    id: int
    snapshot_month: str
    value_sp: float
    value_ta: float
    value_cash: float
    total_value: float
    percent_cash: float


class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    notification_type: str
    is_read: bool
    created_at: str


def _optional_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _outcome_fields(outcome: UpdateOutcome) -> dict:
    portfolio = outcome.portfolio
    market = outcome.market
    return {
        "portfolio": PortfolioResponse(
            value_sp=float(portfolio.value_sp),
            value_ta=float(portfolio.value_ta),
            value_cash=float(portfolio.value_cash),
            total_value=float(portfolio.total_value),
            percent_sp=float(portfolio.percent_sp),
            percent_ta=float(portfolio.percent_ta),
            percent_cash=float(portfolio.percent_cash),
        ),
        "market": MarketSummaryResponse(
            ticker=market.ticker,
            last_price=float(market.summary.last_price),
            high_52w=float(market.summary.high_52w),
            drawdown_percent=float(market.summary.drawdown_percent),
            current_drawdown=float(market.analytics.current_drawdown),
            available=market.is_available,
            error=market.error,
        ),
        "recommendation": (
            StrategyResultResponse.from_domain(outcome.recommendation)
            if outcome.recommendation else None
        ),
        "ammo_reset_ready": outcome.ammo_reset_ready,
    }


@router.post("/{user_id}/strategy/preview", response_model=PreviewResponse)
async def preview_strategy(
    user_id: str,
    payload: PortfolioUpdateRequest,
    as_of: Optional[date] = None,
    service: PortfolioUpdateService = Depends(get_update_service),
):
    """
    Evaluate the strategy for the entered values without saving anything
    """
    outcome = await service.preview(user_id, payload, as_of)
    return PreviewResponse(**_outcome_fields(outcome))


@router.post("/{user_id}/updates", response_model=UpdateSavedResponse)
async def save_update(
    user_id: str,
    payload: PortfolioUpdateRequest,
    as_of: Optional[date] = None,
    service: PortfolioUpdateService = Depends(get_update_service),
):
    """
    Save the month's snapshot and, when market data is available, the
    recommendation with its tranche latch
    """
    outcome = await service.save(user_id, payload, as_of)
    ammo = outcome.ammo
    return UpdateSavedResponse(
        **_outcome_fields(outcome),
        snapshot_id=outcome.snapshot_id,
        snapshot_month=outcome.snapshot_month.isoformat(),
        tranches_used=[n for n in (1, 2, 3) if ammo.is_used(n)],
    )


@router.get("/{user_id}/recommendations", response_model=List[RecommendationLogResponse])
async def get_recommendation_history(
    user_id: str,
    limit: int = 50,
    max_priority: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Past recommendations, newest first; max_priority=4 keeps only
    cash-over-max and tranche firings
    """
    if max_priority is not None and not 1 <= max_priority <= 6:
        raise HTTPException(status_code=400, detail="max_priority must be between 1 and 6")

    rows = await RecommendationLogRepository(db).get_recent(user_id, limit, max_priority)
    return [
        RecommendationLogResponse(
            id=row.id,
            recommendation_type=row.recommendation_type,
            recommendation_text=row.recommendation_text,
            transfer_amount=_optional_float(row.transfer_amount),
            drawdown_percent=_optional_float(row.drawdown_percent),
            market_status=row.market_status,
            priority=row.priority,
            target_percent=_optional_float(row.target_percent),
            cash_contribution=_optional_float(row.cash_contribution),
            stocks_contribution=_optional_float(row.stocks_contribution),
            currency=row.currency,
            snapshot_id=row.snapshot_id,
            created_at=row.created_at.isoformat(),
        )
        for row in rows
    ]


@router.get("/{user_id}/snapshots", response_model=List[SnapshotResponse])
async def get_snapshots(
    user_id: str,
    limit: int = 12,
    db: AsyncSession = Depends(get_db),
):
    rows = await PortfolioSnapshotRepository(db).get_recent(user_id, limit)
    return [
        SnapshotResponse(
            id=row.id,
            snapshot_month=row.snapshot_month.isoformat(),
            value_sp=float(row.value_sp),
            value_ta=float(row.value_ta),
            value_cash=float(row.value_cash),
            total_value=float(row.total_value),
            percent_cash=float(row.percent_cash),
        )
        for row in rows
    ]


@router.get("/{user_id}/notifications", response_model=List[NotificationResponse])
async def get_notifications(
    user_id: str,
    limit: int = 20,
    unread_only: bool = False,
    db: AsyncSession = Depends(get_db),
):
    rows = await NotificationRepository(db).get_recent(user_id, limit, unread_only)
    return [
        NotificationResponse(
            id=row.id,
            title=row.title,
            message=row.message,
            notification_type=row.notification_type,
            is_read=row.is_read,
            created_at=row.created_at.isoformat(),
        )
        for row in rows
    ]


@router.post("/{user_id}/notifications/{notification_id}/read")
async def mark_notification_read(
    user_id: str,
    notification_id: int,
    db: AsyncSession = Depends(get_db),
):
    updated = await NotificationRepository(db).mark_read(user_id, notification_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"status": "ok"}
