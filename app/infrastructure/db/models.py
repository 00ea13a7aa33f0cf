"""
Database Models (SQLAlchemy ORM)
Per-user state tables plus append-only logs
"""

from sqlalchemy import (
    Column, Integer, String, Numeric, Date, DateTime,
    Boolean, ForeignKey, Text, Index, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship

from app.infrastructure.db.database import Base
from app.utils.time import now_utc_naive


class StrategySettingsModel(Base):
    """User strategy thresholds - one row per user"""
    __tablename__ = "strategy_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True, index=True)

    stocks_target_percent = Column(Numeric(5, 2), nullable=False, default=70)
    cash_target_percent = Column(Numeric(5, 2), nullable=False, default=30)
    tranche_1_trigger = Column(Numeric(5, 2), nullable=False, default=10)
    tranche_2_trigger = Column(Numeric(5, 2), nullable=False, default=20)
    tranche_3_trigger = Column(Numeric(5, 2), nullable=False, default=30)
    rebuild_threshold = Column(Numeric(5, 2), nullable=False, default=10)
    cash_min_pct = Column(Numeric(5, 2), nullable=False, default=20)
    cash_max_pct = Column(Numeric(5, 2), nullable=False, default=35)
    contribution_split_cash_percent = Column(Numeric(5, 2), nullable=False, default=30)
    contribution_split_stocks_percent = Column(Numeric(5, 2), nullable=False, default=70)
    monthly_contribution_total = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")

    created_at = Column(DateTime, nullable=False, default=now_utc_naive)
    updated_at = Column(DateTime, nullable=False, default=now_utc_naive, onupdate=now_utc_naive)


class AmmoStateModel(Base):
    """Tranche latches - one row per user, upserted"""
    __tablename__ = "ammo_state"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    tranche_1_used = Column(Boolean, nullable=False, default=False)
    tranche_2_used = Column(Boolean, nullable=False, default=False)
    tranche_3_used = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=now_utc_naive)
    updated_at = Column(DateTime, nullable=False, default=now_utc_naive, onupdate=now_utc_naive)


class PortfolioSnapshotModel(Base):
    """Monthly three-bucket snapshot - last write wins per month"""
    __tablename__ = "portfolio_snapshot"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    snapshot_month = Column(Date, nullable=False)

    value_sp = Column(Numeric(14, 2), nullable=False)
    value_ta = Column(Numeric(14, 2), nullable=False)
    value_cash = Column(Numeric(14, 2), nullable=False)
    total_value = Column(Numeric(14, 2), nullable=False)
    percent_sp = Column(Numeric(7, 4), nullable=False)
    percent_ta = Column(Numeric(7, 4), nullable=False)
    percent_cash = Column(Numeric(7, 4), nullable=False)

    created_at = Column(DateTime, nullable=False, default=now_utc_naive)
    updated_at = Column(DateTime, nullable=False, default=now_utc_naive, onupdate=now_utc_naive)

    # Relationships
    contribution = relationship("ContributionModel", back_populates="snapshot", uselist=False)

    __table_args__ = (
        UniqueConstraint("user_id", "snapshot_month", name="uq_portfolio_snapshot_user_month"),
    )


class ContributionModel(Base):
    """Money added with a snapshot - one per snapshot, overwritten"""
    __tablename__ = "contribution"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    snapshot_id = Column(Integer, ForeignKey("portfolio_snapshot.id"), nullable=False, unique=True)

    amount = Column(Numeric(14, 2), nullable=False)
    amount_sp = Column(Numeric(14, 2), nullable=False, default=0)
    amount_ta = Column(Numeric(14, 2), nullable=False, default=0)
    amount_cash = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False)
    contribution_type = Column(String(20), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)

    # Relationships
    snapshot = relationship("PortfolioSnapshotModel", back_populates="contribution")


class MarketStateLogModel(Base):
    """Market summary at evaluation time - AUDIT RECORD"""
    __tablename__ = "market_state_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    ticker = Column(String(20), nullable=False)
    last_price = Column(Numeric(12, 4), nullable=False)
    high_52w = Column(Numeric(12, 4), nullable=False)
    drawdown_percent = Column(Numeric(9, 4), nullable=True)
    as_of_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)

    __table_args__ = (
        Index('ix_market_state_log_user_date', 'user_id', 'as_of_date'),
    )


class RecommendationLogModel(Base):
    """Recommendation issued on save - AUDIT RECORD"""
    __tablename__ = "recommendation_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    snapshot_id = Column(Integer, ForeignKey("portfolio_snapshot.id"), nullable=True)

    recommendation_type = Column(String(32), nullable=False)
    recommendation_text = Column(Text, nullable=False)
    transfer_amount = Column(Numeric(14, 2), nullable=True)
    drawdown_percent = Column(Numeric(9, 4), nullable=True)
    market_status = Column(String(20), nullable=True)
    priority = Column(Integer, nullable=False)
    target_percent = Column(Numeric(5, 2), nullable=True)
    cash_contribution = Column(Numeric(14, 2), nullable=True)
    stocks_contribution = Column(Numeric(14, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)


class NotificationModel(Base):
    """In-app notification"""
    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    notification_type = Column(String(50), nullable=False)
    metadata_json = Column("metadata", JSON, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)
