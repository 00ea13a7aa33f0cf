from datetime import date, datetime
from decimal import Decimal

import pytest

from app.domain.models import AmmoState, RecommendationType
from app.domain.schemas.strategy import PortfolioUpdateRequest
from app.infrastructure.db.repositories.ammo_state_repository import AmmoStateRepository
from app.infrastructure.db.repositories.market_state_repository import MarketStateLogRepository
from app.infrastructure.db.repositories.notification_repository import NotificationRepository
from app.infrastructure.db.repositories.recommendation_log_repository import RecommendationLogRepository
from app.infrastructure.db.repositories.snapshot_repository import PortfolioSnapshotRepository
from app.services.portfolio_update_service import PortfolioUpdateService

AS_OF = date(2026, 3, 31)


@pytest.fixture()
def service(db_session, market_data_service) -> PortfolioUpdateService:
    return PortfolioUpdateService(
        session=db_session,
        market_data_service=market_data_service,
        market_ticker="SPY",
    )


def _request(**values) -> PortfolioUpdateRequest:
    defaults = {"value_sp": "21000", "value_ta": "10000", "value_cash": "9000"}
    defaults.update(values)
    return PortfolioUpdateRequest(**defaults)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_preview_has_no_side_effects(service, db_session):
    outcome = await service.preview("u1", _request(), AS_OF)
    await db_session.commit()

    assert outcome.recommendation.recommendation_type == RecommendationType.FIRE_AMMO_1
    assert outcome.snapshot_id is None
    assert await PortfolioSnapshotRepository(db_session).get_latest("u1") is None
    assert await AmmoStateRepository(db_session).get_for_user("u1") == AmmoState()
    assert await RecommendationLogRepository(db_session).get_recent("u1") == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_save_fires_tranche_and_latches_it(service, db_session):
    outcome = await service.save("u1", _request(), AS_OF)
    await db_session.commit()

    assert outcome.recommendation.recommendation_type == RecommendationType.FIRE_AMMO_1
    assert outcome.recommendation.transfer_amount == Decimal("3000")
    assert outcome.ammo == AmmoState(tranche1_used=True)
    assert outcome.snapshot_month == date(2026, 3, 1)

    assert await AmmoStateRepository(db_session).get_for_user("u1") == AmmoState(tranche1_used=True)

    logs = await RecommendationLogRepository(db_session).get_recent("u1")
    assert len(logs) == 1
    assert logs[0].snapshot_id == outcome.snapshot_id

    market_log = await MarketStateLogRepository(db_session).get_latest("u1")
    assert market_log.ticker == "SPY"
    assert market_log.high_52w == Decimal("450")

    notifications = await NotificationRepository(db_session).get_recent("u1")
    assert len(notifications) == 1
    assert notifications[0].title == "Tranche deployment recommended"
    assert notifications[0].metadata_json["recommendation_type"] == "FIRE_AMMO_1"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_second_save_does_not_refire(service, db_session):
    await service.save("u1", _request(), AS_OF)
    await db_session.commit()

    outcome = await service.save("u1", _request(), AS_OF)
    await db_session.commit()

    assert outcome.recommendation.recommendation_type == RecommendationType.NORMAL
    assert outcome.ammo == AmmoState(tranche1_used=True)
    # Same month: snapshot replaced, not duplicated
    assert len(await PortfolioSnapshotRepository(db_session).get_recent("u1")) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_values_default_to_latest_snapshot_plus_contributions(service, db_session):
    await service.save("u1", _request(), date(2026, 2, 28))
    await db_session.commit()

    request = PortfolioUpdateRequest(
        contribution_sp="700",
        contribution_cash="300",
        contribution_type="monthly",
    )
    outcome = await service.save("u1", request, AS_OF)
    await db_session.commit()

    assert outcome.portfolio.value_sp == Decimal("21700")
    assert outcome.portfolio.value_ta == Decimal("10000")
    assert outcome.portfolio.value_cash == Decimal("9300")
    assert len(await PortfolioSnapshotRepository(db_session).get_recent("u1")) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cash_over_max_does_not_touch_ammo(service, db_session):
    outcome = await service.save("u1", _request(value_cash="40000"), AS_OF)
    await db_session.commit()

    assert outcome.recommendation.recommendation_type == RecommendationType.STOP_CASH_OVER_MAX
    assert outcome.ammo == AmmoState()
    assert await AmmoStateRepository(db_session).get_for_user("u1") == AmmoState()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unavailable_market_saves_snapshot_only(service, db_session, price_provider):
    price_provider.bars["SPY"] = []

    outcome = await service.save("u1", _request(), AS_OF)
    await db_session.commit()

    assert outcome.recommendation is None
    assert outcome.market.error == "No data available for SPY"
    assert outcome.snapshot_id is not None
    assert await RecommendationLogRepository(db_session).get_recent("u1") == []
    assert await AmmoStateRepository(db_session).get_for_user("u1") == AmmoState()
    assert await NotificationRepository(db_session).get_recent("u1") == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resaving_month_does_not_double_count_contribution(service, db_session):
    await service.save("u1", _request(), date(2026, 2, 28))
    await db_session.commit()

    request = PortfolioUpdateRequest(contribution_cash="300")
    first = await service.save("u1", request, AS_OF)
    await db_session.commit()
    second = await service.save("u1", request, AS_OF)
    await db_session.commit()

    assert first.portfolio.value_cash == Decimal("9300")
    assert second.portfolio.value_cash == Decimal("9300")
    assert second.snapshot_id == first.snapshot_id

    repo = PortfolioSnapshotRepository(db_session)
    contribution = await repo.get_contribution(second.snapshot_id)
    assert contribution.amount_cash == Decimal("300")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resaving_month_without_contribution_drops_it(service, db_session):
    await service.save("u1", _request(), date(2026, 2, 28))
    await db_session.commit()

    saved = await service.save("u1", PortfolioUpdateRequest(contribution_cash="300"), AS_OF)
    await db_session.commit()
    outcome = await service.save("u1", PortfolioUpdateRequest(), AS_OF)
    await db_session.commit()

    assert outcome.portfolio.value_cash == Decimal("9000")
    assert await PortfolioSnapshotRepository(db_session).get_contribution(saved.snapshot_id) is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_preview_of_saved_month_matches_resave(service, db_session):
    await service.save("u1", _request(contribution_sp="500"), AS_OF)
    await db_session.commit()

    preview = await service.preview("u1", PortfolioUpdateRequest(contribution_sp="500"), AS_OF)

    assert preview.portfolio.value_sp == Decimal("21500")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_save_defaults_to_utc_date(service, db_session, monkeypatch):
    monkeypatch.setattr(
        "app.services.portfolio_update_service.now_utc_naive",
        lambda: datetime(2026, 3, 31, 23, 30),
    )
    monkeypatch.setattr(
        "app.services.market_data_service.now_utc_naive",
        lambda: datetime(2026, 3, 31, 23, 30),
    )

    outcome = await service.save("u1", _request())
    await db_session.commit()

    assert outcome.snapshot_month == date(2026, 3, 1)
    snapshot = await service.market_data_service.get_market_data(["SPY"])
    assert snapshot.as_of_date == date(2026, 3, 31)
