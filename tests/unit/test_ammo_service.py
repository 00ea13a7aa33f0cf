import pytest
from decimal import Decimal

from app.domain.models import (
    AmmoState,
    MarketState,
    MarketStatus,
    PortfolioState,
    RecommendationType,
    StrategyResult,
    StrategySettings,
)
from app.domain.services.ammo_service import apply_recommendation, is_ready_for_reset, reset_ammo


def _result(rtype: RecommendationType) -> StrategyResult:
    return StrategyResult(
        recommendation_type=rtype,
        recommendation_text="",
        transfer_amount=None,
        market_status=MarketStatus.NORMAL,
        priority=rtype.priority,
        drawdown_percent=Decimal('0'),
        cash_percent=Decimal('0'),
    )


@pytest.mark.parametrize("rtype,expected", [
    (RecommendationType.FIRE_AMMO_1, AmmoState(tranche1_used=True)),
    (RecommendationType.FIRE_AMMO_2, AmmoState(tranche2_used=True)),
    (RecommendationType.FIRE_AMMO_3, AmmoState(tranche3_used=True)),
])
def test_fire_latches_only_its_tranche(rtype, expected):
    assert apply_recommendation(AmmoState(), _result(rtype)) == expected


@pytest.mark.parametrize("rtype", [
    RecommendationType.STOP_CASH_OVER_MAX,
    RecommendationType.REBUILD_AMMO,
    RecommendationType.NORMAL,
])
def test_non_fire_results_leave_state_unchanged(rtype):
    ammo = AmmoState(tranche2_used=True)

    assert apply_recommendation(ammo, _result(rtype)) is ammo


def test_apply_is_idempotent():
    once = apply_recommendation(AmmoState(), _result(RecommendationType.FIRE_AMMO_2))
    twice = apply_recommendation(once, _result(RecommendationType.FIRE_AMMO_2))

    assert once == twice


def test_rebuild_does_not_clear_latches():
    ammo = AmmoState(tranche1_used=True, tranche2_used=True)

    assert apply_recommendation(ammo, _result(RecommendationType.REBUILD_AMMO)).any_used


def test_reset_clears_everything():
    assert reset_ammo() == AmmoState()
    assert reset_ammo().any_used is False


def test_is_used_rejects_unknown_tranche():
    with pytest.raises(ValueError):
        AmmoState().is_used(4)


class TestReadyForReset:

    @pytest.fixture
    def settings(self):
        return StrategySettings()

    @pytest.fixture
    def spent(self):
        return AmmoState(tranche1_used=True, tranche2_used=True, tranche3_used=True)

    @pytest.fixture
    def recovered(self):
        return MarketState.from_prices(Decimal('98'), Decimal('100'))

    @pytest.fixture
    def refilled(self):
        return PortfolioState(value_sp=Decimal('70'), value_ta=Decimal('0'), value_cash=Decimal('30'))

    def test_ready_when_cycle_complete(self, spent, recovered, refilled, settings):
        assert is_ready_for_reset(spent, recovered, refilled, settings) is True

    def test_not_ready_with_unused_tranche(self, recovered, refilled, settings):
        ammo = AmmoState(tranche1_used=True, tranche2_used=True)

        assert is_ready_for_reset(ammo, recovered, refilled, settings) is False

    def test_not_ready_while_market_down(self, spent, refilled, settings):
        market = MarketState.from_prices(Decimal('85'), Decimal('100'))

        assert is_ready_for_reset(spent, market, refilled, settings) is False

    def test_not_ready_below_cash_target(self, spent, recovered, settings):
        portfolio = PortfolioState(value_sp=Decimal('80'), value_ta=Decimal('0'), value_cash=Decimal('20'))

        assert is_ready_for_reset(spent, recovered, portfolio, settings) is False

    def test_not_ready_without_market_data(self, spent, refilled, settings):
        assert is_ready_for_reset(spent, MarketState.unavailable(), refilled, settings) is False
