from decimal import Decimal

from app.domain.models import (
    Currency,
    MarketStatus,
    RecommendationType,
    StrategyResult,
)
from app.domain.services.recommendation_formatter import (
    format_money,
    format_threshold,
    notification_title,
    render_recommendation,
)


def _result(rtype, **fields) -> StrategyResult:
    defaults = dict(
        recommendation_type=rtype,
        recommendation_text="",
        transfer_amount=None,
        market_status=MarketStatus.NORMAL,
        priority=rtype.priority,
        drawdown_percent=Decimal('0'),
        cash_percent=Decimal('0'),
    )
    defaults.update(fields)
    return StrategyResult(**defaults)


def test_format_money():
    assert format_money(Decimal('3000'), Currency.USD) == "$3,000.00"
    assert format_money(Decimal('1234.5'), "ILS") == "₪1,234.50"
    assert format_money(None, Currency.USD) == "N/A"


def test_format_money_unknown_currency_falls_back_to_dollar():
    assert format_money(Decimal('5'), "EUR") == "$5.00"


def test_format_threshold_drops_trailing_zeros():
    assert format_threshold(Decimal('30.00')) == "30"
    assert format_threshold(Decimal('12.50')) == "12.5"
    assert format_threshold(Decimal('100')) == "100"


def test_render_stop_cash_over_max():
    text = render_recommendation(_result(
        RecommendationType.STOP_CASH_OVER_MAX,
        cash_percent=Decimal('40'),
        target_percent=Decimal('35'),
    ))

    assert text == (
        "Cash allocation (40.0%) exceeds 35%. "
        "Stop contributing to cash - direct all contributions to stocks."
    )


def test_render_fire_headlines():
    expected = {
        RecommendationType.FIRE_AMMO_1: "CORRECTION!",
        RecommendationType.FIRE_AMMO_2: "BEAR MARKET!",
        RecommendationType.FIRE_AMMO_3: "CRASH ALERT!",
    }
    for rtype, headline in expected.items():
        text = render_recommendation(_result(
            rtype,
            transfer_amount=Decimal('3000'),
            drawdown_percent=Decimal('11.111'),
        ))
        assert text == (
            f"{headline} Market down 11.1%. "
            f"Deploy tranche {rtype.tranche} - one third of cash ($3,000.00) to stocks."
        )


def test_render_rebuild_in_shekels():
    text = render_recommendation(_result(
        RecommendationType.REBUILD_AMMO,
        transfer_amount=Decimal('20000'),
        drawdown_percent=Decimal('1.11'),
        target_percent=Decimal('30'),
        currency=Currency.ILS,
    ))

    assert text == (
        "Market recovered (drawdown 1.1%). Rebuild cash reserves to 30%. "
        "Transfer ₪20,000.00 from stocks to cash."
    )


def test_render_normal_split():
    text = render_recommendation(_result(
        RecommendationType.NORMAL,
        market_status=MarketStatus.CORRECTION,
        drawdown_percent=Decimal('12'),
        cash_contribution=Decimal('1500'),
        stocks_contribution=Decimal('3500'),
    ))

    assert text == (
        "Market correction (drawdown 12.0%). Split contribution: "
        "$1,500.00 to cash, $3,500.00 to stocks."
    )


def test_every_type_has_a_title():
    for rtype in RecommendationType:
        assert notification_title(rtype)
