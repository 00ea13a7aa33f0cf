from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.dependencies import get_market_data_service
from app.api.routes import ammo, health, market_data, portfolio, strategy_settings
from app.domain.models import PriceBar
from app.infrastructure.db.database import Base, get_db
from app.infrastructure.db import models  # noqa: F401
from app.services.market_data_service import MarketDataService


class FakePriceHistoryProvider:
    """In-memory provider: a fixed bar list per symbol, whatever the window"""

    def __init__(self, bars: Optional[Dict[str, List[PriceBar]]] = None):
        self.bars = bars or {}
        self.calls: List[str] = []

    async def get_price_bars(self, symbol: str, start_date: date, end_date: date) -> List[PriceBar]:
        self.calls.append(symbol)
        return list(self.bars.get(symbol, []))


def make_bars(closes, end: date = date(2026, 3, 31), highs=None) -> List[PriceBar]:
    """Consecutive daily bars ending on `end`; high defaults to close"""
    start = end - timedelta(days=len(closes) - 1)
    highs = highs or closes
    return [
        PriceBar(
            date=start + timedelta(days=i),
            high=Decimal(str(high)),
            close=Decimal(str(close)),
        )
        for i, (high, close) in enumerate(zip(highs, closes))
    ]


@pytest.fixture()
def price_provider() -> FakePriceHistoryProvider:
    # SPY: peak 450, last 400 -> trigger drawdown 11.11%
    return FakePriceHistoryProvider({
        "SPY": make_bars([420, 450, 430, 400]),
        "EIS": make_bars([50, 55, 60, 58]),
    })


@pytest.fixture()
def market_data_service(price_provider) -> MarketDataService:
    return MarketDataService(provider=price_provider, history_days=365)


@pytest.fixture()
async def db_engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        future=True,
        echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
        # cleanup
        for table in reversed(Base.metadata.sorted_tables):
            await session.execute(table.delete())
        await session.commit()


@pytest.fixture()
async def app(db_session, market_data_service) -> FastAPI:
    app = FastAPI()
    app.include_router(health.router, tags=["Health"])
    app.include_router(market_data.router, prefix="/api/v1/market-data", tags=["Market Data"])
    app.include_router(strategy_settings.router, prefix="/api/v1/users", tags=["Settings"])
    app.include_router(ammo.router, prefix="/api/v1/users", tags=["Ammo"])
    app.include_router(portfolio.router, prefix="/api/v1/users", tags=["Portfolio"])

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_market_data_service] = lambda: market_data_service

    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
