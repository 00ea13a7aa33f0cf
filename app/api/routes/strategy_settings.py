"""
Strategy Settings routes
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.schemas.settings import StrategySettingsSchema
from app.infrastructure.db.database import get_db
from app.infrastructure.db.repositories.settings_repository import StrategySettingsRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{user_id}/settings", response_model=StrategySettingsSchema)
async def get_settings(user_id: str, db: AsyncSession = Depends(get_db)):
    """Saved settings, or the defaults for a user who never saved any"""
    repo = StrategySettingsRepository(db)
    return StrategySettingsSchema.from_domain(await repo.get_or_default(user_id))


@router.put("/{user_id}/settings", response_model=StrategySettingsSchema)
async def save_settings(
    user_id: str,
    payload: StrategySettingsSchema,
    db: AsyncSession = Depends(get_db),
):
    """
    Validate and store settings

    Trigger ordering, target/min/max consistency and the contribution split
    are enforced by the request schema (422 on violation).
    """
    repo = StrategySettingsRepository(db)
    saved = await repo.upsert(user_id, payload.to_domain())
    logger.info("Settings saved for user %s", user_id)
    return StrategySettingsSchema.from_domain(saved)
