"""
Ammo State routes - tranche status and manual reset
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import AmmoState
from app.domain.services.ammo_service import reset_ammo
from app.infrastructure.db.database import get_db
from app.infrastructure.db.repositories.ammo_state_repository import AmmoStateRepository
from app.infrastructure.db.repositories.settings_repository import StrategySettingsRepository

logger = logging.getLogger(__name__)
router = APIRouter()


class TrancheStatus(BaseModel):
    tranche: int
    trigger: float
    used: bool


class AmmoStateResponse(BaseModel):
    tranche_1_used: bool
    tranche_2_used: bool
    tranche_3_used: bool
    all_used: bool
    tranches: list[TrancheStatus]


def _to_response(ammo: AmmoState, settings) -> AmmoStateResponse:
    return AmmoStateResponse(
        tranche_1_used=ammo.tranche1_used,
        tranche_2_used=ammo.tranche2_used,
        tranche_3_used=ammo.tranche3_used,
        all_used=ammo.all_used,
        tranches=[
            TrancheStatus(
                tranche=n,
                trigger=float(settings.trigger_for(n)),
                used=ammo.is_used(n),
            )
            for n in (1, 2, 3)
        ],
    )


@router.get("/{user_id}/ammo", response_model=AmmoStateResponse)
async def get_ammo_state(user_id: str, db: AsyncSession = Depends(get_db)):
    ammo = await AmmoStateRepository(db).get_for_user(user_id)
    settings = await StrategySettingsRepository(db).get_or_default(user_id)
    return _to_response(ammo, settings)


@router.post("/{user_id}/ammo/reset", response_model=AmmoStateResponse)
async def reset_ammo_state(user_id: str, db: AsyncSession = Depends(get_db)):
    """
    Manual reset: the only way a used tranche becomes ready again
    """
    ammo = await AmmoStateRepository(db).upsert(user_id, reset_ammo())
    settings = await StrategySettingsRepository(db).get_or_default(user_id)
    logger.info("Ammo state reset for user %s", user_id)
    return _to_response(ammo, settings)
