"""
Ammo State Repository
Single-row-per-user tranche latches
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import AmmoState
from app.infrastructure.db.models import AmmoStateModel


class AmmoStateRepository:
    """Repository for ammo state"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_user(self, user_id: str, for_update: bool = False) -> AmmoState:
        """
        Current latches for a user; all-ready when no row exists yet.

        for_update locks the row so a read-then-write apply cannot race
        another evaluation for the same user.
        """
        model = await self._get_model(user_id, for_update=for_update)
        if model is None:
            return AmmoState()
        return self._to_domain(model)

    async def upsert(self, user_id: str, ammo: AmmoState) -> AmmoState:
        model = await self._get_model(user_id, for_update=True)
        if model is None:
            model = AmmoStateModel(user_id=user_id)
            self.session.add(model)

        model.tranche_1_used = ammo.tranche1_used
        model.tranche_2_used = ammo.tranche2_used
        model.tranche_3_used = ammo.tranche3_used
        await self.session.flush()
        return self._to_domain(model)

    async def _get_model(self, user_id: str, for_update: bool = False) -> Optional[AmmoStateModel]:
        stmt = select(AmmoStateModel).where(AmmoStateModel.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: AmmoStateModel) -> AmmoState:
        return AmmoState(
            tranche1_used=bool(model.tranche_1_used),
            tranche2_used=bool(model.tranche_2_used),
            tranche3_used=bool(model.tranche_3_used),
        )
