"""
Notification Repository
In-app notifications raised when an update is saved
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.db.models import NotificationModel


class NotificationRepository:
    """Repository for in-app notifications"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        user_id: str,
        title: str,
        message: str,
        notification_type: str,
        metadata: Optional[dict] = None,
    ) -> int:
        model = NotificationModel(
            user_id=user_id,
            title=title,
            message=message,
            notification_type=notification_type,
            metadata_json=metadata,
        )
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def get_recent(
        self,
        user_id: str,
        limit: int = 20,
        unread_only: bool = False,
    ) -> List[NotificationModel]:
        stmt = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            stmt = stmt.where(NotificationModel.is_read.is_(False))
        stmt = stmt.order_by(NotificationModel.id.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_read(self, user_id: str, notification_id: int) -> bool:
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .values(is_read=True)
        )
        return result.rowcount > 0
