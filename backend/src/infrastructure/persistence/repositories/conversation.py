"""
Conversation Repository Implementation
"""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import IConversationRepository
from domain.entities import ConversationEvent
from domain.enums import ConversationDirection, ConversationMedium
from infrastructure.persistence.models.conversation import ConversationModel


class SQLAlchemyConversationRepository(IConversationRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, event: ConversationEvent) -> ConversationEvent:
        self.session.add(
            ConversationModel(
                id=event.id,
                application_id=event.application_id,
                contact_id=event.contact_id,
                medium=event.medium.value,
                direction=event.direction.value,
                text=event.text,
                occurred_at=event.occurred_at,
            )
        )
        await self.session.flush()
        return event

    async def list_for_application(
        self,
        application_id: UUID,
        limit: int = 50,
        before: Optional[datetime] = None
    ) -> List[ConversationEvent]:
        query = select(ConversationModel).where(ConversationModel.application_id == application_id)
        if before is not None:
            query = query.where(ConversationModel.occurred_at < before)
        result = await self.session.execute(
            query.order_by(ConversationModel.occurred_at.desc()).limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def latest_occurred_at(self, application_id: UUID) -> Optional[datetime]:
        result = await self.session.execute(
            select(func.max(ConversationModel.occurred_at))
            .where(ConversationModel.application_id == application_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: ConversationModel) -> ConversationEvent:
        return ConversationEvent(
            id=model.id,
            application_id=model.application_id,
            medium=ConversationMedium(model.medium),
            direction=ConversationDirection(model.direction),
            text=model.text,
            occurred_at=model.occurred_at,
            contact_id=model.contact_id,
        )
