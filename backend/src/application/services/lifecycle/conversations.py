"""
Conversation Service
Records conversation events handed over by messaging and keeps activity current
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from loguru import logger

from application.repositories.interfaces import (
    IApplicationRepository,
    IConversationRepository,
    IUnitOfWork,
)
from domain.entities import ConversationEvent
from domain.enums import ConversationDirection, ConversationMedium
from domain.value_objects import ensure_aware, utc_now
from .access import load_application
from .interfaces import IConversationService, IRecomputeTrigger
from .triggers import fire_trigger


class ConversationService(IConversationService):

    def __init__(
        self,
        application_repo: IApplicationRepository,
        conversation_repo: IConversationRepository,
        unit_of_work: IUnitOfWork,
        recompute_trigger: IRecomputeTrigger,
    ):
        self.application_repo = application_repo
        self.conversation_repo = conversation_repo
        self.uow = unit_of_work
        self.recompute_trigger = recompute_trigger

    async def record(
        self,
        application_id: UUID,
        medium: ConversationMedium,
        direction: ConversationDirection,
        text: str,
        occurred_at: Optional[datetime] = None,
        contact_id: Optional[UUID] = None,
        user_id: Optional[str] = None
    ) -> ConversationEvent:
        occurred_at = ensure_aware(occurred_at, "occurred_at") or utc_now()
        await load_application(self.application_repo, application_id, user_id)

        try:
            event = await self.conversation_repo.add(
                ConversationEvent(
                    id=uuid4(),
                    application_id=application_id,
                    medium=medium,
                    direction=direction,
                    text=text,
                    occurred_at=occurred_at,
                    contact_id=contact_id,
                )
            )
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        logger.info(f"Recorded {direction.value} {medium.value} event for application {application_id}")
        await fire_trigger(self.recompute_trigger, application_id)
        return event

    async def list_events(
        self,
        application_id: UUID,
        limit: int = 50,
        before: Optional[datetime] = None,
        user_id: Optional[str] = None
    ) -> List[ConversationEvent]:
        await load_application(self.application_repo, application_id, user_id)
        return await self.conversation_repo.list_for_application(
            application_id, limit=limit, before=ensure_aware(before, "before")
        )
