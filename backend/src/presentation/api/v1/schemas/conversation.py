"""
Conversation Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.entities import ConversationEvent
from domain.enums import ConversationDirection, ConversationMedium


class ConversationCreateRequest(BaseModel):
    medium: ConversationMedium
    direction: ConversationDirection
    text: str = Field(..., min_length=1)
    occurred_at: Optional[datetime] = None
    contact_id: Optional[UUID] = None


class ConversationEventResponse(BaseModel):
    id: UUID
    application_id: UUID
    medium: ConversationMedium
    direction: ConversationDirection
    text: str
    occurred_at: datetime
    contact_id: Optional[UUID] = None

    @classmethod
    def from_domain(cls, event: ConversationEvent) -> "ConversationEventResponse":
        return cls(
            id=event.id,
            application_id=event.application_id,
            medium=event.medium,
            direction=event.direction,
            text=event.text,
            occurred_at=event.occurred_at,
            contact_id=event.contact_id,
        )


class ConversationListResponse(BaseModel):
    events: List[ConversationEventResponse]
