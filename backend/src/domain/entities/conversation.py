"""
ConversationEvent Domain Entity
Message exchanged about an application, supplied by the messaging side
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..enums import ConversationDirection, ConversationMedium
from ..value_objects import ensure_aware


@dataclass(frozen=True)
class ConversationEvent:
    """Conversation event - only its timestamp matters for activity"""

    id: UUID
    application_id: UUID
    medium: ConversationMedium
    direction: ConversationDirection
    text: str
    occurred_at: datetime
    contact_id: Optional[UUID] = None

    def __post_init__(self):
        ensure_aware(self.occurred_at, "occurred_at")
