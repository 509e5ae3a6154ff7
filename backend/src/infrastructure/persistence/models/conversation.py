"""
Conversation ORM Model
Messages about an application, written by the messaging side
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID

from core.database import Base


class ConversationModel(Base):
    """Conversations table ORM model"""

    __tablename__ = "conversations"
    __table_args__ = (
        Index("idx_conversations_app_occurred", "application_id", "occurred_at"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    application_id = Column(UUID(as_uuid=True), ForeignKey("applications.id"), nullable=False, index=True)
    contact_id = Column(UUID(as_uuid=True), nullable=True)

    medium = Column(String(20), nullable=False)
    direction = Column(String(20), nullable=False)
    text = Column(Text, nullable=False)
    occurred_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<ConversationModel {self.application_id} @ {self.occurred_at}>"
