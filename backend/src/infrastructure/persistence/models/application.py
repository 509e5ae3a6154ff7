"""
Application ORM Model
SQLAlchemy model for tracked job applications
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text, Boolean, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from core.database import Base


class ApplicationModel(Base):
    """Applications table ORM model"""

    __tablename__ = "applications"
    __table_args__ = (
        Index("idx_applications_user_activity", "user_id", "last_activity_at"),
    )

    # Primary Key
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Owner (external auth subject)
    user_id = Column(String(255), nullable=False, index=True)

    # Catalog references, opaque to this service
    company_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    platform_id = Column(UUID(as_uuid=True), nullable=True, index=True)

    role = Column(String(500), nullable=False)
    job_url = Column(Text, nullable=True)
    source = Column(String(50), nullable=True)

    # Lifecycle; stage is plain text so interview rounds stay open-ended
    stage = Column(Text, nullable=False, index=True)
    milestone = Column(String(50), nullable=False, index=True)
    is_archived = Column(Boolean, nullable=False, default=False, server_default="false", index=True)

    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_activity_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<ApplicationModel {self.id} - {self.stage}>"
