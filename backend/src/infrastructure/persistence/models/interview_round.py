"""
Interview Round ORM Model
SQLAlchemy model for interview rounds of an application
"""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from core.database import Base


class InterviewRoundModel(Base):
    """Interview rounds table ORM model"""

    __tablename__ = "interview_rounds"
    __table_args__ = (
        UniqueConstraint("application_id", "round_index", name="uq_interview_round_app_index"),
        CheckConstraint("round_index > 0", name="ck_interview_round_index_positive"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    application_id = Column(UUID(as_uuid=True), ForeignKey("applications.id"), nullable=False, index=True)

    # Matches the numeric suffix of the interview_round_<n> stage
    round_index = Column(Integer, nullable=False)

    type = Column(String(50), nullable=False, default="other")
    custom_name = Column(Text, nullable=True)
    mode = Column(String(20), nullable=False, default="online", server_default="online")
    status = Column(String(20), nullable=False, default="unscheduled", server_default="unscheduled", index=True)

    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    rescheduled_count = Column(Integer, nullable=False, default=0)

    result = Column(String(20), nullable=True)
    feedback = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<InterviewRoundModel {self.application_id}#{self.round_index} - {self.status}>"
