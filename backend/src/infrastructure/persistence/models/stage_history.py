"""
Stage History ORM Model
Append-only ledger of application stage transitions
"""
import uuid
from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Identity, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID

from core.database import Base


class StageHistoryModel(Base):
    """Stage history table ORM model - rows are never updated"""

    __tablename__ = "stage_history"
    __table_args__ = (
        Index("idx_stage_history_app_changed", "application_id", "changed_at", "seq"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Insertion order, tie-breaker for equal changed_at
    seq = Column(BigInteger, Identity(always=True), nullable=False, unique=True)

    application_id = Column(UUID(as_uuid=True), ForeignKey("applications.id"), nullable=False, index=True)
    from_stage = Column(Text, nullable=False)
    to_stage = Column(Text, nullable=False)
    actor = Column(String(20), nullable=False, default="user")
    reason = Column(Text, nullable=True)
    changed_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<StageHistoryModel {self.application_id}: {self.from_stage} -> {self.to_stage}>"
