"""
StageTransition Domain Entity
Append-only audit fact for one stage change
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..enums import StageActor
from ..value_objects import ensure_aware, require_valid_stage


@dataclass(frozen=True)
class StageTransition:
    """Stage history record - never mutated once written"""

    id: UUID
    application_id: UUID
    from_stage: str
    to_stage: str
    actor: StageActor
    changed_at: datetime
    reason: Optional[str] = None

    def __post_init__(self):
        require_valid_stage(self.from_stage)
        require_valid_stage(self.to_stage)
        ensure_aware(self.changed_at, "changed_at")

    def __str__(self) -> str:
        return f"StageTransition({self.from_stage} -> {self.to_stage} at {self.changed_at.isoformat()})"
