"""
Application Domain Entity
Immutable record of a user's pursuit of a role
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..enums import ApplicationSource
from ..value_objects import Milestone, derive_milestone, ensure_aware, parse_interview_round, require_valid_stage


@dataclass(frozen=True)
class Application:
    """Job application domain entity - immutable"""

    id: UUID
    user_id: str
    company_id: UUID
    role: str

    # Lifecycle
    stage: str
    milestone: Milestone
    created_at: datetime
    last_activity_at: datetime
    is_archived: bool = False

    # Catalog references (opaque here)
    platform_id: Optional[UUID] = None
    source: Optional[ApplicationSource] = None
    job_url: Optional[str] = None

    notes: Optional[str] = None

    def __post_init__(self):
        """Validate application data"""
        require_valid_stage(self.stage)
        ensure_aware(self.created_at, "created_at")
        ensure_aware(self.last_activity_at, "last_activity_at")
        if not self.role or not self.role.strip():
            raise ValueError("Role cannot be empty")

    @property
    def interview_round_number(self) -> Optional[int]:
        return parse_interview_round(self.stage)

    def is_interviewing(self) -> bool:
        return self.milestone == Milestone.INTERVIEWING

    def with_stage(self, stage: str) -> "Application":
        """Copy moved to ``stage`` with its milestone re-derived"""
        return replace(self, stage=stage, milestone=derive_milestone(stage))

    def __str__(self) -> str:
        return f"Application({self.id}, stage={self.stage})"
