"""
InterviewRound Domain Entity
One interview event tied to an ``interview_round_<n>`` stage
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from core.exceptions import InvalidRoundException, InvalidTimestampException
from ..value_objects import (
    InterviewMode,
    InterviewRoundResult,
    InterviewRoundStatus,
    InterviewRoundType,
    ensure_aware,
    format_interview_round,
)
from ..value_objects.interview_status import INTERVIEW_TYPE_DISPLAY_NAMES


@dataclass(frozen=True)
class InterviewRound:
    """Interview round domain entity - immutable"""

    id: UUID
    application_id: UUID
    round_number: int
    type: InterviewRoundType
    status: InterviewRoundStatus = InterviewRoundStatus.UNSCHEDULED
    mode: InterviewMode = InterviewMode.ONLINE
    custom_name: Optional[str] = None

    scheduled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rescheduled_count: int = 0

    result: Optional[InterviewRoundResult] = None
    feedback: Optional[str] = None
    rejection_reason: Optional[str] = None

    def __post_init__(self):
        """Enforce round invariants"""
        if isinstance(self.round_number, bool) or not isinstance(self.round_number, int) or self.round_number <= 0:
            raise InvalidRoundException(self.round_number)
        ensure_aware(self.scheduled_at, "scheduled_at")
        ensure_aware(self.completed_at, "completed_at")

        if self.status == InterviewRoundStatus.UNSCHEDULED and self.scheduled_at is not None:
            raise InvalidTimestampException("unscheduled round cannot carry scheduled_at", field="scheduled_at")
        if self.status == InterviewRoundStatus.COMPLETED:
            if self.completed_at is None:
                raise InvalidTimestampException("completed round requires completed_at", field="completed_at")
            if self.scheduled_at is not None and self.completed_at < self.scheduled_at:
                raise InvalidTimestampException("completed_at precedes scheduled_at", field="completed_at")

    @property
    def stage(self) -> str:
        """Stage identifier this round belongs to"""
        return format_interview_round(self.round_number)

    @property
    def display_name(self) -> str:
        if self.custom_name:
            return self.custom_name
        return INTERVIEW_TYPE_DISPLAY_NAMES.get(self.type, "Interview Round")

    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def __str__(self) -> str:
        return f"InterviewRound({self.application_id}#{self.round_number}, status={self.status.value})"
