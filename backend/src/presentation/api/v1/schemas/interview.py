"""
Interview Round Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.entities import InterviewRound
from domain.value_objects import (
    InterviewMode,
    InterviewRoundResult,
    InterviewRoundStatus,
    InterviewRoundType,
)


class InterviewPlanRequest(BaseModel):
    """Add an unscheduled round; the number defaults to the next free one"""
    round_number: Optional[int] = Field(None, examples=[1])
    type: InterviewRoundType = InterviewRoundType.OTHER
    mode: InterviewMode = InterviewMode.ONLINE
    custom_name: Optional[str] = Field(None, max_length=255)


class InterviewScheduleRequest(BaseModel):
    type: InterviewRoundType
    scheduled_at: datetime
    mode: InterviewMode = InterviewMode.ONLINE
    custom_name: Optional[str] = Field(None, max_length=255)


class InterviewRescheduleRequest(BaseModel):
    scheduled_at: datetime


class InterviewCompleteRequest(BaseModel):
    completed_at: datetime
    result: Optional[InterviewRoundResult] = None
    feedback: Optional[str] = None


class InterviewRejectRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class InterviewRoundResponse(BaseModel):
    id: UUID
    application_id: UUID
    round_number: int
    stage: str
    name: str
    type: InterviewRoundType
    mode: InterviewMode
    status: InterviewRoundStatus
    custom_name: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rescheduled_count: int = 0
    result: Optional[InterviewRoundResult] = None
    feedback: Optional[str] = None
    rejection_reason: Optional[str] = None

    @classmethod
    def from_domain(cls, interview_round: InterviewRound) -> "InterviewRoundResponse":
        return cls(
            id=interview_round.id,
            application_id=interview_round.application_id,
            round_number=interview_round.round_number,
            stage=interview_round.stage,
            name=interview_round.display_name,
            type=interview_round.type,
            mode=interview_round.mode,
            status=interview_round.status,
            custom_name=interview_round.custom_name,
            scheduled_at=interview_round.scheduled_at,
            completed_at=interview_round.completed_at,
            rescheduled_count=interview_round.rescheduled_count,
            result=interview_round.result,
            feedback=interview_round.feedback,
            rejection_reason=interview_round.rejection_reason,
        )


class InterviewRoundListResponse(BaseModel):
    rounds: List[InterviewRoundResponse]
    next_round_number: int
