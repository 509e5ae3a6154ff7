"""
Stage Schemas
Structured wire form of an application stage
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from core.exceptions import InvalidStageException
from domain.entities import InterviewRound
from domain.value_objects import (
    InterviewRoundResult,
    InterviewRoundStatus,
    InterviewRoundType,
    parse_interview_round,
    require_valid_stage,
    stage_display_name,
)


class InterviewData(BaseModel):
    """Round details attached to an interview_round_<n> stage"""
    type: InterviewRoundType
    custom_name: Optional[str] = None
    status: InterviewRoundStatus
    scheduled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    result: Optional[InterviewRoundResult] = None
    rejection_reason: Optional[str] = None

    @classmethod
    def from_domain(cls, interview_round: InterviewRound) -> "InterviewData":
        return cls(
            type=interview_round.type,
            custom_name=interview_round.custom_name,
            status=interview_round.status,
            scheduled_at=interview_round.scheduled_at,
            completed_at=interview_round.completed_at,
            result=interview_round.result,
            rejection_reason=interview_round.rejection_reason,
        )


class StageObject(BaseModel):
    """
    Stage as sent to and accepted from clients

    Built from the stored stage string plus the matching interview round,
    and reduced back to the ``id`` string on input.
    """
    id: str = Field(..., examples=["interview_round_2"])
    name: str = Field(..., examples=["Interview Round 2"])
    type: Literal["standard", "interview_round"]
    interview_round_number: Optional[int] = None
    interview_data: Optional[InterviewData] = None

    @classmethod
    def from_domain(cls, stage: str, interview_round: Optional[InterviewRound] = None) -> "StageObject":
        require_valid_stage(stage)
        round_number = parse_interview_round(stage)

        if round_number is None:
            return cls(id=stage, name=stage_display_name(stage), type="standard")

        interview_data = None
        if interview_round is not None and interview_round.round_number == round_number:
            interview_data = InterviewData.from_domain(interview_round)

        return cls(
            id=stage,
            name=stage_display_name(stage),
            type="interview_round",
            interview_round_number=round_number,
            interview_data=interview_data,
        )

    def to_stage_id(self) -> str:
        """Reduce to the stored stage string, checking the structured fields agree"""
        require_valid_stage(self.id)
        round_number = parse_interview_round(self.id)

        if self.type == "standard":
            if round_number is not None or self.interview_round_number is not None:
                raise InvalidStageException(self.id)
        else:
            if round_number is None:
                raise InvalidStageException(self.id)
            if self.interview_round_number is not None and self.interview_round_number != round_number:
                raise InvalidStageException(self.id)

        return self.id
