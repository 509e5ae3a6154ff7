"""
Application Schemas
Request/response models for application endpoints
"""
from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from domain.entities import Application, InterviewRound, StageTransition
from domain.enums import ApplicationSource, StageActor
from domain.value_objects import Milestone
from .stage import StageObject


class ApplicationCreateRequest(BaseModel):
    """Create a tracked application"""
    company_id: UUID
    role: str = Field(..., min_length=1, max_length=255, examples=["Backend Engineer"])
    source: Optional[ApplicationSource] = None
    platform_id: Optional[UUID] = None
    job_url: Optional[str] = Field(None, max_length=2048)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('role must not be blank')
        return v


class TransitionRequest(BaseModel):
    """Target stage as an id string or a full stage object"""
    to_stage: Union[str, StageObject] = Field(..., examples=["interview_round_1"])
    at: Optional[datetime] = None
    reason: Optional[str] = Field(None, max_length=500)
    strict: Optional[bool] = None

    def stage_id(self) -> str:
        if isinstance(self.to_stage, StageObject):
            return self.to_stage.to_stage_id()
        return self.to_stage


class ApplicationResponse(BaseModel):
    id: UUID
    user_id: str
    company_id: UUID
    platform_id: Optional[UUID] = None
    role: str
    job_url: Optional[str] = None
    source: Optional[ApplicationSource] = None
    stage: StageObject
    milestone: Milestone
    is_archived: bool
    notes: Optional[str] = None
    created_at: datetime
    last_activity_at: datetime

    @classmethod
    def from_domain(
        cls,
        application: Application,
        interview_round: Optional[InterviewRound] = None
    ) -> "ApplicationResponse":
        return cls(
            id=application.id,
            user_id=application.user_id,
            company_id=application.company_id,
            platform_id=application.platform_id,
            role=application.role,
            job_url=application.job_url,
            source=application.source,
            stage=StageObject.from_domain(application.stage, interview_round),
            milestone=application.milestone,
            is_archived=application.is_archived,
            notes=application.notes,
            created_at=application.created_at,
            last_activity_at=application.last_activity_at,
        )


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    count: int
    limit: int
    offset: int


class TransitionResponse(BaseModel):
    application: ApplicationResponse
    changed: bool


class StageTransitionResponse(BaseModel):
    id: UUID
    from_stage: str
    to_stage: str
    actor: StageActor
    changed_at: datetime
    reason: Optional[str] = None

    @classmethod
    def from_domain(cls, transition: StageTransition) -> "StageTransitionResponse":
        return cls(
            id=transition.id,
            from_stage=transition.from_stage,
            to_stage=transition.to_stage,
            actor=transition.actor,
            changed_at=transition.changed_at,
            reason=transition.reason,
        )


class RecomputeResponse(BaseModel):
    application_id: UUID
    last_activity_at: datetime
    changed: bool
