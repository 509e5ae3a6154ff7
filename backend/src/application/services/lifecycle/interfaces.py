"""
Application Lifecycle Service Interfaces
Stage machine, interview rounds and derived activity
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from application.repositories.interfaces import ApplicationFilters
from domain.entities import Application, ConversationEvent, InterviewRound, StageTransition
from domain.enums import ApplicationSource, ConversationDirection, ConversationMedium, StageActor
from domain.value_objects import InterviewMode, InterviewRoundResult, InterviewRoundType


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a transition request; ``transition`` is None for a no-op"""

    application: Application
    transition: Optional[StageTransition] = None

    @property
    def changed(self) -> bool:
        return self.transition is not None


class IRecomputeTrigger(ABC):
    """Requests an activity recompute after a write.

    Implementations never raise: failures are logged and retried on their side.
    """

    @abstractmethod
    async def trigger(self, application_id: UUID) -> None:
        pass


class IActivityNotifier(ABC):
    """Tells interested clients that last_activity_at moved"""

    @abstractmethod
    async def activity_changed(self, application: Application, last_activity_at: datetime) -> None:
        pass


class IActivityRecomputer(ABC):
    """Derives application.last_activity_at from its activity sources"""

    @abstractmethod
    async def compute(self, application_id: UUID) -> datetime:
        """Return the derived value without writing it"""
        pass

    @abstractmethod
    async def recompute(self, application_id: UUID) -> bool:
        """
        Recompute and persist last_activity_at

        Returns:
            True if the stored value changed
        """
        pass


class IApplicationStageMachine(ABC):
    """Validates and applies application stage transitions"""

    @abstractmethod
    async def create(
        self,
        user_id: str,
        company_id: UUID,
        role: str,
        source: Optional[ApplicationSource] = None,
        platform_id: Optional[UUID] = None,
        job_url: Optional[str] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None
    ) -> Application:
        """Create an application at the initial stage"""
        pass

    @abstractmethod
    async def transition(
        self,
        application_id: UUID,
        to_stage: str,
        actor: StageActor = StageActor.USER,
        at: Optional[datetime] = None,
        reason: Optional[str] = None,
        strict: Optional[bool] = None,
        user_id: Optional[str] = None
    ) -> TransitionResult:
        """
        Move an application to ``to_stage``

        Raises:
            InvalidStageException: to_stage is not a valid stage
            NoOpTransitionException: to_stage equals the current stage and strict is set
        """
        pass

    @abstractmethod
    async def get(self, application_id: UUID, user_id: Optional[str] = None) -> Application:
        pass

    @abstractmethod
    async def history(self, application_id: UUID, user_id: Optional[str] = None) -> List[StageTransition]:
        """Stage history, newest first"""
        pass

    @abstractmethod
    async def set_archived(self, application_id: UUID, archived: bool, user_id: Optional[str] = None) -> Application:
        pass

    @abstractmethod
    async def list_for_user(
        self,
        user_id: str,
        filters: Optional[ApplicationFilters] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        pass


class IInterviewRoundManager(ABC):
    """Scheduling and completion lifecycle of interview rounds"""

    @abstractmethod
    async def list_rounds(self, application_id: UUID, user_id: Optional[str] = None) -> List[InterviewRound]:
        pass

    @abstractmethod
    async def get_round(self, application_id: UUID, round_number: int) -> Optional[InterviewRound]:
        pass

    @abstractmethod
    async def next_round_number(self, application_id: UUID) -> int:
        pass

    @abstractmethod
    async def plan(
        self,
        application_id: UUID,
        round_number: Optional[int] = None,
        type: InterviewRoundType = InterviewRoundType.OTHER,
        mode: InterviewMode = InterviewMode.ONLINE,
        custom_name: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        """Add an unscheduled round"""
        pass

    @abstractmethod
    async def schedule(
        self,
        application_id: UUID,
        round_number: int,
        type: InterviewRoundType,
        scheduled_at: datetime,
        mode: InterviewMode = InterviewMode.ONLINE,
        custom_name: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        pass

    @abstractmethod
    async def reschedule(
        self,
        application_id: UUID,
        round_number: int,
        scheduled_at: datetime,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        pass

    @abstractmethod
    async def complete(
        self,
        application_id: UUID,
        round_number: int,
        completed_at: datetime,
        result: Optional[InterviewRoundResult] = None,
        feedback: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        pass

    @abstractmethod
    async def reject(
        self,
        application_id: UUID,
        round_number: int,
        reason: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        pass

    @abstractmethod
    async def withdraw(
        self,
        application_id: UUID,
        round_number: int,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        pass


class IConversationService(ABC):
    """Entry point for conversation events coming from messaging"""

    @abstractmethod
    async def record(
        self,
        application_id: UUID,
        medium: ConversationMedium,
        direction: ConversationDirection,
        text: str,
        occurred_at: Optional[datetime] = None,
        contact_id: Optional[UUID] = None,
        user_id: Optional[str] = None
    ) -> ConversationEvent:
        pass

    @abstractmethod
    async def list_events(
        self,
        application_id: UUID,
        limit: int = 50,
        before: Optional[datetime] = None,
        user_id: Optional[str] = None
    ) -> List[ConversationEvent]:
        pass
