"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from domain.entities import Application, StageTransition, InterviewRound, ConversationEvent
from domain.value_objects import Milestone


@dataclass(frozen=True)
class ApplicationFilters:
    """Listing filters; None means 'do not filter on this field'"""

    stage: Optional[str] = None
    milestone: Optional[Milestone] = None
    platform_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    is_archived: Optional[bool] = False
    activity_from: Optional[datetime] = None
    activity_to: Optional[datetime] = None


class IUnitOfWork(ABC):
    """All-or-nothing boundary shared by the repositories of one operation"""

    @abstractmethod
    async def commit(self) -> None:
        """Commit pending writes"""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard pending writes"""
        pass


class IApplicationRepository(ABC):
    """Application repository interface"""

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        """Get application by ID"""
        pass

    @abstractmethod
    async def create(self, application: Application) -> Application:
        """Create new application"""
        pass

    @abstractmethod
    async def update_stage(self, application_id: UUID, stage: str, milestone: Milestone) -> Application:
        """Set stage and milestone"""
        pass

    @abstractmethod
    async def set_archived(self, application_id: UUID, archived: bool) -> Application:
        """Set archive flag"""
        pass

    @abstractmethod
    async def update_last_activity(self, application_id: UUID, last_activity_at: datetime) -> None:
        """Write the derived last_activity_at field"""
        pass

    @abstractmethod
    async def list_for_user(
        self,
        user_id: str,
        filters: Optional[ApplicationFilters] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        """List a user's applications, most recent activity first"""
        pass

    @abstractmethod
    async def list_ids(self, limit: int = 500, offset: int = 0) -> List[UUID]:
        """Page through all application IDs in a stable order"""
        pass


class IStageHistoryRepository(ABC):
    """Append-only stage transition ledger"""

    @abstractmethod
    async def append(self, transition: StageTransition) -> StageTransition:
        """Append one transition record"""
        pass

    @abstractmethod
    async def list_for_application(self, application_id: UUID, newest_first: bool = True) -> List[StageTransition]:
        """Transitions ordered by changed_at, then insertion"""
        pass

    @abstractmethod
    async def count_for_application(self, application_id: UUID) -> int:
        pass

    @abstractmethod
    async def latest_changed_at(self, application_id: UUID) -> Optional[datetime]:
        pass


class IInterviewRoundRepository(ABC):
    """Interview round store"""

    @abstractmethod
    async def get(self, application_id: UUID, round_number: int) -> Optional[InterviewRound]:
        """Get round by application and round number"""
        pass

    @abstractmethod
    async def save(self, interview_round: InterviewRound) -> InterviewRound:
        """Insert or update a round"""
        pass

    @abstractmethod
    async def list_for_application(self, application_id: UUID) -> List[InterviewRound]:
        """Rounds ordered by round number"""
        pass

    @abstractmethod
    async def max_round_number(self, application_id: UUID) -> int:
        """Highest round number, 0 when there are none"""
        pass

    @abstractmethod
    async def latest_scheduled_at(self, application_id: UUID) -> Optional[datetime]:
        pass

    @abstractmethod
    async def latest_completed_at(self, application_id: UUID) -> Optional[datetime]:
        pass


class IConversationRepository(ABC):
    """Conversation events supplied by the messaging side"""

    @abstractmethod
    async def add(self, event: ConversationEvent) -> ConversationEvent:
        pass

    @abstractmethod
    async def list_for_application(
        self,
        application_id: UUID,
        limit: int = 50,
        before: Optional[datetime] = None
    ) -> List[ConversationEvent]:
        """Events newest first"""
        pass

    @abstractmethod
    async def latest_occurred_at(self, application_id: UUID) -> Optional[datetime]:
        pass
