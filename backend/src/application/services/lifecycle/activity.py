"""
Activity Recomputer
Derives application.last_activity_at from an explicit list of activity sources.

Each source reports the latest timestamp it holds for an application; the
value is the max of those and the application's created_at. New event types
register here by adding an ActivitySource to ``default_activity_sources``.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
from uuid import UUID

from loguru import logger

from application.repositories.interfaces import (
    IApplicationRepository,
    IConversationRepository,
    IInterviewRoundRepository,
    IStageHistoryRepository,
    IUnitOfWork,
)
from domain.entities import Application
from .access import load_application
from .interfaces import IActivityNotifier, IActivityRecomputer


class ActivitySource(ABC):
    """One stream of timestamped events belonging to an application"""

    name: str = "activity"

    @abstractmethod
    async def latest_for(self, application_id: UUID) -> Optional[datetime]:
        """Latest event timestamp, or None when the stream is empty"""
        pass


class ConversationActivitySource(ActivitySource):
    name = "conversation.occurred_at"

    def __init__(self, conversations: IConversationRepository):
        self.conversations = conversations

    async def latest_for(self, application_id: UUID) -> Optional[datetime]:
        return await self.conversations.latest_occurred_at(application_id)


class StageHistoryActivitySource(ActivitySource):
    name = "stage_history.changed_at"

    def __init__(self, history: IStageHistoryRepository):
        self.history = history

    async def latest_for(self, application_id: UUID) -> Optional[datetime]:
        return await self.history.latest_changed_at(application_id)


class InterviewScheduledActivitySource(ActivitySource):
    name = "interview_round.scheduled_at"

    def __init__(self, rounds: IInterviewRoundRepository):
        self.rounds = rounds

    async def latest_for(self, application_id: UUID) -> Optional[datetime]:
        return await self.rounds.latest_scheduled_at(application_id)


class InterviewCompletedActivitySource(ActivitySource):
    name = "interview_round.completed_at"

    def __init__(self, rounds: IInterviewRoundRepository):
        self.rounds = rounds

    async def latest_for(self, application_id: UUID) -> Optional[datetime]:
        return await self.rounds.latest_completed_at(application_id)


def default_activity_sources(
    conversations: IConversationRepository,
    history: IStageHistoryRepository,
    rounds: IInterviewRoundRepository,
) -> List[ActivitySource]:
    """The registered activity sources, in reporting order"""
    return [
        ConversationActivitySource(conversations),
        StageHistoryActivitySource(history),
        InterviewScheduledActivitySource(rounds),
        InterviewCompletedActivitySource(rounds),
    ]


def reduce_last_activity(created_at: datetime, timestamps: Iterable[Optional[datetime]]) -> datetime:
    """Max of created_at and every non-empty source timestamp"""
    latest = created_at
    for ts in timestamps:
        if ts is not None and ts > latest:
            latest = ts
    return latest


class ActivityRecomputer(IActivityRecomputer):
    """Reads the activity sources and writes the derived field"""

    def __init__(
        self,
        application_repo: IApplicationRepository,
        sources: Sequence[ActivitySource],
        unit_of_work: IUnitOfWork,
        notifier: Optional[IActivityNotifier] = None,
    ):
        """
        Initialize activity recomputer

        Args:
            application_repo: Application repository (owner of the derived field)
            sources: Activity sources to reduce over
            unit_of_work: Commit boundary for the derived-field write
            notifier: Optional push channel for changed values
        """
        self.application_repo = application_repo
        self.sources = list(sources)
        self.uow = unit_of_work
        self.notifier = notifier

    async def _derive(self, application: Application) -> datetime:
        # Sources may share one DB session, so they are read one at a time
        stamps = []
        for source in self.sources:
            stamps.append(await source.latest_for(application.id))
        return reduce_last_activity(application.created_at, stamps)

    async def compute(self, application_id: UUID) -> datetime:
        application = await load_application(self.application_repo, application_id)
        return await self._derive(application)

    async def recompute(self, application_id: UUID) -> bool:
        try:
            application = await load_application(self.application_repo, application_id)
            latest = await self._derive(application)

            if latest == application.last_activity_at:
                logger.debug(f"last_activity_at unchanged for application {application_id}")
                return False

            await self.application_repo.update_last_activity(application_id, latest)
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        logger.info(
            f"last_activity_at for application {application_id}: "
            f"{application.last_activity_at.isoformat()} -> {latest.isoformat()}"
        )

        if self.notifier is not None:
            try:
                await self.notifier.activity_changed(application, latest)
            except Exception as e:
                logger.warning(f"Activity notification failed for application {application_id}: {e}")

        return True
