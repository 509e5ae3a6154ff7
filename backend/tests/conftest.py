"""
Shared fixtures: in-memory repositories and a snapshotting unit of work
"""
import os

os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_JSON_FORMAT", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RECOMPUTE_WORKER_ENABLED", "false")

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4

import pytest
from dataclasses import replace

from application.repositories.interfaces import (
    ApplicationFilters,
    IApplicationRepository,
    IConversationRepository,
    IInterviewRoundRepository,
    IStageHistoryRepository,
    IUnitOfWork,
)
from application.services.lifecycle import (
    ActivityRecomputer,
    ApplicationStageMachine,
    ConversationService,
    IRecomputeTrigger,
    InterviewRoundManager,
    default_activity_sources,
)
from core.exceptions import RepositoryException, ResourceNotFoundException
from domain.entities import Application, ConversationEvent, InterviewRound, StageTransition
from domain.value_objects import Milestone


BASE_TIME = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def at(minutes: int = 0) -> datetime:
    """Aware timestamp ``minutes`` after BASE_TIME"""
    return BASE_TIME + timedelta(minutes=minutes)


class InMemoryStore:
    """Committed state shared by the fake repositories"""

    def __init__(self):
        self.applications: Dict[UUID, Application] = {}
        self.history: List[Tuple[int, StageTransition]] = []
        self.rounds: Dict[Tuple[UUID, int], InterviewRound] = {}
        self.conversations: List[ConversationEvent] = []
        self.seq = 0

    def snapshot(self):
        return (dict(self.applications), list(self.history), dict(self.rounds), list(self.conversations))

    def restore(self, snapshot):
        self.applications, self.history, self.rounds, self.conversations = (
            dict(snapshot[0]), list(snapshot[1]), dict(snapshot[2]), list(snapshot[3])
        )


class FakeUnitOfWork(IUnitOfWork):
    """Rollback restores the state as of the last commit"""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.commits = 0
        self.rollbacks = 0
        self._snapshot = store.snapshot()

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = self.store.snapshot()

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.store.restore(self._snapshot)


class FakeApplicationRepository(IApplicationRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.last_activity_writes = 0

    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        return self.store.applications.get(application_id)

    async def create(self, application: Application) -> Application:
        self.store.applications[application.id] = application
        return application

    def _require(self, application_id: UUID) -> Application:
        application = self.store.applications.get(application_id)
        if application is None:
            raise ResourceNotFoundException("Application", str(application_id))
        return application

    async def update_stage(self, application_id: UUID, stage: str, milestone: Milestone) -> Application:
        updated = replace(self._require(application_id), stage=stage, milestone=milestone)
        self.store.applications[application_id] = updated
        return updated

    async def set_archived(self, application_id: UUID, archived: bool) -> Application:
        updated = replace(self._require(application_id), is_archived=archived)
        self.store.applications[application_id] = updated
        return updated

    async def update_last_activity(self, application_id: UUID, last_activity_at: datetime) -> None:
        self.store.applications[application_id] = replace(
            self._require(application_id), last_activity_at=last_activity_at
        )
        self.last_activity_writes += 1

    async def list_for_user(
        self,
        user_id: str,
        filters: Optional[ApplicationFilters] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        filters = filters or ApplicationFilters()
        found = [
            a for a in self.store.applications.values()
            if a.user_id == user_id
            and (filters.stage is None or a.stage == filters.stage)
            and (filters.milestone is None or a.milestone == filters.milestone)
            and (filters.is_archived is None or a.is_archived == filters.is_archived)
        ]
        found.sort(key=lambda a: a.last_activity_at, reverse=True)
        return found[offset:offset + limit]

    async def list_ids(self, limit: int = 500, offset: int = 0) -> List[UUID]:
        return list(self.store.applications)[offset:offset + limit]


class FakeStageHistoryRepository(IStageHistoryRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.fail_next_append = False

    async def append(self, transition: StageTransition) -> StageTransition:
        if self.fail_next_append:
            self.fail_next_append = False
            raise RepositoryException("stage_history insert failed")
        self.store.seq += 1
        self.store.history.append((self.store.seq, transition))
        return transition

    async def list_for_application(self, application_id: UUID, newest_first: bool = True) -> List[StageTransition]:
        rows = [(seq, t) for seq, t in self.store.history if t.application_id == application_id]
        rows.sort(key=lambda row: (row[1].changed_at, row[0]), reverse=newest_first)
        return [t for _, t in rows]

    async def count_for_application(self, application_id: UUID) -> int:
        return len([t for _, t in self.store.history if t.application_id == application_id])

    async def latest_changed_at(self, application_id: UUID) -> Optional[datetime]:
        stamps = [t.changed_at for _, t in self.store.history if t.application_id == application_id]
        return max(stamps) if stamps else None


class FakeInterviewRoundRepository(IInterviewRoundRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get(self, application_id: UUID, round_number: int) -> Optional[InterviewRound]:
        return self.store.rounds.get((application_id, round_number))

    async def save(self, interview_round: InterviewRound) -> InterviewRound:
        self.store.rounds[(interview_round.application_id, interview_round.round_number)] = interview_round
        return interview_round

    def _for(self, application_id: UUID) -> List[InterviewRound]:
        return [r for (app_id, _), r in self.store.rounds.items() if app_id == application_id]

    async def list_for_application(self, application_id: UUID) -> List[InterviewRound]:
        return sorted(self._for(application_id), key=lambda r: r.round_number)

    async def max_round_number(self, application_id: UUID) -> int:
        return max((r.round_number for r in self._for(application_id)), default=0)

    async def latest_scheduled_at(self, application_id: UUID) -> Optional[datetime]:
        stamps = [r.scheduled_at for r in self._for(application_id) if r.scheduled_at is not None]
        return max(stamps) if stamps else None

    async def latest_completed_at(self, application_id: UUID) -> Optional[datetime]:
        stamps = [r.completed_at for r in self._for(application_id) if r.completed_at is not None]
        return max(stamps) if stamps else None


class FakeConversationRepository(IConversationRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def add(self, event: ConversationEvent) -> ConversationEvent:
        self.store.conversations.append(event)
        return event

    async def list_for_application(
        self,
        application_id: UUID,
        limit: int = 50,
        before: Optional[datetime] = None
    ) -> List[ConversationEvent]:
        events = [
            e for e in self.store.conversations
            if e.application_id == application_id and (before is None or e.occurred_at < before)
        ]
        events.sort(key=lambda e: e.occurred_at, reverse=True)
        return events[:limit]

    async def latest_occurred_at(self, application_id: UUID) -> Optional[datetime]:
        stamps = [e.occurred_at for e in self.store.conversations if e.application_id == application_id]
        return max(stamps) if stamps else None


class RecordingTrigger(IRecomputeTrigger):
    """Records trigger calls; optionally forwards them to a recomputer"""

    def __init__(self, recomputer: Optional[ActivityRecomputer] = None):
        self.calls: List[UUID] = []
        self.recomputer = recomputer

    async def trigger(self, application_id: UUID) -> None:
        self.calls.append(application_id)
        if self.recomputer is not None:
            await self.recomputer.recompute(application_id)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def uow(store):
    return FakeUnitOfWork(store)


@pytest.fixture
def application_repo(store):
    return FakeApplicationRepository(store)


@pytest.fixture
def history_repo(store):
    return FakeStageHistoryRepository(store)


@pytest.fixture
def round_repo(store):
    return FakeInterviewRoundRepository(store)


@pytest.fixture
def conversation_repo(store):
    return FakeConversationRepository(store)


@pytest.fixture
def recomputer(application_repo, history_repo, round_repo, conversation_repo, uow):
    return ActivityRecomputer(
        application_repo,
        default_activity_sources(conversation_repo, history_repo, round_repo),
        uow,
    )


@pytest.fixture
def trigger(recomputer):
    """Trigger that recomputes inline, like the request path without a worker"""
    return RecordingTrigger(recomputer)


@pytest.fixture
def stage_machine(application_repo, history_repo, uow, trigger):
    return ApplicationStageMachine(application_repo, history_repo, uow, trigger)


@pytest.fixture
def round_manager(application_repo, round_repo, uow, trigger):
    return InterviewRoundManager(application_repo, round_repo, uow, trigger)


@pytest.fixture
def conversation_service(application_repo, conversation_repo, uow, trigger):
    return ConversationService(application_repo, conversation_repo, uow, trigger)


@pytest.fixture
def make_application(stage_machine):
    """Create an application owned by ``user-1`` at BASE_TIME"""

    async def _make(user_id: str = "user-1", created_at: datetime = BASE_TIME, **kwargs) -> Application:
        return await stage_machine.create(
            user_id=user_id,
            company_id=kwargs.pop("company_id", uuid4()),
            role=kwargs.pop("role", "Backend Engineer"),
            created_at=created_at,
            **kwargs,
        )

    return _make
