"""
Dependency Injection Container
Manages service and repository instances
"""
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends

from core.config import settings
from core.database import get_db, get_db_session
from application.repositories.interfaces import (
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
    IActivityNotifier,
    IActivityRecomputer,
    IApplicationStageMachine,
    IConversationService,
    IInterviewRoundManager,
    IRecomputeTrigger,
    InlineRecomputeTrigger,
    InterviewRoundManager,
    default_activity_sources,
)
from application.services.recompute_worker import get_recompute_worker
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.conversation import SQLAlchemyConversationRepository
from infrastructure.persistence.repositories.interview_round import SQLAlchemyInterviewRoundRepository
from infrastructure.persistence.repositories.stage_history import SQLAlchemyStageHistoryRepository
from infrastructure.persistence.unit_of_work import SQLAlchemyUnitOfWork
from infrastructure.realtime import SocketIOActivityNotifier, sio


# Singleton instances
_activity_notifier: Optional[IActivityNotifier] = None


def get_activity_notifier() -> IActivityNotifier:
    """Get activity notifier instance (singleton)"""
    global _activity_notifier
    if _activity_notifier is None:
        _activity_notifier = SocketIOActivityNotifier(sio)
    return _activity_notifier


def get_application_repository(
    session: AsyncSession = Depends(get_db)
) -> IApplicationRepository:
    """Get application repository instance (per-request)"""
    return SQLAlchemyApplicationRepository(session)


def get_stage_history_repository(
    session: AsyncSession = Depends(get_db)
) -> IStageHistoryRepository:
    return SQLAlchemyStageHistoryRepository(session)


def get_interview_round_repository(
    session: AsyncSession = Depends(get_db)
) -> IInterviewRoundRepository:
    return SQLAlchemyInterviewRoundRepository(session)


def get_conversation_repository(
    session: AsyncSession = Depends(get_db)
) -> IConversationRepository:
    return SQLAlchemyConversationRepository(session)


def get_unit_of_work(
    session: AsyncSession = Depends(get_db)
) -> IUnitOfWork:
    return SQLAlchemyUnitOfWork(session)


def build_activity_recomputer(session: AsyncSession) -> ActivityRecomputer:
    """Recomputer whose repositories all share ``session``"""
    return ActivityRecomputer(
        SQLAlchemyApplicationRepository(session),
        default_activity_sources(
            SQLAlchemyConversationRepository(session),
            SQLAlchemyStageHistoryRepository(session),
            SQLAlchemyInterviewRoundRepository(session),
        ),
        SQLAlchemyUnitOfWork(session),
        notifier=get_activity_notifier(),
    )


def get_activity_recomputer(
    session: AsyncSession = Depends(get_db)
) -> IActivityRecomputer:
    """Get activity recomputer instance (per-request)"""
    return build_activity_recomputer(session)


async def recompute_in_new_session(application_id: UUID) -> bool:
    """Run one recompute in a session of its own (background worker entry point)"""
    async with get_db_session() as session:
        return await build_activity_recomputer(session).recompute(application_id)


def get_recompute_trigger(
    recomputer: IActivityRecomputer = Depends(get_activity_recomputer)
) -> IRecomputeTrigger:
    """
    Get recompute trigger (per-request)

    Uses the background worker when it is running, otherwise recomputes
    inline in the request's session after the write commits.
    """
    worker = get_recompute_worker()
    if settings.RECOMPUTE_WORKER_ENABLED and worker is not None and worker.running:
        return worker
    return InlineRecomputeTrigger(recomputer.recompute)


def get_stage_machine(
    application_repo: IApplicationRepository = Depends(get_application_repository),
    history_repo: IStageHistoryRepository = Depends(get_stage_history_repository),
    uow: IUnitOfWork = Depends(get_unit_of_work),
    trigger: IRecomputeTrigger = Depends(get_recompute_trigger)
) -> IApplicationStageMachine:
    """Get stage machine instance (per-request)"""
    return ApplicationStageMachine(
        application_repo,
        history_repo,
        uow,
        trigger,
        strict_noop=settings.STRICT_NOOP_TRANSITIONS,
    )


def get_interview_round_manager(
    application_repo: IApplicationRepository = Depends(get_application_repository),
    round_repo: IInterviewRoundRepository = Depends(get_interview_round_repository),
    uow: IUnitOfWork = Depends(get_unit_of_work),
    trigger: IRecomputeTrigger = Depends(get_recompute_trigger)
) -> IInterviewRoundManager:
    """Get interview round manager instance (per-request)"""
    return InterviewRoundManager(application_repo, round_repo, uow, trigger)


def get_conversation_service(
    application_repo: IApplicationRepository = Depends(get_application_repository),
    conversation_repo: IConversationRepository = Depends(get_conversation_repository),
    uow: IUnitOfWork = Depends(get_unit_of_work),
    trigger: IRecomputeTrigger = Depends(get_recompute_trigger)
) -> IConversationService:
    return ConversationService(application_repo, conversation_repo, uow, trigger)
