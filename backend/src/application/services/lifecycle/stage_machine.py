"""
ApplicationStageMachine Implementation
Validates stage changes and records each one in the stage history.

Any valid stage may follow any other; progression policy (for example
forbidding moves backward) belongs to callers layered on top.
"""
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from loguru import logger

from application.repositories.interfaces import (
    ApplicationFilters,
    IApplicationRepository,
    IStageHistoryRepository,
    IUnitOfWork,
)
from core.exceptions import InvalidTimestampException, NoOpTransitionException
from domain.entities import Application, StageTransition
from domain.enums import ApplicationSource, StageActor
from domain.value_objects import (
    INITIAL_STAGE,
    derive_milestone,
    ensure_aware,
    initial_stage_for_source,
    require_valid_stage,
    utc_now,
)
from .access import load_application
from .interfaces import IApplicationStageMachine, IRecomputeTrigger, TransitionResult
from .triggers import fire_trigger


class ApplicationStageMachine(IApplicationStageMachine):
    """State machine over application.stage"""

    def __init__(
        self,
        application_repo: IApplicationRepository,
        history_repo: IStageHistoryRepository,
        unit_of_work: IUnitOfWork,
        recompute_trigger: IRecomputeTrigger,
        strict_noop: bool = False,
    ):
        """
        Initialize stage machine

        Args:
            application_repo: Application repository
            history_repo: Stage history ledger
            unit_of_work: Commit boundary shared by both repositories
            recompute_trigger: Fired once after every committed transition
            strict_noop: Default for raising on same-stage transitions
        """
        self.application_repo = application_repo
        self.history_repo = history_repo
        self.uow = unit_of_work
        self.recompute_trigger = recompute_trigger
        self.strict_noop = strict_noop

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
        """
        Create an application in the wishlist stage

        When the source implies a later starting stage (self or referral
        applications start in self_review, recruiter outreach in
        recruiter_reachout) the move is recorded as a system transition
        in the same unit of work as the insert.
        """
        created_at = ensure_aware(created_at, "created_at") or utc_now()
        application = Application(
            id=uuid4(),
            user_id=user_id,
            company_id=company_id,
            role=role,
            stage=INITIAL_STAGE,
            milestone=derive_milestone(INITIAL_STAGE),
            created_at=created_at,
            last_activity_at=created_at,
            platform_id=platform_id,
            source=source,
            job_url=job_url,
            notes=notes,
        )
        start_stage = initial_stage_for_source(source.value if source else None)

        try:
            saved = await self.application_repo.create(application)
            if start_stage != saved.stage:
                saved, _ = await self._apply(
                    saved,
                    start_stage,
                    StageActor.SYSTEM,
                    created_at,
                    f"initial stage for source {source.value}",
                )
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        logger.info(f"Created application {saved.id} for user {user_id} at stage {saved.stage}")

        if saved.stage != INITIAL_STAGE:
            await fire_trigger(self.recompute_trigger, saved.id)
            return await self._reload(saved)
        return saved

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
        require_valid_stage(to_stage)
        changed_at = ensure_aware(at, "changed_at") or utc_now()
        strict = self.strict_noop if strict is None else strict

        try:
            application = await load_application(self.application_repo, application_id, user_id)

            if application.stage == to_stage:
                if strict:
                    raise NoOpTransitionException(application_id, to_stage)
                logger.debug(f"Application {application_id} already in stage {to_stage}; nothing to do")
                return TransitionResult(application=application)

            from_stage = application.stage
            updated, record = await self._apply(application, to_stage, actor, changed_at, reason)
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        logger.info(f"Application {application_id}: {from_stage} -> {to_stage} by {actor.value}")

        await fire_trigger(self.recompute_trigger, application_id)
        return TransitionResult(application=await self._reload(updated), transition=record)

    async def _apply(
        self,
        application: Application,
        to_stage: str,
        actor: StageActor,
        changed_at: datetime,
        reason: Optional[str]
    ) -> Tuple[Application, StageTransition]:
        """Update the stage and append its history row; the caller commits"""
        latest = await self.history_repo.latest_changed_at(application.id)
        if latest is not None and changed_at < latest:
            raise InvalidTimestampException(
                f"changed_at {changed_at.isoformat()} precedes the latest stage change at {latest.isoformat()}",
                field="changed_at",
            )

        updated = await self.application_repo.update_stage(
            application.id, to_stage, derive_milestone(to_stage)
        )
        record = await self.history_repo.append(
            StageTransition(
                id=uuid4(),
                application_id=application.id,
                from_stage=application.stage,
                to_stage=to_stage,
                actor=actor,
                changed_at=changed_at,
                reason=reason,
            )
        )
        return updated, record

    async def _reload(self, application: Application) -> Application:
        """Re-read after the recompute trigger so last_activity_at is current"""
        return await self.application_repo.get_by_id(application.id) or application

    async def get(self, application_id: UUID, user_id: Optional[str] = None) -> Application:
        return await load_application(self.application_repo, application_id, user_id)

    async def history(self, application_id: UUID, user_id: Optional[str] = None) -> List[StageTransition]:
        await load_application(self.application_repo, application_id, user_id)
        return await self.history_repo.list_for_application(application_id, newest_first=True)

    async def set_archived(self, application_id: UUID, archived: bool, user_id: Optional[str] = None) -> Application:
        application = await load_application(self.application_repo, application_id, user_id)
        if application.is_archived == archived:
            return application

        try:
            updated = await self.application_repo.set_archived(application_id, archived)
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        logger.info(f"Application {application_id} {'archived' if archived else 'unarchived'}")
        return updated

    async def list_for_user(
        self,
        user_id: str,
        filters: Optional[ApplicationFilters] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        return await self.application_repo.list_for_user(user_id, filters, limit=limit, offset=offset)
