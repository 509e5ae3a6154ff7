"""
InterviewRoundManager Implementation
Scheduling, rescheduling, completion and terminal outcomes of interview rounds
"""
from dataclasses import replace
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from loguru import logger

from application.repositories.interfaces import (
    IApplicationRepository,
    IInterviewRoundRepository,
    IUnitOfWork,
)
from core.exceptions import (
    InvalidRoundException,
    InvalidStateException,
    InvalidTimestampException,
    ResourceNotFoundException,
)
from domain.entities import InterviewRound
from domain.value_objects import (
    InterviewMode,
    InterviewRoundResult,
    InterviewRoundStatus,
    InterviewRoundType,
    can_transition_status,
    ensure_aware,
)
from .access import load_application
from .interfaces import IInterviewRoundManager, IRecomputeTrigger
from .triggers import fire_trigger


# Upper bound of the round_index column (32-bit INTEGER)
MAX_ROUND_NUMBER = 2 ** 31 - 1


def _validate_round_number(round_number: object) -> int:
    if isinstance(round_number, bool) or not isinstance(round_number, int) or not 0 < round_number <= MAX_ROUND_NUMBER:
        raise InvalidRoundException(round_number)
    return round_number


def _require_timestamp(value: Optional[datetime], field: str) -> datetime:
    if value is None:
        raise InvalidTimestampException(f"{field} is required", field=field)
    return ensure_aware(value, field)


class InterviewRoundManager(IInterviewRoundManager):
    """Owns every write to interview rounds"""

    def __init__(
        self,
        application_repo: IApplicationRepository,
        round_repo: IInterviewRoundRepository,
        unit_of_work: IUnitOfWork,
        recompute_trigger: IRecomputeTrigger,
    ):
        self.application_repo = application_repo
        self.round_repo = round_repo
        self.uow = unit_of_work
        self.recompute_trigger = recompute_trigger

    async def list_rounds(self, application_id: UUID, user_id: Optional[str] = None) -> List[InterviewRound]:
        await load_application(self.application_repo, application_id, user_id)
        return await self.round_repo.list_for_application(application_id)

    async def get_round(self, application_id: UUID, round_number: int) -> Optional[InterviewRound]:
        return await self.round_repo.get(application_id, _validate_round_number(round_number))

    async def next_round_number(self, application_id: UUID) -> int:
        return await self.round_repo.max_round_number(application_id) + 1

    async def _require_round(
        self,
        application_id: UUID,
        round_number: int,
        user_id: Optional[str]
    ) -> InterviewRound:
        _validate_round_number(round_number)
        await load_application(self.application_repo, application_id, user_id)
        interview_round = await self.round_repo.get(application_id, round_number)
        if interview_round is None:
            raise ResourceNotFoundException("InterviewRound", f"{application_id}#{round_number}")
        return interview_round

    @staticmethod
    def _check_status(interview_round: InterviewRound, target: InterviewRoundStatus, operation: str) -> None:
        if not can_transition_status(interview_round.status, target):
            raise InvalidStateException(operation, interview_round.status.value)

    async def _persist(self, interview_round: InterviewRound, operation: str) -> InterviewRound:
        """Save, commit, then request the activity recompute"""
        try:
            saved = await self.round_repo.save(interview_round)
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        logger.info(
            f"Interview round {saved.round_number} of application {saved.application_id} "
            f"{operation}: status={saved.status.value}"
        )
        await fire_trigger(self.recompute_trigger, saved.application_id)
        return saved

    async def plan(
        self,
        application_id: UUID,
        round_number: Optional[int] = None,
        type: InterviewRoundType = InterviewRoundType.OTHER,
        mode: InterviewMode = InterviewMode.ONLINE,
        custom_name: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        await load_application(self.application_repo, application_id, user_id)
        if round_number is None:
            round_number = await self.next_round_number(application_id)
        _validate_round_number(round_number)

        existing = await self.round_repo.get(application_id, round_number)
        if existing is not None:
            raise InvalidStateException("plan", existing.status.value)

        return await self._persist(
            InterviewRound(
                id=uuid4(),
                application_id=application_id,
                round_number=round_number,
                type=type,
                mode=mode,
                custom_name=custom_name,
            ),
            "planned",
        )

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
        """Create the round as scheduled, or book a previously planned one"""
        _validate_round_number(round_number)
        scheduled_at = _require_timestamp(scheduled_at, "scheduled_at")
        await load_application(self.application_repo, application_id, user_id)

        existing = await self.round_repo.get(application_id, round_number)
        if existing is None:
            interview_round = InterviewRound(
                id=uuid4(),
                application_id=application_id,
                round_number=round_number,
                type=type,
                status=InterviewRoundStatus.SCHEDULED,
                mode=mode,
                custom_name=custom_name,
                scheduled_at=scheduled_at,
            )
        else:
            self._check_status(existing, InterviewRoundStatus.SCHEDULED, "schedule")
            interview_round = replace(
                existing,
                type=type,
                status=InterviewRoundStatus.SCHEDULED,
                mode=mode,
                custom_name=custom_name or existing.custom_name,
                scheduled_at=scheduled_at,
            )

        return await self._persist(interview_round, "scheduled")

    async def reschedule(
        self,
        application_id: UUID,
        round_number: int,
        scheduled_at: datetime,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        scheduled_at = _require_timestamp(scheduled_at, "scheduled_at")
        interview_round = await self._require_round(application_id, round_number, user_id)
        self._check_status(interview_round, InterviewRoundStatus.RESCHEDULED, "reschedule")

        return await self._persist(
            replace(
                interview_round,
                status=InterviewRoundStatus.RESCHEDULED,
                scheduled_at=scheduled_at,
                rescheduled_count=interview_round.rescheduled_count + 1,
            ),
            "rescheduled",
        )

    async def complete(
        self,
        application_id: UUID,
        round_number: int,
        completed_at: datetime,
        result: Optional[InterviewRoundResult] = None,
        feedback: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        completed_at = _require_timestamp(completed_at, "completed_at")
        interview_round = await self._require_round(application_id, round_number, user_id)
        self._check_status(interview_round, InterviewRoundStatus.COMPLETED, "complete")

        if interview_round.scheduled_at is not None and completed_at < interview_round.scheduled_at:
            raise InvalidTimestampException(
                f"completed_at {completed_at.isoformat()} precedes scheduled_at "
                f"{interview_round.scheduled_at.isoformat()}",
                field="completed_at",
            )

        return await self._persist(
            replace(
                interview_round,
                status=InterviewRoundStatus.COMPLETED,
                completed_at=completed_at,
                result=result if result is not None else InterviewRoundResult.PENDING,
                feedback=feedback if feedback is not None else interview_round.feedback,
            ),
            "completed",
        )

    async def reject(
        self,
        application_id: UUID,
        round_number: int,
        reason: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        interview_round = await self._require_round(application_id, round_number, user_id)
        self._check_status(interview_round, InterviewRoundStatus.REJECTED, "reject")

        return await self._persist(
            replace(
                interview_round,
                status=InterviewRoundStatus.REJECTED,
                result=InterviewRoundResult.REJECTED,
                rejection_reason=reason,
            ),
            "rejected",
        )

    async def withdraw(
        self,
        application_id: UUID,
        round_number: int,
        user_id: Optional[str] = None
    ) -> InterviewRound:
        interview_round = await self._require_round(application_id, round_number, user_id)
        self._check_status(interview_round, InterviewRoundStatus.WITHDRAWN, "withdraw")

        return await self._persist(
            replace(interview_round, status=InterviewRoundStatus.WITHDRAWN),
            "withdrawn",
        )
