"""
Interview Round Repository Implementation
"""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from sqlalchemy import select, and_, func
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import IInterviewRoundRepository
from domain.entities import InterviewRound
from domain.value_objects import InterviewMode, InterviewRoundResult, InterviewRoundStatus, InterviewRoundType
from infrastructure.persistence.models.interview_round import InterviewRoundModel


class SQLAlchemyInterviewRoundRepository(IInterviewRoundRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, application_id: UUID, round_number: int) -> Optional[InterviewRoundModel]:
        result = await self.session.execute(
            select(InterviewRoundModel).where(
                and_(
                    InterviewRoundModel.application_id == application_id,
                    InterviewRoundModel.round_index == round_number,
                )
            )
        )
        return result.scalar_one_or_none()

    async def get(self, application_id: UUID, round_number: int) -> Optional[InterviewRound]:
        model = await self._get_model(application_id, round_number)
        return self._to_entity(model) if model else None

    async def save(self, interview_round: InterviewRound) -> InterviewRound:
        model = await self._get_model(interview_round.application_id, interview_round.round_number)
        if model is None:
            model = InterviewRoundModel(
                id=interview_round.id,
                application_id=interview_round.application_id,
                round_index=interview_round.round_number,
            )
            self.session.add(model)

        model.type = interview_round.type.value
        model.custom_name = interview_round.custom_name
        model.mode = interview_round.mode.value
        model.status = interview_round.status.value
        model.scheduled_at = interview_round.scheduled_at
        model.completed_at = interview_round.completed_at
        model.rescheduled_count = interview_round.rescheduled_count
        model.result = interview_round.result.value if interview_round.result else None
        model.feedback = interview_round.feedback
        model.rejection_reason = interview_round.rejection_reason

        await self.session.flush()
        return self._to_entity(model)

    async def list_for_application(self, application_id: UUID) -> List[InterviewRound]:
        result = await self.session.execute(
            select(InterviewRoundModel)
            .where(InterviewRoundModel.application_id == application_id)
            .order_by(InterviewRoundModel.round_index.asc())
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def max_round_number(self, application_id: UUID) -> int:
        result = await self.session.execute(
            select(func.max(InterviewRoundModel.round_index))
            .where(InterviewRoundModel.application_id == application_id)
        )
        return result.scalar_one_or_none() or 0

    async def latest_scheduled_at(self, application_id: UUID) -> Optional[datetime]:
        result = await self.session.execute(
            select(func.max(InterviewRoundModel.scheduled_at))
            .where(InterviewRoundModel.application_id == application_id)
        )
        return result.scalar_one_or_none()

    async def latest_completed_at(self, application_id: UUID) -> Optional[datetime]:
        result = await self.session.execute(
            select(func.max(InterviewRoundModel.completed_at))
            .where(InterviewRoundModel.application_id == application_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: InterviewRoundModel) -> InterviewRound:
        return InterviewRound(
            id=model.id,
            application_id=model.application_id,
            round_number=model.round_index,
            type=InterviewRoundType(model.type),
            status=InterviewRoundStatus(model.status),
            mode=InterviewMode(model.mode),
            custom_name=model.custom_name,
            scheduled_at=model.scheduled_at,
            completed_at=model.completed_at,
            rescheduled_count=model.rescheduled_count or 0,
            result=InterviewRoundResult(model.result) if model.result else None,
            feedback=model.feedback,
            rejection_reason=model.rejection_reason,
        )
