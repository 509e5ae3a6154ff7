"""
Stage History Repository Implementation
Insert-only access to the stage_history ledger
"""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import IStageHistoryRepository
from domain.entities import StageTransition
from domain.enums import StageActor
from infrastructure.persistence.models.stage_history import StageHistoryModel


class SQLAlchemyStageHistoryRepository(IStageHistoryRepository):
    """Stage history repository using SQLAlchemy"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, transition: StageTransition) -> StageTransition:
        model = StageHistoryModel(
            id=transition.id,
            application_id=transition.application_id,
            from_stage=transition.from_stage,
            to_stage=transition.to_stage,
            actor=transition.actor.value,
            reason=transition.reason,
            changed_at=transition.changed_at,
        )
        self.session.add(model)
        await self.session.flush()
        return transition

    async def list_for_application(self, application_id: UUID, newest_first: bool = True) -> List[StageTransition]:
        order = (
            (StageHistoryModel.changed_at.desc(), StageHistoryModel.seq.desc())
            if newest_first
            else (StageHistoryModel.changed_at.asc(), StageHistoryModel.seq.asc())
        )
        result = await self.session.execute(
            select(StageHistoryModel)
            .where(StageHistoryModel.application_id == application_id)
            .order_by(*order)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def count_for_application(self, application_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count(StageHistoryModel.id))
            .where(StageHistoryModel.application_id == application_id)
        )
        return int(result.scalar_one())

    async def latest_changed_at(self, application_id: UUID) -> Optional[datetime]:
        result = await self.session.execute(
            select(func.max(StageHistoryModel.changed_at))
            .where(StageHistoryModel.application_id == application_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: StageHistoryModel) -> StageTransition:
        return StageTransition(
            id=model.id,
            application_id=model.application_id,
            from_stage=model.from_stage,
            to_stage=model.to_stage,
            actor=StageActor(model.actor),
            changed_at=model.changed_at,
            reason=model.reason,
        )
