"""
Application Repository Implementation
SQLAlchemy async repository for applications
"""
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import ApplicationFilters, IApplicationRepository
from core.exceptions import ResourceNotFoundException
from domain.entities import Application
from domain.enums import ApplicationSource
from domain.value_objects import Milestone
from infrastructure.persistence.models.application import ApplicationModel


class SQLAlchemyApplicationRepository(IApplicationRepository):
    """Application repository using SQLAlchemy"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        result = await self.session.execute(
            select(ApplicationModel).where(ApplicationModel.id == application_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, application: Application) -> Application:
        model = self._to_model(application)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def _get_model(self, application_id: UUID) -> ApplicationModel:
        result = await self.session.execute(
            select(ApplicationModel).where(ApplicationModel.id == application_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            raise ResourceNotFoundException("Application", str(application_id))
        return model

    async def update_stage(self, application_id: UUID, stage: str, milestone: Milestone) -> Application:
        model = await self._get_model(application_id)
        model.stage = stage
        model.milestone = milestone.value
        await self.session.flush()
        return self._to_entity(model)

    async def set_archived(self, application_id: UUID, archived: bool) -> Application:
        model = await self._get_model(application_id)
        model.is_archived = archived
        await self.session.flush()
        return self._to_entity(model)

    async def update_last_activity(self, application_id: UUID, last_activity_at: datetime) -> None:
        result = await self.session.execute(
            update(ApplicationModel)
            .where(ApplicationModel.id == application_id)
            .values(last_activity_at=last_activity_at)
        )
        if result.rowcount == 0:
            raise ResourceNotFoundException("Application", str(application_id))
        await self.session.flush()

    async def list_for_user(
        self,
        user_id: str,
        filters: Optional[ApplicationFilters] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Application]:
        filters = filters or ApplicationFilters()
        query = select(ApplicationModel).where(ApplicationModel.user_id == user_id)

        if filters.stage is not None:
            query = query.where(ApplicationModel.stage == filters.stage)
        if filters.milestone is not None:
            query = query.where(ApplicationModel.milestone == filters.milestone.value)
        if filters.platform_id is not None:
            query = query.where(ApplicationModel.platform_id == filters.platform_id)
        if filters.company_id is not None:
            query = query.where(ApplicationModel.company_id == filters.company_id)
        if filters.is_archived is not None:
            query = query.where(ApplicationModel.is_archived == filters.is_archived)
        if filters.activity_from is not None:
            query = query.where(ApplicationModel.last_activity_at >= filters.activity_from)
        if filters.activity_to is not None:
            query = query.where(ApplicationModel.last_activity_at <= filters.activity_to)

        query = (
            query
            .order_by(ApplicationModel.last_activity_at.desc(), ApplicationModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_ids(self, limit: int = 500, offset: int = 0) -> List[UUID]:
        result = await self.session.execute(
            select(ApplicationModel.id)
            .order_by(ApplicationModel.created_at, ApplicationModel.id)
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    def _to_model(self, entity: Application) -> ApplicationModel:
        return ApplicationModel(
            id=entity.id,
            user_id=entity.user_id,
            company_id=entity.company_id,
            platform_id=entity.platform_id,
            role=entity.role,
            job_url=entity.job_url,
            source=entity.source.value if entity.source else None,
            stage=entity.stage,
            milestone=entity.milestone.value,
            is_archived=entity.is_archived,
            notes=entity.notes,
            created_at=entity.created_at,
            last_activity_at=entity.last_activity_at,
        )

    def _to_entity(self, model: ApplicationModel) -> Application:
        return Application(
            id=model.id,
            user_id=model.user_id,
            company_id=model.company_id,
            role=model.role,
            stage=model.stage,
            milestone=Milestone(model.milestone),
            created_at=model.created_at,
            last_activity_at=model.last_activity_at,
            is_archived=bool(model.is_archived),
            platform_id=model.platform_id,
            source=ApplicationSource(model.source) if model.source else None,
            job_url=model.job_url,
            notes=model.notes,
        )
