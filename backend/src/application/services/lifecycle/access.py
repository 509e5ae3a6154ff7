"""Ownership-aware application lookup shared by the lifecycle services"""
from typing import Optional
from uuid import UUID

from application.repositories.interfaces import IApplicationRepository
from core.exceptions import ResourceNotFoundException
from domain.entities import Application


async def load_application(
    repo: IApplicationRepository,
    application_id: UUID,
    user_id: Optional[str] = None
) -> Application:
    """
    Fetch an application, hiding other users' applications as not found

    Raises:
        ResourceNotFoundException: missing, or owned by someone else
    """
    application = await repo.get_by_id(application_id)
    if application is None or (user_id is not None and application.user_id != user_id):
        raise ResourceNotFoundException("Application", str(application_id))
    return application
