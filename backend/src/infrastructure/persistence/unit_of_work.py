"""
SQLAlchemy Unit of Work
Commit boundary around the request's AsyncSession
"""
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import IUnitOfWork


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """Repositories built on the same session commit together"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
