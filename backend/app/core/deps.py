from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import async_session_factory
from app.services.barter import BarterService
from app.services.directory import BarterDirectory
from app.services.notification import BarterNotifier, NotificationService
from app.services.repository import BarterRepository, SqlBarterRepository


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async database session.

    The session is automatically closed when the request finishes.
    """
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_barter_repository(db: AsyncSession = Depends(get_db)) -> BarterRepository:
    return SqlBarterRepository(db)


def get_notifier() -> BarterNotifier:
    # Own sessions, so a failed notification never touches the request's transaction
    return NotificationService(async_session_factory)


def get_barter_service(
    repository: BarterRepository = Depends(get_barter_repository),
    notifier: BarterNotifier = Depends(get_notifier),
) -> BarterService:
    return BarterService(repository, notifier)


def get_barter_directory(
    repository: BarterRepository = Depends(get_barter_repository),
) -> BarterDirectory:
    return BarterDirectory(repository)
