# app/api/dependencies/services.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, SystemClock
from app.core.config import get_settings
from app.db.session import get_db
from app.repositories.staffing import SqlAlchemyStaffingRepository
from app.services.project_lifecycle import ProjectLifecycleManager


def get_clock() -> Clock:
    """
    Clock used by the status engine. Override in tests to pin "now".
    """
    return SystemClock(get_settings().STATUS_TIMEZONE)


def get_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlAlchemyStaffingRepository:
    return SqlAlchemyStaffingRepository(db)


def get_project_lifecycle(
    repository: SqlAlchemyStaffingRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
) -> ProjectLifecycleManager:
    settings = get_settings()
    return ProjectLifecycleManager(
        repository=repository,
        clock=clock,
        resolution_order=settings.STATUS_RESOLUTION_ORDER,
    )
