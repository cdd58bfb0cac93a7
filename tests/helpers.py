# tests/helpers.py
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock
from app.core.config import StatusResolutionOrder
from app.models.status_history import StatusHistoryEntry
from app.models.user import User
from app.repositories.staffing import SqlAlchemyStaffingRepository
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.services.project_lifecycle import ProjectLifecycleManager


def build_manager(
    session: AsyncSession,
    clock: Clock,
    order: StatusResolutionOrder = StatusResolutionOrder.CONFIRMED_FIRST,
) -> ProjectLifecycleManager:
    return ProjectLifecycleManager(
        repository=SqlAlchemyStaffingRepository(session),
        clock=clock,
        resolution_order=order,
    )


def project_payload(staff: dict[str, int], **overrides) -> dict:
    payload = {
        "name": "Warehouse fit-out",
        "description": "Racking and lighting",
        "service_type": "Installation",
        "deadline": "2025-12-31",
        "start_date": "2025-11-01",
        "completed": False,
        "assigned_users": [staff["alice"]],
        "client": staff["client_a"],
        "team_leader": staff["lead"],
    }
    payload.update(overrides)
    return payload


def create_request(staff: dict[str, int], **overrides) -> ProjectCreate:
    return ProjectCreate(**project_payload(staff, **overrides))


def update_request(staff: dict[str, int], **overrides) -> ProjectUpdate:
    return ProjectUpdate(**project_payload(staff, **overrides))


async def user_status(session: AsyncSession, user_id: int) -> str:
    result = await session.execute(select(User.status).where(User.id == user_id))
    return result.scalar_one()


async def ledger_entries(session: AsyncSession, user_id: int) -> list[StatusHistoryEntry]:
    result = await session.execute(
        select(StatusHistoryEntry)
        .where(StatusHistoryEntry.user_id == user_id)
        .order_by(StatusHistoryEntry.status_date)
    )
    return list(result.scalars().all())
