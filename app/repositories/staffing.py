# app/repositories/staffing.py
"""
Storage abstraction consumed by the status engine.

`StaffingRepository` lists the operations the engine needs; the SQLAlchemy
implementation below backs them with an AsyncSession. Repositories never
commit on their own except through `commit()`, which the lifecycle services
call once per operation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date, datetime
from typing import AsyncContextManager, AsyncIterator, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.models.client import Client
from app.models.project import Project, ProjectAssignment
from app.models.status_history import StatusHistoryEntry
from app.models.user import User


@dataclass(frozen=True)
class ProjectFilter:
    """
    Criteria for `find_projects`. Unset attributes do not constrain the query.
    """

    exclude_id: int | None = None
    assigned_user_id: int | None = None
    completed: bool | None = None
    start_date_lte: date | None = None
    start_date_eq: date | None = None
    client_id: int | None = None


@dataclass(frozen=True)
class DayWindow:
    """Half-open interval [start, end) covering one calendar day."""

    start: datetime
    end: datetime

    @property
    def day(self) -> date:
        return self.start.date()


class StaffingRepository(ABC):
    @abstractmethod
    async def find_projects(self, criteria: ProjectFilter) -> list[Project]: ...

    @abstractmethod
    async def get_project(self, project_id: int) -> Project: ...

    @abstractmethod
    async def save_project(self, project: Project) -> Project: ...

    @abstractmethod
    async def delete_project(self, project: Project) -> None: ...

    @abstractmethod
    async def find_users_by_ids(self, user_ids: Iterable[int]) -> list[User]: ...

    @abstractmethod
    async def save_user(self, user: User) -> User: ...

    @abstractmethod
    async def find_latest_status_entry(
        self,
        user_id: int,
        window: DayWindow,
    ) -> StatusHistoryEntry | None: ...

    @abstractmethod
    async def save_status_entry(self, entry: StatusHistoryEntry) -> StatusHistoryEntry: ...

    @abstractmethod
    async def find_users_by_status(self, status: str) -> list[User]: ...

    @abstractmethod
    async def get_user(self, user_id: int) -> User: ...

    @abstractmethod
    async def get_client(self, client_id: int) -> Client: ...

    @abstractmethod
    def savepoint(self) -> AsyncContextManager[None]: ...

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...


class SqlAlchemyStaffingRepository(StaffingRepository):
    """
    StaffingRepository backed by an async SQLAlchemy session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def find_projects(self, criteria: ProjectFilter) -> list[Project]:
        stmt = select(Project)

        if criteria.exclude_id is not None:
            stmt = stmt.where(Project.id != criteria.exclude_id)
        if criteria.assigned_user_id is not None:
            stmt = stmt.where(
                Project.id.in_(
                    select(ProjectAssignment.project_id).where(
                        ProjectAssignment.user_id == criteria.assigned_user_id
                    )
                )
            )
        if criteria.completed is not None:
            stmt = stmt.where(Project.completed.is_(criteria.completed))
        if criteria.start_date_lte is not None:
            stmt = stmt.where(Project.start_date <= criteria.start_date_lte)
        if criteria.start_date_eq is not None:
            stmt = stmt.where(Project.start_date == criteria.start_date_eq)
        if criteria.client_id is not None:
            stmt = stmt.where(Project.client_id == criteria.client_id)

        result = await self.session.execute(stmt.order_by(Project.id.asc()))
        return list(result.scalars().all())

    async def get_project(self, project_id: int) -> Project:
        result = await self.session.execute(select(Project).where(Project.id == project_id))
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError(f"Project with id {project_id} not found.")
        return project

    async def save_project(self, project: Project) -> Project:
        self.session.add(project)
        await self.session.flush()
        return project

    async def delete_project(self, project: Project) -> None:
        await self.session.delete(project)
        await self.session.flush()

    # ------------------------------------------------------------------
    # Users / clients
    # ------------------------------------------------------------------

    async def find_users_by_ids(self, user_ids: Iterable[int]) -> list[User]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return []
        result = await self.session.execute(select(User).where(User.id.in_(ids)))
        return list(result.scalars().all())

    async def find_users_by_status(self, status: str) -> list[User]:
        result = await self.session.execute(
            select(User).where(User.status == status).order_by(User.id.asc())
        )
        return list(result.scalars().all())

    async def get_user(self, user_id: int) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} not found.")
        return user

    async def save_user(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_client(self, client_id: int) -> Client:
        client = await self.session.get(Client, client_id)
        if client is None:
            raise NotFoundError(f"Client with id {client_id} not found.")
        return client

    # ------------------------------------------------------------------
    # Status history
    # ------------------------------------------------------------------

    async def find_latest_status_entry(
        self,
        user_id: int,
        window: DayWindow,
    ) -> StatusHistoryEntry | None:
        stmt = (
            select(StatusHistoryEntry)
            .where(
                StatusHistoryEntry.user_id == user_id,
                StatusHistoryEntry.timestamp >= window.start,
                StatusHistoryEntry.timestamp < window.end,
            )
            .order_by(StatusHistoryEntry.timestamp.desc(), StatusHistoryEntry.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save_status_entry(self, entry: StatusHistoryEntry) -> StatusHistoryEntry:
        self.session.add(entry)
        await self.session.flush()
        return entry

    # ------------------------------------------------------------------
    # Transaction control
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        """
        Run a block inside a nested transaction.

        On error only the block's writes are rolled back and the exception
        propagates to the caller.
        """
        async with self.session.begin_nested():
            yield

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
