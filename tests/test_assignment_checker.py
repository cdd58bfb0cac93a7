# tests/test_assignment_checker.py
from datetime import date, datetime, timezone

import pytest

from app.db.session import AsyncSessionLocal
from app.models.project import Project
from app.repositories.staffing import SqlAlchemyStaffingRepository
from app.services.assignment_checker import is_assigned_elsewhere

AS_OF = datetime(2025, 11, 14, 10, 0, tzinfo=timezone.utc)


async def _add_project(session, staff, user_ids, start_date, completed=False, client="client_a"):
    project = Project(
        name=f"Project {start_date.isoformat()}",
        service_type="Installation",
        start_date=start_date,
        completed=completed,
        client_id=staff[client],
        team_leader_id=staff["lead"],
    )
    project.assign_users(user_ids)
    session.add(project)
    await session.flush()
    return project


@pytest.mark.asyncio
async def test_started_open_project_counts_as_elsewhere(staff):
    async with AsyncSessionLocal() as session:
        repository = SqlAlchemyStaffingRepository(session)
        await _add_project(session, staff, [staff["alice"]], date(2025, 11, 1))

        assert await is_assigned_elsewhere(repository, staff["alice"], None, AS_OF)
        assert not await is_assigned_elsewhere(repository, staff["bob"], None, AS_OF)


@pytest.mark.asyncio
async def test_excluded_project_is_ignored(staff):
    async with AsyncSessionLocal() as session:
        repository = SqlAlchemyStaffingRepository(session)
        project = await _add_project(session, staff, [staff["alice"]], date(2025, 11, 1))

        assert not await is_assigned_elsewhere(repository, staff["alice"], project.id, AS_OF)


@pytest.mark.asyncio
async def test_completed_and_future_projects_do_not_count(staff):
    async with AsyncSessionLocal() as session:
        repository = SqlAlchemyStaffingRepository(session)
        await _add_project(session, staff, [staff["alice"]], date(2025, 11, 1), completed=True)
        await _add_project(
            session, staff, [staff["alice"]], date(2025, 11, 15), client="client_b"
        )

        assert not await is_assigned_elsewhere(repository, staff["alice"], None, AS_OF)


@pytest.mark.asyncio
async def test_project_starting_today_counts(staff):
    async with AsyncSessionLocal() as session:
        repository = SqlAlchemyStaffingRepository(session)
        await _add_project(session, staff, [staff["carol"]], date(2025, 11, 14))

        assert await is_assigned_elsewhere(repository, staff["carol"], None, AS_OF)
