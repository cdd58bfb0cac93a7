# tests/test_project_lifecycle.py
from datetime import date, timedelta, timezone

import pytest
from sqlalchemy import func, select, update

from app.core.config import StatusResolutionOrder
from app.core.errors import ConflictError, NoOpUpdate, NotFoundError, ValidationError
from app.db.session import AsyncSessionLocal
from app.models.project import Project
from app.models.status_history import StatusHistoryEntry
from app.models.user import User
from app.schemas.status_history import UserStatus
from app.services.project_lifecycle import resolve_update_status
from tests.conftest import NOW
from tests.helpers import (
    build_manager,
    create_request,
    ledger_entries,
    update_request,
    user_status,
)

TODAY = NOW.date()


async def _ledger_count(session) -> int:
    result = await session.execute(select(func.count(StatusHistoryEntry.id)))
    return result.scalar_one()


# --------------------------------------------------------------------------
# Create
# --------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_started_project_marks_team_at_work(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        result = await manager.create(
            create_request(staff, assigned_users=[staff["alice"], staff["bob"]])
        )

        assert result.message == "New project created"
        assert result.warnings == []
        for name in ("alice", "bob"):
            assert await user_status(session, staff[name]) == "At Work"
            entries = await ledger_entries(session, staff[name])
            assert len(entries) == 1
            assert entries[0].status_date == TODAY


@pytest.mark.asyncio
async def test_create_future_project_leaves_statuses_untouched(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        await manager.create(create_request(staff, start_date="2025-12-01"))

        assert await user_status(session, staff["alice"]) == "Available"
        assert await _ledger_count(session) == 0


@pytest.mark.asyncio
async def test_create_skips_user_already_active_elsewhere(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        await manager.create(create_request(staff, assigned_users=[staff["alice"]]))

        # A label set outside the engine must survive: Alice is owned by the
        # first project.
        await session.execute(
            update(User).where(User.id == staff["alice"]).values(status="On Leave")
        )
        await session.commit()

        result = await manager.create(
            create_request(
                staff,
                name="Second site",
                client=staff["client_b"],
                assigned_users=[staff["alice"], staff["bob"]],
            )
        )

        assert result.warnings == []
        assert await user_status(session, staff["bob"]) == "At Work"
        assert await user_status(session, staff["alice"]) == "On Leave"
        assert len(await ledger_entries(session, staff["alice"])) == 1


@pytest.mark.asyncio
async def test_create_duplicate_client_and_start_date_conflicts(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        await manager.create(create_request(staff))

        with pytest.raises(ConflictError):
            await manager.create(create_request(staff, name="Completely different name"))


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["deadline", "start_date"])
@pytest.mark.parametrize("bad_value", ["2023-13-01", "2023-02-30", "abc"])
async def test_create_invalid_date_aborts_before_any_write(staff, clock, field, bad_value):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)

        with pytest.raises(ValidationError) as exc_info:
            await manager.create(create_request(staff, **{field: bad_value}))

        assert exc_info.value.field == field
        projects = await session.execute(select(func.count(Project.id)))
        assert projects.scalar_one() == 0
        assert await _ledger_count(session) == 0


@pytest.mark.asyncio
async def test_create_unknown_references_are_not_found(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)

        with pytest.raises(NotFoundError):
            await manager.create(create_request(staff, assigned_users=[4242]))
        with pytest.raises(NotFoundError):
            await manager.create(create_request(staff, client=4242))


@pytest.mark.asyncio
async def test_create_rejects_duplicate_user_ids(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)

        with pytest.raises(ValidationError):
            await manager.create(
                create_request(staff, assigned_users=[staff["alice"], staff["alice"]])
            )


# --------------------------------------------------------------------------
# Update
# --------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_without_changes_is_noop_and_writes_nothing(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        created = await manager.create(create_request(staff))
        count_before = await _ledger_count(session)

        clock.advance(days=1)
        with pytest.raises(NoOpUpdate):
            await manager.update(created.id, update_request(staff))

        assert await _ledger_count(session) == count_before


@pytest.mark.asyncio
async def test_update_with_confirmed_flag_forces_recalculation(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        created = await manager.create(create_request(staff, confirmed=True))

        clock.advance(days=1)
        result = await manager.update(created.id, update_request(staff, confirmed=True))

        assert result.message == "'Warehouse fit-out' updated"
        entries = await ledger_entries(session, staff["alice"])
        assert [entry.status for entry in entries] == ["At Work", "At Work"]


@pytest.mark.asyncio
async def test_update_removed_user_becomes_available(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        created = await manager.create(
            create_request(staff, assigned_users=[staff["alice"], staff["carol"]])
        )
        assert await user_status(session, staff["carol"]) == "At Work"

        await manager.update(
            created.id, update_request(staff, assigned_users=[staff["alice"]])
        )

        assert await user_status(session, staff["carol"]) == "Available"
        assert await user_status(session, staff["alice"]) == "At Work"
        project = await session.get(Project, created.id)
        assert project.assigned_user_ids == [staff["alice"]]


@pytest.mark.asyncio
async def test_update_removed_user_active_elsewhere_keeps_status(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        first = await manager.create(
            create_request(staff, assigned_users=[staff["alice"], staff["carol"]])
        )
        await manager.create(
            create_request(
                staff,
                name="Other site",
                client=staff["client_b"],
                assigned_users=[staff["carol"]],
            )
        )

        await manager.update(first.id, update_request(staff, assigned_users=[staff["alice"]]))

        assert await user_status(session, staff["carol"]) == "At Work"


@pytest.mark.asyncio
async def test_update_added_user_is_put_to_work(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        created = await manager.create(create_request(staff))

        await manager.update(
            created.id,
            update_request(staff, assigned_users=[staff["alice"], staff["dave"]]),
        )

        assert await user_status(session, staff["dave"]) == "At Work"


@pytest.mark.asyncio
async def test_update_moving_start_into_future_frees_team(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        created = await manager.create(create_request(staff))

        await manager.update(created.id, update_request(staff, start_date="2026-01-05"))

        assert await user_status(session, staff["alice"]) == "Available"


@pytest.mark.asyncio
async def test_update_unknown_project_is_not_found(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)

        with pytest.raises(NotFoundError):
            await manager.update(4242, update_request(staff))


@pytest.mark.asyncio
async def test_update_onto_taken_client_start_date_conflicts(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        await manager.create(create_request(staff))
        second = await manager.create(create_request(staff, start_date="2025-11-02"))

        with pytest.raises(ConflictError):
            await manager.update(second.id, update_request(staff))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"deadline": "2023-02-30"}, "deadline"),
        ({"deadline": "abc"}, "deadline"),
        ({"start_date": "2023-13-01"}, "start_date"),
        ({"start_date": ""}, "start_date"),
        ({"completed_at": "2023-02-30"}, "completed_at"),
        ({"completed_at": "14/11/2025"}, "completed_at"),
    ],
)
async def test_update_invalid_date_aborts_before_any_write(staff, clock, overrides, field):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        created = await manager.create(create_request(staff))
        ledger_before = await _ledger_count(session)

        clock.advance(hours=2)
        with pytest.raises(ValidationError) as exc_info:
            await manager.update(
                created.id,
                update_request(staff, completed=True, **overrides),
            )

        assert exc_info.value.field == field
        assert await _ledger_count(session) == ledger_before
        assert await user_status(session, staff["alice"]) == "At Work"

    async with AsyncSessionLocal() as session:
        project = await session.get(Project, created.id)

    assert project.completed is False
    assert project.completed_at is None


@pytest.mark.asyncio
async def test_completed_at_is_stamped_by_server_and_kept(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        created = await manager.create(create_request(staff))

        await manager.update(
            created.id,
            update_request(staff, completed=True, completed_at="2020-01-01"),
        )
        project = await session.get(Project, created.id)
        stamped = project.completed_at
        assert stamped is not None
        assert stamped.date() == TODAY

        clock.advance(days=2)
        await manager.update(
            created.id,
            update_request(staff, completed=True, description="Handover done"),
        )
        assert project.completed_at == stamped

        await manager.update(created.id, update_request(staff, completed=False))
        assert project.completed_at is None


# --------------------------------------------------------------------------
# Delete
# --------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_delete_frees_users_not_active_elsewhere(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        target = await manager.create(
            create_request(staff, assigned_users=[staff["alice"], staff["bob"]])
        )
        await manager.create(
            create_request(
                staff,
                name="Bob's other job",
                client=staff["client_b"],
                assigned_users=[staff["bob"]],
            )
        )

        result = await manager.delete(target.id)

        assert result.message == f"Project 'Warehouse fit-out' with ID {target.id} deleted"
        assert await user_status(session, staff["alice"]) == "Available"
        assert await user_status(session, staff["bob"]) == "At Work"
        assert len(await ledger_entries(session, staff["alice"])) == 1
        assert await session.get(Project, target.id) is None


@pytest.mark.asyncio
async def test_delete_unknown_project_is_not_found(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)

        with pytest.raises(NotFoundError):
            await manager.delete(4242)


# --------------------------------------------------------------------------
# End to end
# --------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_then_complete_amends_same_day_entry(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock)
        created = await manager.create(
            create_request(staff, start_date="2024-01-01", deadline=None)
        )

        assert await user_status(session, staff["alice"]) == "At Work"
        entries = await ledger_entries(session, staff["alice"])
        assert [(e.status_date, e.status) for e in entries] == [(TODAY, "At Work")]

        clock.advance(hours=3)
        await manager.update(
            created.id,
            update_request(staff, start_date="2024-01-01", deadline=None, completed=True),
        )

        assert await user_status(session, staff["alice"]) == "Available"
        entries = await ledger_entries(session, staff["alice"])
        assert [(e.status_date, e.status) for e in entries] == [(TODAY, "Available")]

    async with AsyncSessionLocal() as session:
        project = await session.get(Project, created.id)

    assert project.completed is True
    assert project.completed_at == clock.now()
    assert project.completed_at.tzinfo == timezone.utc


# --------------------------------------------------------------------------
# Status resolution order on update
# --------------------------------------------------------------------------


def test_resolution_future_start_overrides_everything():
    for order in StatusResolutionOrder:
        status = resolve_update_status(
            start_date=TODAY + timedelta(days=1),
            completed=False,
            confirmed=True,
            today=TODAY,
            order=order,
        )
        assert status is UserStatus.AVAILABLE


def test_resolution_confirmed_today_wins_only_when_configured():
    kwargs = dict(start_date=TODAY, completed=True, confirmed=True, today=TODAY)

    assert (
        resolve_update_status(order=StatusResolutionOrder.CONFIRMED_FIRST, **kwargs)
        is UserStatus.AT_WORK
    )
    assert (
        resolve_update_status(order=StatusResolutionOrder.LEGACY, **kwargs)
        is UserStatus.AVAILABLE
    )


def test_resolution_completed_based_default():
    past = date(2024, 1, 1)

    assert (
        resolve_update_status(start_date=past, completed=True, confirmed=False, today=TODAY)
        is UserStatus.AVAILABLE
    )
    assert (
        resolve_update_status(start_date=past, completed=False, confirmed=False, today=TODAY)
        is UserStatus.AT_WORK
    )


@pytest.mark.asyncio
async def test_legacy_order_lets_completion_overwrite_confirmation(staff, clock):
    async with AsyncSessionLocal() as session:
        manager = build_manager(session, clock, order=StatusResolutionOrder.LEGACY)
        created = await manager.create(
            create_request(staff, start_date=TODAY.isoformat())
        )

        await manager.update(
            created.id,
            update_request(
                staff, start_date=TODAY.isoformat(), completed=True, confirmed=True
            ),
        )

        assert await user_status(session, staff["alice"]) == "Available"
