# app/services/availability_report.py
from __future__ import annotations

from collections import defaultdict
from datetime import date as date_type
from typing import Dict, List

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.status_history import StatusHistoryEntry
from app.models.user import User
from app.schemas.availability_report import AvailabilitySummary, UserAvailabilitySummary
from app.schemas.status_history import UserStatus


def _summarize(
    user: User,
    entries: List[StatusHistoryEntry],
    start_date: date_type,
    end_date: date_type,
) -> UserAvailabilitySummary:
    total_days = len(entries)
    at_work = sum(1 for entry in entries if entry.status == UserStatus.AT_WORK.value)
    available = sum(1 for entry in entries if entry.status == UserStatus.AVAILABLE.value)

    if total_days > 0:
        utilization_pct = (at_work / float(total_days)) * 100.0
    else:
        utilization_pct = 0.0

    return UserAvailabilitySummary(
        user_id=user.id,
        username=user.username,
        start_date=start_date,
        end_date=end_date,
        total_days=total_days,
        at_work_days=at_work,
        available_days=available,
        other_days=total_days - at_work - available,
        utilization_pct=round(utilization_pct, 2),
    )


async def compute_availability_summary(
    db: AsyncSession,
    start_date: date_type,
    end_date: date_type,
) -> AvailabilitySummary:
    """
    Compute per-user availability over an inclusive date range.

    Steps
    -----
    1) Fetch all status history entries within [start_date, end_date].
    2) Group them by user.
    3) Count At Work / Available / other days and compute
       utilization_pct = at_work_days / total_days * 100.

    Users without entries in the range do not appear in the result.
    """
    if end_date < start_date:
        raise ValueError("end_date must be greater than or equal to start_date")

    stmt = (
        select(StatusHistoryEntry, User)
        .join(User, StatusHistoryEntry.user_id == User.id)
        .where(
            and_(
                StatusHistoryEntry.status_date >= start_date,
                StatusHistoryEntry.status_date <= end_date,
            )
        )
        .order_by(User.id, StatusHistoryEntry.status_date)
    )

    result = await db.execute(stmt)
    rows: List[tuple[StatusHistoryEntry, User]] = list(result.all())

    users: Dict[int, User] = {}
    entries_by_user: Dict[int, List[StatusHistoryEntry]] = defaultdict(list)
    for entry, user in rows:
        users[user.id] = user
        entries_by_user[user.id].append(entry)

    return AvailabilitySummary(
        start_date=start_date,
        end_date=end_date,
        users=[
            _summarize(users[user_id], entries, start_date, end_date)
            for user_id, entries in entries_by_user.items()
        ],
    )


async def compute_user_availability(
    db: AsyncSession,
    user_id: int,
    start_date: date_type,
    end_date: date_type,
) -> UserAvailabilitySummary:
    """
    Single-user variant of `compute_availability_summary`.

    If the user exists but has no entries in the range, a summary with
    total_days = 0 is returned.
    """
    if end_date < start_date:
        raise ValueError("end_date must be greater than or equal to start_date")

    user = await db.get(User, user_id)
    if user is None:
        raise LookupError(f"User with id={user_id} not found")

    stmt = (
        select(StatusHistoryEntry)
        .where(
            and_(
                StatusHistoryEntry.user_id == user_id,
                StatusHistoryEntry.status_date >= start_date,
                StatusHistoryEntry.status_date <= end_date,
            )
        )
        .order_by(StatusHistoryEntry.status_date)
    )
    result = await db.execute(stmt)
    entries: List[StatusHistoryEntry] = list(result.scalars().all())

    return _summarize(user, entries, start_date, end_date)
