# app/services/status_ledger.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.core.logging import get_logger
from app.models.status_history import StatusHistoryEntry
from app.models.user import User
from app.repositories.staffing import DayWindow, StaffingRepository
from app.schemas.status_history import UserStatus

logger = get_logger(__name__)


def day_window(as_of: datetime) -> DayWindow:
    """Calendar day containing `as_of`, in `as_of`'s own timezone."""
    start = as_of.replace(hour=0, minute=0, second=0, microsecond=0)
    return DayWindow(start=start, end=start + timedelta(hours=24))


async def record_status(
    repository: StaffingRepository,
    user: User,
    status: UserStatus,
    as_of: datetime,
) -> StatusHistoryEntry:
    """
    Record `status` as the user's status for the day of `as_of`.

    At most one ledger entry exists per user and day: if one is already
    there it is amended (status and timestamp), otherwise a new entry is
    inserted. The user's live `status` field is updated in the same call.
    """
    window = day_window(as_of)
    status_value = status.value if isinstance(status, UserStatus) else str(status)

    entry = await repository.find_latest_status_entry(user.id, window)

    if entry is None:
        entry = StatusHistoryEntry(
            user_id=user.id,
            status_date=window.day,
        )
        action = "inserted"
    else:
        action = "amended"

    entry.status = status_value
    entry.timestamp = as_of.astimezone(timezone.utc)
    await repository.save_status_entry(entry)

    user.status = status_value
    await repository.save_user(user)

    logger.debug(
        "status_recorded",
        user_id=user.id,
        status=status_value,
        status_date=window.day.isoformat(),
        action=action,
    )
    return entry
