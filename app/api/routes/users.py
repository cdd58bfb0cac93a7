# app/api/routes/users.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models.status_history import StatusHistoryEntry
from app.models.user import User
from app.schemas.availability_report import UserAvailabilitySummary
from app.schemas.status_history import StatusHistoryEntryRead
from app.services.availability_report import compute_user_availability

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/{user_id}/status-history",
    response_model=list[StatusHistoryEntryRead],
    status_code=HTTPStatus.OK,
    summary="List status history for a user",
    description=(
        "Return the day-wise status ledger of a user, optionally filtered by "
        "a date range.\n\n"
        "Each day carries at most one entry: the last status computed for the "
        "user on that day.\n\n"
        "- If `from_date` and `to_date` are both omitted, all entries are returned.\n"
        "- If only `from_date` is provided, entries from that date onwards are returned.\n"
        "- If only `to_date` is provided, entries up to that date are returned."
    ),
)
async def list_user_status_history(
    user_id: int = Path(..., description="Numeric ID of the user.", examples=[3]),
    from_date: date_type | None = Query(
        default=None,
        description="Start date (inclusive) in ISO format (YYYY-MM-DD).",
    ),
    to_date: date_type | None = Query(
        default=None,
        description="End date (inclusive) in ISO format (YYYY-MM-DD).",
    ),
    db: AsyncSession = Depends(get_db),
) -> list[StatusHistoryEntryRead]:
    user = await db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"User with id={user_id} not found.",
        )

    conditions = [StatusHistoryEntry.user_id == user_id]
    if from_date is not None:
        conditions.append(StatusHistoryEntry.status_date >= from_date)
    if to_date is not None:
        conditions.append(StatusHistoryEntry.status_date <= to_date)

    stmt = (
        select(StatusHistoryEntry)
        .where(and_(*conditions))
        .order_by(StatusHistoryEntry.status_date.asc())
    )
    result = await db.execute(stmt)

    return [StatusHistoryEntryRead.model_validate(entry) for entry in result.scalars().all()]


@router.get(
    "/{user_id}/availability",
    response_model=UserAvailabilitySummary,
    status_code=HTTPStatus.OK,
    summary="Get availability summary for a user",
    description=(
        "Count the days a user was `At Work` or `Available` over an inclusive "
        "date range, with a utilization percentage.\n\n"
        "If the user exists but has no entries in the range, a summary with "
        "`total_days = 0` is returned."
    ),
)
async def get_user_availability(
    user_id: int = Path(..., description="Numeric ID of the user."),
    from_date: date_type = Query(..., description="Start date (inclusive)."),
    to_date: date_type = Query(..., description="End date (inclusive)."),
    db: AsyncSession = Depends(get_db),
) -> UserAvailabilitySummary:
    try:
        return await compute_user_availability(
            db=db,
            user_id=user_id,
            start_date=from_date,
            end_date=to_date,
        )
    except LookupError:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"User with id={user_id} not found.",
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=str(exc),
        )
