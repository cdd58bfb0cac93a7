# app/api/routes/reports.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.availability_report import AvailabilitySummary
from app.services.availability_report import compute_availability_summary

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


@router.get(
    "/availability",
    response_model=AvailabilitySummary,
    status_code=HTTPStatus.OK,
    summary="Get availability summary for all users",
    description=(
        "Return an availability summary for every user with status history "
        "in the given window.\n\n"
        "The range is **inclusive** of both `from_date` and `to_date`.\n\n"
        "For each user, the report includes:\n"
        "- Total number of days with a ledger entry in the range\n"
        "- Count of days `At Work`, `Available` and with any other label\n"
        "- Utilization percentage = at_work_days / total_days * 100\n\n"
        "This endpoint is read-only and intended for staffing dashboards."
    ),
    responses={
        200: {
            "description": "Availability summary successfully computed.",
            "content": {
                "application/json": {
                    "example": {
                        "start_date": "2025-11-10",
                        "end_date": "2025-11-16",
                        "users": [
                            {
                                "user_id": 3,
                                "username": "jdoe",
                                "start_date": "2025-11-10",
                                "end_date": "2025-11-16",
                                "total_days": 5,
                                "at_work_days": 4,
                                "available_days": 1,
                                "other_days": 0,
                                "utilization_pct": 80.0,
                            }
                        ],
                    }
                }
            },
        },
        400: {"description": "to_date is before from_date."},
        422: {"description": "Validation error (e.g. missing or invalid dates)."},
    },
)
async def get_availability_report(
    from_date: date_type = Query(
        ...,
        description="Start date (inclusive) of the reporting window (YYYY-MM-DD).",
    ),
    to_date: date_type = Query(
        ...,
        description=(
            "End date (inclusive) of the reporting window (YYYY-MM-DD). "
            "Must be greater than or equal to from_date."
        ),
    ),
    db: AsyncSession = Depends(get_db),
) -> AvailabilitySummary:
    try:
        return await compute_availability_summary(db, start_date=from_date, end_date=to_date)
    except ValueError as exc:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=str(exc),
        )
