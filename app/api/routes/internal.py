# app/api/routes/internal.py
from http import HTTPStatus

from fastapi import APIRouter, Depends

from app.api.dependencies.internal_auth import verify_internal_api_key
from app.api.dependencies.services import get_clock, get_repository
from app.core.clock import Clock
from app.repositories.staffing import SqlAlchemyStaffingRepository
from app.schemas.status_sweep import DailySweepSummary
from app.services.daily_status_sweep import run_daily_status_sweep

router = APIRouter(
    prefix="/internal",
    tags=["Internal"],
    dependencies=[Depends(verify_internal_api_key)],
)


@router.post(
    "/run-status-sweep",
    response_model=DailySweepSummary,
    status_code=HTTPStatus.OK,
    summary="Re-evaluate every user's work status for today",
    description=(
        "Marks users on started, open projects as `At Work` and releases users "
        "left `At Work` without any active project. Projects created with a "
        "future `start_date` start occupying their team once this runs on or "
        "after that date.\n\n"
        "Intended to be called once per day from a cron job or scheduler and "
        "protected via the `X-Internal-Api-Key` header when configured. "
        "Running it twice on the same day is harmless."
    ),
    responses={
        401: {
            "description": "Missing or invalid internal API key (if configured).",
        },
    },
)
async def trigger_status_sweep(
    repository: SqlAlchemyStaffingRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
) -> DailySweepSummary:
    return await run_daily_status_sweep(repository, clock)
