# app/api/routes/health.py
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.api.dependencies.services import get_clock
from app.core.clock import Clock
from app.core.config import get_settings


router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Liveness payload, plus the calendar context the status engine runs with.
    """

    status: str = Field(..., examples=["ok"])
    app_name: str = Field(..., examples=["Staffing Status Service"])
    environment: str = Field(
        ...,
        description="Current deployment environment (local/dev/stage/prod).",
        examples=["local"],
    )
    timestamp_utc: datetime
    status_timezone: str = Field(
        ...,
        description="Timezone in which 'today' and ledger days are computed.",
        examples=["Europe/Athens"],
    )
    status_date: date = Field(
        ...,
        description="What the status engine currently considers 'today'.",
    )
    resolution_order: str = Field(
        ...,
        description="Precedence used for the confirmed/starts-today update rule.",
        examples=["confirmed_first"],
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check for the Staffing Status service",
    description=(
        "Lightweight probe for load balancers and uptime checks.\n\n"
        "Also reports the engine's notion of 'today', which is handy when "
        "statuses look off around midnight in a non-UTC deployment."
    ),
)
async def health_check(clock: Clock = Depends(get_clock)) -> HealthResponse:
    """
    Does **not** touch the database so it stays green while storage is degraded.
    """
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        timestamp_utc=datetime.now(tz=timezone.utc),
        status_timezone=settings.STATUS_TIMEZONE,
        status_date=clock.today(),
        resolution_order=settings.STATUS_RESOLUTION_ORDER.value,
    )
