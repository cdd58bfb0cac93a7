# app/schemas/availability_report.py
from datetime import date

from pydantic import BaseModel, Field


class UserAvailabilitySummary(BaseModel):
    """
    Per-user summary of recorded work status over a given date range.
    """

    user_id: int = Field(
        ...,
        description="Numeric identifier of the user.",
        examples=[3],
    )
    username: str = Field(
        ...,
        description="Login name of the user.",
        examples=["jdoe"],
    )

    start_date: date = Field(
        ...,
        description="Start date (inclusive) of the reporting window.",
        examples=["2025-11-10"],
    )
    end_date: date = Field(
        ...,
        description="End date (inclusive) of the reporting window.",
        examples=["2025-11-16"],
    )

    total_days: int = Field(
        ...,
        description=(
            "Number of days in the range for which a status history entry "
            "exists for this user."
        ),
        examples=[5],
    )

    at_work_days: int = Field(
        ...,
        description="Number of days where the recorded status was 'At Work'.",
        examples=[4],
    )
    available_days: int = Field(
        ...,
        description="Number of days where the recorded status was 'Available'.",
        examples=[1],
    )
    other_days: int = Field(
        ...,
        description="Number of days carrying a status label set outside the engine.",
        examples=[0],
    )

    utilization_pct: float = Field(
        ...,
        description=(
            "Utilization percentage, computed as: at_work_days / total_days * 100. "
            "If total_days is zero, this will be 0.0."
        ),
        examples=[80.0],
    )


class AvailabilitySummary(BaseModel):
    """
    Aggregated availability summary across all users with ledger entries.
    """

    start_date: date = Field(
        ...,
        description="Start date (inclusive) of the reporting window.",
    )
    end_date: date = Field(
        ...,
        description="End date (inclusive) of the reporting window.",
    )

    users: list[UserAvailabilitySummary] = Field(
        ...,
        description="Per-user summaries for the given date range.",
    )
