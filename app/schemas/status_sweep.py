# app/schemas/status_sweep.py
from datetime import date

from pydantic import BaseModel, Field


class DailySweepSummary(BaseModel):
    """
    Summary payload returned by the /internal/run-status-sweep endpoint.
    """

    sweep_date: date = Field(
        ...,
        description="The day for which statuses were re-evaluated.",
        examples=["2025-11-14"],
    )
    active_projects: int = Field(
        ...,
        description="Number of started, not yet completed projects considered.",
        examples=[4],
    )
    users_updated: int = Field(
        ...,
        description="Users whose status was written to the ledger in this run.",
        examples=[9],
    )
    users_skipped: int = Field(
        ...,
        description="Users left untouched because another active project owns their status.",
        examples=[0],
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Per-user failures collected during the run.",
    )
