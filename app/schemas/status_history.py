# app/schemas/status_history.py
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserStatus(str, Enum):
    """
    Work status written by the status engine.

    Users may carry other free-text labels set elsewhere; the engine only
    ever writes these two.
    """

    AVAILABLE = "Available"
    AT_WORK = "At Work"


class StatusHistoryEntryRead(BaseModel):
    """
    Public representation of a status history ledger entry.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1], description="Database identifier of the entry.")
    user_id: int = Field(
        ...,
        examples=[7],
        description="Identifier of the user whose status was recorded.",
    )
    status: str = Field(
        ...,
        description="Last status computed for the user on that day.",
        examples=["At Work"],
    )
    status_date: date = Field(
        ...,
        description="Calendar day the entry covers.",
        examples=["2025-11-14"],
    )
    timestamp: datetime = Field(
        ...,
        description="Instant of the latest status computation on that day.",
    )
