# app/schemas/project.py

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


# --------------------------------------------------------------------------
# Create schema (POST /projects)
# --------------------------------------------------------------------------

class ProjectCreate(BaseModel):
    """
    Schema for creating a new project.

    Dates travel as ISO strings (YYYY-MM-DD) and are validated by the
    lifecycle manager so that a malformed value is reported with the
    offending field name.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Human-readable project name.",
        examples=["Warehouse fit-out"],
    )
    description: str | None = Field(
        default=None,
        description="Free-form description of the engagement.",
    )
    service_type: str = Field(
        ...,
        min_length=1,
        description="Kind of service delivered (e.g. 'Installation').",
        examples=["Installation"],
    )
    deadline: str | None = Field(
        default=None,
        description="Optional deadline in ISO format (YYYY-MM-DD).",
        examples=["2025-12-31"],
    )
    start_date: str = Field(
        ...,
        description="Date the team starts working, in ISO format (YYYY-MM-DD).",
        examples=["2025-11-17"],
    )
    completed: bool = Field(
        default=False,
        description="Whether the project is already completed.",
    )
    confirmed: bool = Field(
        default=False,
        description="Whether the client confirmed the start date.",
    )
    assigned_users: list[int] = Field(
        ...,
        min_length=1,
        description="Ids of the users staffed on the project, in display order.",
        examples=[[3, 5]],
    )
    client: int = Field(..., description="Id of the client.", examples=[1])
    team_leader: int = Field(..., description="Id of the team leader.", examples=[3])


# --------------------------------------------------------------------------
# Update schema (PUT /projects/{id})
# --------------------------------------------------------------------------

class ProjectUpdate(BaseModel):
    """
    Schema for updating a project.

    Full replace: every editable field must be resupplied. Nullable fields
    are still required keys. `completed_at` is accepted for compatibility
    but never copied; it is stamped by the server when `completed` flips.
    """

    name: str = Field(..., min_length=1)
    description: str | None = Field(...)
    service_type: str = Field(..., min_length=1)
    deadline: str | None = Field(...)
    start_date: str = Field(...)
    completed: bool = Field(...)
    assigned_users: list[int] = Field(..., min_length=1)
    client: int = Field(...)
    team_leader: int = Field(...)
    confirmed: bool | None = Field(
        default=None,
        description=(
            "Optional confirmation flag. When true the update is applied and "
            "statuses are recomputed even if nothing else changed."
        ),
    )
    completed_at: str | None = Field(
        default=None,
        description="Ignored; validated for format only.",
    )


# --------------------------------------------------------------------------
# Read schema (GET /projects, GET /projects/{id})
# --------------------------------------------------------------------------

class ProjectRead(BaseModel):
    """
    Response schema for reading a project.
    Includes the DB-generated and derived fields.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Auto-incremented project ID.", examples=[12])
    name: str
    description: str | None = None
    service_type: str
    deadline: date | None = None
    start_date: date
    completed: bool
    completed_at: datetime | None = Field(
        None,
        description="Instant at which the project was marked completed.",
    )
    confirmed: bool
    client_id: int
    team_leader_id: int
    assigned_user_ids: list[int]

    created_at: datetime | None = Field(
        None,
        description="Timestamp when the project record was created (if available).",
    )
    updated_at: datetime | None = Field(
        None,
        description="Timestamp when the project record was last updated (if available).",
    )


class ProjectMutationResult(BaseModel):
    """
    Outcome of a create / update / delete operation.

    `warnings` lists users whose status could not be recomputed; the project
    write itself succeeded.
    """

    id: int = Field(..., description="Id of the affected project.", examples=[12])
    message: str = Field(..., examples=["New project created"])
    warnings: list[str] = Field(
        default_factory=list,
        description="Partial-failure notes from the per-user status fan-out.",
    )
