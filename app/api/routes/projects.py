# app/api/routes/projects.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.services import get_project_lifecycle
from app.api.errors import to_http_exception
from app.core.errors import NoOpUpdate, StaffingError
from app.db.session import get_db
from app.models.project import Project
from app.schemas.project import (
    ProjectCreate,
    ProjectMutationResult,
    ProjectRead,
    ProjectUpdate,
)
from app.services.project_lifecycle import ProjectLifecycleManager

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post(
    "",
    response_model=ProjectMutationResult,
    status_code=HTTPStatus.CREATED,
    summary="Create a new project",
    description=(
        "Register a new project for a client and staff it with users.\n\n"
        "If `start_date` is today or in the past, every assigned user is marked "
        "`At Work` (unless another active project already owns their status). "
        "Projects starting in the future do not change anyone's status.\n\n"
        "Only one project may exist per client and start date."
    ),
    responses={
        201: {
            "description": "Project successfully created.",
            "content": {
                "application/json": {
                    "example": {
                        "id": 1,
                        "message": "New project created",
                        "warnings": [],
                    }
                }
            },
        },
        400: {"description": "Malformed date or invalid assigned users."},
        404: {"description": "Client, team leader or an assigned user does not exist."},
        409: {
            "description": "A project for this client and start date already exists.",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "A project for client 1 starting on 2025-11-17 already exists.",
                    }
                }
            },
        },
    },
)
async def create_project(
    payload: ProjectCreate,
    lifecycle: ProjectLifecycleManager = Depends(get_project_lifecycle),
) -> ProjectMutationResult:
    """
    Create a project and propagate the team's work status.
    """
    try:
        return await lifecycle.create(payload)
    except StaffingError as exc:
        raise to_http_exception(exc)


@router.get(
    "",
    response_model=list[ProjectRead],
    summary="List projects",
    description=(
        "Return all projects.\n\n"
        "The optional `completed` filter restricts the list to completed or "
        "open projects."
    ),
)
async def list_projects(
    completed: bool | None = Query(
        default=None,
        description=(
            "If true, returns only completed projects. If false, returns only "
            "open projects. If omitted, returns all."
        ),
    ),
    db: AsyncSession = Depends(get_db),
) -> list[ProjectRead]:
    """
    Fetch all projects, optionally filtered by completion.
    """
    stmt = select(Project)
    if completed is not None:
        stmt = stmt.where(Project.completed.is_(completed))

    result = await db.execute(stmt.order_by(Project.id.asc()))
    projects = result.scalars().all()

    return [ProjectRead.model_validate(p) for p in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project details by ID",
    responses={
        404: {"description": "No project exists with the given ID."},
    },
)
async def get_project(
    project_id: int = Path(..., description="Numeric ID of the project."),
    db: AsyncSession = Depends(get_db),
) -> ProjectRead:
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()

    if project is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Project with id {project_id} not found.",
        )

    return ProjectRead.model_validate(project)


@router.put(
    "/{project_id}",
    response_model=ProjectMutationResult,
    summary="Replace an existing project",
    description=(
        "Full replace: every editable field must be supplied.\n\n"
        "If nothing differs from the stored project and `confirmed` is not "
        "true, the request is a no-op and answers 204 without touching any "
        "user status.\n\n"
        "Otherwise the team's status is recomputed: completed projects free "
        "their users, open ones occupy them, and projects starting in the "
        "future free them. Users removed from the team are freed unless "
        "another active project holds them. `completed_at` is stamped by the "
        "server when `completed` becomes true."
    ),
    responses={
        204: {"description": "Nothing new to update."},
        400: {"description": "Malformed date or invalid assigned users."},
        404: {"description": "Project, client or a user does not exist."},
        409: {"description": "Another project already uses this client and start date."},
    },
)
async def update_project(
    payload: ProjectUpdate,
    project_id: int = Path(..., description="Numeric ID of the project to update."),
    lifecycle: ProjectLifecycleManager = Depends(get_project_lifecycle),
):
    try:
        return await lifecycle.update(project_id, payload)
    except NoOpUpdate:
        return Response(status_code=HTTPStatus.NO_CONTENT)
    except StaffingError as exc:
        raise to_http_exception(exc)


@router.delete(
    "/{project_id}",
    response_model=ProjectMutationResult,
    summary="Delete a project",
    description=(
        "Delete a project after freeing its assigned users. Users still "
        "staffed on another active project keep their status."
    ),
    responses={
        404: {"description": "No project exists with the given ID."},
    },
)
async def delete_project(
    project_id: int = Path(..., description="Numeric ID of the project to delete."),
    lifecycle: ProjectLifecycleManager = Depends(get_project_lifecycle),
) -> ProjectMutationResult:
    try:
        return await lifecycle.delete(project_id)
    except StaffingError as exc:
        raise to_http_exception(exc)
