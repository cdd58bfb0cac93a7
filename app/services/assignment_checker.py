# app/services/assignment_checker.py
from __future__ import annotations

from datetime import datetime

from app.repositories.staffing import ProjectFilter, StaffingRepository


async def is_assigned_elsewhere(
    repository: StaffingRepository,
    user_id: int,
    exclude_project_id: int | None,
    as_of: datetime,
) -> bool:
    """
    Return True if the user is staffed on another active project.

    A project counts when it is not `exclude_project_id`, lists the user among
    its assigned users, is not completed, and has already started on the day
    of `as_of`.
    """
    projects = await repository.find_projects(
        ProjectFilter(
            exclude_id=exclude_project_id,
            assigned_user_id=user_id,
            completed=False,
            start_date_lte=as_of.date(),
        )
    )
    return len(projects) > 0
