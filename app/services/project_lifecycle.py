# app/services/project_lifecycle.py
from __future__ import annotations

from datetime import date as date_type, timezone

from sqlalchemy.exc import IntegrityError

from app.core.clock import Clock
from app.core.config import StatusResolutionOrder
from app.core.errors import ConflictError, NoOpUpdate, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models.project import Project
from app.repositories.staffing import ProjectFilter, StaffingRepository
from app.schemas.project import ProjectCreate, ProjectMutationResult, ProjectUpdate
from app.schemas.status_history import UserStatus
from app.services.dates import parse_date, parse_required_date
from app.services.project_diff import ProjectFields, diff_project
from app.services.status_recalculator import RecalculationReport, StatusRecalculator

logger = get_logger(__name__)


def resolve_update_status(
    *,
    start_date: date_type,
    completed: bool,
    confirmed: bool,
    today: date_type,
    order: StatusResolutionOrder = StatusResolutionOrder.CONFIRMED_FIRST,
) -> UserStatus:
    """
    Status an updated project asks for on behalf of its assigned users.

    Rules, lowest to highest precedence:
    1) completed => Available, otherwise At Work
    2) starts today and confirmed => At Work (CONFIRMED_FIRST only; LEGACY
       lets rule 1 overwrite it)
    3) starts in the future => Available
    """
    status = UserStatus.AVAILABLE if completed else UserStatus.AT_WORK

    if (
        order is StatusResolutionOrder.CONFIRMED_FIRST
        and start_date == today
        and confirmed
    ):
        status = UserStatus.AT_WORK

    if start_date > today:
        status = UserStatus.AVAILABLE

    return status


def _unique_user_ids(user_ids: list[int]) -> list[int]:
    if len(set(user_ids)) != len(user_ids):
        raise ValidationError(
            "assigned_users must not contain the same user twice",
            field="assigned_users",
        )
    return list(user_ids)


class ProjectLifecycleManager:
    """
    Create / update / delete projects and propagate user work status.

    Every operation reads the clock once and uses that instant for all of
    its date comparisons and ledger writes, then commits once. Per-user
    status failures do not abort the operation; they come back as
    `warnings` on the result.
    """

    def __init__(
        self,
        repository: StaffingRepository,
        clock: Clock,
        resolution_order: StatusResolutionOrder = StatusResolutionOrder.CONFIRMED_FIRST,
    ) -> None:
        self.repository = repository
        self.clock = clock
        self.resolution_order = resolution_order
        self.recalculator = StatusRecalculator(repository)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    async def _ensure_references(
        self,
        client_id: int,
        team_leader_id: int,
        assigned_user_ids: list[int],
    ) -> None:
        await self.repository.get_client(client_id)

        wanted = [*assigned_user_ids, team_leader_id]
        found = {user.id for user in await self.repository.find_users_by_ids(wanted)}
        missing = sorted({user_id for user_id in wanted if user_id not in found})
        if missing:
            ids = ", ".join(str(user_id) for user_id in missing)
            raise NotFoundError(f"User(s) with id {ids} not found.")

    async def _ensure_unique_start(
        self,
        client_id: int,
        start_date: date_type,
        exclude_project_id: int | None = None,
    ) -> None:
        duplicates = await self.repository.find_projects(
            ProjectFilter(
                client_id=client_id,
                start_date_eq=start_date,
                exclude_id=exclude_project_id,
            )
        )
        if duplicates:
            raise ConflictError(
                f"A project for client {client_id} starting on "
                f"{start_date.isoformat()} already exists."
            )

    async def _persist(self, project: Project) -> None:
        try:
            await self.repository.save_project(project)
        except IntegrityError:
            await self.repository.rollback()
            raise ConflictError(
                f"A project for client {project.client_id} starting on "
                f"{project.start_date.isoformat()} already exists."
            ) from None

    def _log_report(self, event: str, project_id: int, report: RecalculationReport) -> None:
        if report.failed:
            logger.warning(
                f"{event}_partial_status_failure",
                project_id=project_id,
                failed_user_ids=sorted(report.failed),
            )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create(self, payload: ProjectCreate) -> ProjectMutationResult:
        """
        Create a project and occupy its team if it has already started.

        Future-dated projects leave every assigned user's status alone.
        """
        deadline = parse_date(payload.deadline, "deadline")
        start_date = parse_required_date(payload.start_date, "start_date")
        assigned = _unique_user_ids(payload.assigned_users)

        await self._ensure_references(payload.client, payload.team_leader, assigned)
        await self._ensure_unique_start(payload.client, start_date)

        now = self.clock.now()

        project = Project(
            name=payload.name,
            description=payload.description,
            service_type=payload.service_type,
            deadline=deadline,
            start_date=start_date,
            completed=payload.completed,
            completed_at=now.astimezone(timezone.utc) if payload.completed else None,
            confirmed=payload.confirmed,
            client_id=payload.client,
            team_leader_id=payload.team_leader,
        )
        project.assign_users(assigned)
        await self._persist(project)

        report = RecalculationReport()
        if start_date <= now.date():
            report = await self.recalculator.recalculate_many(
                {user_id: UserStatus.AT_WORK for user_id in assigned},
                exclude_project_id=project.id,
                as_of=now,
            )

        await self.repository.commit()

        logger.info(
            "project_created",
            project_id=project.id,
            client_id=project.client_id,
            start_date=start_date.isoformat(),
            assigned_users=len(assigned),
        )
        self._log_report("project_created", project.id, report)

        return ProjectMutationResult(
            id=project.id,
            message="New project created",
            warnings=report.warnings,
        )

    async def update(self, project_id: int, payload: ProjectUpdate) -> ProjectMutationResult:
        """
        Replace every editable field of a project and recompute statuses.

        Raises NoOpUpdate when nothing differs from the stored project and
        `confirmed` is not asserted; no status is touched in that case.
        """
        deadline = parse_date(payload.deadline, "deadline")
        start_date = parse_required_date(payload.start_date, "start_date")
        if payload.completed:
            # Format check only: completion time is stamped by the server.
            parse_date(payload.completed_at, "completed_at")
        assigned = _unique_user_ids(payload.assigned_users)

        project = await self.repository.get_project(project_id)
        await self._ensure_references(payload.client, payload.team_leader, assigned)

        proposed = ProjectFields(
            name=payload.name,
            description=payload.description,
            service_type=payload.service_type,
            deadline=deadline,
            start_date=start_date,
            completed=payload.completed,
            client_id=payload.client,
            team_leader_id=payload.team_leader,
            assigned_user_ids=tuple(assigned),
            confirmed=payload.confirmed,
        )
        changes = diff_project(project, proposed)

        if not changes.has_changes and payload.confirmed is not True:
            logger.info("project_update_noop", project_id=project_id)
            raise NoOpUpdate(project_id)

        if {"client_id", "start_date"} & set(changes.changed_fields):
            await self._ensure_unique_start(
                payload.client, start_date, exclude_project_id=project.id
            )

        now = self.clock.now()
        confirmed = project.confirmed if payload.confirmed is None else payload.confirmed

        desired = resolve_update_status(
            start_date=start_date,
            completed=payload.completed,
            confirmed=confirmed,
            today=now.date(),
            order=self.resolution_order,
        )

        plan: dict[int, UserStatus] = {user_id: desired for user_id in assigned}
        for user_id in changes.removed_user_ids:
            plan[user_id] = UserStatus.AVAILABLE

        report = await self.recalculator.recalculate_many(
            plan,
            exclude_project_id=project.id,
            as_of=now,
        )

        if payload.completed and not project.completed:
            project.completed_at = now.astimezone(timezone.utc)
        elif not payload.completed:
            project.completed_at = None

        project.name = payload.name
        project.description = payload.description
        project.service_type = payload.service_type
        project.deadline = deadline
        project.start_date = start_date
        project.completed = payload.completed
        project.confirmed = confirmed
        project.client_id = payload.client
        project.team_leader_id = payload.team_leader
        project.assign_users(assigned)

        await self._persist(project)
        await self.repository.commit()

        logger.info(
            "project_updated",
            project_id=project.id,
            changed_fields=list(changes.changed_fields),
            added_users=list(changes.added_user_ids),
            removed_users=list(changes.removed_user_ids),
            desired_status=desired.value,
        )
        self._log_report("project_updated", project.id, report)

        return ProjectMutationResult(
            id=project.id,
            message=f"'{project.name}' updated",
            warnings=report.warnings,
        )

    async def delete(self, project_id: int) -> ProjectMutationResult:
        """
        Free the project's team (where no other project holds them) and
        remove the project.
        """
        project = await self.repository.get_project(project_id)
        assigned = list(project.assigned_user_ids)
        name = project.name

        now = self.clock.now()
        report = await self.recalculator.recalculate_many(
            {user_id: UserStatus.AVAILABLE for user_id in assigned},
            exclude_project_id=project.id,
            as_of=now,
        )

        await self.repository.delete_project(project)
        await self.repository.commit()

        logger.info("project_deleted", project_id=project_id, assigned_users=len(assigned))
        self._log_report("project_deleted", project_id, report)

        return ProjectMutationResult(
            id=project_id,
            message=f"Project '{name}' with ID {project_id} deleted",
            warnings=report.warnings,
        )
