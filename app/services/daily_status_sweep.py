# app/services/daily_status_sweep.py
from __future__ import annotations

from app.core.clock import Clock
from app.core.logging import get_logger
from app.repositories.staffing import ProjectFilter, StaffingRepository
from app.schemas.status_history import UserStatus
from app.schemas.status_sweep import DailySweepSummary
from app.services.status_recalculator import StatusRecalculator

logger = get_logger(__name__)


async def run_daily_status_sweep(
    repository: StaffingRepository,
    clock: Clock,
) -> DailySweepSummary:
    """
    Re-evaluate every user's status for the current day.

    Behavior
    --------
    - Users staffed on at least one active project (started, not
      completed) are recorded as At Work. This picks up projects created
      with a future start date once that date arrives.
    - Users currently marked At Work who are on no active project are
      released to Available.
    - Running the sweep twice on the same day amends the same ledger
      entries instead of adding new ones.
    """
    now = clock.now()
    recalculator = StatusRecalculator(repository)

    active_projects = await repository.find_projects(
        ProjectFilter(completed=False, start_date_lte=now.date())
    )

    occupied: dict[int, UserStatus] = {}
    for project in active_projects:
        for user_id in project.assigned_user_ids:
            occupied.setdefault(user_id, UserStatus.AT_WORK)

    # The user's own active project is what makes them At Work here, so the
    # elsewhere rule does not apply.
    report = await recalculator.recalculate_many(
        occupied,
        exclude_project_id=None,
        as_of=now,
        check_elsewhere=False,
    )

    stale = [
        user.id
        for user in await repository.find_users_by_status(UserStatus.AT_WORK.value)
        if user.id not in occupied
    ]
    release_report = await recalculator.recalculate_many(
        {user_id: UserStatus.AVAILABLE for user_id in stale},
        exclude_project_id=None,
        as_of=now,
    )
    report.merge(release_report)

    await repository.commit()

    logger.info(
        "daily_status_sweep_finished",
        sweep_date=now.date().isoformat(),
        active_projects=len(active_projects),
        updated=len(report.updated),
        skipped=len(report.skipped),
        failed=len(report.failed),
    )

    return DailySweepSummary(
        sweep_date=now.date(),
        active_projects=len(active_projects),
        users_updated=len(report.updated),
        users_skipped=len(report.skipped),
        warnings=report.warnings,
    )
