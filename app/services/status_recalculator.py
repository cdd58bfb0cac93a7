# app/services/status_recalculator.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping

from app.core.logging import get_logger
from app.models.user import User
from app.repositories.staffing import StaffingRepository
from app.schemas.status_history import UserStatus
from app.services.assignment_checker import is_assigned_elsewhere
from app.services.status_ledger import record_status

logger = get_logger(__name__)


@dataclass
class RecalculationReport:
    """
    Outcome of a status fan-out over several users.

    - updated: users whose status was written to the ledger
    - skipped: users left alone because another active project owns them
    - failed:  users whose recalculation raised, with the error message
    """

    updated: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)

    @property
    def warnings(self) -> list[str]:
        return [
            f"Status for user {user_id} was not updated: {message}"
            for user_id, message in self.failed.items()
        ]

    def merge(self, other: "RecalculationReport") -> "RecalculationReport":
        self.updated.extend(other.updated)
        self.skipped.extend(other.skipped)
        self.failed.update(other.failed)
        return self


class StatusRecalculator:
    """
    Decides whether a user's status may be written and writes it.

    The conflict rule lives here: a user still staffed on another active
    project keeps whatever status that project gave them. Which status to
    apply otherwise is the caller's decision.
    """

    def __init__(self, repository: StaffingRepository) -> None:
        self.repository = repository

    async def recalculate(
        self,
        user: User,
        desired_status: UserStatus,
        exclude_project_id: int | None,
        as_of: datetime,
        check_elsewhere: bool = True,
    ) -> bool:
        """
        Apply `desired_status` unless the user is assigned elsewhere.

        Returns True if a ledger write happened.
        """
        if check_elsewhere and await is_assigned_elsewhere(
            self.repository, user.id, exclude_project_id, as_of
        ):
            return False

        await record_status(self.repository, user, desired_status, as_of)
        return True

    async def recalculate_many(
        self,
        plan: Mapping[int, UserStatus],
        exclude_project_id: int | None,
        as_of: datetime,
        check_elsewhere: bool = True,
    ) -> RecalculationReport:
        """
        Recalculate every user in `plan` ({user_id: desired status}).

        Each user runs in its own savepoint so that one failure rolls back
        only that user's writes; siblings still get processed and the failure
        is reported instead of raised.
        """
        report = RecalculationReport()
        if not plan:
            return report

        users = {user.id: user for user in await self.repository.find_users_by_ids(plan)}

        for user_id, desired_status in plan.items():
            user = users.get(user_id)
            if user is None:
                report.failed[user_id] = "user not found"
                logger.warning(
                    "status_recalculation_user_missing",
                    user_id=user_id,
                    project_id=exclude_project_id,
                )
                continue

            try:
                async with self.repository.savepoint():
                    written = await self.recalculate(
                        user,
                        desired_status,
                        exclude_project_id,
                        as_of,
                        check_elsewhere=check_elsewhere,
                    )
            except Exception as exc:
                report.failed[user_id] = str(exc) or exc.__class__.__name__
                logger.exception(
                    "status_recalculation_failed",
                    user_id=user_id,
                    project_id=exclude_project_id,
                    desired_status=desired_status.value,
                )
                continue

            if written:
                report.updated.append(user_id)
            else:
                report.skipped.append(user_id)

        logger.info(
            "status_recalculation_finished",
            project_id=exclude_project_id,
            updated=len(report.updated),
            skipped=len(report.skipped),
            failed=len(report.failed),
        )
        return report
