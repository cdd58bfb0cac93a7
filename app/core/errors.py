# app/core/errors.py
"""
Domain errors raised by the status engine and project lifecycle services.

Routers translate these into HTTP responses; services never build
HTTPExceptions themselves.
"""


class StaffingError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StaffingError):
    """Bad or missing input. The message names the offending field."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(StaffingError):
    """A referenced project, user or client does not exist."""


class ConflictError(StaffingError):
    """A project already exists for the same client and start date."""


class NoOpUpdate(StaffingError):
    """
    Update request carried no change and no forcing confirmation.

    Not a failure: the caller answers with "nothing to do" (HTTP 204).
    """

    def __init__(self, project_id: int) -> None:
        super().__init__(f"Nothing new to update for project {project_id}.")
        self.project_id = project_id
