# app/api/errors.py
from http import HTTPStatus

from fastapi import HTTPException

from app.core.errors import ConflictError, NotFoundError, StaffingError, ValidationError

_STATUS_BY_ERROR: dict[type[StaffingError], HTTPStatus] = {
    ValidationError: HTTPStatus.BAD_REQUEST,
    NotFoundError: HTTPStatus.NOT_FOUND,
    ConflictError: HTTPStatus.CONFLICT,
}


def to_http_exception(exc: StaffingError) -> HTTPException:
    """
    Translate a domain error into the HTTPException returned to clients.

    The domain message is passed through verbatim as `detail`.
    """
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=exc.message)
