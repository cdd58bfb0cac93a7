# app/services/dates.py
from __future__ import annotations

import re
from datetime import date

from app.core.errors import ValidationError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _invalid(field: str) -> ValidationError:
    return ValidationError(
        f"Invalid {field} format. Use ISO 8601 format (YYYY-MM-DD)",
        field=field,
    )


def parse_date(value: str | date | None, field: str) -> date | None:
    """
    Parse an ISO calendar date (YYYY-MM-DD).

    `None` and the empty string mean "not supplied" and yield None. A string
    that matches the pattern but does not denote a real day (e.g.
    "2023-02-30") is rejected just like a malformed one.

    Raises
    ------
    ValidationError
        If the value is supplied but is not a valid calendar date. The
        message names `field`.
    """
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise _invalid(field)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise _invalid(field) from None


def parse_required_date(value: str | date | None, field: str) -> date:
    """Like `parse_date`, but absence is an error too."""
    parsed = parse_date(value, field)
    if parsed is None:
        raise ValidationError(f"{field} is required (YYYY-MM-DD)", field=field)
    return parsed
