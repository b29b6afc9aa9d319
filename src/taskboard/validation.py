"""Input validation and coercion for board operations."""

from datetime import date, datetime
from typing import Any

from taskboard.errors import ValidationError
from taskboard.models import Status


def clean_name(name: Any) -> str:
    """Return the stripped name, rejecting empty or non-string values."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name must be a non-empty string")
    return name.strip()


def clean_details(details: Any) -> str | None:
    if details is None:
        return None
    if not isinstance(details, str):
        raise ValidationError("Details must be a string")
    return details


def parse_due_date(value: Any) -> date | None:
    """Coerce a due date to a ``date``.

    Accepts ``None``, a ``date`` or a ``YYYY-MM-DD`` string. Datetimes are rejected
    because due dates carry no time component.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        raise ValidationError("Due date must be a calendar date without time")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            if len(value) != 10:
                raise ValueError(value)
            return date.fromisoformat(value)
        except ValueError as e:
            raise ValidationError(f"Malformed due date {value!r}, expected YYYY-MM-DD") from e
    raise ValidationError(f"Unsupported due date value: {value!r}")


def format_due_date(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_status(value: Any) -> Status:
    """Coerce a status by value ("In Progress") or by name ("in_progress")."""
    if isinstance(value, Status):
        return value
    if isinstance(value, str):
        try:
            return Status(value)
        except ValueError:
            pass
        try:
            return Status[value.strip().upper().replace(" ", "_").replace("-", "_")]
        except KeyError:
            pass
    allowed = ", ".join(s.value for s in Status)
    raise ValidationError(f"Invalid status {value!r}, expected one of: {allowed}")


def check_order(order: Any) -> int:
    # bool is an int subclass; True is not a position
    if isinstance(order, bool) or not isinstance(order, int):
        raise ValidationError(f"Order must be an integer, got {order!r}")
    if order < 0:
        raise ValidationError(f"Order must be non-negative, got {order}")
    return order


def check_completed(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"Completed must be a boolean, got {value!r}")
    return value
