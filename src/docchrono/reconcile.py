"""Date reconciliation for the ``date`` and ``updated`` metadata fields.

Rules:

1. ``date`` is the original publish date. It must exist and be today or
   earlier. When it is missing it is taken from the last recorded edit, or
   today if the document has never been committed.
2. ``updated`` is only present when the document changed on a later day than
   ``date``. It marks the document for review rather than recording the exact
   edit day, so an existing value is kept as long as it is not older than the
   last edit.

``reconcile`` is a pure function: "today" is always passed in by the caller.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from docchrono.errors import FutureLastEditError
from docchrono.models import (
    Absent,
    CalendarDate,
    DateValue,
    FieldValue,
    InvalidType,
    Reconciliation,
)


def sanitize(
    date_field: FieldValue,
    updated_field: FieldValue,
    today: CalendarDate,
) -> Tuple[Optional[CalendarDate], Optional[CalendarDate], List[str]]:
    """Normalize raw field values before they go through the decision table.

    Returns the working ``date`` and ``updated`` values and a warning for
    every value that had to be corrected.
    """
    warnings: List[str] = []

    date: Optional[CalendarDate] = None
    if isinstance(date_field, DateValue):
        date = date_field.date
    elif isinstance(date_field, InvalidType):
        warnings.append(f"Non date value found for `date` ({date_field.raw!r}), ignoring it")

    updated: Optional[CalendarDate] = None
    if isinstance(updated_field, DateValue):
        updated = updated_field.date
    elif isinstance(updated_field, InvalidType):
        warnings.append(
            f"Non date value found for `updated` ({updated_field.raw!r}), setting it to today"
        )
        updated = today

    if date is not None and updated is not None and updated < date:
        warnings.append(
            f"`updated` ({updated}) is before `date` ({date}), setting `updated` to today"
        )
        updated = today

    if date is not None and date > today:
        warnings.append(f"`date` ({date}) is in the future, ignoring it")
        date = None

    if updated is not None and updated > today:
        warnings.append(f"`updated` ({updated}) is in the future, setting it to today")
        updated = today

    return date, updated, warnings


def decide(
    last_edit: Optional[CalendarDate],
    date: Optional[CalendarDate],
    updated: Optional[CalendarDate],
    today: CalendarDate,
) -> Tuple[CalendarDate, Optional[CalendarDate]]:
    """Pick the new ``(date, updated)`` pair from sanitized inputs."""
    match (last_edit, date, updated):
        case (None, None, _):
            return today, None
        case (None, CalendarDate() as d, _):
            return d, (None if d == today else today)
        case (CalendarDate() as last, None, _):
            return last, (None if last == today else today)
        case (CalendarDate() as last, CalendarDate() as d, None):
            return d, (None if last <= d else today)
        case (CalendarDate() as last, CalendarDate() as d, CalendarDate() as u):
            if d == today:
                return d, None
            if last <= u:
                return d, u
            return d, today
    raise TypeError(f"Unexpected reconciliation inputs: {(last_edit, date, updated)!r}")


def _is_same(original: FieldValue, new: Optional[CalendarDate]) -> bool:
    if isinstance(original, Absent):
        return new is None
    if isinstance(original, DateValue):
        return new is not None and original.date == new
    return False


def reconcile(
    last_edit: Optional[CalendarDate],
    date_field: FieldValue,
    updated_field: FieldValue,
    today: CalendarDate,
) -> Reconciliation:
    """Compute the ``date`` and ``updated`` values a document should carry.

    Raises ``FutureLastEditError`` if ``last_edit`` is after ``today``.
    """
    if last_edit is not None and last_edit > today:
        raise FutureLastEditError(last_edit, today)

    date, updated, warnings = sanitize(date_field, updated_field, today)
    new_date, new_updated = decide(last_edit, date, updated, today)

    # A missing or non date ``date`` always counts as a change.
    changed = not (_is_same(date_field, new_date) and _is_same(updated_field, new_updated))
    return Reconciliation(
        date=new_date,
        updated=new_updated,
        changed=changed,
        warnings=warnings,
    )
