"""Core docchrono data models."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union


@dataclass(slots=True, frozen=True, order=True)
class CalendarDate:
    """A (year, month, day) value with no time of day and no offset.

    Ordering compares year, then month, then day.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        # Raises ValueError for impossible dates such as 2023-02-30.
        dt.date(self.year, self.month, self.day)

    @classmethod
    def from_date(cls, value: dt.date) -> CalendarDate:
        """Build from a ``date``; a ``datetime`` contributes only its date part."""
        if isinstance(value, dt.datetime):
            value = value.date()
        return cls(value.year, value.month, value.day)

    @classmethod
    def from_iso(cls, text: str) -> CalendarDate:
        """Parse a ``YYYY-MM-DD`` string."""
        return cls.from_date(dt.date.fromisoformat(text.strip()))

    @classmethod
    def today(cls) -> CalendarDate:
        return cls.from_date(dt.date.today())

    def to_date(self) -> dt.date:
        return dt.date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(slots=True, frozen=True)
class Absent:
    """The field is not present in the metadata block."""


@dataclass(slots=True, frozen=True)
class InvalidType:
    """The field is present but does not hold a date."""

    raw: Any = None


@dataclass(slots=True, frozen=True)
class DateValue:
    """The field holds a calendar date."""

    date: CalendarDate


FieldValue = Union[Absent, InvalidType, DateValue]

ABSENT = Absent()


@dataclass(slots=True)
class Reconciliation:
    """Outcome of reconciling a document's ``date`` and ``updated`` fields."""

    date: CalendarDate
    updated: Optional[CalendarDate]
    changed: bool
    warnings: List[str] = field(default_factory=list)
