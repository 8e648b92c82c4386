"""Document record: front matter, body, and the date update workflow."""

from __future__ import annotations

import datetime as dt
import logging
import re
from pathlib import Path
from typing import Optional

import tomlkit
from tomlkit.exceptions import ParseError
from tomlkit.toml_document import TOMLDocument

from docchrono.errors import MetadataParseError, UnchangedWriteError
from docchrono.frontmatter import join_document, split_document
from docchrono.models import (
    ABSENT,
    CalendarDate,
    DateValue,
    FieldValue,
    InvalidType,
    Reconciliation,
)
from docchrono.reconcile import reconcile

LOGGER = logging.getLogger(__name__)

KEY_DATE = "date"
KEY_UPDATED = "updated"

_BARE_LF_RE = re.compile(r"(?<!\r)\n")


def read_field(doc: TOMLDocument, key: str) -> FieldValue:
    """Classify the value stored under ``key`` in a parsed metadata block."""
    if key not in doc:
        return ABSENT
    value = doc[key]
    # Offset datetimes, local datetimes and local dates all carry a calendar day.
    if isinstance(value, dt.date):
        return DateValue(CalendarDate.from_date(value))
    return InvalidType(raw=value)


class Document:
    """A text document split into its metadata block and body."""

    def __init__(self, path: Path, front_matter: str, content: str) -> None:
        self.path = path
        self.front_matter = front_matter
        self.content = content
        self.newline = "\r\n" if front_matter.startswith("\r\n") else "\n"
        self._changed = False

    @classmethod
    def from_text(cls, path: Path, text: str) -> Document:
        front_matter, content = split_document(text)
        return cls(path, front_matter, content)

    @classmethod
    def from_path(cls, path: Path) -> Document:
        """Read and split a document from disk, keeping its line endings."""
        with path.open("r", encoding="utf-8", newline="") as handle:
            text = handle.read()
        return cls.from_text(path, text)

    @property
    def changed(self) -> bool:
        return self._changed

    def _leading_break(self) -> str:
        return self.newline if self.front_matter.startswith(self.newline) else ""

    def _parse(self) -> TOMLDocument:
        # The line break after the opening marker stays outside the TOML text.
        try:
            return tomlkit.parse(self.front_matter[len(self._leading_break()):])
        except ParseError as exc:
            raise MetadataParseError(f"Failed to parse TOML in front matter: {exc}") from exc

    def update_dates(
        self, last_edit: Optional[CalendarDate], today: CalendarDate
    ) -> Reconciliation:
        """Reconcile ``date`` and ``updated`` and rewrite the front matter if needed.

        Values that are already correct are left untouched, so a date that
        carries a time of day keeps it.
        """
        doc = self._parse()
        date_field = read_field(doc, KEY_DATE)
        updated_field = read_field(doc, KEY_UPDATED)

        result = reconcile(last_edit, date_field, updated_field, today)
        for message in result.warnings:
            LOGGER.warning("%s in %s", message, self.path)

        if not result.changed:
            return result

        if date_field != DateValue(result.date):
            doc[KEY_DATE] = result.date.to_date()
        if result.updated is None:
            if KEY_UPDATED in doc:
                del doc[KEY_UPDATED]
        elif updated_field != DateValue(result.updated):
            doc[KEY_UPDATED] = result.updated.to_date()

        text = doc.as_string()
        if self.newline == "\r\n":
            text = _BARE_LF_RE.sub("\r\n", text)
        if text and not text.endswith("\n"):
            text += self.newline
        self.front_matter = self.newline + text
        self._changed = True
        return result

    def render(self) -> str:
        return join_document(self.front_matter, self.content, self.newline)

    def write(self) -> None:
        """Write the document back to disk.

        Only valid after a change; writing an unchanged document raises
        ``UnchangedWriteError`` instead of rewriting the same bytes.
        """
        if not self._changed:
            raise UnchangedWriteError(f"No change detected. Write aborted. Path: {self.path}")
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(self.render())
