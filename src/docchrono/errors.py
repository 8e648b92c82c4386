"""Exception hierarchy for docchrono."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from docchrono.models import CalendarDate


class DocChronoError(Exception):
    """Base class for all docchrono errors."""


class RootPathError(DocChronoError):
    """The root path given for a run does not exist."""


class FutureLastEditError(DocChronoError):
    """Version control reported a last edit after today.

    This means the clock or the history query cannot be trusted, so it aborts
    the whole run instead of a single document.
    """

    def __init__(self, last_edit: CalendarDate, today: CalendarDate) -> None:
        super().__init__(f"Last edit date {last_edit} is after today ({today})")
        self.last_edit = last_edit
        self.today = today


class DocumentError(DocChronoError):
    """A failure confined to one document."""


class NoMetadataBlockFound(DocumentError):
    """The document does not start with a ``+++`` delimited metadata block."""


class MetadataParseError(DocumentError):
    """The metadata block is not valid TOML."""


class UnchangedWriteError(DocumentError):
    """A write was requested for a document that has no changes."""


class VCSError(DocChronoError):
    """Base class for version control failures."""


class VCSQueryError(VCSError):
    """Running git failed or produced output that could not be parsed."""


class NoVCSError(VCSError):
    """The path is not inside a git working tree."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"No git working tree found for {path}")
        self.path = path


class DirtyFilesError(VCSError):
    """The working tree holds changes that are not allowed for a run."""

    def __init__(self, dirty_files: Sequence[str], staged_files: Sequence[str]) -> None:
        lines = ["Uncommitted changes found in the working tree."]
        if dirty_files:
            lines.append("Dirty files:")
            lines.extend(f"  {name}" for name in dirty_files)
        if staged_files:
            lines.append("Staged files:")
            lines.extend(f"  {name}" for name in staged_files)
        lines.append("Commit or stash them, or pass --allow-dirty to continue anyway.")
        super().__init__("\n".join(lines))
        self.dirty_files = list(dirty_files)
        self.staged_files = list(staged_files)
