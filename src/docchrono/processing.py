"""Walking a document tree and updating each document's dates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from docchrono.config import AppConfig
from docchrono.document import Document
from docchrono.errors import FutureLastEditError, NoVCSError, RootPathError
from docchrono.models import CalendarDate
from docchrono.utils.files import iter_files, should_skip_file
from docchrono.vcs import git_last_edit_date, is_inside_work_tree

LOGGER = logging.getLogger(__name__)

LastEditLookup = Callable[[Path], Optional[CalendarDate]]


def no_history(path: Path) -> Optional[CalendarDate]:
    """Last edit lookup for trees outside version control."""
    return None


@dataclass(slots=True)
class RunStats:
    changed: int = 0
    not_changed: int = 0
    skipped: int = 0
    errors: int = 0

    def increment(self, status: str) -> None:
        if status == "changed":
            self.changed += 1
        elif status == "not_changed":
            self.not_changed += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.errors += 1

    def __str__(self) -> str:
        return (
            f"Changed: {self.changed}, Not Changed: {self.not_changed}, "
            f"Skipped: {self.skipped}, Errors: {self.errors}"
        )


def process_file(
    path: Path,
    *,
    today: CalendarDate,
    last_edit_lookup: LastEditLookup,
    check_only: bool = False,
) -> str:
    """Update one document and return its status (``changed`` or ``not_changed``)."""
    document = Document.from_path(path)
    last_edit = last_edit_lookup(path)
    document.update_dates(last_edit, today)
    if not document.changed:
        return "not_changed"
    if not check_only:
        document.write()
    return "changed"


def walk_directory(
    root: Path,
    config: AppConfig,
    *,
    today: CalendarDate,
    last_edit_lookup: LastEditLookup,
) -> RunStats:
    """Process every file under ``root``.

    Failures are logged and counted per file. A last edit date in the future
    is re-raised because it means no date in this run can be trusted.
    """
    stats = RunStats()
    for path in iter_files(root):
        if should_skip_file(path, extensions=config.extensions, skip_names=config.skip_names):
            stats.increment("skipped")
            LOGGER.debug("(Skipped)     %s", path)
            continue
        try:
            status = process_file(
                path,
                today=today,
                last_edit_lookup=last_edit_lookup,
                check_only=config.check_only,
            )
        except FutureLastEditError:
            raise
        except Exception as exc:
            LOGGER.error("Processing failed for %s: %s", path, exc)
            stats.increment("error")
            continue
        stats.increment(status)
        if status == "changed":
            LOGGER.debug("(Changed)     %s", path)
        else:
            LOGGER.debug("(Not Changed) %s", path)
    return stats


def run(
    config: AppConfig,
    *,
    today: Optional[CalendarDate] = None,
    last_edit_lookup: Optional[LastEditLookup] = None,
    base_dir: Optional[Path] = None,
) -> RunStats:
    """Update the dates of every document under the configured root path.

    ``today`` is fixed once here so every document in the run is judged
    against the same day.
    """
    root = config.resolve_root(base_dir)
    if not root.exists():
        raise RootPathError(f"Root path not found: {root}")

    if today is None:
        today = CalendarDate.today()

    if last_edit_lookup is None:
        if is_inside_work_tree(root):
            last_edit_lookup = git_last_edit_date
        elif config.allow_no_vcs:
            LOGGER.info("%s is not under git, treating every document as never committed", root)
            last_edit_lookup = no_history
        else:
            raise NoVCSError(root)

    LOGGER.info("Updating dates under %s (today is %s)", root, today)
    return walk_directory(root, config, today=today, last_edit_lookup=last_edit_lookup)
