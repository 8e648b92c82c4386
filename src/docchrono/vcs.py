"""Git helpers: last edit dates and working tree checks."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from docchrono.errors import DirtyFilesError, NoVCSError, VCSQueryError
from docchrono.models import CalendarDate

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckOptions:
    """Which working tree states are acceptable before files are modified."""

    allow_dirty: bool = False
    allow_no_vcs: bool = False
    allow_staged: bool = True


def _working_dir(path: Path) -> Path:
    return path if path.is_dir() else path.parent


def _run_git(args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise VCSQueryError(f"Failed to execute git: {exc}") from exc


def is_inside_work_tree(path: Path) -> bool:
    """Return True when ``path`` belongs to a git working tree."""
    try:
        output = _run_git(["rev-parse", "--is-inside-work-tree"], _working_dir(path))
    except VCSQueryError as exc:
        LOGGER.debug("git unavailable: %s", exc)
        return False
    return output.returncode == 0 and output.stdout.strip() == "true"


def git_last_edit_date(path: Path) -> Optional[CalendarDate]:
    """Return the committer date of the last commit touching ``path``.

    ``None`` means the file has never been committed.
    """
    output = _run_git(["log", "-1", "--format=%cs", "--", path.name], path.parent)
    if output.returncode != 0 or output.stderr:
        raise VCSQueryError(
            f"Running git failed. status: {output.returncode} "
            f"stdout: {output.stdout!r}, stderr: {output.stderr!r}"
        )
    stamp = output.stdout.strip()
    LOGGER.debug("GitDate: %r - %s", stamp, path)
    if not stamp:
        return None
    try:
        return CalendarDate.from_iso(stamp)
    except ValueError as exc:
        raise VCSQueryError(f"Unexpected date from git log: {stamp!r}") from exc


def parse_porcelain_status(text: str) -> Tuple[List[str], List[str]]:
    """Split ``git status --porcelain`` output into (dirty, staged) file lists."""
    dirty: List[str] = []
    staged: List[str] = []
    for line in text.splitlines():
        if len(line) < 4:
            continue
        index_status, tree_status, name = line[0], line[1], line[3:]
        if " -> " in name:
            name = name.split(" -> ", 1)[1]
        name = name.strip('"')
        if index_status not in (" ", "?", "!"):
            staged.append(name)
        if tree_status not in (" ", "!"):
            dirty.append(name)
    return dirty, staged


def check_version_control(path: Path, options: CheckOptions) -> None:
    """Make sure ``path`` is in a state where changes can be undone through git.

    Raises ``NoVCSError`` or ``DirtyFilesError`` unless ``options`` allow it.
    """
    if not is_inside_work_tree(path):
        if options.allow_no_vcs:
            LOGGER.info("No git working tree found for %s, continuing anyway", path)
            return
        raise NoVCSError(path)

    target = "." if path.is_dir() else path.name
    output = _run_git(
        ["status", "--porcelain", "--untracked-files=all", "--", target],
        _working_dir(path),
    )
    if output.returncode != 0:
        raise VCSQueryError(f"git status failed: {output.stderr.strip()}")

    if options.allow_dirty:
        return
    dirty, staged = parse_porcelain_status(output.stdout)
    blocked_staged = [] if options.allow_staged else staged
    if dirty or blocked_staged:
        raise DirtyFilesError(dirty, blocked_staged)
