"""Shared fixtures for docchrono tests."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Optional

import pytest


def _git(repo: Path, *args: str, date: Optional[str] = None) -> None:
    env = dict(os.environ)
    env.update(
        GIT_AUTHOR_NAME="test_user",
        GIT_AUTHOR_EMAIL="test@example.com",
        GIT_COMMITTER_NAME="test_user",
        GIT_COMMITTER_EMAIL="test@example.com",
    )
    if date is not None:
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_DATE"] = date
    subprocess.run(
        ["git", "-c", "commit.gpgsign=false", *args],
        cwd=repo,
        env=env,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """An empty git repository."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    return repo


@pytest.fixture
def git() -> Callable[..., None]:
    """Run a git command inside a test repository."""
    return _git


@pytest.fixture
def commit(git: Callable[..., None]) -> Callable[..., None]:
    """Stage the given files and commit them, optionally at a fixed date."""

    def _commit(repo: Path, *names: str, date: Optional[str] = None) -> None:
        git(repo, "add", "--", *names)
        git(repo, "commit", "-q", "-m", "no msg set", date=date)

    return _commit
