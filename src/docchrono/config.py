"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from docchrono.vcs import CheckOptions

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".md",)
# Section index pages carry no publish date of their own.
DEFAULT_SKIP_NAMES: Tuple[str, ...] = ("_index.md",)


@dataclass(slots=True)
class AppConfig:
    root_path: Path = Path(".")
    unattended: bool = False
    check_only: bool = False
    allow_dirty: bool = False
    allow_no_vcs: bool = False
    verbose: bool = False
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    skip_names: Tuple[str, ...] = DEFAULT_SKIP_NAMES

    def resolve_root(self, base_dir: Path | None = None) -> Path:
        if Path(self.root_path).is_absolute() or base_dir is None:
            return Path(self.root_path)
        return base_dir / self.root_path

    def check_options(self) -> CheckOptions:
        return CheckOptions(allow_dirty=self.allow_dirty, allow_no_vcs=self.allow_no_vcs)
