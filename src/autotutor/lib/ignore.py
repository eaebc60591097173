"""Ignore-pattern matching for repository traversal.

Combines a fixed default pattern set with the repository's own
``.gitignore`` into a single ``pathspec`` matcher with gitignore semantics
(later ``!`` lines re-include, trailing ``/`` restricts to directories).
"""

from __future__ import annotations

__all__ = ["DEFAULT_IGNORE_PATTERNS", "IgnoreMatcher", "build_matcher"]

import logging
from collections.abc import Iterable
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    ".git",
    "node_modules",
    "__pycache__",
    "*.pyc",
    ".DS_Store",
    "*.log",
    "dist",
    "build",
)

IGNORE_FILE_NAME = ".gitignore"


class IgnoreMatcher:
    """Immutable predicate deciding whether a repo-relative path is excluded."""

    def __init__(self, patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS) -> None:
        self._patterns = tuple(patterns)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self._patterns)

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def matches(self, relative_path: str, *, is_dir: bool = False) -> bool:
        """Return whether *relative_path* is excluded.

        Directories are tested in their trailing-slash form only, so that
        directory-only patterns (``out/``, ``!dist/``) take part in the
        last-match-wins evaluation alongside plain ones.
        """
        rel = relative_path.replace("\\", "/").strip("/")
        if not rel:
            return False
        return self._spec.match_file(f"{rel}/" if is_dir else rel)


def _read_ignore_lines(repo_root: Path) -> list[str]:
    ignore_file = repo_root / IGNORE_FILE_NAME
    if not ignore_file.is_file():
        logger.debug("No %s at %s; using default patterns", IGNORE_FILE_NAME, repo_root)
        return []
    try:
        return ignore_file.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as exc:
        logger.warning(
            "Could not read %s (%s); using default patterns only", ignore_file, exc
        )
        return []


def build_matcher(repo_root: Path) -> IgnoreMatcher:
    """Build the matcher for *repo_root*: defaults, then the repo's ignore file."""
    return IgnoreMatcher((*DEFAULT_IGNORE_PATTERNS, *_read_ignore_lines(repo_root)))
