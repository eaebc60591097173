"""File-importance scoring and top-N selection."""

from __future__ import annotations

__all__ = [
    "MAX_RANKED_FILES",
    "file_importance",
    "rank_files",
    "sort_by_importance",
]

from collections.abc import Iterable
from pathlib import PurePosixPath

MAX_RANKED_FILES = 20

_README_NAMES = frozenset({"readme.md", "readme.txt", "readme"})
_MANIFEST_NAMES = frozenset({"package.json", "requirements.txt", "setup.py"})
_ENTRYPOINT_NAMES = frozenset({"index.js", "main.py", "app.py", "server.js"})

_EXTENSION_SCORES: dict[str, int] = {
    ".js": 70,
    ".py": 70,
    ".ts": 70,
    ".json": 60,
    ".yaml": 60,
    ".yml": 60,
    ".md": 50,
    ".txt": 40,
    ".html": 30,
    ".css": 20,
}
_DEFAULT_SCORE = 10


def file_importance(relative_path: str) -> int:
    """Score a path by how much it likely says about the repository.

    Rules are checked in order and the first match wins: readme files,
    dependency manifests, conventional entry points, then the extension
    table, with a floor of 10 so every file is still ranked.
    """
    path = PurePosixPath(relative_path.replace("\\", "/"))
    file_name = path.name.lower()
    if file_name in _README_NAMES:
        return 100
    if file_name in _MANIFEST_NAMES:
        return 90
    if file_name in _ENTRYPOINT_NAMES:
        return 80
    return _EXTENSION_SCORES.get(path.suffix.lower(), _DEFAULT_SCORE)


def sort_by_importance(paths: Iterable[str]) -> list[str]:
    """Return every path ordered by descending score.

    ``sorted`` is stable, so equal scores keep their input (traversal) order.
    """
    return sorted(paths, key=lambda p: -file_importance(p))


def rank_files(paths: Iterable[str], limit: int = MAX_RANKED_FILES) -> list[str]:
    """Return the *limit* most important paths."""
    return sort_by_importance(paths)[:limit]
