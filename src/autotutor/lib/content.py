"""Bounded loading of repository file contents for prompt building.

Every failure here is a soft skip: the caller gets ``None`` (or the path is
left out of the content map) and a log line, never an exception, so one
unreadable file cannot abort a tutorial run.
"""

from __future__ import annotations

__all__ = [
    "BINARY_EXTENSIONS",
    "MAX_CONTENT_FILES",
    "MAX_FILE_SIZE",
    "collect_contents",
    "is_binary_path",
    "load_content",
    "resolve_repo_target",
]

import logging
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 50_000
MAX_CONTENT_FILES = 50

BINARY_EXTENSIONS = frozenset(
    {
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".bmp",
        ".ico",
        ".pdf",
        ".zip",
        ".tar",
        ".gz",
        ".rar",
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".mp3",
        ".mp4",
        ".avi",
        ".mov",
    }
)


def is_binary_path(relative_path: str) -> bool:
    """Return whether the path's extension is in the binary set."""
    return PurePosixPath(relative_path.replace("\\", "/")).suffix.lower() in (
        BINARY_EXTENSIONS
    )


def resolve_repo_target(repo_root: Path, relative_path: str) -> Path:
    """Resolve a relative path inside ``repo_root`` or raise ``ValueError``."""
    root = repo_root.resolve()
    normalized = relative_path.replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    if not normalized or normalized.startswith("/"):
        raise ValueError("invalid path")

    target = (root / normalized).resolve()
    try:
        target.relative_to(root)
    except ValueError as exc:
        raise ValueError("invalid path") from exc
    return target


def load_content(
    repo_root: Path,
    relative_path: str,
    max_size_bytes: int = MAX_FILE_SIZE,
) -> str | None:
    """Read a repo file as text, or return ``None`` when it should be skipped.

    Skips binary extensions (before touching the filesystem), paths outside
    the repo, missing or non-regular files, and files above
    *max_size_bytes*. Text is decoded as UTF-8 with invalid bytes replaced.
    """
    if is_binary_path(relative_path):
        return None

    try:
        target = resolve_repo_target(repo_root, relative_path)
    except ValueError:
        logger.warning("Refusing to read %s: outside repository root", relative_path)
        return None

    try:
        if not target.is_file():
            return None
        size = target.stat().st_size
        if size > max_size_bytes:
            logger.info(
                "File %s too large (%d bytes), skipping", relative_path, size
            )
            return None
        return target.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Could not read file %s: %s", relative_path, exc)
        return None


def collect_contents(
    repo_root: Path,
    ranked_paths: Iterable[str],
    *,
    max_files: int = MAX_CONTENT_FILES,
    max_size_bytes: int = MAX_FILE_SIZE,
) -> dict[str, str]:
    """Load contents for the first *max_files* ranked paths.

    The returned mapping keeps ranked order and omits skipped files.
    """
    contents: dict[str, str] = {}
    for index, rel_path in enumerate(ranked_paths):
        if index >= max_files:
            break
        text = load_content(repo_root, rel_path, max_size_bytes)
        if text is not None:
            contents[rel_path] = text
    return contents
