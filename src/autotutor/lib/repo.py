"""Repository traversal: walk, filter, classify, and index a checked-out repo."""

from __future__ import annotations

import logging
import os
import stat
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from autotutor.lib.content import MAX_CONTENT_FILES, MAX_FILE_SIZE, collect_contents
from autotutor.lib.content import load_content as _load_content
from autotutor.lib.ignore import IgnoreMatcher, build_matcher
from autotutor.lib.ranking import MAX_RANKED_FILES, rank_files

__all__ = [
    "EXTENSION_LANGUAGES",
    "FileEntry",
    "RepoIndex",
    "RepositoryScan",
    "TraversalResult",
    "scan_repository",
    "walk",
    "walk_for_ranking",
]

logger = logging.getLogger(__name__)

MAX_STRUCTURE_FILES = 100
DEFAULT_MAX_DEPTH = 64

EXTENSION_LANGUAGES: dict[str, str] = {
    ".js": "JavaScript",
    ".ts": "TypeScript",
    ".py": "Python",
    ".java": "Java",
    ".cpp": "C++",
    ".c": "C",
    ".cs": "C#",
    ".php": "PHP",
    ".rb": "Ruby",
    ".go": "Go",
    ".rs": "Rust",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".scala": "Scala",
    ".html": "HTML",
    ".css": "CSS",
    ".json": "JSON",
    ".xml": "XML",
    ".yaml": "YAML",
    ".yml": "YAML",
}


@dataclass(frozen=True)
class FileEntry:
    """Metadata for one file recorded during traversal."""

    name: str
    relative_path: str
    parent_directory: str
    size_bytes: int
    extension: str

    @property
    def language(self) -> str | None:
        return EXTENSION_LANGUAGES.get(self.extension)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.relative_path,
            "directory": self.parent_directory,
            "size": self.size_bytes,
            "extension": self.extension,
        }


@dataclass(frozen=True)
class TraversalResult:
    """Capped structural view of a repository.

    ``total_files`` counts every recorded file; ``files`` holds only the first
    ``MAX_STRUCTURE_FILES`` in traversal order.
    """

    total_files: int
    languages: dict[str, int]
    files: tuple[FileEntry, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "languages": dict(self.languages),
            "files": [entry.to_dict() for entry in self.files],
        }


@dataclass(frozen=True)
class RepositoryScan:
    """Both views of one traversal: the capped structure and every path."""

    structure: TraversalResult
    paths: tuple[str, ...]


@dataclass
class _ScanAccumulator:
    """Mutable state owned by a single traversal, frozen into its results."""

    file_limit: int | None = MAX_STRUCTURE_FILES
    track_structure: bool = True
    total_files: int = 0
    languages: Counter[str] = field(default_factory=Counter)
    files: list[FileEntry] = field(default_factory=list)
    paths: list[str] = field(default_factory=list)

    def add(self, entry: FileEntry) -> None:
        self.paths.append(entry.relative_path)
        if not self.track_structure:
            return
        self.total_files += 1
        language = entry.language
        if language:
            self.languages[language] += 1
        if self.file_limit is None or len(self.files) < self.file_limit:
            self.files.append(entry)

    def structure(self) -> TraversalResult:
        return TraversalResult(
            total_files=self.total_files,
            languages=dict(self.languages),
            files=tuple(self.files),
        )


def _list_dir(path: Path) -> list[str] | None:
    try:
        return sorted(child.name for child in path.iterdir())
    except OSError as exc:
        logger.warning("Skipping unreadable directory %s: %s", path, exc)
        return None


def _iter_files(
    root: Path,
    matcher: IgnoreMatcher,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[FileEntry]:
    """Yield every non-ignored regular file under *root*, depth-first.

    Uses an explicit stack of directory iterators so that deep trees cannot
    exhaust the interpreter stack. Each directory is entered at most once
    (keyed by device/inode) to stop symlink cycles.
    """
    try:
        root_stat = root.stat()
    except OSError as exc:
        logger.warning("Cannot stat repository root %s: %s", root, exc)
        return
    visited: set[tuple[int, int]] = {(root_stat.st_dev, root_stat.st_ino)}

    names = _list_dir(root)
    if names is None:
        return
    stack: list[tuple[str, int, Iterator[str]]] = [("", 0, iter(names))]

    while stack:
        rel_dir, depth, children = stack[-1]
        name = next(children, None)
        if name is None:
            stack.pop()
            continue

        rel_path = f"{rel_dir}/{name}" if rel_dir else name
        full_path = root / rel_path
        try:
            st = full_path.stat()
        except OSError as exc:
            # Dangling symlink or entry removed mid-walk.
            logger.debug("Skipping %s: %s", rel_path, exc)
            continue

        is_dir = stat.S_ISDIR(st.st_mode)
        if matcher.matches(rel_path, is_dir=is_dir):
            continue

        if is_dir:
            key = (st.st_dev, st.st_ino)
            if key in visited:
                logger.warning("Skipping %s: directory already visited", rel_path)
                continue
            if depth + 1 > max_depth:
                logger.warning(
                    "Skipping %s: exceeds max traversal depth %d", rel_path, max_depth
                )
                continue
            sub_names = _list_dir(full_path)
            if sub_names is None:
                continue
            visited.add(key)
            stack.append((rel_path, depth + 1, iter(sub_names)))
        elif stat.S_ISREG(st.st_mode):
            yield FileEntry(
                name=name,
                relative_path=rel_path,
                parent_directory=rel_dir,
                size_bytes=st.st_size,
                extension=os.path.splitext(name)[1].lower(),
            )


def _run_scan(
    root: Path,
    accumulator: _ScanAccumulator,
    *,
    matcher: IgnoreMatcher | None,
    max_depth: int,
) -> _ScanAccumulator:
    if not root.is_dir():
        msg = f"Not a directory: {root}"
        raise FileNotFoundError(msg)
    resolved_matcher = matcher or build_matcher(root)
    for entry in _iter_files(root, resolved_matcher, max_depth=max_depth):
        accumulator.add(entry)
    return accumulator


def walk(
    root: Path,
    *,
    matcher: IgnoreMatcher | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TraversalResult:
    """Walk *root* and return the capped structure with its language histogram."""
    return _run_scan(
        root, _ScanAccumulator(), matcher=matcher, max_depth=max_depth
    ).structure()


def walk_for_ranking(
    root: Path,
    *,
    matcher: IgnoreMatcher | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[str]:
    """Walk *root* and return every recorded relative path, uncapped."""
    acc = _run_scan(
        root,
        _ScanAccumulator(track_structure=False),
        matcher=matcher,
        max_depth=max_depth,
    )
    return acc.paths


def scan_repository(
    root: Path,
    *,
    matcher: IgnoreMatcher | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> RepositoryScan:
    """Single traversal producing both the capped structure and all paths."""
    acc = _run_scan(root, _ScanAccumulator(), matcher=matcher, max_depth=max_depth)
    return RepositoryScan(structure=acc.structure(), paths=tuple(acc.paths))


@dataclass
class RepoIndex:
    """Structural map of a checked-out repository."""

    root: Path
    files: list[str] = field(default_factory=list)
    structure: TraversalResult = field(
        default_factory=lambda: TraversalResult(0, {}, ())
    )

    @classmethod
    def from_path(cls, path: Path, *, max_depth: int = DEFAULT_MAX_DEPTH) -> RepoIndex:
        """Walk a local repo once and build an index of its files."""
        scan = scan_repository(path, max_depth=max_depth)
        return cls(root=path, files=list(scan.paths), structure=scan.structure)

    def main_files(self, limit: int = MAX_RANKED_FILES) -> list[str]:
        """Most important files, best first."""
        return rank_files(self.files, limit)

    def read_file(
        self, relative_path: str, max_size_bytes: int = MAX_FILE_SIZE
    ) -> str | None:
        return _load_content(self.root, relative_path, max_size_bytes)

    def main_file_contents(
        self,
        *,
        max_files: int = MAX_CONTENT_FILES,
        max_size_bytes: int = MAX_FILE_SIZE,
    ) -> dict[str, str]:
        """Contents of the ranked main files, bounded for prompt building."""
        return collect_contents(
            self.root,
            self.main_files(),
            max_files=max_files,
            max_size_bytes=max_size_bytes,
        )
