"""Shallow clones of GitHub repositories into scoped temporary directories.

``RepoCheckout`` owns the temporary directory: it is created on enter and
removed exactly once on exit, whether the body succeeded or raised.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from tempfile import mkdtemp
from typing import Any

from autotutor.lib.errors import CollaboratorError
from autotutor.lib.git_utils import (
    RepoInfo,
    extract_owner_and_name,
    git_noninteractive_env,
    github_clone_url,
    redact_sensitive,
    repo_tmp_dir,
)

__all__ = ["RepoCheckout", "clone"]

logger = logging.getLogger(__name__)


def _run_git(
    cmd: list[str],
    *,
    cwd: Path | str | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a git command, raising ``CollaboratorError`` on failure."""
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
            env=git_noninteractive_env(),
        )
    except OSError as exc:
        msg = f"git could not be executed: {exc}"
        raise CollaboratorError(msg) from exc
    if result.returncode != 0:
        safe_cmd = " ".join(redact_sensitive(part) for part in cmd)
        safe_stderr = redact_sensitive(result.stderr.strip()) or "unknown git error"
        msg = f"git failed ({safe_cmd}): {safe_stderr}"
        raise CollaboratorError(msg)
    return result


def clone(url: str, dest: Path | str, *, depth: int | None = 1) -> Path:
    """Clone *url* into *dest*.

    Args:
        url: Clone URL (may embed a token; it is redacted in errors).
        dest: Target directory; must not exist or be empty.
        depth: Shallow clone depth. ``None`` for full history.

    Returns:
        Path to the cloned repository.
    """
    dest = Path(dest)
    cmd: list[str] = ["git", "clone"]
    if depth is not None:
        cmd += ["--depth", str(depth)]
    cmd += [url, str(dest)]
    _run_git(cmd)
    return dest


class RepoCheckout:
    """Context manager that clones a GitHub repo and cleans it up afterwards.

    Example::

        with RepoCheckout("https://github.com/owner/name") as checkout:
            index = RepoIndex.from_path(checkout.path)
    """

    def __init__(self, github_url: str, *, depth: int | None = 1) -> None:
        owner, name = extract_owner_and_name(github_url)
        self.repo_info = RepoInfo(owner=owner, name=name, url=github_url)
        self.depth = depth
        self._tmp_root: Path | None = None
        self._path: Path | None = None

    @property
    def path(self) -> Path:
        if self._path is None:
            raise RuntimeError("Repository not cloned yet")
        return self._path

    def clone(self) -> Path:
        self._tmp_root = Path(mkdtemp(prefix="autotutor_repo_", dir=repo_tmp_dir()))
        dest = self._tmp_root / "repo"
        url = github_clone_url(self.repo_info.full_name)
        logger.info("Cloning %s to %s", self.repo_info.full_name, dest)
        try:
            clone(url, dest, depth=self.depth)
        except CollaboratorError as exc:
            msg = f"Failed to clone repository: {exc}"
            raise CollaboratorError(msg) from exc
        logger.info("Repository cloned successfully")
        self._path = dest
        return dest

    def cleanup(self) -> None:
        """Remove the temporary checkout if it exists; safe to call twice."""
        tmp_root, self._tmp_root = self._tmp_root, None
        self._path = None
        if tmp_root is None or not tmp_root.exists():
            return
        try:
            shutil.rmtree(tmp_root)
            logger.info("Cleaned up temporary files at %s", tmp_root)
        except OSError as exc:
            logger.warning("Cleanup warning for %s: %s", tmp_root, exc)

    def __enter__(self) -> RepoCheckout:
        try:
            self.clone()
        except BaseException:
            self.cleanup()
            raise
        return self

    def __exit__(self, *_: Any) -> None:
        self.cleanup()
