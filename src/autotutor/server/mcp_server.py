"""MCP server for autotutor.

Exposes the repository scan engine and tutorial generation over the Model
Context Protocol.

Tools:
  - scan_repository: Structure, language histogram and ranked files of a repo.
  - rank_repository_files: Importance-ordered files with their scores.
  - read_repository_file: Text of one file, subject to the loader's limits.
  - generate_tutorial: (async via Celery) Enqueue a tutorial run.
  - get_task_status: Check the status of an enqueued run.

Run with:
  uv run autotutor-mcp          (stdio)
  uv run autotutor-mcp --http   (streamable-http)
"""

from __future__ import annotations

import sys
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from autotutor.lib.content import MAX_FILE_SIZE, load_content
from autotutor.lib.git_utils import extract_owner_and_name
from autotutor.lib.pipeline import summarize_repository
from autotutor.lib.ranking import MAX_RANKED_FILES, file_importance, rank_files
from autotutor.lib.repo import walk_for_ranking
from autotutor.server.task_result import normalize_task_result

mcp = FastMCP(
    "autotutor",
    instructions=(
        "autotutor MCP server. Use scan_repository on a local checkout to see "
        "what a tutorial would be built from, or generate_tutorial to queue "
        "a full run for a GitHub URL."
    ),
)


def _repo_root(repo_path: str) -> Path:
    """Resolve and validate a repository root path."""
    root = Path(repo_path).resolve()
    if not root.is_dir():
        msg = f"Repository path not found: {repo_path}"
        raise FileNotFoundError(msg)
    return root


@mcp.tool()
def scan_repository(repo_path: str) -> dict:
    """Scan a local repository without calling any model.

    Args:
        repo_path: Absolute path to the repository on disk.

    Returns:
        Dict with the capped structure (first 100 files, total count,
        language histogram), the top ranked files, and which of those had
        loadable text content.
    """
    return summarize_repository(_repo_root(repo_path))


@mcp.tool()
def rank_repository_files(repo_path: str, limit: int = MAX_RANKED_FILES) -> list:
    """Return the most important files of a repository with their scores."""
    paths = walk_for_ranking(_repo_root(repo_path))
    return [
        {"path": path, "score": file_importance(path)}
        for path in rank_files(paths, max(1, limit))
    ]


@mcp.tool()
def read_repository_file(
    repo_path: str,
    file_path: str,
    max_size_bytes: int = MAX_FILE_SIZE,
) -> dict:
    """Read a text file the way tutorial generation would.

    Binary, oversized, missing or out-of-repo files come back with
    ``content`` set to ``None`` instead of raising.
    """
    content = load_content(_repo_root(repo_path), file_path, max_size_bytes)
    return {"path": file_path, "content": content, "loaded": content is not None}


@mcp.tool()
def generate_tutorial(
    github_url: str,
    upload_to_s3: bool | None = None,
    s3_bucket: str | None = None,
    provider: str | None = None,
    model: str | None = None,
) -> dict:
    """Enqueue a tutorial run via Celery and return the task ID.

    Args:
        github_url: Repository URL, ``https://github.com/<owner>/<name>``.
        upload_to_s3: Publish to S3 (defaults to configuration).
        s3_bucket: Bucket override.
        provider: bedrock / anthropic / openai.
        model: Model id override.
    """
    from autotutor.server.celery_app import generate_tutorial_task

    extract_owner_and_name(github_url)
    task = generate_tutorial_task.delay(
        github_url=github_url,
        upload_to_s3=upload_to_s3,
        s3_bucket=s3_bucket,
        provider=provider,
        model=model,
    )
    return {"task_id": task.id, "status": "queued", "github_url": github_url}


@mcp.tool()
def get_task_status(task_id: str) -> dict:
    """Check the status of a previously enqueued tutorial run."""
    from autotutor.server.celery_app import generate_tutorial_task

    result = generate_tutorial_task.AsyncResult(task_id)
    raw_result = result.result if result.ready() else result.info
    return {
        "task_id": task_id,
        "status": result.status,
        "result": normalize_task_result(result.status, raw_result),
    }


def main() -> None:
    """Entry point for the MCP server."""
    transport = "streamable-http" if "--http" in sys.argv else "stdio"
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
