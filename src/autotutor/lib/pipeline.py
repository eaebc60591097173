"""End-to-end tutorial generation for one repository.

clone -> scan -> rank -> load contents -> analyze -> assemble -> write
Markdown -> publish. Any failure aborts the run; the temporary checkout is
removed on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from autotutor.lib.ai_providers import get_provider
from autotutor.lib.ai_providers.bedrock import BedrockProvider
from autotutor.lib.ai_providers.types import AIProvider
from autotutor.lib.analysis import CodeAnalyzer
from autotutor.lib.config import Config
from autotutor.lib.errors import ClientError
from autotutor.lib.git_utils import RepoInfo
from autotutor.lib.github import RepoCheckout
from autotutor.lib.repo import RepoIndex
from autotutor.lib.storage import S3Uploader
from autotutor.lib.tutorial import prepare_tutorial_data, save_tutorial_files

__all__ = [
    "TutorialRequest",
    "build_provider",
    "generate_tutorial",
    "summarize_repository",
]

logger = logging.getLogger(__name__)

INLINE_MARKDOWN_CHARS = 10_000


@dataclass(frozen=True)
class TutorialRequest:
    """Caller input for one tutorial run; ``None`` fields fall back to config."""

    github_url: str
    upload_to_s3: bool | None = None
    aws_region: str | None = None
    s3_bucket: str | None = None
    provider: str | None = None
    model: str | None = None
    output_dir: str | None = None

    def config_overrides(self) -> dict[str, Any]:
        return {
            "upload_to_s3": self.upload_to_s3,
            "aws_region": self.aws_region,
            "s3_bucket": self.s3_bucket,
            "provider": self.provider,
            "model": self.model,
            "output_dir": self.output_dir,
        }


def build_provider(config: Config) -> AIProvider:
    """Provider for *config*; Bedrock gets a client bound to the configured region."""
    if config.provider == "bedrock":
        return BedrockProvider(region=config.aws_region)
    return get_provider(config.provider)


def summarize_repository(root: Path) -> dict[str, Any]:
    """Scan a local checkout without calling any model.

    Returns the capped structure, the ranked main files, and which of them
    had loadable content.
    """
    index = RepoIndex.from_path(root)
    main_files = index.main_files()
    contents = index.main_file_contents()
    return {
        "root": str(root),
        "structure": index.structure.to_dict(),
        "main_files": main_files,
        "loaded_files": list(contents),
    }


async def _analyze_and_write(
    analyzer: CodeAnalyzer,
    repo_info: RepoInfo,
    index: RepoIndex,
) -> tuple[dict[str, Any], dict[str, Any]]:
    structure = index.structure.to_dict()
    main_files = index.main_files()
    contents = index.main_file_contents()
    logger.info(
        "Scanned %d files; loaded %d of %d ranked files",
        index.structure.total_files,
        len(contents),
        len(main_files),
    )
    analysis = await analyzer.analyze_full_repository(
        repo_info.to_dict(), structure, main_files, contents
    )
    data = prepare_tutorial_data(analysis, repo_info.to_dict(), structure)
    tutorial = await analyzer.generate_markdown_tutorial(data)
    return analysis, tutorial


def _publish(
    uploader: S3Uploader,
    tutorial: dict[str, Any],
    repo_name: str,
    output_dir: str,
) -> dict[str, str]:
    if output_dir:
        paths = save_tutorial_files(tutorial, Path(output_dir), repo_name)
        return uploader.upload_tutorial_files(paths, repo_name)
    with tempfile.TemporaryDirectory(prefix="autotutor_out_") as tmp:
        paths = save_tutorial_files(tutorial, Path(tmp), repo_name)
        return uploader.upload_tutorial_files(paths, repo_name)


def generate_tutorial(
    request: TutorialRequest,
    *,
    config: Config | None = None,
    provider: AIProvider | None = None,
    uploader: S3Uploader | None = None,
) -> dict[str, Any]:
    """Generate (and optionally publish) a tutorial for ``request.github_url``.

    Raises:
        ClientError: Missing URL, malformed URL, or missing bucket.
        CollaboratorError: Clone, model, or upload failure.
    """
    start = time.monotonic()
    if not request.github_url or not request.github_url.strip():
        raise ClientError("Missing required parameter: github_url")

    if config is None:
        try:
            config = Config.from_env(overrides=request.config_overrides())
        except ValueError as exc:
            raise ClientError(str(exc)) from exc
    analyzer = CodeAnalyzer(provider or build_provider(config), config.resolved_model)
    if config.upload_to_s3 and uploader is None:
        uploader = S3Uploader(config.s3_bucket, config.aws_region)

    with RepoCheckout(request.github_url.strip()) as checkout:
        repo_info = checkout.repo_info
        logger.info("Analyzing file structure of %s", repo_info.full_name)
        index = RepoIndex.from_path(checkout.path)
        analysis, tutorial = asyncio.run(
            _analyze_and_write(analyzer, repo_info, index)
        )

    result: dict[str, Any] = {
        "repository": repo_info.to_dict(),
        "analysis": analysis,
        "success": True,
    }
    if config.upload_to_s3 and uploader is not None:
        urls = _publish(uploader, tutorial, repo_info.name, config.output_dir)
        result["s3_urls"] = urls
        result["tutorial_url"] = urls.get("markdown")
        result["data_url"] = urls.get("json")
    else:
        if config.output_dir:
            paths = save_tutorial_files(
                tutorial, Path(config.output_dir), repo_info.name
            )
            result["files"] = {kind: str(path) for kind, path in paths.items()}
        result["tutorial_content"] = {
            "markdown": str(tutorial["markdown"])[:INLINE_MARKDOWN_CHARS],
            "data": tutorial["data"],
        }

    result["execution_time"] = round(time.monotonic() - start, 2)
    return result
