"""Repository analysis through a text-generation provider.

Four independent analyses (overview, relationships, components, setup) run
concurrently and are awaited together; if any one fails the whole analysis
fails. Model output is never trusted to be JSON: each reply becomes either a
``ParsedResponse`` or an ``UnparsedResponse`` carrying a raw-text prefix.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from autotutor.lib import default_prompts
from autotutor.lib.ai_providers.types import AIProvider
from autotutor.lib.errors import CollaboratorError

__all__ = [
    "AnalysisResponse",
    "CodeAnalyzer",
    "ParsedResponse",
    "UnparsedResponse",
    "parse_json_response",
]

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
RAW_RESPONSE_PREFIX_CHARS = 500


@dataclass(frozen=True)
class ParsedResponse:
    """Model reply that contained a parseable JSON value."""

    data: Any

    def to_dict(self) -> Any:
        return self.data


@dataclass(frozen=True)
class UnparsedResponse:
    """Model reply that could not be parsed; keeps a prefix for debugging."""

    error: str
    raw_response: str

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "raw_response": self.raw_response}


AnalysisResponse = ParsedResponse | UnparsedResponse


def parse_json_response(response: str) -> AnalysisResponse:
    """Parse the span from the first ``{`` to the last ``}`` in *response*."""
    match = _JSON_OBJECT.search(response)
    if not match:
        return UnparsedResponse(
            error="Could not parse response",
            raw_response=response[:RAW_RESPONSE_PREFIX_CHARS],
        )
    try:
        return ParsedResponse(json.loads(match.group(0)))
    except json.JSONDecodeError:
        return UnparsedResponse(
            error="JSON parse error",
            raw_response=response[:RAW_RESPONSE_PREFIX_CHARS],
        )


class CodeAnalyzer:
    """Runs the analysis prompts against one provider/model."""

    def __init__(self, provider: AIProvider, model: str | None = None) -> None:
        self.provider = provider
        self.model = model or provider.default_model

    async def _invoke(self, prompt: str) -> str:
        try:
            return await self.provider.acomplete_text(prompt, model=self.model)
        except Exception as exc:
            msg = f"{self.provider.name} invocation failed: {exc}"
            raise CollaboratorError(msg) from exc

    async def _analyze(self, prompt: str) -> dict[str, Any]:
        response = parse_json_response(await self._invoke(prompt))
        if isinstance(response, UnparsedResponse):
            logger.warning("Model reply was not JSON: %s", response.error)
        return response.to_dict()

    async def analyze_full_repository(
        self,
        repo_info: Mapping[str, Any],
        structure: Mapping[str, Any],
        main_files: list[str],
        contents: Mapping[str, str],
    ) -> dict[str, Any]:
        """Run all four analyses concurrently and merge them with metadata."""
        logger.info(
            "Starting repository analysis of %d files (%d ranked)",
            len(contents),
            len(main_files),
        )
        try:
            overview, relationships, components, setup = await asyncio.gather(
                self._analyze(
                    default_prompts.overview_prompt(repo_info, structure, contents)
                ),
                self._analyze(default_prompts.relationships_prompt(contents)),
                self._analyze(default_prompts.components_prompt(contents)),
                self._analyze(default_prompts.setup_prompt(repo_info, contents)),
            )
        except CollaboratorError as exc:
            msg = f"Analysis failed: {exc}"
            raise CollaboratorError(msg) from exc

        return {
            "overview": overview,
            "relationships": relationships,
            "components": components,
            "setup": setup,
            "metadata": {
                "analyzed_at": datetime.now(UTC).isoformat(),
                "model_used": self.model,
                "files_analyzed": len(contents),
            },
        }

    async def generate_markdown_tutorial(
        self, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Ask the model to write the Markdown tutorial for *data*."""
        markdown = await self._invoke(default_prompts.markdown_tutorial_prompt(data))
        return {"markdown": markdown, "data": dict(data)}
