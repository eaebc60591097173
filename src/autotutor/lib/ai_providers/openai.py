"""OpenAI Responses API wrapper, used when ``AUTOTUTOR_PROVIDER=openai``."""

from __future__ import annotations

__all__ = ["OPENAI_PROVIDER", "OpenAIProvider"]

import os
from typing import Any

from autotutor.lib.ai_providers.types import AIProvider


class OpenAIProvider(AIProvider):
    """Sends analysis and tutorial prompts through ``responses.create``.

    ``max_tokens`` from callers is mapped to ``max_output_tokens``.
    """

    name = "openai"
    api_key_env_var = "OPENAI_API_KEY"
    default_model = "gpt-4.1"
    install_hint = "uv add openai"

    def _build_inner(self) -> Any:
        """Client from ``OPENAI_API_KEY``, or the SDK's own key lookup."""
        try:
            from openai import OpenAI
        except ImportError as exc:
            raise RuntimeError(
                "OpenAI SDK is not installed. Install with: uv add openai"
            ) from exc

        api_key = os.environ.get(self.api_key_env_var)
        if api_key:
            return OpenAI(api_key=api_key)
        return OpenAI()

    def _complete_impl(
        self,
        *,
        inner: Any,
        messages: list[dict[str, str]],
        model: str,
        **kwargs: Any,
    ) -> Any:
        """Messages go in as ``input``, capped at 4000 output tokens by default."""
        if "max_tokens" in kwargs:
            kwargs["max_output_tokens"] = kwargs.pop("max_tokens")
        kwargs.setdefault("max_output_tokens", 4000)
        return inner.responses.create(
            model=model,
            input=messages,
            **kwargs,
        )

    def extract_text(self, response: Any) -> str:
        return str(getattr(response, "output_text", "") or "")


OPENAI_PROVIDER = OpenAIProvider()
