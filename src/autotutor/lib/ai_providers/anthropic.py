"""Anthropic Messages API wrapper, used when ``AUTOTUTOR_PROVIDER=anthropic``.

Lets tutorial analysis call Claude directly instead of through Bedrock.
"""

from __future__ import annotations

__all__ = ["ANTHROPIC_PROVIDER", "AnthropicProvider"]

import os
from typing import Any

from autotutor.lib.ai_providers.types import AIProvider


class AnthropicProvider(AIProvider):
    """Sends analysis and tutorial prompts as a single user turn."""

    name = "anthropic"
    api_key_env_var = "ANTHROPIC_API_KEY"
    default_model = "claude-3-5-sonnet-latest"
    install_hint = "uv add anthropic"

    def _build_inner(self) -> Any:
        """Client from ``ANTHROPIC_API_KEY``, or the SDK's own key lookup."""
        try:
            from anthropic import Anthropic
        except ImportError as exc:
            raise RuntimeError(
                "Anthropic SDK is not installed. Install with: uv add anthropic"
            ) from exc

        api_key = os.environ.get(self.api_key_env_var)
        if api_key:
            return Anthropic(api_key=api_key)
        return Anthropic()

    def _complete_impl(
        self,
        *,
        inner: Any,
        messages: list[dict[str, str]],
        model: str,
        **kwargs: Any,
    ) -> Any:
        """Call the Messages API with the same 4000-token ceiling as Bedrock."""
        max_tokens = kwargs.pop("max_tokens", 4000)
        return inner.messages.create(
            model=model,
            max_tokens=max_tokens,
            messages=messages,
            **kwargs,
        )

    def extract_text(self, response: Any) -> str:
        parts: list[str] = []
        for block in getattr(response, "content", None) or []:
            text = getattr(block, "text", None)
            if text is not None:
                parts.append(str(text))
        return "".join(parts)


ANTHROPIC_PROVIDER = AnthropicProvider()
