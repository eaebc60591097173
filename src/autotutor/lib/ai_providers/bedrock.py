"""AWS Bedrock provider wrapper (Anthropic models via ``bedrock-runtime``)."""

from __future__ import annotations

__all__ = ["BEDROCK_PROVIDER", "BedrockProvider"]

import json
import os
from typing import Any

from autotutor.lib.ai_providers.types import AIProvider

BEDROCK_ANTHROPIC_VERSION = "bedrock-2023-05-31"
DEFAULT_MAX_TOKENS = 4000


class BedrockProvider(AIProvider):
    """Wrapper around a ``boto3`` Bedrock runtime client."""

    name = "bedrock"
    api_key_env_var = "AWS_ACCESS_KEY_ID"
    default_model = "anthropic.claude-3-sonnet-20240229-v1:0"
    install_hint = "uv add boto3"

    def __init__(self, *, inner: Any | None = None, region: str | None = None) -> None:
        super().__init__(inner=inner)
        self.region = region

    def _build_inner(self) -> Any:
        """Lazily construct a ``bedrock-runtime`` client.

        The region comes from the constructor, then ``AWS_REGION``, then
        ``us-west-2``. Credentials follow the normal boto3 resolution chain.
        """
        try:
            import boto3
        except ImportError as exc:
            raise RuntimeError(
                "boto3 is not installed. Install with: uv add boto3"
            ) from exc

        region = self.region or os.environ.get("AWS_REGION") or "us-west-2"
        return boto3.client("bedrock-runtime", region_name=region)

    def _complete_impl(
        self,
        *,
        inner: Any,
        messages: list[dict[str, str]],
        model: str,
        **kwargs: Any,
    ) -> Any:
        """Call ``InvokeModel`` with an Anthropic messages body.

        Defaults ``max_tokens`` to 4000 when not supplied in *kwargs*. Returns
        the decoded JSON response body.
        """
        body = {
            "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
            "max_tokens": kwargs.pop("max_tokens", DEFAULT_MAX_TOKENS),
            "messages": messages,
            **kwargs,
        }
        response = inner.invoke_model(
            modelId=model,
            body=json.dumps(body),
            contentType="application/json",
            accept="application/json",
        )
        raw = response["body"]
        payload = raw.read() if hasattr(raw, "read") else raw
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        return json.loads(payload)

    def extract_text(self, response: Any) -> str:
        blocks = response.get("content") or []
        return "".join(
            str(block.get("text", ""))
            for block in blocks
            if block.get("type", "text") == "text"
        )


BEDROCK_PROVIDER = BedrockProvider()
