"""Text-generation provider wrappers used by the code analyzer.

Each wrapper adapts one SDK (AWS Bedrock, Anthropic, OpenAI) to the shared
``AIProvider`` interface so analysis code only deals in prompt-in, text-out.
"""

from autotutor.lib.ai_providers.anthropic import ANTHROPIC_PROVIDER, AnthropicProvider
from autotutor.lib.ai_providers.bedrock import BEDROCK_PROVIDER, BedrockProvider
from autotutor.lib.ai_providers.openai import OPENAI_PROVIDER, OpenAIProvider
from autotutor.lib.ai_providers.types import AIProvider

PROVIDERS: dict[str, AIProvider] = {
    BEDROCK_PROVIDER.name: BEDROCK_PROVIDER,
    ANTHROPIC_PROVIDER.name: ANTHROPIC_PROVIDER,
    OPENAI_PROVIDER.name: OPENAI_PROVIDER,
}


def get_provider(name: str) -> AIProvider:
    """Look up a registered provider by name."""
    try:
        return PROVIDERS[name]
    except KeyError:
        choices = ", ".join(sorted(PROVIDERS))
        msg = f"Unknown provider {name!r}; expected one of: {choices}"
        raise ValueError(msg) from None


__all__ = [
    "ANTHROPIC_PROVIDER",
    "BEDROCK_PROVIDER",
    "OPENAI_PROVIDER",
    "PROVIDERS",
    "AIProvider",
    "AnthropicProvider",
    "BedrockProvider",
    "OpenAIProvider",
    "get_provider",
]
