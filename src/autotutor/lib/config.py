"""Configuration loading: CLI flags / request fields → env vars → .env file."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_MODEL_PATTERN = re.compile(r"^[a-zA-Z0-9._:/-]+$")

SUPPORTED_PROVIDERS = ("bedrock", "anthropic", "openai")
DEFAULT_BEDROCK_MODEL = "anthropic.claude-3-sonnet-20240229-v1:0"
DEFAULT_REGION = "us-west-2"

ConfigValue = str | bool | None


def _env_flag(name: str) -> bool | None:
    """Parse a boolean env var; ``None`` when unset so defaults apply."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    return raw.lower() in ("1", "true", "yes")


def _validate_provider(provider: str) -> None:
    if provider not in SUPPORTED_PROVIDERS:
        choices = ", ".join(SUPPORTED_PROVIDERS)
        msg = f"Unsupported provider {provider!r}; expected one of: {choices}"
        raise ValueError(msg)


def _validate_model(model: str) -> None:
    """Warn if model string doesn't match expected patterns."""
    if not model or model == "default":
        return
    if not _MODEL_PATTERN.match(model):
        logger.warning(
            "Model '%s' contains unexpected characters; expected an id such as "
            "'%s' or 'claude-3-5-sonnet-latest'",
            model,
            DEFAULT_BEDROCK_MODEL,
        )


def _env_model(provider: str) -> str | None:
    """Model id from the environment; the Bedrock id only applies to Bedrock."""
    if provider == "bedrock":
        return os.environ.get("AWS_BEDROCK_MODEL_ID") or os.environ.get(
            "AUTOTUTOR_MODEL"
        )
    return os.environ.get("AUTOTUTOR_MODEL")


def _load_env_files() -> None:
    load_dotenv(Path.cwd() / ".env", override=False)


@dataclass(frozen=True)
class Config:
    """Immutable application configuration."""

    provider: str = "bedrock"
    model: str = "default"
    aws_region: str = DEFAULT_REGION
    s3_bucket: str = ""
    upload_to_s3: bool = True
    output_dir: str = ""
    verbose: bool = False

    def __post_init__(self) -> None:
        _validate_provider(self.provider)
        _validate_model(self.model)

    @property
    def resolved_model(self) -> str | None:
        """Model id to pass to the provider, or ``None`` for its default."""
        if self.model and self.model != "default":
            return self.model
        if self.provider == "bedrock":
            return DEFAULT_BEDROCK_MODEL
        return None

    @classmethod
    def from_env(cls, overrides: dict[str, ConfigValue] | None = None) -> Config:
        """Build config from environment variables, then apply overrides.

        Priority: overrides (CLI flags / request fields) > env vars > defaults.
        """
        _load_env_files()

        env_values: dict[str, ConfigValue] = {
            "provider": os.environ.get("AUTOTUTOR_PROVIDER"),
            "aws_region": os.environ.get("AWS_REGION"),
            "s3_bucket": os.environ.get("S3_BUCKET_NAME"),
            "upload_to_s3": _env_flag("AUTOTUTOR_UPLOAD_TO_S3"),
            "output_dir": os.environ.get("AUTOTUTOR_OUTPUT_DIR"),
            "verbose": _env_flag("AUTOTUTOR_VERBOSE"),
        }

        merged = {k: v for k, v in env_values.items() if v is not None and v != ""}
        if overrides:
            merged.update({k: v for k, v in overrides.items() if v is not None})

        provider = str(merged.get("provider", cls.provider)).strip().lower()
        if "model" not in merged:
            env_model = _env_model(provider)
            if env_model:
                merged["model"] = env_model

        return cls(
            provider=provider,
            model=str(merged.get("model", cls.model)),
            aws_region=str(merged.get("aws_region", cls.aws_region)),
            s3_bucket=str(merged.get("s3_bucket", cls.s3_bucket)),
            upload_to_s3=bool(merged.get("upload_to_s3", cls.upload_to_s3)),
            output_dir=str(merged.get("output_dir", cls.output_dir)),
            verbose=bool(merged.get("verbose", cls.verbose)),
        )
