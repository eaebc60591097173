"""Tests for autotutor.lib.config."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from autotutor.lib.config import DEFAULT_BEDROCK_MODEL, DEFAULT_REGION, Config

_ENV_KEYS = (
    "AUTOTUTOR_PROVIDER",
    "AUTOTUTOR_MODEL",
    "AWS_BEDROCK_MODEL_ID",
    "AWS_REGION",
    "S3_BUCKET_NAME",
    "AUTOTUTOR_UPLOAD_TO_S3",
    "AUTOTUTOR_OUTPUT_DIR",
    "AUTOTUTOR_VERBOSE",
)


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_defaults(self) -> None:
        config = Config.from_env()

        assert config.provider == "bedrock"
        assert config.model == "default"
        assert config.aws_region == DEFAULT_REGION
        assert config.s3_bucket == ""
        assert config.upload_to_s3 is True
        assert config.output_dir == ""
        assert config.verbose is False

    def test_frozen(self) -> None:
        config = Config()
        with pytest.raises(AttributeError):
            config.provider = "openai"  # type: ignore[misc]


class TestFromEnv:
    def test_reads_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTOTUTOR_PROVIDER", "Anthropic")
        monkeypatch.setenv("AWS_REGION", "eu-west-1")
        monkeypatch.setenv("S3_BUCKET_NAME", "tutorials")
        monkeypatch.setenv("AUTOTUTOR_UPLOAD_TO_S3", "false")
        monkeypatch.setenv("AUTOTUTOR_OUTPUT_DIR", "/tmp/out")
        monkeypatch.setenv("AUTOTUTOR_VERBOSE", "yes")

        config = Config.from_env()

        assert config.provider == "anthropic"
        assert config.aws_region == "eu-west-1"
        assert config.s3_bucket == "tutorials"
        assert config.upload_to_s3 is False
        assert config.output_dir == "/tmp/out"
        assert config.verbose is True

    def test_bedrock_model_id_preferred(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTOTUTOR_MODEL", "generic")
        monkeypatch.setenv("AWS_BEDROCK_MODEL_ID", "anthropic.claude-v2")

        assert Config.from_env().model == "anthropic.claude-v2"

    def test_bedrock_model_id_ignored_for_other_providers(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(
            "AWS_BEDROCK_MODEL_ID", "anthropic.claude-3-haiku-20240307-v1:0"
        )

        config = Config.from_env(overrides={"provider": "openai"})

        assert config.model == "default"
        assert config.resolved_model is None

    def test_generic_model_used_for_other_providers(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AWS_BEDROCK_MODEL_ID", "anthropic.claude-v2")
        monkeypatch.setenv("AUTOTUTOR_MODEL", "gpt-4o")

        config = Config.from_env(overrides={"provider": "openai"})

        assert config.resolved_model == "gpt-4o"

    def test_model_override_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AWS_BEDROCK_MODEL_ID", "anthropic.claude-v2")

        config = Config.from_env(overrides={"model": "anthropic.claude-instant-v1"})

        assert config.model == "anthropic.claude-instant-v1"

    def test_empty_env_values_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AWS_REGION", "")
        monkeypatch.setenv("AUTOTUTOR_UPLOAD_TO_S3", "  ")

        config = Config.from_env()

        assert config.aws_region == DEFAULT_REGION
        assert config.upload_to_s3 is True

    def test_overrides_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("S3_BUCKET_NAME", "from-env")
        monkeypatch.setenv("AUTOTUTOR_UPLOAD_TO_S3", "1")

        config = Config.from_env(
            {"s3_bucket": "from-request", "upload_to_s3": False, "aws_region": None}
        )

        assert config.s3_bucket == "from-request"
        assert config.upload_to_s3 is False
        assert config.aws_region == DEFAULT_REGION

    def test_dotenv_file_loaded(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Record the unset state so the value load_dotenv writes is undone.
        monkeypatch.setenv("S3_BUCKET_NAME", "placeholder")
        monkeypatch.delenv("S3_BUCKET_NAME")
        (tmp_path / ".env").write_text("S3_BUCKET_NAME=dotenv-bucket\n")

        config = Config.from_env()

        assert config.s3_bucket == "dotenv-bucket"

    def test_dotenv_does_not_override_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / ".env").write_text("S3_BUCKET_NAME=dotenv-bucket\n")
        monkeypatch.setenv("S3_BUCKET_NAME", "real-bucket")

        assert Config.from_env().s3_bucket == "real-bucket"

    def test_unknown_provider_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTOTUTOR_PROVIDER", "ollama")

        with pytest.raises(ValueError, match="Unsupported provider"):
            Config.from_env()


class TestResolvedModel:
    def test_bedrock_default(self) -> None:
        assert Config().resolved_model == DEFAULT_BEDROCK_MODEL

    def test_other_provider_uses_its_own_default(self) -> None:
        assert Config(provider="openai").resolved_model is None

    def test_explicit_model(self) -> None:
        assert Config(provider="openai", model="gpt-4o").resolved_model == "gpt-4o"

    def test_odd_model_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            Config(model="bad model!")
        assert "unexpected characters" in caplog.text
