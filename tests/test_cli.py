"""Tests for autotutor.cli.main."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from autotutor.cli import main as cli_main
from autotutor.lib.errors import CollaboratorError


class TestScanOnly:
    def test_prints_summary(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (tmp_path / "README.md").write_text("# hi")
        (tmp_path / "main.py").write_text("print(1)")

        cli_main.main([str(tmp_path), "--scan-only"])

        summary = json.loads(capsys.readouterr().out)
        assert summary["main_files"] == ["README.md", "main.py"]
        assert summary["structure"]["total_files"] == 2

    def test_not_a_directory(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as excinfo:
            cli_main.main([str(tmp_path / "missing"), "--scan-only"])

        assert excinfo.value.code == 1
        assert "is not a directory" in capsys.readouterr().err


class TestGenerate:
    def test_prints_markdown_without_upload(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        fake = MagicMock(
            return_value={
                "tutorial_content": {"markdown": "# Tutorial", "data": {}},
                "execution_time": 1.25,
            }
        )
        monkeypatch.setattr(cli_main, "generate_tutorial", fake)

        cli_main.main(
            [
                "https://github.com/o/r",
                "--no-upload",
                "--provider",
                "openai",
                "--model",
                "gpt-4o",
            ]
        )

        out = capsys.readouterr()
        assert out.out.strip() == "# Tutorial"
        assert "execution_time=1.25s" in out.err
        request = fake.call_args.args[0]
        assert request.upload_to_s3 is False
        assert request.provider == "openai"
        assert request.model == "gpt-4o"

    def test_prints_urls_after_upload(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        fake = MagicMock(
            return_value={
                "tutorial_url": "https://b/t.md",
                "data_url": "https://b/d.json",
                "execution_time": 2.0,
            }
        )
        monkeypatch.setattr(cli_main, "generate_tutorial", fake)

        cli_main.main(["https://github.com/o/r", "--bucket", "b", "--region", "x-1"])

        out = capsys.readouterr().out
        assert "tutorial_url=https://b/t.md" in out
        assert "data_url=https://b/d.json" in out
        request = fake.call_args.args[0]
        assert request.upload_to_s3 is None
        assert request.s3_bucket == "b"
        assert request.aws_region == "x-1"

    def test_error_exits_nonzero(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr(
            cli_main,
            "generate_tutorial",
            MagicMock(side_effect=CollaboratorError("Failed to clone repository")),
        )

        with pytest.raises(SystemExit) as excinfo:
            cli_main.main(["https://github.com/o/missing", "--no-upload"])

        assert excinfo.value.code == 1
        assert "Error: Failed to clone repository" in capsys.readouterr().err
