"""Tests for autotutor.server.lambda_handler."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from autotutor.lib.errors import ClientError, CollaboratorError
from autotutor.lib.pipeline import TutorialRequest
from autotutor.server import lambda_handler

_URL = "https://github.com/o/demo"


@pytest.fixture()
def fake_generate(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock = MagicMock(return_value={"success": True, "tutorial_url": "u"})
    monkeypatch.setattr(lambda_handler, "generate_tutorial", mock)
    return mock


class TestHandler:
    def test_api_gateway_string_body(self, fake_generate: MagicMock) -> None:
        event = {"body": json.dumps({"github_url": _URL, "upload_to_s3": False})}

        response = lambda_handler.handler(event, None)

        assert response["statusCode"] == 200
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"
        assert json.loads(response["body"])["tutorial_url"] == "u"
        fake_generate.assert_called_once_with(
            TutorialRequest(github_url=_URL, upload_to_s3=False)
        )

    def test_direct_invocation(self, fake_generate: MagicMock) -> None:
        event = {"github_url": f" {_URL} ", "bedrock_model": "anthropic.claude-v2"}

        assert lambda_handler.handler(event)["statusCode"] == 200
        request = fake_generate.call_args.args[0]
        assert request.github_url == _URL
        assert request.model == "anthropic.claude-v2"

    def test_empty_body_falls_back_to_event(self, fake_generate: MagicMock) -> None:
        response = lambda_handler.handler({"body": "", "github_url": _URL})

        assert response["statusCode"] == 200
        assert fake_generate.call_args.args[0].github_url == _URL

    def test_dict_body(self, fake_generate: MagicMock) -> None:
        response = lambda_handler.handler({"body": {"github_url": _URL}})
        assert response["statusCode"] == 200

    def test_missing_url(self, fake_generate: MagicMock) -> None:
        response = lambda_handler.handler({"body": "{}"})

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["success"] is False
        assert body["error"] == "Missing required parameter: github_url"
        assert "execution_time" in body
        fake_generate.assert_not_called()

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]"])
    def test_malformed_body(self, fake_generate: MagicMock, raw: str) -> None:
        response = lambda_handler.handler({"body": raw})

        assert response["statusCode"] == 400
        fake_generate.assert_not_called()

    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (ClientError("Invalid GitHub URL format: 'x'"), 400),
            (CollaboratorError("Failed to upload files to S3: denied"), 500),
            (RuntimeError("surprise"), 500),
        ],
    )
    def test_error_mapping(
        self,
        fake_generate: MagicMock,
        exc: Exception,
        status: int,
    ) -> None:
        fake_generate.side_effect = exc

        response = lambda_handler.handler({"github_url": _URL})

        assert response["statusCode"] == status
        assert json.loads(response["body"])["error"] == str(exc)
