"""Tests for the FastAPI app."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("celery")
from fastapi.testclient import TestClient

from autotutor import __version__
from autotutor.lib.errors import ClientError, CollaboratorError
from autotutor.lib.pipeline import TutorialRequest
from autotutor.server.app import app

_URL = "https://github.com/o/demo"


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestCreateTutorial:
    def test_success(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        captured: list[TutorialRequest] = []

        def fake_generate(request: TutorialRequest) -> dict[str, object]:
            captured.append(request)
            return {"success": True, "tutorial_url": "https://x/t.md"}

        monkeypatch.setattr("autotutor.server.app.generate_tutorial", fake_generate)

        response = client.post(
            "/tutorials",
            json={"github_url": f"  {_URL} ", "upload_to_s3": False, "model": "m"},
        )

        assert response.status_code == 200
        assert response.json()["tutorial_url"] == "https://x/t.md"
        assert response.headers["access-control-allow-origin"] == "*"
        assert captured == [
            TutorialRequest(github_url=_URL, upload_to_s3=False, model="m")
        ]

    def test_missing_url_is_400(self, client: TestClient) -> None:
        response = client.post("/tutorials", json={})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Missing required parameter: github_url"
        assert "execution_time" in body

    def test_client_error_is_400(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "autotutor.server.app.generate_tutorial",
            MagicMock(side_effect=ClientError("Invalid GitHub URL format: 'x'")),
        )

        response = client.post("/tutorials", json={"github_url": "x"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid GitHub URL format")

    def test_collaborator_error_is_500(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "autotutor.server.app.generate_tutorial",
            MagicMock(side_effect=CollaboratorError("Failed to clone repository")),
        )

        response = client.post("/tutorials", json={"github_url": _URL})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to clone repository"

    def test_unexpected_error_is_500(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "autotutor.server.app.generate_tutorial",
            MagicMock(side_effect=KeyError("surprise")),
        )

        response = client.post("/tutorials", json={"github_url": _URL})

        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_invalid_body_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/tutorials", json={"github_url": _URL, "provider": "ollama"}
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request: ")


class TestEnqueueTutorial:
    def test_enqueues(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        captured: dict[str, object] = {}

        def fake_delay(**kwargs: object) -> SimpleNamespace:
            captured.update(kwargs)
            return SimpleNamespace(id="task-123")

        monkeypatch.setattr(
            "autotutor.server.app.generate_tutorial_task.delay", fake_delay
        )

        response = client.post(
            "/tutorials/async", json={"github_url": _URL, "provider": "anthropic"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "task_id": "task-123",
            "status": "queued",
            "github_url": _URL,
        }
        assert captured["provider"] == "anthropic"
        assert captured["upload_to_s3"] is None

    def test_invalid_url_not_enqueued(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        delay = MagicMock()
        monkeypatch.setattr("autotutor.server.app.generate_tutorial_task.delay", delay)

        response = client.post(
            "/tutorials/async", json={"github_url": "https://gitlab.com/o/r"}
        )

        assert response.status_code == 400
        delay.assert_not_called()


class TestTaskStatus:
    def _fake_result(self, **kwargs: object) -> SimpleNamespace:
        ready = kwargs.pop("ready", True)
        return SimpleNamespace(ready=lambda: ready, **kwargs)

    def test_success(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = self._fake_result(status="SUCCESS", result={"success": True}, info=None)
        monkeypatch.setattr(
            "autotutor.server.app.generate_tutorial_task.AsyncResult",
            lambda task_id: fake,
        )

        response = client.get("/tasks/abc")

        assert response.json() == {
            "task_id": "abc",
            "status": "SUCCESS",
            "result": {"success": True},
        }

    def test_progress_uses_info(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = self._fake_result(
            ready=False, status="PROGRESS", result=None, info={"stage": "running"}
        )
        monkeypatch.setattr(
            "autotutor.server.app.generate_tutorial_task.AsyncResult",
            lambda task_id: fake,
        )

        assert client.get("/tasks/abc").json()["result"] == {"stage": "running"}

    def test_failure_becomes_error_body(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = self._fake_result(
            status="FAILURE", result=CollaboratorError("Analysis failed: x"), info=None
        )
        monkeypatch.setattr(
            "autotutor.server.app.generate_tutorial_task.AsyncResult",
            lambda task_id: fake,
        )

        result = client.get("/tasks/abc").json()["result"]

        assert result["success"] is False
        assert result["error"] == "Analysis failed: x"
        assert result["error_type"] == "CollaboratorError"
