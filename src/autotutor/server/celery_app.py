"""Celery application and the queued tutorial-generation task."""

from __future__ import annotations

import logging
import os
from typing import Any

from celery import Celery

logger = logging.getLogger(__name__)


def _resolve_celery_urls() -> tuple[str, str]:
    """Resolve broker/result backend URLs with env fallbacks.

    Priority order:
    1. `CELERY_BROKER_URL` / `CELERY_RESULT_BACKEND`
    2. shared `REDIS_URL`
    3. local default (`redis://localhost:6379/0`)
    """
    redis_url = os.environ.get("REDIS_URL")
    broker_url = (
        os.environ.get("CELERY_BROKER_URL") or redis_url or "redis://localhost:6379/0"
    )
    backend_url = os.environ.get("CELERY_RESULT_BACKEND") or redis_url or broker_url
    return broker_url, backend_url


_BROKER_URL, _RESULT_BACKEND_URL = _resolve_celery_urls()

celery_app = Celery(
    "autotutor",
    broker=_BROKER_URL,
    backend=_RESULT_BACKEND_URL,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
)


def _update_progress(
    task: object,
    *,
    task_id: str | None,
    stage: str,
    github_url: str,
) -> None:
    update_state = getattr(task, "update_state", None)
    if not callable(update_state):
        return
    update_state(
        state="PROGRESS",
        meta={"task_id": task_id, "stage": stage, "github_url": github_url},
    )


def run_tutorial_task(
    task: object,
    *,
    github_url: str,
    upload_to_s3: bool | None = None,
    aws_region: str | None = None,
    s3_bucket: str | None = None,
    provider: str | None = None,
    model: str | None = None,
) -> dict[str, Any]:
    """Task body, separated from the Celery decorator for direct testing."""
    from autotutor.lib.pipeline import TutorialRequest, generate_tutorial

    task_id = getattr(getattr(task, "request", None), "id", None)
    _update_progress(task, task_id=task_id, stage="running", github_url=github_url)
    logger.info("Tutorial task %s started for %s", task_id, github_url)
    result = generate_tutorial(
        TutorialRequest(
            github_url=github_url,
            upload_to_s3=upload_to_s3,
            aws_region=aws_region,
            s3_bucket=s3_bucket,
            provider=provider,
            model=model,
        )
    )
    result["task_id"] = task_id
    return result


@celery_app.task(bind=True, name="autotutor.generate_tutorial")
def generate_tutorial_task(
    self: object,
    github_url: str,
    upload_to_s3: bool | None = None,
    aws_region: str | None = None,
    s3_bucket: str | None = None,
    provider: str | None = None,
    model: str | None = None,
) -> dict[str, Any]:  # pragma: no cover - exercised in integration
    """Async task: generate a tutorial for one repository.

    Failures propagate so Celery records the task as FAILURE; the API turns
    the stored exception into the standard error payload.
    """
    return run_tutorial_task(
        self,
        github_url=github_url,
        upload_to_s3=upload_to_s3,
        aws_region=aws_region,
        s3_bucket=s3_bucket,
        provider=provider,
        model=model,
    )
