"""FastAPI application exposing tutorial generation over HTTP.

``POST /tutorials`` runs the whole pipeline in the request; ``POST
/tutorials/async`` enqueues it on Celery and ``GET /tasks/{task_id}`` polls.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Literal

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from autotutor import __version__
from autotutor.lib.errors import AutotutorError, ClientError
from autotutor.lib.git_utils import extract_owner_and_name
from autotutor.lib.pipeline import TutorialRequest, generate_tutorial
from autotutor.server.celery_app import generate_tutorial_task
from autotutor.server.task_result import error_body, normalize_task_result

logger = logging.getLogger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

app = FastAPI(
    title="autotutor",
    description="Git-to-tutorial generator.",
    version=__version__,
)


class TutorialRequestBody(BaseModel):
    """Request body for the tutorial endpoints."""

    github_url: str | None = None
    upload_to_s3: bool | None = None
    aws_region: str | None = None
    s3_bucket: str | None = None
    provider: Literal["bedrock", "anthropic", "openai"] | None = None
    model: str | None = None

    @field_validator("github_url", "aws_region", "s3_bucket", "model")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    def to_request(self) -> TutorialRequest:
        if not self.github_url:
            raise ClientError("Missing required parameter: github_url")
        return TutorialRequest(
            github_url=self.github_url,
            upload_to_s3=self.upload_to_s3,
            aws_region=self.aws_region,
            s3_bucket=self.s3_bucket,
            provider=self.provider,
            model=self.model,
        )


class EnqueueResponse(BaseModel):
    """Response for an enqueued tutorial job."""

    task_id: str
    status: str
    github_url: str


class TaskStatus(BaseModel):
    """Response for checking task status."""

    task_id: str
    status: str
    result: dict[str, Any] | None = None


def _json(status_code: int, payload: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload, headers=CORS_HEADERS)


def _elapsed(start: float) -> float:
    return round(time.monotonic() - start, 2)


@app.exception_handler(RequestValidationError)
async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return _json(400, error_body(f"Invalid request: {details}"))


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@app.post("/tutorials")
def create_tutorial(body: TutorialRequestBody) -> JSONResponse:
    """Generate a tutorial synchronously and return the full result."""
    start = time.monotonic()
    try:
        result = generate_tutorial(body.to_request())
    except AutotutorError as exc:
        logger.error("Tutorial generation failed: %s", exc)
        return _json(
            exc.status_code, error_body(str(exc), execution_time=_elapsed(start))
        )
    except Exception as exc:
        logger.exception("Unexpected error during tutorial generation")
        return _json(500, error_body(str(exc), execution_time=_elapsed(start)))
    return _json(200, result)


@app.post("/tutorials/async", response_model=EnqueueResponse)
def enqueue_tutorial(body: TutorialRequestBody) -> Any:
    """Validate the request and enqueue it for a Celery worker."""
    try:
        request = body.to_request()
        extract_owner_and_name(request.github_url)
    except ClientError as exc:
        return _json(400, error_body(str(exc)))

    task = generate_tutorial_task.delay(
        github_url=request.github_url,
        upload_to_s3=request.upload_to_s3,
        aws_region=request.aws_region,
        s3_bucket=request.s3_bucket,
        provider=request.provider,
        model=request.model,
    )
    return EnqueueResponse(
        task_id=task.id, status="queued", github_url=request.github_url
    )


@app.get("/tasks/{task_id}", response_model=TaskStatus)
def get_task(task_id: str) -> TaskStatus:
    """Check the status of an enqueued tutorial task."""
    result = generate_tutorial_task.AsyncResult(task_id)
    raw_result = result.result if result.ready() else result.info
    return TaskStatus(
        task_id=task_id,
        status=result.status,
        result=normalize_task_result(result.status, raw_result),
    )
