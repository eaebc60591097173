"""AWS Lambda entry point (API Gateway proxy events or direct invocation)."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from autotutor.lib.errors import AutotutorError, ClientError
from autotutor.lib.pipeline import TutorialRequest, generate_tutorial
from autotutor.server.task_result import error_body

logger = logging.getLogger(__name__)

_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}


def _response(status_code: int, payload: dict[str, Any]) -> dict[str, Any]:
    return {"statusCode": status_code, "headers": _HEADERS, "body": json.dumps(payload)}


def _event_data(event: dict[str, Any]) -> dict[str, Any]:
    body = event.get("body")
    if not body:
        return event
    if isinstance(body, dict):
        return body
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        msg = f"Request body is not valid JSON: {exc}"
        raise ClientError(msg) from exc
    if not isinstance(data, dict):
        raise ClientError("Request body must be a JSON object")
    return data


def _request_from(data: dict[str, Any]) -> TutorialRequest:
    github_url = data.get("github_url")
    if not isinstance(github_url, str) or not github_url.strip():
        raise ClientError("Missing required parameter: github_url")
    upload = data.get("upload_to_s3")
    return TutorialRequest(
        github_url=github_url.strip(),
        upload_to_s3=None if upload is None else bool(upload),
        aws_region=data.get("aws_region"),
        s3_bucket=data.get("s3_bucket"),
        provider=data.get("provider"),
        model=data.get("bedrock_model") or data.get("model"),
    )


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Run one tutorial generation and return an API Gateway response."""
    logger.info("autotutor Lambda invocation started")
    start = time.monotonic()
    try:
        result = generate_tutorial(_request_from(_event_data(event)))
    except AutotutorError as exc:
        logger.error("Tutorial generation failed: %s", exc)
        elapsed = round(time.monotonic() - start, 2)
        return _response(exc.status_code, error_body(str(exc), execution_time=elapsed))
    except Exception as exc:
        logger.exception("Unexpected error during tutorial generation")
        elapsed = round(time.monotonic() - start, 2)
        return _response(500, error_body(str(exc), execution_time=elapsed))
    return _response(200, result)
