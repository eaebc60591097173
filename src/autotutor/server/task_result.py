"""Tutorial task result normalization for the HTTP and MCP surfaces."""

from __future__ import annotations

from typing import Any

__all__ = ["error_body", "normalize_task_result"]


def error_body(message: str, **details: Any) -> dict[str, Any]:
    """Uniform failure payload: ``{"success": false, "error": ..., **details}``."""
    return {"success": False, "error": message, **details}


def normalize_task_result(status: str, raw_result: Any) -> dict[str, Any] | None:
    """Turn a Celery result or progress ``info`` into a JSON-safe dict.

    Failed tasks carry exception instances; these become the same failure
    payload the synchronous endpoint returns, tagged with the task status.
    """
    if raw_result is None:
        return None
    if isinstance(raw_result, dict):
        return raw_result
    if isinstance(raw_result, BaseException):
        return error_body(
            str(raw_result),
            error_type=type(raw_result).__name__,
            status=status,
        )
    return {
        "value": str(raw_result),
        "value_type": type(raw_result).__name__,
        "status": status,
    }
