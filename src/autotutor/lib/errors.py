"""Request-level error taxonomy.

``ClientError`` marks bad caller input (surfaced as HTTP 400) and
``CollaboratorError`` marks a failed external dependency such as git, the
model API, or S3 (surfaced as HTTP 500). Neither is retried.
"""

from __future__ import annotations

__all__ = ["AutotutorError", "ClientError", "CollaboratorError"]


class AutotutorError(Exception):
    """Base class for errors that abort a tutorial run."""

    status_code = 500


class ClientError(AutotutorError, ValueError):
    """Malformed or missing caller input."""

    status_code = 400


class CollaboratorError(AutotutorError, RuntimeError):
    """An external collaborator (clone, model, storage) failed."""

    status_code = 500
