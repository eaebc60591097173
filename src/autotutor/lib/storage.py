"""S3 publishing for generated tutorial files."""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from autotutor.lib.errors import ClientError, CollaboratorError

__all__ = ["S3Uploader", "content_type_for"]

logger = logging.getLogger(__name__)

CACHE_CONTROL = "max-age=3600"

_CONTENT_TYPE_OVERRIDES = {
    ".md": "text/markdown",
    ".json": "application/json",
}


def content_type_for(filename: str) -> str:
    """Guess a MIME type; ``.md`` and ``.json`` are fixed regardless of platform."""
    override = _CONTENT_TYPE_OVERRIDES.get(Path(filename).suffix.lower())
    if override:
        return override
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


class S3Uploader:
    """Uploads files to one bucket and returns their public URLs."""

    def __init__(
        self,
        bucket_name: str | None,
        region: str = "us-west-2",
        *,
        client: Any | None = None,
    ) -> None:
        if not bucket_name:
            msg = (
                "S3 bucket name must be provided via s3_bucket or the "
                "S3_BUCKET_NAME environment variable"
            )
            raise ClientError(msg)
        self.bucket_name = bucket_name
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            import boto3

            self._client = boto3.client("s3", region_name=self.region)
        return self._client

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def _put(self, local_path: Path, key: str, **extra: Any) -> str:
        self.client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=local_path.read_bytes(),
            ContentType=content_type_for(local_path.name),
            **extra,
        )
        return self.public_url(key)

    def upload_tutorial_files(
        self,
        file_paths: Mapping[str, Path],
        repo_name: str,
    ) -> dict[str, str]:
        """Upload each file under ``<repo>/<YYYY-MM-DD>/`` and map kind -> URL.

        Missing local files are skipped with a warning.
        """
        base_key = f"{repo_name}/{datetime.now(UTC).date().isoformat()}"
        uploaded: dict[str, str] = {}
        try:
            for kind, local_path in file_paths.items():
                path = Path(local_path)
                if not path.exists():
                    logger.warning("File not found, not uploading: %s", path)
                    continue
                logger.info("Uploading %s", path.name)
                url = self._put(
                    path, f"{base_key}/{path.name}", CacheControl=CACHE_CONTROL
                )
                uploaded[kind] = url
                logger.info("Uploaded %s -> %s", path.name, url)
        except Exception as exc:
            msg = f"Failed to upload files to S3: {exc}"
            raise CollaboratorError(msg) from exc
        return uploaded

    def upload_file(self, local_path: Path, key: str) -> str:
        """Upload a single file to *key* and return its public URL."""
        path = Path(local_path)
        if not path.exists():
            msg = f"Failed to upload file to S3: file not found: {path}"
            raise CollaboratorError(msg)
        try:
            return self._put(path, key)
        except Exception as exc:
            msg = f"Failed to upload file to S3: {exc}"
            raise CollaboratorError(msg) from exc
