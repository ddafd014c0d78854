"""Object writer service.

Stores uploaded bytes under their resolved (bucket, name) location. Content
is staged in a temporary file inside the bucket directory and renamed onto
the final path, so a failed upload never leaves a partial object behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from objstore.app.services.base import BaseService, ServiceError
from objstore.infra.observability.metrics import UPLOADED_BYTES, UPLOADS
from objstore.infra.storage import StorageError

COPY_CHUNK_SIZE = 64 * 1024
OBJECT_FILE_MODE = 0o644
STAGING_PREFIX = ".upload-"

logger = logging.getLogger("storage")


class InvalidUploadError(ServiceError):
    """Raised when the upload form lacks a usable file part."""


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Result of a successful upload."""

    bucket: str
    name: str
    path: Path
    size_bytes: int


def _copy_stream(source: BinaryIO, target: BinaryIO) -> int:
    total = 0
    while True:
        chunk = source.read(COPY_CHUNK_SIZE)
        if not chunk:
            return total
        target.write(chunk)
        total += len(chunk)


class ObjectWriter(BaseService):
    """Application service committing uploads to the storage root."""

    def store(self, bucket: str, declared_name: str, source: BinaryIO) -> StoredObject:
        """Write ``source`` to ``bucket/basename(declared_name)``.

        An existing object with the same identity is replaced.

        Raises:
            InvalidObjectNameError: If the bucket or name cannot be resolved.
            StorageError: If the bucket directory or the file cannot be written.
        """
        destination = self.resolver.resolve(bucket, declared_name)
        try:
            fd, staging_name = tempfile.mkstemp(
                prefix=STAGING_PREFIX, dir=destination.parent
            )
        except OSError as exc:
            self._log_failure("file_create_failed", bucket, destination, exc)
            UPLOADS.labels("failed").inc()
            raise StorageError("Error saving file") from exc

        staging_path = Path(staging_name)
        committed = False
        try:
            with os.fdopen(fd, "wb") as fp:
                size = _copy_stream(source, fp)
            os.chmod(staging_path, OBJECT_FILE_MODE)
            os.replace(staging_path, destination)
            committed = True
        except OSError as exc:
            self._log_failure("file_copy_failed", bucket, destination, exc)
            UPLOADS.labels("failed").inc()
            raise StorageError("Error saving file") from exc
        finally:
            if not committed:
                staging_path.unlink(missing_ok=True)

        UPLOADS.labels("stored").inc()
        UPLOADED_BYTES.inc(size)
        logger.info(
            "object_stored bucket=%s name=%s size_bytes=%s",
            bucket,
            destination.name,
            size,
            extra={
                "extra": {
                    "bucket": bucket,
                    "object": destination.name,
                    "size_bytes": size,
                }
            },
        )
        return StoredObject(
            bucket=bucket,
            name=destination.name,
            path=destination,
            size_bytes=size,
        )

    @staticmethod
    def _log_failure(event: str, bucket: str, destination: Path, exc: OSError) -> None:
        logger.error(
            "%s bucket=%s path=%s error=%s",
            event,
            bucket,
            destination,
            exc,
            extra={
                "extra": {
                    "event": event,
                    "bucket": bucket,
                    "path": str(destination),
                    "error": str(exc),
                }
            },
        )
