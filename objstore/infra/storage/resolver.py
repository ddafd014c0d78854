"""Filesystem addressing for buckets and objects.

This module maps a (bucket, object name) pair onto a path below the storage
root. The same mapping is used by uploads and downloads, so an object written
under a given identity is always found again under that identity.
"""

from __future__ import annotations

import logging
from pathlib import Path

DEFAULT_BUCKET_DIR_MODE = 0o755

_SEPARATORS = ("/", "\\")
_RESERVED_SEGMENTS = {"", ".", ".."}
_NUL = "\x00"

logger = logging.getLogger("storage")


class StorageError(RuntimeError):
    """Raised when the backing filesystem cannot complete an operation."""


class InvalidObjectNameError(ValueError):
    """Raised when a bucket or object name cannot be mapped to a path."""


def object_basename(name: str) -> str:
    """Reduce a client-supplied object name to its final path segment.

    Leading directories are discarded and trailing separators are ignored,
    so ``"../../etc/x"`` and ``"etc/x/"`` both become ``"x"``.

    Raises:
        InvalidObjectNameError: If no usable segment remains or the name
            contains a NUL byte.
    """
    normalized = name.replace("\\", "/").rstrip("/")
    base = normalized.rsplit("/", 1)[-1]
    if base in _RESERVED_SEGMENTS or _NUL in name:
        raise InvalidObjectNameError(f"Invalid object name: {name!r}")
    return base


def validate_bucket_name(bucket: str) -> str:
    """Ensure the bucket maps to exactly one directory below the root."""
    if (
        bucket in _RESERVED_SEGMENTS
        or _NUL in bucket
        or any(sep in bucket for sep in _SEPARATORS)
    ):
        raise InvalidObjectNameError(f"Invalid bucket name: {bucket!r}")
    return bucket


class StorageRootResolver:
    """Resolves object identities to paths below a fixed storage root."""

    def __init__(
        self, root: str | Path, *, dir_mode: int = DEFAULT_BUCKET_DIR_MODE
    ) -> None:
        self._root = Path(root)
        self._dir_mode = dir_mode

    @property
    def root(self) -> Path:
        return self._root

    def bucket_path(self, bucket: str) -> Path:
        return self._root / validate_bucket_name(bucket)

    def resolve(self, bucket: str, name: str) -> Path:
        """Return the on-disk path for ``(bucket, name)``.

        The bucket directory is created when missing. The object path itself
        is not checked; callers decide whether it must exist.

        Raises:
            InvalidObjectNameError: If the bucket or object name is unusable.
            StorageError: If the bucket directory cannot be created.
        """
        file_name = object_basename(name)
        bucket_dir = self.bucket_path(bucket)
        if not bucket_dir.is_dir():
            try:
                # exist_ok covers a concurrent first writer
                bucket_dir.mkdir(mode=self._dir_mode, parents=True, exist_ok=True)
            except OSError as exc:
                logger.error(
                    "bucket_create_failed bucket=%s path=%s error=%s",
                    bucket,
                    bucket_dir,
                    exc,
                    extra={"extra": {"bucket": bucket, "error": str(exc)}},
                )
                raise StorageError("Error creating bucket path") from exc
        return bucket_dir / file_name
