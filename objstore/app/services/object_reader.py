"""Object reader service.

Turns a retrieval path such as ``/bucket/object`` into the file that backs
it. Serving the bytes (content type, ranges, validators) is left to the HTTP
layer.
"""

from __future__ import annotations

from pathlib import Path

from objstore.app.services.base import BaseService, ServiceError


class InvalidObjectPathError(ServiceError):
    """Raised when a retrieval path does not name a bucket and an object."""


class ObjectNotFoundError(ServiceError):
    """Raised when no object is stored at the resolved location."""


def split_object_path(request_path: str) -> tuple[str, str]:
    """Return ``(bucket, object_name)`` from a retrieval path.

    Only the first two segments are used; anything after them is ignored.
    """
    parts = request_path.removeprefix("/").split("/")
    if len(parts) < 2:
        raise InvalidObjectPathError("Invalid request")
    return parts[0], parts[1]


class ObjectReader(BaseService):
    def locate(self, request_path: str) -> Path:
        """Resolve ``request_path`` to an existing object file.

        Raises:
            InvalidObjectPathError: If fewer than two segments are given.
            InvalidObjectNameError: If the bucket or object name is unusable.
            StorageError: If the bucket directory cannot be created.
            ObjectNotFoundError: If the object does not exist.
        """
        bucket, name = split_object_path(request_path)
        path = self.resolver.resolve(bucket, name)
        if not path.is_file():
            raise ObjectNotFoundError(f"Object {bucket}/{path.name} not found")
        return path
