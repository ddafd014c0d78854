"""Local filesystem storage layer.

This module exposes the resolver that maps bucket and object names onto the
storage root, together with the errors it raises.
"""

from .resolver import (
    DEFAULT_BUCKET_DIR_MODE,
    InvalidObjectNameError,
    StorageError,
    StorageRootResolver,
    object_basename,
    validate_bucket_name,
)

__all__ = [
    "DEFAULT_BUCKET_DIR_MODE",
    "InvalidObjectNameError",
    "StorageError",
    "StorageRootResolver",
    "object_basename",
    "validate_bucket_name",
]
