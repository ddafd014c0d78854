from .base import BaseService, ServiceError
from .bundle import ServiceBundle, get_service_bundle
from .object_reader import (
    InvalidObjectPathError,
    ObjectNotFoundError,
    ObjectReader,
    split_object_path,
)
from .object_writer import (
    InvalidUploadError,
    ObjectWriter,
    StoredObject,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "ServiceBundle",
    "get_service_bundle",
    "ObjectReader",
    "ObjectNotFoundError",
    "InvalidObjectPathError",
    "split_object_path",
    "ObjectWriter",
    "StoredObject",
    "InvalidUploadError",
]
