from __future__ import annotations

from objstore.infra.storage import StorageRootResolver


class ServiceError(Exception):
    """Base class for application service level exceptions."""


class BaseService:
    """Shared plumbing for services operating on the storage root."""

    def __init__(self, resolver: StorageRootResolver):
        self._resolver = resolver

    @property
    def resolver(self) -> StorageRootResolver:
        return self._resolver
