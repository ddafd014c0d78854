from __future__ import annotations

from dataclasses import dataclass, field

from objstore.infra.storage import StorageRootResolver

from .object_reader import ObjectReader
from .object_writer import ObjectWriter


@dataclass
class ServiceBundle:
    """Lazily constructs application services sharing the same resolver."""

    resolver: StorageRootResolver
    _writer: ObjectWriter | None = field(default=None, init=False, repr=False)
    _reader: ObjectReader | None = field(default=None, init=False, repr=False)

    def writer(self) -> ObjectWriter:
        if self._writer is None:
            self._writer = ObjectWriter(self.resolver)
        return self._writer

    def reader(self) -> ObjectReader:
        if self._reader is None:
            self._reader = ObjectReader(self.resolver)
        return self._reader


def get_service_bundle(resolver: StorageRootResolver) -> ServiceBundle:
    return ServiceBundle(resolver=resolver)
