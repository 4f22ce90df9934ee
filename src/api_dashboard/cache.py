"""Process-lifetime cache of the metadata index."""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from enum import Enum

from api_dashboard.generator.metadata import EndpointMetadataBuilder
from api_dashboard.parser.base import EndpointDescriptor, EndpointMetadata, MetadataIndex, RefreshAck

logger = logging.getLogger(__name__)


class CacheMode(str, Enum):
    FRESH = "fresh"  # rebuild on every read, keep nothing
    CACHED = "cached"  # build once, keep until invalidated


class MetadataCache:
    """Holds the metadata index and rebuilds it on demand.

    In cached mode the first read builds the index and later reads reuse it,
    only swapping in the caller's base URL. ``invalidate`` empties the cache so
    the next read rebuilds from the current endpoint set.
    """

    def __init__(
        self,
        endpoints: Callable[[], Iterable[EndpointDescriptor]],
        builder: EndpointMetadataBuilder,
        mode: CacheMode = CacheMode.CACHED,
        excluded_paths: Iterable[str] = (),
    ):
        self.endpoints = endpoints
        self.builder = builder
        self.mode = CacheMode(mode)
        self.excluded_paths = frozenset(excluded_paths)
        self._index: MetadataIndex | None = None
        self._lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._index is not None

    def get(self, base_url: str = "") -> MetadataIndex:
        if self.mode is CacheMode.FRESH:
            return self.build().with_base_url(base_url)

        index = self._index
        if index is None:
            with self._lock:
                if self._index is None:
                    self._index = self.build()
                index = self._index
        return index.with_base_url(base_url)

    def invalidate(self) -> RefreshAck:
        with self._lock:
            self._index = None
        logger.info("Metadata cache invalidated")
        return RefreshAck(status="ok", timestamp=time.time())

    def build(self) -> MetadataIndex:
        """Build a complete index from the current endpoint set."""
        started = time.perf_counter()
        groups: dict[str, list[EndpointMetadata]] = {}
        for endpoint in self.endpoints():
            if endpoint.path in self.excluded_paths:
                continue
            try:
                metadata = self.builder.build(endpoint)
            except Exception:  # noqa: BLE001 - one broken handler must not blank the index
                logger.warning("Cannot build metadata for %s", endpoint.path, exc_info=True)
                continue
            groups.setdefault(metadata.group_name, []).append(metadata)

        index = MetadataIndex(
            groups={
                name: tuple(sorted(entries, key=lambda m: (m.path, m.method_label)))
                for name, entries in sorted(groups.items())
            }
        )
        logger.debug(
            "Built metadata for %d endpoints in %.1f ms",
            sum(len(g) for g in index.groups.values()),
            (time.perf_counter() - started) * 1000,
        )
        return index
