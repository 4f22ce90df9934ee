"""Dashboard service: metadata listing, cache refresh and Markdown export.

Owns the source comment store and the metadata cache, so both live
exactly as long as the Dashboard instance.
"""

import logging

from api_dashboard.cache import CacheMode, MetadataCache
from api_dashboard.config import DashboardSettings
from api_dashboard.generator.markdown import render, render_not_found
from api_dashboard.generator.metadata import EndpointMetadataBuilder
from api_dashboard.parser.base import EndpointMetadata, MetadataIndex, RefreshAck
from api_dashboard.parser.comments import HASH, CommentStyle
from api_dashboard.parser.source import SourceCommentStore
from api_dashboard.routing import RouteRegistry

logger = logging.getLogger(__name__)


class Dashboard:
    """Entry point used by presentation code (web views, CLI)."""

    def __init__(
        self,
        registry: RouteRegistry,
        settings: DashboardSettings | None = None,
        style: CommentStyle = HASH,
    ):
        self.registry = registry
        self.settings = settings or DashboardSettings()
        self.store = SourceCommentStore(self.settings.source_root, style=style)
        self.builder = EndpointMetadataBuilder(
            self.store,
            limit=self.settings.depth_limit,
            no_description=self.settings.no_description,
        )
        self.cache = MetadataCache(
            registry.endpoints,
            self.builder,
            mode=CacheMode(self.settings.cache_mode),
            excluded_paths=self.settings.excluded_paths,
        )

    def meta(self, base_url: str | None = None) -> MetadataIndex:
        """Return the full metadata index, URLs rooted at ``base_url``."""
        return self.cache.get(self.settings.base_url if base_url is None else base_url)

    def refresh(self) -> RefreshAck:
        return self.cache.invalidate()

    def find(self, key: str, base_url: str | None = None) -> EndpointMetadata | None:
        """Match an endpoint by full URL, path, or ``"METHOD path"``.

        An endpoint with no declared methods accepts any method.
        """
        index = self.meta(base_url)
        method, _, rest = key.strip().partition(" ")
        for metadata in index.all():
            if key in (index.url_for(metadata), metadata.path):
                return metadata
            methods = metadata.endpoint.methods
            if rest and rest.strip() == metadata.path and (not methods or method.upper() in methods):
                return metadata
        return None

    def export_markdown(self, key: str, actual_response: str | None = None, base_url: str | None = None) -> str:
        metadata = self.find(key, base_url)
        if metadata is None:
            logger.info("No endpoint matches %s", key)
            return render_not_found(key)
        return render(metadata, actual_response)

    def close(self) -> None:
        self.cache.invalidate()
        self.store.clear()
