"""Dependency Injection Container

Wires the shared HTTP client, the extractor invoker, the transport adapter
and the handlers built on top of them. Components are created on first
access and cached for the life of the container.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from media_source.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import httpx

    from ..application.commands.enqueue_source import EnqueueSourceHandler
    from ..application.interfaces.extractor import ExtractorInvoker
    from ..application.interfaces.search_api import MetadataSearch
    from ..application.interfaces.source_queue import SourceQueue
    from ..application.interfaces.transport import StreamBuilder
    from ..application.queries.get_current import GetCurrentSourceHandler
    from ..application.services.playlist_resolver import PlaylistResolver
    from ..application.services.source_factory import SourceFactory
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Every source created through this container shares one
    ``httpx.AsyncClient``; call :meth:`shutdown` to close it.
    """

    settings: Settings

    # Infrastructure adapters
    _http_client: httpx.AsyncClient | None = None
    _invoker: ExtractorInvoker | None = None
    _transport_adapter: StreamBuilder | None = None
    _search_api: MetadataSearch | None = None
    _source_queue: SourceQueue | None = None

    # Application services
    _source_factory: SourceFactory | None = None
    _playlist_resolver: PlaylistResolver | None = None

    # Handlers
    _enqueue_handler: EnqueueSourceHandler | None = None
    _get_current_handler: GetCurrentSourceHandler | None = None

    # === Infrastructure Adapters ===

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get the shared HTTP client used for streams and the search API."""
        if self._http_client is None:
            import httpx

            http = self.settings.http
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(http.timeout_s, connect=http.connect_timeout_s),
                limits=httpx.Limits(max_connections=http.max_connections),
                headers={"User-Agent": http.user_agent},
                follow_redirects=True,
            )
        return self._http_client

    @property
    def invoker(self) -> ExtractorInvoker:
        """Get the extractor invoker."""
        if self._invoker is None:
            from ..infrastructure.extractor.invoker import YtDlpInvoker

            self._invoker = YtDlpInvoker(self.settings.extractor)
        return self._invoker

    @property
    def transport_adapter(self) -> StreamBuilder:
        """Get the transport adapter."""
        if self._transport_adapter is None:
            from ..infrastructure.transport.adapter import TransportAdapter

            self._transport_adapter = TransportAdapter(chunk_size=self.settings.http.chunk_size)
        return self._transport_adapter

    @property
    def search_api(self) -> MetadataSearch:
        """Get the fast-path search client."""
        if self._search_api is None:
            from ..infrastructure.search.youtube_data_api import YouTubeDataApiClient

            self._search_api = YouTubeDataApiClient(self.http_client, self.settings.search_api)
        return self._search_api

    @property
    def source_queue(self) -> SourceQueue:
        """Get the source queue."""
        if self._source_queue is None:
            from ..infrastructure.queue.memory_queue import InMemorySourceQueue

            self._source_queue = InMemorySourceQueue(self.settings.playback.max_queue_size)
        return self._source_queue

    # === Application Services ===

    @property
    def source_factory(self) -> SourceFactory:
        """Get the source factory."""
        if self._source_factory is None:
            from ..application.services.source_factory import SourceFactory

            self._source_factory = SourceFactory(
                invoker=self.invoker,
                stream_builder=self.transport_adapter,
                client=self.http_client,
            )
        return self._source_factory

    @property
    def playlist_resolver(self) -> PlaylistResolver:
        """Get the playlist resolver."""
        if self._playlist_resolver is None:
            from ..application.services.playlist_resolver import PlaylistResolver

            self._playlist_resolver = PlaylistResolver(
                invoker=self.invoker,
                stream_builder=self.transport_adapter,
                client=self.http_client,
            )
        return self._playlist_resolver

    # === Handlers ===

    @property
    def enqueue_handler(self) -> EnqueueSourceHandler:
        """Get the enqueue command handler."""
        if self._enqueue_handler is None:
            from ..application.commands.enqueue_source import EnqueueSourceHandler

            self._enqueue_handler = EnqueueSourceHandler(
                source_factory=self.source_factory,
                playlist_resolver=self.playlist_resolver,
                source_queue=self.source_queue,
                search_api=self.search_api,
            )
        return self._enqueue_handler

    @property
    def get_current_handler(self) -> GetCurrentSourceHandler:
        """Get the current-source query handler."""
        if self._get_current_handler is None:
            from ..application.queries.get_current import GetCurrentSourceHandler

            self._get_current_handler = GetCurrentSourceHandler(
                source_queue=self.source_queue,
                metadata_timeout_s=self.settings.playback.metadata_timeout_s,
            )
        return self._get_current_handler

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Close the shared HTTP client."""
        if self._http_client is not None:
            logger.debug(LogTemplates.CONTAINER_SHUTDOWN)
            await self._http_client.aclose()
            self._http_client = None


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
