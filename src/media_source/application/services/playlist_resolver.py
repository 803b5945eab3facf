"""Resolve a whole playlist with one extractor call."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from media_source.application.services.source_descriptor import SourceDescriptor
from media_source.domain.shared.messages import LogTemplates
from media_source.domain.source.decoder import decode
from media_source.domain.source.value_objects import UrlQuery

if TYPE_CHECKING:
    import httpx

    from ...domain.source.entities import Metadata
    from ...domain.source.records import ExtractionRecord
    from ..interfaces.extractor import ExtractorInvoker
    from ..interfaces.transport import StreamBuilder

logger = logging.getLogger(__name__)


class PlaylistResolver:
    """Expands a playlist URL into pre-seeded source descriptors.

    Every descriptor starts in METADATA_CACHED, so asking for its metadata
    never runs the extractor again. Its byte stream is still resolved lazily.
    """

    def __init__(
        self,
        *,
        invoker: ExtractorInvoker,
        stream_builder: StreamBuilder,
        client: httpx.AsyncClient,
    ) -> None:
        self._invoker = invoker
        self._stream_builder = stream_builder
        self._client = client

    @staticmethod
    def _entry_metadata(record: ExtractionRecord) -> Metadata:
        # Flat entries usually omit webpage_url; their url is the entry page itself.
        metadata = record.metadata
        if metadata.source_url is None:
            return metadata.model_copy(update={"source_url": record.url})
        return metadata

    async def resolve_playlist(self, url: str) -> list[SourceDescriptor]:
        """Return one descriptor per entry, in the extractor's order.

        Raises:
            ExtractionError: If the call failed or any entry was malformed;
                partial playlists are never returned.
        """
        logger.info(LogTemplates.PLAYLIST_RESOLVING, url)
        lines = await self._invoker.invoke_playlist(url)
        records = decode(lines, url)

        descriptors = [
            SourceDescriptor(
                UrlQuery(url=record.url),
                invoker=self._invoker,
                stream_builder=self._stream_builder,
                client=self._client,
                metadata=self._entry_metadata(record),
            )
            for record in records
        ]
        logger.info(LogTemplates.PLAYLIST_RESOLVED, url, len(descriptors))
        return descriptors
