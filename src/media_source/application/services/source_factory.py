"""Builds source descriptors from raw user input."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from media_source.application.services.source_descriptor import SourceDescriptor
from media_source.domain.shared.exceptions import ValidationError
from media_source.domain.shared.messages import ErrorMessages
from media_source.domain.source.decoder import decode
from media_source.domain.source.value_objects import Query, SearchQuery, UrlQuery

if TYPE_CHECKING:
    import httpx

    from ...domain.source.entities import Metadata
    from ..interfaces.extractor import ExtractorInvoker
    from ..interfaces.transport import StreamBuilder

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"^https?://"),
    re.compile(r"^www\."),
]

PLAYLIST_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"[?&]list="),
    re.compile(r"/playlist\?"),
    re.compile(r"/sets/"),
]


def is_url(text: str) -> bool:
    return any(pattern.search(text) for pattern in URL_PATTERNS)


def is_playlist(url: str) -> bool:
    return is_url(url) and any(pattern.search(url) for pattern in PLAYLIST_PATTERNS)


class SourceFactory:
    """Creates descriptors that share one invoker, stream builder and HTTP client."""

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

    def _descriptor(
        self, query: Query, metadata: Metadata | None = None
    ) -> SourceDescriptor:
        return SourceDescriptor(
            query,
            invoker=self._invoker,
            stream_builder=self._stream_builder,
            client=self._client,
            metadata=metadata,
        )

    def for_url(self, url: str) -> SourceDescriptor:
        return self._descriptor(UrlQuery(url=url))

    def for_search(self, terms: str) -> SourceDescriptor:
        return self._descriptor(SearchQuery(terms=terms))

    def with_metadata(self, url: str, metadata: Metadata) -> SourceDescriptor:
        """A descriptor whose metadata is already known (search API hit, playlist entry)."""
        return self._descriptor(UrlQuery(url=url), metadata)

    async def search(self, terms: str, limit: int = 5) -> list[SourceDescriptor]:
        """Run one search and return a pre-seeded descriptor per hit, best first.

        Raises:
            ExtractionError: If the extractor failed or found nothing.
        """
        query = SearchQuery(terms=terms, result_count=limit)
        lines = await self._invoker.invoke(query, query.result_count)
        return [
            self.with_metadata(record.webpage_url or record.url, record.metadata)
            for record in decode(lines, terms)
        ]

    def from_input(self, text: str) -> SourceDescriptor:
        """URL-looking input is played directly, anything else is searched."""
        text = text.strip()
        if not text:
            raise ValidationError(ErrorMessages.EMPTY_QUERY, field="query")
        if is_url(text):
            return self.for_url(text)
        return self.for_search(text)
