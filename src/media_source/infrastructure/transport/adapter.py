"""Turn a resolved ExtractionRecord into a readable ResolvedStream."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Final

import httpx

from media_source.application.interfaces.transport import ResolvedStream, StreamBuilder
from media_source.domain.shared.exceptions import TransportFailedError
from media_source.domain.shared.messages import LogTemplates
from media_source.domain.source.records import ExtractionRecord
from media_source.domain.source.value_objects import TransportKind
from media_source.infrastructure.transport.streams import (
    DEFAULT_CHUNK_SIZE,
    HlsStream,
    HttpRangeStream,
)

logger = logging.getLogger(__name__)

# RFC 9110 token characters for field names
HEADER_NAME: Final[re.Pattern[str]] = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
HEADER_VALUE: Final[re.Pattern[str]] = re.compile(r"[\t\x20-\x7e]*")


def build_headers(raw: Mapping[str, str]) -> httpx.Headers:
    """Rebuild request headers, dropping pairs that are not valid HTTP syntax."""
    headers = httpx.Headers()
    for name, value in raw.items():
        if not HEADER_NAME.fullmatch(name) or not HEADER_VALUE.fullmatch(value):
            logger.debug(LogTemplates.HEADER_DROPPED, name)
            continue
        headers[name] = value.strip()
    return headers


StreamFactory = Callable[[httpx.AsyncClient, ExtractionRecord, httpx.Headers], ResolvedStream]


class TransportAdapter(StreamBuilder):
    """Chooses the transport from the record's protocol and opens the stream."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._chunk_size = chunk_size
        self._factories: dict[TransportKind, StreamFactory] = {
            TransportKind.DIRECT_HTTP: self._direct_http,
            TransportKind.SEGMENTED_MANIFEST: self._segmented_manifest,
        }

    def _direct_http(
        self, client: httpx.AsyncClient, record: ExtractionRecord, headers: httpx.Headers
    ) -> ResolvedStream:
        return HttpRangeStream(
            client,
            record.url,
            headers=headers,
            content_length=record.filesize,
            chunk_size=self._chunk_size,
        )

    def _segmented_manifest(
        self, client: httpx.AsyncClient, record: ExtractionRecord, headers: httpx.Headers
    ) -> ResolvedStream:
        return HlsStream(client, record.url, headers=headers, chunk_size=self._chunk_size)

    def prepare(self, record: ExtractionRecord, client: httpx.AsyncClient) -> ResolvedStream:
        """Construct the stream without touching the network."""
        headers = build_headers(record.http_headers)
        return self._factories[record.transport](client, record, headers)

    async def build(self, record: ExtractionRecord, client: httpx.AsyncClient) -> ResolvedStream:
        """Construct the stream and perform its validation round trip.

        Raises:
            TransportFailedError: If the resource could not be opened.
        """
        stream = self.prepare(record, client)
        try:
            await stream.open()
        except TransportFailedError:
            raise
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning(LogTemplates.TRANSPORT_FAILED, record.url, e)
            raise TransportFailedError(record.url, e) from e
        return stream
