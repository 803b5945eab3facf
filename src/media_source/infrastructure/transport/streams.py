"""Byte sources for resolved media.

Two transports sit behind the same ResolvedStream interface:

- HttpRangeStream: one continuous resource fetched with HTTP Range requests.
- HlsStream: a segmented manifest (m3u8) whose segments are fetched in order.

Neither decodes audio; they only hand out the bytes.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Final
from urllib.parse import urljoin

import httpx

from media_source.application.interfaces.transport import ResolvedStream
from media_source.domain.shared.exceptions import TransportFailedError
from media_source.domain.shared.messages import LogTemplates
from media_source.domain.source.value_objects import TransportKind

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE: Final[int] = 64 * 1024
CONTENT_RANGE_TOTAL: Final[re.Pattern[str]] = re.compile(r"/(\d+)\s*$")
BANDWIDTH_ATTR: Final[re.Pattern[str]] = re.compile(r"BANDWIDTH=(\d+)")


class HttpxStream(ResolvedStream):
    """Shared state for streams that read through the pooled httpx client."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: httpx.Headers | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._client = client
        self.url = url
        self.headers = headers if headers is not None else httpx.Headers()
        self._chunk_size = chunk_size
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value!r}, url={self.url!r})"


class HttpRangeStream(HttpxStream):
    """Continuous resource read through HTTP byte ranges.

    A known ``content_length`` (the extractor's ``filesize``) makes the
    stream seekable without asking the server first.
    """

    kind = TransportKind.DIRECT_HTTP

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: httpx.Headers | None = None,
        content_length: int | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        super().__init__(client, url, headers, chunk_size)
        self.content_length = content_length
        self._position = 0
        self._discard = 0
        self._response: httpx.Response | None = None

    @property
    def seekable(self) -> bool:
        return self.content_length is not None

    @property
    def position(self) -> int:
        return self._position

    async def _request_from(self, offset: int) -> httpx.Response:
        headers = httpx.Headers(self.headers)
        headers["Range"] = f"bytes={offset}-"
        request = self._client.build_request("GET", self.url, headers=headers)
        try:
            response = await self._client.send(request, stream=True)
            if response.is_error:
                await response.aclose()
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.TRANSPORT_FAILED, self.url, e)
            raise TransportFailedError(self.url, e) from e

        # A 200 to a ranged request carries the whole body from byte 0.
        if offset and response.status_code != httpx.codes.PARTIAL_CONTENT:
            logger.debug(LogTemplates.TRANSPORT_RANGE_IGNORED, self.url, offset)
            self._discard = offset
        else:
            self._discard = 0
        return response

    def _learn_length(self, response: httpx.Response) -> None:
        if self.content_length is not None:
            return
        content_range = response.headers.get("content-range")
        if content_range:
            match = CONTENT_RANGE_TOTAL.search(content_range)
            if match:
                self.content_length = int(match.group(1))
                return
        length = response.headers.get("content-length")
        if response.status_code == httpx.codes.OK and length is not None:
            try:
                self.content_length = int(length)
            except ValueError:
                logger.debug(LogTemplates.TRANSPORT_BAD_LENGTH, length, self.url)

    async def open(self) -> None:
        self._response = await self._request_from(self._position)
        self._learn_length(self._response)
        logger.debug(LogTemplates.TRANSPORT_HTTP_OPENED, self.url, self.content_length)

    async def seek(self, offset: int) -> int:
        if self.content_length is None:
            raise OSError("stream is not seekable")
        offset = max(0, min(offset, self.content_length))
        if self._response is not None:
            await self._response.aclose()
            self._response = None
        self._position = offset
        return offset

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        if self._response is None:
            self._response = await self._request_from(self._position)
            self._learn_length(self._response)
        response = self._response
        try:
            async for chunk in response.aiter_bytes(chunk_size=self._chunk_size):
                if self._discard:
                    skipped = min(self._discard, len(chunk))
                    self._discard -= skipped
                    chunk = chunk[skipped:]
                    if not chunk:
                        continue
                self._position += len(chunk)
                yield chunk
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.TRANSPORT_FAILED, self.url, e)
            raise TransportFailedError(self.url, e) from e
        finally:
            await response.aclose()
            if self._response is response:
                self._response = None

    async def aclose(self) -> None:
        if self._response is not None:
            await self._response.aclose()
            self._response = None
        await super().aclose()


@dataclass
class HlsManifest:
    """The parts of an m3u8 playlist this engine needs."""

    segments: list[str] = field(default_factory=list)
    variants: list[tuple[int, str]] = field(default_factory=list)
    media_sequence: int = 0
    target_duration: float = 0.0
    ended: bool = False

    @property
    def is_master(self) -> bool:
        return bool(self.variants)

    def best_variant(self) -> str:
        return max(self.variants, key=lambda v: v[0])[1]


def parse_manifest(text: str, base_url: str) -> HlsManifest:
    """Parse an m3u8 document, resolving every URI against ``base_url``.

    Raises:
        ValueError: If a numeric tag carries a non-numeric value.
    """
    manifest = HlsManifest()
    pending_bandwidth: int | None = None

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("#EXT-X-STREAM-INF"):
            match = BANDWIDTH_ATTR.search(line)
            pending_bandwidth = int(match.group(1)) if match else 0
        elif line.startswith("#EXT-X-MEDIA-SEQUENCE:"):
            manifest.media_sequence = int(line.split(":", 1)[1])
        elif line.startswith("#EXT-X-TARGETDURATION:"):
            manifest.target_duration = float(line.split(":", 1)[1])
        elif line.startswith("#EXT-X-ENDLIST"):
            manifest.ended = True
        elif line.startswith("#"):
            continue
        elif pending_bandwidth is not None:
            manifest.variants.append((pending_bandwidth, urljoin(base_url, line)))
            pending_bandwidth = None
        else:
            manifest.segments.append(urljoin(base_url, line))

    return manifest


class HlsStream(HttpxStream):
    """Segmented manifest stream.

    The resource URL is the manifest endpoint. A master playlist is followed
    to its highest-bandwidth variant. Live playlists (no ``#EXT-X-ENDLIST``)
    are reloaded every target duration until they end or the stream closes.
    """

    kind = TransportKind.SEGMENTED_MANIFEST

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: httpx.Headers | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        super().__init__(client, url, headers, chunk_size)
        self.playlist_url = url
        self.manifest: HlsManifest | None = None
        self._next_sequence = 0

    async def _get(self, url: str) -> httpx.Response:
        try:
            response = await self._client.get(url, headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.TRANSPORT_FAILED, url, e)
            raise TransportFailedError(url, e) from e
        return response

    async def _load(self, url: str) -> HlsManifest:
        response = await self._get(url)
        try:
            return parse_manifest(response.text, str(response.url))
        except ValueError as e:
            logger.warning(LogTemplates.TRANSPORT_FAILED, url, e)
            raise TransportFailedError(url, e) from e

    async def open(self) -> None:
        manifest = await self._load(self.url)
        if manifest.is_master:
            self.playlist_url = manifest.best_variant()
            logger.debug(LogTemplates.TRANSPORT_HLS_VARIANT, self.playlist_url)
            manifest = await self._load(self.playlist_url)
        self.manifest = manifest
        self._next_sequence = manifest.media_sequence
        logger.debug(LogTemplates.TRANSPORT_HLS_OPENED, self.playlist_url, len(manifest.segments))

    async def _iter_segment(self, url: str) -> AsyncIterator[bytes]:
        try:
            async with self._client.stream("GET", url, headers=self.headers) as response:
                response.raise_for_status()
                async for chunk in response.aiter_bytes(chunk_size=self._chunk_size):
                    yield chunk
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.TRANSPORT_FAILED, url, e)
            raise TransportFailedError(url, e) from e

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        if self.manifest is None:
            await self.open()

        while not self._closed:
            manifest = self.manifest
            if manifest is None:
                return
            self._next_sequence = max(self._next_sequence, manifest.media_sequence)
            first = self._next_sequence - manifest.media_sequence
            for segment_url in manifest.segments[first:]:
                async for chunk in self._iter_segment(segment_url):
                    yield chunk
                self._next_sequence += 1

            if manifest.ended:
                return
            await asyncio.sleep(manifest.target_duration or 1.0)
            self.manifest = await self._load(self.playlist_url)
