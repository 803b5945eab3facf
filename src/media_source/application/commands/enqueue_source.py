"""Command and handler for turning user input into queued sources."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from media_source.application.services.source_descriptor import SourceDescriptor
from media_source.application.services.source_factory import is_playlist, is_url
from media_source.domain.shared.exceptions import (
    DecodeFailedError,
    ExtractionError,
    NoResultsError,
    QueueFullError,
    SearchApiError,
    ToolFailedError,
    ToolMissingError,
    TransportFailedError,
)
from media_source.domain.shared.messages import LogTemplates, UserMessages
from media_source.domain.shared.types import NonEmptyStr, NonNegativeInt
from media_source.domain.source.entities import Metadata

if TYPE_CHECKING:
    from ..interfaces.search_api import MetadataSearch
    from ..interfaces.source_queue import SourceQueue
    from ..services.playlist_resolver import PlaylistResolver
    from ..services.source_factory import SourceFactory

logger = logging.getLogger(__name__)


class EnqueueStatus(Enum):
    """Status codes for enqueue results."""

    NOW_PLAYING = "now_playing"
    QUEUED = "queued"
    QUEUED_PLAYLIST = "queued_playlist"
    NO_RESULTS = "no_results"
    TOOL_MISSING = "tool_missing"
    TOOL_FAILURE = "tool_failure"
    DECODE_FAILURE = "decode_failure"
    TRANSPORT_FAILURE = "transport_failure"
    QUEUE_FULL = "queue_full"


class EnqueueSourceCommand(BaseModel):
    """Request to resolve a query, URL or playlist and queue the result."""

    model_config = ConfigDict(frozen=True, strict=True)

    query: NonEmptyStr
    play_next: bool = False

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class EnqueueSourceResult(BaseModel):
    """Result of an enqueue command."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: EnqueueStatus
    message: str
    metadata: Metadata | None = None
    descriptors: list[SourceDescriptor] = Field(default_factory=list)
    queue_length: NonNegativeInt = 0

    @property
    def is_success(self) -> bool:
        return self.status in {
            EnqueueStatus.NOW_PLAYING,
            EnqueueStatus.QUEUED,
            EnqueueStatus.QUEUED_PLAYLIST,
        }

    @classmethod
    def success(
        cls,
        descriptor: SourceDescriptor,
        metadata: Metadata,
        queue_length: int,
        started_playing: bool = False,
    ) -> EnqueueSourceResult:
        status = EnqueueStatus.NOW_PLAYING if started_playing else EnqueueStatus.QUEUED
        message = UserMessages.NOW_PLAYING if started_playing else UserMessages.QUEUED
        return cls(
            status=status,
            message=message,
            metadata=metadata,
            descriptors=[descriptor],
            queue_length=queue_length,
        )

    @classmethod
    def playlist(cls, descriptors: list[SourceDescriptor], queue_length: int) -> EnqueueSourceResult:
        return cls(
            status=EnqueueStatus.QUEUED_PLAYLIST,
            message=UserMessages.QUEUED_PLAYLIST.format(count=len(descriptors)),
            descriptors=descriptors,
            queue_length=queue_length,
        )

    @classmethod
    def error(cls, status: EnqueueStatus, message: str, queue_length: int = 0) -> EnqueueSourceResult:
        return cls(status=status, message=message, queue_length=queue_length)


def result_for_error(error: ExtractionError, query: str, queue_length: int = 0) -> EnqueueSourceResult:
    """Map a resolution failure to the status and text shown to the user."""
    if isinstance(error, NoResultsError):
        status, message = EnqueueStatus.NO_RESULTS, UserMessages.NO_RESULTS.format(query=query)
    elif isinstance(error, ToolMissingError):
        status, message = EnqueueStatus.TOOL_MISSING, UserMessages.TOOL_MISSING
    elif isinstance(error, ToolFailedError):
        status = EnqueueStatus.TOOL_FAILURE
        message = UserMessages.TOOL_FAILURE.format(detail=error.stderr or error.message)
    elif isinstance(error, DecodeFailedError):
        status, message = EnqueueStatus.DECODE_FAILURE, UserMessages.DECODE_FAILURE
    elif isinstance(error, TransportFailedError):
        status, message = EnqueueStatus.TRANSPORT_FAILURE, UserMessages.TRANSPORT_FAILURE
    else:
        status = EnqueueStatus.TOOL_FAILURE
        message = UserMessages.TOOL_FAILURE.format(detail=error.message)
    return EnqueueSourceResult.error(status, message, queue_length)


class EnqueueSourceHandler:
    """Resolves user input to sources, queues them, and reports what happened.

    A single source is queued before its metadata is known so a parallel
    consumer can start resolving it; if resolution fails it is discarded
    again and the failure reported.
    """

    def __init__(
        self,
        *,
        source_factory: SourceFactory,
        playlist_resolver: PlaylistResolver,
        source_queue: SourceQueue,
        search_api: MetadataSearch | None = None,
    ) -> None:
        self._factory = source_factory
        self._playlist_resolver = playlist_resolver
        self._queue = source_queue
        self._search_api = search_api

    async def handle(self, command: EnqueueSourceCommand) -> EnqueueSourceResult:
        if is_playlist(command.query):
            return await self._enqueue_playlist(command.query)

        was_empty = self._queue.is_empty
        descriptor = None
        if was_empty and not is_url(command.query):
            descriptor = await self._search_fast_path(command.query)
        if descriptor is None:
            descriptor = self._factory.from_input(command.query)

        try:
            self._queue.enqueue(descriptor, front=command.play_next)
        except QueueFullError:
            return EnqueueSourceResult.error(
                EnqueueStatus.QUEUE_FULL, UserMessages.QUEUE_FULL, len(self._queue)
            )

        try:
            metadata = await descriptor.aux_metadata()
        except ExtractionError as e:
            logger.warning(LogTemplates.ENQUEUE_FAILED, command.query, e)
            self._queue.discard(descriptor)
            return result_for_error(e, command.query, len(self._queue))

        logger.info(LogTemplates.ENQUEUED, 1, command.query)
        return EnqueueSourceResult.success(
            descriptor=descriptor,
            metadata=metadata,
            queue_length=len(self._queue),
            started_playing=was_empty,
        )

    async def _enqueue_playlist(self, url: str) -> EnqueueSourceResult:
        try:
            descriptors = await self._playlist_resolver.resolve_playlist(url)
        except ExtractionError as e:
            logger.warning(LogTemplates.ENQUEUE_FAILED, url, e)
            return result_for_error(e, url, len(self._queue))

        try:
            self._queue.enqueue_many(descriptors)
        except QueueFullError:
            return EnqueueSourceResult.error(
                EnqueueStatus.QUEUE_FULL, UserMessages.QUEUE_FULL, len(self._queue)
            )

        logger.info(LogTemplates.ENQUEUED, len(descriptors), url)
        return EnqueueSourceResult.playlist(descriptors, len(self._queue))

    async def _search_fast_path(self, terms: str) -> SourceDescriptor | None:
        if self._search_api is None or not self._search_api.enabled:
            return None
        try:
            hit = await self._search_api.search_first(terms)
        except SearchApiError:
            # Already logged by the client; the extractor search still works.
            return None
        if hit is None:
            return None
        url, metadata = hit
        return self._factory.with_metadata(url, metadata)
