"""Query for the metadata of the source at the head of the queue."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from media_source.application.services.metadata_race import metadata_with_fallback
from media_source.domain.shared.types import NonNegativeInt, PositiveFloat
from media_source.domain.source.entities import Metadata
from media_source.domain.source.value_objects import ResolutionState

if TYPE_CHECKING:
    from ..interfaces.source_queue import SourceQueue

MetadataFallback = Callable[[], Awaitable[Metadata | None]]


class GetCurrentSourceQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout_s: PositiveFloat | None = None


class CurrentSourceInfo(BaseModel):

    metadata: Metadata | None = None
    state: ResolutionState | None = None
    queue_length: NonNegativeInt = 0


class GetCurrentSourceHandler:
    """Reports the head of the queue without ever blocking past the timeout."""

    def __init__(
        self,
        *,
        source_queue: SourceQueue,
        metadata_timeout_s: float = 1.0,
        fallback: MetadataFallback | None = None,
    ) -> None:
        self._queue = source_queue
        self._timeout = metadata_timeout_s
        self._fallback = fallback

    async def handle(self, query: GetCurrentSourceQuery) -> CurrentSourceInfo:
        descriptor = self._queue.peek()
        if descriptor is None:
            return CurrentSourceInfo(queue_length=len(self._queue))

        metadata = await metadata_with_fallback(
            descriptor,
            self._fallback,
            timeout=query.timeout_s or self._timeout,
        )
        return CurrentSourceInfo(
            metadata=metadata,
            state=descriptor.state,
            queue_length=len(self._queue),
        )
