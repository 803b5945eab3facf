"""Lazily resolved audio source, the unit stored in a play queue.

A descriptor starts UNRESOLVED (or METADATA_CACHED when seeded from a
playlist or a search API hit). The first caller of ``aux_metadata()`` or
``create_stream()`` starts a single extraction task; every concurrent caller
attaches to that same task. A finished task keeps its record or its error,
so the extractor runs at most once per descriptor and failures are never
retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from media_source.domain.shared.exceptions import ExtractionError, UnsupportedError
from media_source.domain.shared.messages import ErrorMessages, LogTemplates
from media_source.domain.source.decoder import decode
from media_source.domain.source.value_objects import Query, ResolutionState

if TYPE_CHECKING:
    import httpx

    from ...domain.source.entities import Metadata
    from ...domain.source.records import ExtractionRecord
    from ..interfaces.extractor import ExtractorInvoker
    from ..interfaces.transport import ResolvedStream, StreamBuilder

logger = logging.getLogger(__name__)


class SourceDescriptor:
    """One resolvable audio item.

    Holds no external resources until ``create_stream()`` is called, so a
    queue can drop it without any teardown.
    """

    def __init__(
        self,
        query: Query,
        *,
        invoker: ExtractorInvoker,
        stream_builder: StreamBuilder,
        client: httpx.AsyncClient,
        metadata: Metadata | None = None,
    ) -> None:
        self._query = query
        self._invoker = invoker
        self._stream_builder = stream_builder
        self._client = client

        self._metadata = metadata
        self._record: ExtractionRecord | None = None
        self._resolution: asyncio.Task[ExtractionRecord] | None = None
        self._state = (
            ResolutionState.METADATA_CACHED if metadata is not None else ResolutionState.UNRESOLVED
        )

    @property
    def query(self) -> Query:
        return self._query

    @property
    def state(self) -> ResolutionState:
        return self._state

    @property
    def metadata(self) -> Metadata | None:
        """Cached metadata, without triggering resolution."""
        return self._metadata

    @property
    def should_create_async(self) -> bool:
        return True

    # ── Resolution guard ───────────────────────────────────────────────

    async def _extract(self) -> ExtractionRecord:
        logger.debug(LogTemplates.RESOLUTION_STARTED, self._query)
        lines = await self._invoker.invoke(self._query, 1)
        record = decode(lines, str(self._query))[0]

        self._record = record
        if self._metadata is None:
            self._metadata = record.metadata
        if self._state is ResolutionState.UNRESOLVED:
            self._state = ResolutionState.METADATA_CACHED
        return record

    def _on_resolved(self, task: asyncio.Task[ExtractionRecord]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.info(LogTemplates.RESOLUTION_FAILED, self._query, error)

    def _ensure_resolution(self) -> asyncio.Task[ExtractionRecord]:
        # No await between the check and the assignment: only one task is ever created.
        if self._resolution is None:
            self._resolution = asyncio.get_running_loop().create_task(self._extract())
            self._resolution.add_done_callback(self._on_resolved)
        elif not self._resolution.done():
            logger.debug(LogTemplates.RESOLUTION_JOIN_INFLIGHT, self._query)
        return self._resolution

    async def _resolve(self) -> ExtractionRecord:
        if self._record is not None:
            return self._record
        # Shielded so that a cancelled caller does not abort the shared extraction.
        return await asyncio.shield(self._ensure_resolution())

    # ── Public operations ──────────────────────────────────────────────

    async def aux_metadata(self) -> Metadata:
        """Return the metadata, resolving the source on first use.

        Raises:
            ExtractionError: If the one-shot resolution failed; every caller
                receives the same error.
        """
        if self._metadata is not None:
            logger.debug(LogTemplates.RESOLUTION_CACHE_HIT, self._query)
            return self._metadata

        await self._resolve()

        if self._metadata is None:
            raise ExtractionError(ErrorMessages.METADATA_UNREACHABLE)
        return self._metadata

    async def create_stream(self) -> ResolvedStream:
        """Resolve if needed and open the byte stream.

        Ownership of the returned stream passes to the caller.

        Raises:
            ExtractionError: If resolution or the transport failed.
        """
        record = await self._resolve()

        if self._state is ResolutionState.STREAM_ISSUED:
            logger.warning(LogTemplates.STREAM_REISSUED, self._query)

        stream = await self._stream_builder.build(record, self._client)
        self._state = ResolutionState.STREAM_ISSUED
        logger.debug(LogTemplates.STREAM_ISSUED, stream.kind.value, self._query)
        return stream

    def create(self) -> ResolvedStream:
        """Synchronous eager creation is not available; resolution needs the async path."""
        raise UnsupportedError("create")

    def __repr__(self) -> str:
        return f"SourceDescriptor(query={self._query!r}, state={self._state.value!r})"
