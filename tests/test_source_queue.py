"""Tests for InMemorySourceQueue and the current-source query."""

import asyncio
from unittest.mock import MagicMock

import pytest

from media_source.application.queries.get_current import (
    GetCurrentSourceHandler,
    GetCurrentSourceQuery,
)
from media_source.application.services.source_descriptor import SourceDescriptor
from media_source.domain.shared.exceptions import QueueFullError, ToolFailedError
from media_source.domain.source.entities import Metadata
from media_source.domain.source.value_objects import ResolutionState, UrlQuery
from media_source.infrastructure.queue.memory_queue import InMemorySourceQueue


def _descriptor(name: str = "a") -> MagicMock:
    return MagicMock(spec=SourceDescriptor, name=name)


# =============================================================================
# InMemorySourceQueue
# =============================================================================


class TestInMemorySourceQueue:

    def test_enqueue_returns_position(self):
        queue = InMemorySourceQueue()

        assert queue.enqueue(_descriptor()) == 0
        assert queue.enqueue(_descriptor()) == 1
        assert len(queue) == 2

    def test_front_insert(self):
        queue = InMemorySourceQueue()
        first, urgent = _descriptor("first"), _descriptor("urgent")
        queue.enqueue(first)

        assert queue.enqueue(urgent, front=True) == 0
        assert queue.peek() is urgent

    def test_capacity_enforced(self):
        queue = InMemorySourceQueue(capacity=1)
        queue.enqueue(_descriptor())

        with pytest.raises(QueueFullError) as exc_info:
            queue.enqueue(_descriptor())

        assert exc_info.value.capacity == 1

    def test_enqueue_many_all_or_nothing(self):
        queue = InMemorySourceQueue(capacity=3)
        queue.enqueue(_descriptor())

        with pytest.raises(QueueFullError):
            queue.enqueue_many([_descriptor(), _descriptor(), _descriptor()])

        assert len(queue) == 1

    def test_discard_by_identity(self):
        queue = InMemorySourceQueue()
        keep, drop = _descriptor("keep"), _descriptor("drop")
        queue.enqueue_many([keep, drop])

        assert queue.discard(drop) is True
        assert queue.discard(drop) is False
        assert list(queue) == [keep]

    def test_pop_in_order(self):
        queue = InMemorySourceQueue()
        a, b = _descriptor("a"), _descriptor("b")
        queue.enqueue_many([a, b])

        assert queue.pop() is a
        assert queue.pop() is b
        assert queue.pop() is None
        assert queue.is_empty


# =============================================================================
# GetCurrentSourceHandler
# =============================================================================


class TestGetCurrentSource:
    """Tests for reporting the head of the queue."""

    @pytest.mark.asyncio
    async def test_empty_queue(self):
        handler = GetCurrentSourceHandler(source_queue=InMemorySourceQueue())

        info = await handler.handle(GetCurrentSourceQuery())

        assert info.metadata is None
        assert info.queue_length == 0

    @pytest.mark.asyncio
    async def test_cached_metadata(self, invoker, stream_builder, http_client):
        queue = InMemorySourceQueue()
        queue.enqueue(
            SourceDescriptor(
                UrlQuery(url="https://x.test/a"),
                invoker=invoker,
                stream_builder=stream_builder,
                client=http_client,
                metadata=Metadata(title="Playing"),
            )
        )

        info = await GetCurrentSourceHandler(source_queue=queue).handle(GetCurrentSourceQuery())

        assert info.metadata.title == "Playing"
        assert info.state is ResolutionState.METADATA_CACHED
        assert info.queue_length == 1

    @pytest.mark.asyncio
    async def test_slow_resolution_times_out(self, invoker, stream_builder, http_client, sample_line):
        release = asyncio.Event()

        async def slow_invoke(query, limit):
            await release.wait()
            return [sample_line]

        invoker.invoke.side_effect = slow_invoke
        queue = InMemorySourceQueue()
        queue.enqueue(
            SourceDescriptor(
                UrlQuery(url="https://x.test/a"),
                invoker=invoker,
                stream_builder=stream_builder,
                client=http_client,
            )
        )

        info = await GetCurrentSourceHandler(source_queue=queue).handle(
            GetCurrentSourceQuery(timeout_s=0.01)
        )

        assert info.metadata is None
        assert info.state is ResolutionState.UNRESOLVED

        # The extraction keeps running after the timeout and still lands.
        release.set()
        assert (await queue.peek().aux_metadata()).title == "Never Gonna Give You Up"

    @pytest.mark.asyncio
    async def test_fallback_used(self, invoker, stream_builder, http_client):
        invoker.invoke.side_effect = ToolFailedError("yt-dlp", "HTTP Error 429")
        queue = InMemorySourceQueue()
        queue.enqueue(
            SourceDescriptor(
                UrlQuery(url="https://x.test/a"),
                invoker=invoker,
                stream_builder=stream_builder,
                client=http_client,
            )
        )

        async def fallback():
            return Metadata(title="Announced")

        handler = GetCurrentSourceHandler(source_queue=queue, fallback=fallback)
        info = await handler.handle(GetCurrentSourceQuery())

        assert info.metadata.title == "Announced"
