"""Tests for the dependency injection container."""

import httpx
import pytest

from media_source.application.commands.enqueue_source import EnqueueSourceHandler
from media_source.config.container import create_container
from media_source.config.settings import Settings
from media_source.infrastructure.extractor.invoker import YtDlpInvoker
from media_source.infrastructure.queue.memory_queue import InMemorySourceQueue
from media_source.infrastructure.transport.adapter import TransportAdapter


@pytest.fixture
def container(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    return create_container(Settings())


class TestContainer:

    def test_components_are_cached(self, container):
        assert container.invoker is container.invoker
        assert container.source_factory is container.source_factory
        assert container.enqueue_handler is container.enqueue_handler

    def test_component_types(self, container):
        assert isinstance(container.invoker, YtDlpInvoker)
        assert isinstance(container.transport_adapter, TransportAdapter)
        assert isinstance(container.source_queue, InMemorySourceQueue)
        assert isinstance(container.enqueue_handler, EnqueueSourceHandler)

    def test_queue_capacity_from_settings(self, container):
        assert container.source_queue.capacity == container.settings.playback.max_queue_size

    def test_http_client_configured(self, container):
        client = container.http_client

        assert isinstance(client, httpx.AsyncClient)
        assert client.headers["user-agent"] == container.settings.http.user_agent
        assert client.follow_redirects is True

    @pytest.mark.asyncio
    async def test_shutdown_closes_client(self, container):
        client = container.http_client

        await container.shutdown()

        assert client.is_closed
        assert container.http_client is not client
        await container.shutdown()

    @pytest.mark.asyncio
    async def test_shutdown_without_client(self, container):
        await container.shutdown()
