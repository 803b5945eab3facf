import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from media_source.application.interfaces.extractor import ExtractorInvoker
from media_source.application.interfaces.transport import ResolvedStream, StreamBuilder
from media_source.domain.source.value_objects import TransportKind

# ============================================================================
# Extractor Output Fixtures
# ============================================================================

VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
AUDIO_URL = "https://rr1.example.com/videoplayback?id=abc&mime=audio%2Fwebm"


def record_line(**overrides) -> str:
    """One ``yt-dlp -j`` output line with sensible defaults."""
    data = {
        "url": AUDIO_URL,
        "webpage_url": VIDEO_URL,
        "title": "Never Gonna Give You Up",
        "uploader": "Rick Astley",
        "upload_date": "20091025",
        "duration": 212.0,
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
        "protocol": "https",
        "http_headers": {"User-Agent": "Mozilla/5.0", "Accept": "*/*"},
    }
    data.update(overrides)
    return json.dumps(data)


@pytest.fixture
def sample_line() -> str:
    return record_line()


@pytest.fixture
def playlist_lines() -> list[str]:
    return [
        record_line(
            url=f"https://www.youtube.com/watch?v=entry{i}",
            webpage_url=None,
            title=f"Entry {i}",
            duration=60.0 + i,
        )
        for i in range(3)
    ]


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def invoker(sample_line):
    """Invoker double returning one record per call."""
    mock = AsyncMock(spec=ExtractorInvoker)
    mock.invoke.return_value = [sample_line]
    mock.invoke_playlist.return_value = []
    return mock


@pytest.fixture
def stream():
    stream = MagicMock(spec=ResolvedStream)
    stream.kind = TransportKind.DIRECT_HTTP
    stream.url = AUDIO_URL
    return stream


@pytest.fixture
def stream_builder(stream):
    builder = AsyncMock(spec=StreamBuilder)
    builder.build.return_value = stream
    return builder


@pytest_asyncio.fixture
async def http_client():
    """Client whose every request fails loudly unless a test swaps the transport."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request: {request.method} {request.url}")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        yield client


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
