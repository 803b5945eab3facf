"""
Unit Tests for the Transport Adapter and Streams

Tests for:
- Header rebuilding and dropping of malformed pairs
- Transport selection by record protocol
- HTTP range reads and seeking
- HLS manifest parsing and segment iteration
- Network failures mapped to TransportFailedError
"""

import httpx
import pytest

from conftest import mock_client
from media_source.domain.shared.exceptions import TransportFailedError
from media_source.domain.source.records import ExtractionRecord
from media_source.domain.source.value_objects import TransportKind
from media_source.infrastructure.transport.adapter import TransportAdapter, build_headers
from media_source.infrastructure.transport.streams import (
    HlsStream,
    HttpRangeStream,
    parse_manifest,
)

AUDIO = b"0123456789" * 10
MEDIA_URL = "https://cdn.test/audio.webm"
MANIFEST_URL = "https://cdn.test/hls/index.m3u8"


def range_handler(request: httpx.Request) -> httpx.Response:
    """Serve AUDIO honouring ``Range: bytes=N-``."""
    start = int(request.headers["range"].removeprefix("bytes=").rstrip("-"))
    body = AUDIO[start:]
    return httpx.Response(
        206,
        content=body,
        headers={"Content-Range": f"bytes {start}-{len(AUDIO) - 1}/{len(AUDIO)}"},
    )


# =============================================================================
# Headers
# =============================================================================


class TestBuildHeaders:

    def test_valid_headers_kept(self):
        headers = build_headers({"User-Agent": "Mozilla/5.0", "Accept": "*/*"})

        assert headers["user-agent"] == "Mozilla/5.0"
        assert headers["accept"] == "*/*"

    @pytest.mark.parametrize(
        "raw",
        [
            {"Bad Name": "x"},
            {"X-Ok": "line\nbreak"},
            {"": "empty"},
            {"X-Colon:": "v"},
        ],
    )
    def test_malformed_pairs_dropped(self, raw):
        assert len(build_headers(raw)) == 0

    def test_only_bad_pair_dropped(self):
        headers = build_headers({"Accept": "*/*", "Bad Name": "x"})

        assert list(headers.keys()) == ["accept"]


# =============================================================================
# Adapter
# =============================================================================


class TestTransportSelection:
    """The adapter picks the stream class from the record's transport kind."""

    @pytest.mark.asyncio
    async def test_m3u8_native_gives_hls_stream(self):
        record = ExtractionRecord(url=MANIFEST_URL, protocol="m3u8_native")
        async with mock_client(range_handler) as client:
            stream = TransportAdapter().prepare(record, client)

        assert isinstance(stream, HlsStream)
        assert stream.kind is TransportKind.SEGMENTED_MANIFEST

    @pytest.mark.asyncio
    async def test_https_gives_range_stream_with_filesize(self):
        record = ExtractionRecord(url=MEDIA_URL, protocol="https", filesize=100)
        async with mock_client(range_handler) as client:
            stream = TransportAdapter().prepare(record, client)

        assert isinstance(stream, HttpRangeStream)
        assert stream.kind is TransportKind.DIRECT_HTTP
        assert stream.content_length == 100
        assert stream.seekable

    @pytest.mark.asyncio
    async def test_build_sends_record_headers(self):
        seen = []

        def handler(request):
            seen.append(request)
            return range_handler(request)

        record = ExtractionRecord(
            url=MEDIA_URL, http_headers={"User-Agent": "yt-dlp-agent", "Bad Name": "x"}
        )
        async with mock_client(handler) as client:
            stream = await TransportAdapter().build(record, client)
            await stream.aclose()

        assert seen[0].headers["user-agent"] == "yt-dlp-agent"
        assert seen[0].headers["range"] == "bytes=0-"

    @pytest.mark.asyncio
    async def test_http_error_becomes_transport_failed(self):
        def handler(request):
            return httpx.Response(403)

        record = ExtractionRecord(url=MEDIA_URL)
        async with mock_client(handler) as client:
            with pytest.raises(TransportFailedError) as exc_info:
                await TransportAdapter().build(record, client)

        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert exc_info.value.code == "TRANSPORT_FAILED"

    @pytest.mark.asyncio
    async def test_connection_error_becomes_transport_failed(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        record = ExtractionRecord(url=MEDIA_URL)
        async with mock_client(handler) as client:
            with pytest.raises(TransportFailedError):
                await TransportAdapter().build(record, client)


# =============================================================================
# HTTP Range Stream
# =============================================================================


class TestHttpRangeStream:

    @pytest.mark.asyncio
    async def test_reads_whole_resource(self):
        async with mock_client(range_handler) as client:
            stream = HttpRangeStream(client, MEDIA_URL, chunk_size=16)
            await stream.open()
            data = await stream.read_all()

        assert data == AUDIO
        assert stream.content_length == len(AUDIO)
        assert stream.position == len(AUDIO)

    @pytest.mark.asyncio
    async def test_seek_restarts_at_offset(self):
        requested = []

        def handler(request):
            requested.append(request.headers["range"])
            return range_handler(request)

        async with mock_client(handler) as client:
            async with HttpRangeStream(client, MEDIA_URL, content_length=len(AUDIO)) as stream:
                await stream.open()
                await stream.seek(90)
                data = await stream.read_all()

        assert data == AUDIO[90:]
        assert requested == ["bytes=0-", "bytes=90-"]

    @pytest.mark.asyncio
    async def test_seek_without_length_fails(self):
        def handler(request):
            return httpx.Response(200, content=b"abc", headers={"Transfer-Encoding": "chunked"})

        async with mock_client(handler) as client:
            stream = HttpRangeStream(client, MEDIA_URL)

            assert not stream.seekable
            with pytest.raises(OSError):
                await stream.seek(10)

    @pytest.mark.asyncio
    async def test_seek_when_server_ignores_range(self):
        """A plain 200 to a ranged request still starts at the seek offset."""

        def handler(request):
            return httpx.Response(200, content=b"0123456789")

        async with mock_client(handler) as client:
            async with HttpRangeStream(client, MEDIA_URL, content_length=10, chunk_size=3) as stream:
                await stream.open()
                await stream.seek(5)
                data = await stream.read_all()

        assert data == b"56789"
        assert stream.position == 10

    @pytest.mark.asyncio
    async def test_unparsable_length_left_unknown(self):
        def handler(request):
            return httpx.Response(200, content=b"abc", headers={"Content-Length": "abc"})

        record = ExtractionRecord(url=MEDIA_URL)
        async with mock_client(handler) as client:
            stream = await TransportAdapter().build(record, client)

            assert stream.content_length is None
            assert not stream.seekable
            await stream.aclose()


# =============================================================================
# HLS
# =============================================================================

MASTER = """#EXTM3U
#EXT-X-STREAM-INF:BANDWIDTH=64000
low/index.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=128000
high/index.m3u8
"""

MEDIA = """#EXTM3U
#EXT-X-TARGETDURATION:10
#EXT-X-MEDIA-SEQUENCE:5
#EXTINF:10.0,
seg5.ts
#EXTINF:10.0,
https://other.test/seg6.ts
#EXT-X-ENDLIST
"""


class TestParseManifest:

    def test_media_playlist(self):
        manifest = parse_manifest(MEDIA, "https://cdn.test/hls/index.m3u8")

        assert manifest.segments == ["https://cdn.test/hls/seg5.ts", "https://other.test/seg6.ts"]
        assert manifest.media_sequence == 5
        assert manifest.target_duration == 10.0
        assert manifest.ended
        assert not manifest.is_master

    def test_master_playlist_best_variant(self):
        manifest = parse_manifest(MASTER, "https://cdn.test/hls/master.m3u8")

        assert manifest.is_master
        assert manifest.best_variant() == "https://cdn.test/hls/high/index.m3u8"

    @pytest.mark.parametrize("tag", ["#EXT-X-MEDIA-SEQUENCE:abc", "#EXT-X-TARGETDURATION:ten"])
    def test_non_numeric_tag_rejected(self, tag):
        with pytest.raises(ValueError):
            parse_manifest(f"#EXTM3U\n{tag}\nseg0.ts\n", MANIFEST_URL)


class TestHlsStream:

    @pytest.mark.asyncio
    async def test_follows_master_and_reads_segments(self):
        def handler(request):
            url = str(request.url)
            if url == MANIFEST_URL:
                return httpx.Response(200, text=MASTER)
            if url == "https://cdn.test/hls/high/index.m3u8":
                return httpx.Response(200, text=MEDIA)
            if url == "https://cdn.test/hls/high/seg5.ts":
                return httpx.Response(200, content=b"AAAA")
            if url == "https://other.test/seg6.ts":
                return httpx.Response(200, content=b"BBBB")
            return httpx.Response(404)

        async with mock_client(handler) as client:
            stream = HlsStream(client, MANIFEST_URL)
            await stream.open()
            data = await stream.read_all()

        assert stream.playlist_url == "https://cdn.test/hls/high/index.m3u8"
        assert data == b"AAAABBBB"

    @pytest.mark.asyncio
    async def test_missing_segment_is_transport_failure(self):
        def handler(request):
            if str(request.url) == MANIFEST_URL:
                return httpx.Response(200, text=MEDIA)
            return httpx.Response(404)

        async with mock_client(handler) as client:
            stream = HlsStream(client, MANIFEST_URL)
            with pytest.raises(TransportFailedError):
                await stream.read_all()

    @pytest.mark.asyncio
    async def test_adapter_opens_manifest(self):
        def handler(request):
            return httpx.Response(200, text=MEDIA)

        record = ExtractionRecord(url=MANIFEST_URL, protocol="m3u8_native")
        async with mock_client(handler) as client:
            stream = await TransportAdapter().build(record, client)

        assert stream.manifest is not None
        assert len(stream.manifest.segments) == 2
        assert not stream.seekable

    @pytest.mark.asyncio
    async def test_malformed_manifest_is_transport_failure(self):
        def handler(request):
            return httpx.Response(200, text="#EXTM3U\n#EXT-X-MEDIA-SEQUENCE:abc\nseg0.ts\n")

        record = ExtractionRecord(url=MANIFEST_URL, protocol="m3u8_native")
        async with mock_client(handler) as client:
            with pytest.raises(TransportFailedError) as exc_info:
                await TransportAdapter().build(record, client)

        assert isinstance(exc_info.value.__cause__, ValueError)
