"""Byte stream adapters for resolved sources."""

from media_source.infrastructure.transport.adapter import TransportAdapter
from media_source.infrastructure.transport.streams import HlsStream, HttpRangeStream

__all__ = [
    "HlsStream",
    "HttpRangeStream",
    "TransportAdapter",
]
