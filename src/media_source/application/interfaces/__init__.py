"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from media_source.application.interfaces.extractor import ExtractorInvoker
from media_source.application.interfaces.search_api import MetadataSearch
from media_source.application.interfaces.source_queue import SourceQueue
from media_source.application.interfaces.transport import ResolvedStream, StreamBuilder

__all__ = [
    "ExtractorInvoker",
    "MetadataSearch",
    "ResolvedStream",
    "SourceQueue",
    "StreamBuilder",
]
