"""
Application Queries

Query objects and handlers for read operations.
"""

from media_source.application.queries.get_current import (
    CurrentSourceInfo,
    GetCurrentSourceHandler,
    GetCurrentSourceQuery,
)

__all__ = [
    "CurrentSourceInfo",
    "GetCurrentSourceHandler",
    "GetCurrentSourceQuery",
]
