"""Source resolution bounded context."""

from media_source.domain.source.entities import Metadata
from media_source.domain.source.value_objects import (
    Query,
    ResolutionState,
    SearchQuery,
    TransportKind,
    UrlQuery,
)

__all__ = [
    "Metadata",
    "Query",
    "ResolutionState",
    "SearchQuery",
    "TransportKind",
    "UrlQuery",
]
