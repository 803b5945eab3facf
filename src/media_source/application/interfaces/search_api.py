"""Port interface for a fast metadata search that skips the extractor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from media_source.domain.shared.types import NonEmptyStr

if TYPE_CHECKING:
    from ...domain.source.entities import Metadata


class MetadataSearch(ABC):
    """Interface for looking up the best match for search terms over HTTP."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        ...

    @abstractmethod
    async def search_first(self, terms: NonEmptyStr) -> tuple[str, "Metadata"] | None:
        """Return ``(page_url, metadata)`` for the top hit, or None if nothing matched."""
        ...
