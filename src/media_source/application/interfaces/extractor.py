"""Port interface for running the external media extractor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from media_source.domain.shared.types import HttpUrlStr, PositiveInt

if TYPE_CHECKING:
    from ...domain.source.value_objects import Query


class ExtractorInvoker(ABC):
    """Runs the extractor once and returns its raw, non-empty output lines."""

    @abstractmethod
    async def invoke(self, query: "Query", result_limit: PositiveInt = 1) -> list[str]:
        """Extract a single item (or the top ``result_limit`` search hits)."""
        ...

    @abstractmethod
    async def invoke_playlist(self, url: HttpUrlStr) -> list[str]:
        """Extract every entry of a playlist in one flat call."""
        ...
