"""Port interfaces for turning a resolved record into audio bytes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    import httpx

    from ...domain.source.records import ExtractionRecord
    from ...domain.source.value_objects import TransportKind


class ResolvedStream(ABC):
    """A byte-producing handle bound to exactly one transport."""

    kind: ClassVar["TransportKind"]
    url: str

    @abstractmethod
    async def open(self) -> None:
        """Perform the initial round trip that proves the resource is readable."""
        ...

    @abstractmethod
    def aiter_bytes(self) -> AsyncIterator[bytes]:
        """Yield the media bytes in order."""
        ...

    @abstractmethod
    async def aclose(self) -> None:
        ...

    @property
    def seekable(self) -> bool:
        return False

    async def read_all(self) -> bytes:
        return b"".join([chunk async for chunk in self.aiter_bytes()])

    async def __aenter__(self) -> ResolvedStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class StreamBuilder(ABC):
    """Interface for building a ResolvedStream from an extraction record."""

    @abstractmethod
    async def build(self, record: "ExtractionRecord", client: "httpx.AsyncClient") -> ResolvedStream:
        """Open a stream for the record's transport."""
        ...
