"""Port interface for the playback queue that owns pending sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..services.source_descriptor import SourceDescriptor


class SourceQueue(ABC):
    """Interface for the ordered queue of sources waiting to be played."""

    @abstractmethod
    def enqueue(self, descriptor: "SourceDescriptor", *, front: bool = False) -> int:
        """Add a source and return its 0-based position.

        Raises:
            QueueFullError: If the queue is already at capacity.
        """
        ...

    @abstractmethod
    def enqueue_many(self, descriptors: Iterable["SourceDescriptor"]) -> int:
        """Add every source in order, or none of them if they do not all fit."""
        ...

    @abstractmethod
    def discard(self, descriptor: "SourceDescriptor") -> bool:
        """Remove a source; returns False if it was not queued."""
        ...

    @abstractmethod
    def peek(self) -> "SourceDescriptor | None":
        ...

    @abstractmethod
    def pop(self) -> "SourceDescriptor | None":
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    @property
    def is_empty(self) -> bool:
        return len(self) == 0
