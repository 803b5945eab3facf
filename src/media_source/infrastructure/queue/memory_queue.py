"""In-process SourceQueue used by the CLI and tests."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from media_source.application.interfaces.source_queue import SourceQueue
from media_source.domain.shared.exceptions import QueueFullError
from media_source.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...application.services.source_descriptor import SourceDescriptor

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 200


class InMemorySourceQueue(SourceQueue):

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._capacity = capacity
        self._items: deque[SourceDescriptor] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def _ensure_room(self, count: int) -> None:
        if len(self._items) + count > self._capacity:
            raise QueueFullError(self._capacity)

    def enqueue(self, descriptor: SourceDescriptor, *, front: bool = False) -> int:
        self._ensure_room(1)
        if front:
            self._items.appendleft(descriptor)
            return 0
        self._items.append(descriptor)
        return len(self._items) - 1

    def enqueue_many(self, descriptors: Iterable[SourceDescriptor]) -> int:
        batch = list(descriptors)
        self._ensure_room(len(batch))
        self._items.extend(batch)
        return len(batch)

    def discard(self, descriptor: SourceDescriptor) -> bool:
        # Identity, not equality: two descriptors for the same URL are distinct entries.
        for index, item in enumerate(self._items):
            if item is descriptor:
                del self._items[index]
                logger.debug(LogTemplates.SOURCE_DISCARDED, descriptor)
                return True
        return False

    def peek(self) -> SourceDescriptor | None:
        return self._items[0] if self._items else None

    def pop(self) -> SourceDescriptor | None:
        return self._items.popleft() if self._items else None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[SourceDescriptor]:
        return iter(list(self._items))
