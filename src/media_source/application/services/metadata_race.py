"""Race several metadata sources and keep the first usable answer."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from media_source.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.source.entities import Metadata
    from .source_descriptor import SourceDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def first_completed(*aws: Awaitable[T | None], timeout: float | None = None) -> T | None:
    """Return the first non-None result among ``aws``.

    A branch that raises or returns None does not win; the race continues
    with the others. Branches still running when a winner is found, or when
    the timeout expires, are cancelled and never awaited to completion, so
    their side effects must tolerate being cut short.

    Returns:
        The winning value, or None if every branch failed or the timeout hit.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    deadline = None if timeout is None else time.monotonic() + timeout
    pending: set[asyncio.Future[T | None]] = set(tasks)

    try:
        while pending:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            done, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            if not done:
                logger.debug(LogTemplates.RACE_TIMEOUT, timeout)
                return None

            # Ties go to the branch listed first. Every finished branch is
            # inspected so that no failure is left unretrieved.
            winner: T | None = None
            for index, task in enumerate(tasks):
                if task not in done or task.cancelled():
                    continue
                error = task.exception()
                if error is not None:
                    logger.debug(LogTemplates.RACE_BRANCH_FAILED, index, error)
                    continue
                result = task.result()
                if result is not None and winner is None:
                    logger.debug(LogTemplates.RACE_WINNER, index)
                    winner = result
            if winner is not None:
                return winner
        return None
    finally:
        for task in pending:
            task.cancel()


async def metadata_with_fallback(
    descriptor: SourceDescriptor,
    fallback: Callable[[], Awaitable[Metadata | None]] | None = None,
    timeout: float = 1.0,
) -> Metadata | None:
    """Metadata for a source that may already be playing.

    Races the descriptor's own resolution against an out-of-band source
    (for example a previously posted announcement), bounded by ``timeout``.
    Cancelling the descriptor branch does not abort its extraction; the
    result is still cached on the descriptor.
    """
    if descriptor.metadata is not None:
        return descriptor.metadata

    branches: list[Awaitable[Metadata | None]] = [descriptor.aux_metadata()]
    if fallback is not None:
        branches.append(fallback())
    return await first_completed(*branches, timeout=timeout)
