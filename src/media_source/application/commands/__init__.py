"""
Application Commands

Command objects and their handlers for operations that change the queue.
"""

from media_source.application.commands.enqueue_source import (
    EnqueueSourceCommand,
    EnqueueSourceHandler,
    EnqueueSourceResult,
    EnqueueStatus,
)

__all__ = [
    "EnqueueSourceCommand",
    "EnqueueSourceHandler",
    "EnqueueSourceResult",
    "EnqueueStatus",
]
