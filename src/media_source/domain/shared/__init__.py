"""
Shared Domain Kernel

Contains types, message templates, and exceptions shared across the package.
"""

from media_source.domain.shared.exceptions import (
    DecodeFailedError,
    DomainError,
    ExtractionError,
    NoResultsError,
    QueueFullError,
    SearchApiError,
    ToolFailedError,
    ToolMissingError,
    TransportFailedError,
    UnsupportedError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "ExtractionError",
    "ToolMissingError",
    "ToolFailedError",
    "DecodeFailedError",
    "NoResultsError",
    "UnsupportedError",
    "TransportFailedError",
    "SearchApiError",
    "QueueFullError",
]
