"""
Domain Layer

Contains pure resolution logic organized by bounded contexts:
- shared/: Cross-cutting types, messages, and exceptions
- source/: Queries, metadata, and resolution state
"""

from media_source.domain.shared.exceptions import DomainError, ExtractionError

__all__ = [
    "DomainError",
    "ExtractionError",
]
