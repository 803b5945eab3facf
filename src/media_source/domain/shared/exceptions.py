"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class ExtractionError(DomainError):
    """Base class for every failure while resolving a source."""


class ToolMissingError(ExtractionError):
    """The extractor executable could not be found on the search path."""

    def __init__(self, program: str) -> None:
        super().__init__(
            f"could not find executable '{program}' on path", code="TOOL_MISSING"
        )
        self.program = program


class ToolFailedError(ExtractionError):
    """The extractor exited with a non-zero status."""

    def __init__(self, program: str, stderr: str, returncode: int | None = None) -> None:
        super().__init__(
            f"{program} failed with non-zero status code: {stderr or '<no error message>'}",
            code="TOOL_FAILED",
        )
        self.program = program
        self.stderr = stderr
        self.returncode = returncode


class DecodeFailedError(ExtractionError):
    """The extractor produced output that could not be decoded."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message, code="DECODE_FAILED")
        self.line_number = line_number


class NoResultsError(ExtractionError):
    """The extractor output was well-formed but contained no entries."""

    def __init__(self, query: str) -> None:
        super().__init__(f"no results found for '{query}'", code="NO_RESULTS")
        self.query = query


class UnsupportedError(ExtractionError):
    """A synchronous code path was used where only async resolution exists."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"'{operation}' is not supported, use the async variant", code="UNSUPPORTED"
        )
        self.operation = operation


class TransportFailedError(ExtractionError):
    """Building the byte stream for a resolved record failed."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"transport failed for {url}: {cause}", code="TRANSPORT_FAILED")
        self.url = url
        self.__cause__ = cause


class SearchApiError(DomainError):
    """The fast-path search API returned an error or an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, code="SEARCH_API_ERROR")
        self.status_code = status_code


class QueueFullError(DomainError):
    """Raised when a source would push the queue past its capacity."""

    def __init__(self, capacity: int) -> None:
        super().__init__(f"queue is full ({capacity} sources)", code="QUEUE_FULL")
        self.capacity = capacity
