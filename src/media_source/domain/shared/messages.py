"""Centralized message constants for error messages, logging, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Query Validation Errors
    EMPTY_QUERY = "Query cannot be empty"
    INVALID_RESULT_COUNT = "Result count must be positive"

    # Decoding Errors
    MALFORMED_LINE = "Malformed extractor output on line {line}: {error}"
    NOT_AN_OBJECT = "Extractor output on line {line} is not a JSON object"

    # Resolution Errors
    METADATA_UNREACHABLE = "Resolution finished without producing metadata"

    # Settings Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_BASE_URL = "Base URL must start with http:// or https://"

    # Search API Errors
    SEARCH_API_DISABLED = "Search API key is not configured"
    SEARCH_API_HTTP_ERROR = "Search API request failed: {error}"
    SEARCH_API_BAD_RESPONSE = "Search API returned an unexpected response"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Extractor
    EXTRACTOR_INVOKING = "Invoking %s for %s"
    EXTRACTOR_FINISHED = "%s finished in %.2fs with %d output lines"
    EXTRACTOR_MISSING = "Extractor executable '%s' not found on path"
    EXTRACTOR_FAILED = "%s exited with status %s: %s"

    # Decoder
    DECODE_FAILED = "Failed to decode extractor line %d: %r"
    DECODE_NO_RESULTS = "Extractor returned no results for %s"

    # Resolution
    RESOLUTION_STARTED = "Resolving %s"
    RESOLUTION_JOIN_INFLIGHT = "Joining in-flight resolution for %s"
    RESOLUTION_CACHE_HIT = "Metadata cache hit for %s"
    RESOLUTION_FAILED = "Resolution failed for %s: %s"
    STREAM_ISSUED = "Issued %s stream for %s"
    STREAM_REISSUED = "Stream already issued for %s, creating another"

    # Transport
    HEADER_DROPPED = "Dropping malformed header %r"
    TRANSPORT_HTTP_OPENED = "Opened HTTP range stream %s (length=%s)"
    TRANSPORT_BAD_LENGTH = "Ignoring unparsable length %r from %s"
    TRANSPORT_RANGE_IGNORED = "Server ignored range for %s, skipping %d bytes"
    TRANSPORT_HLS_OPENED = "Opened HLS stream %s with %d segments"
    TRANSPORT_HLS_VARIANT = "Following HLS variant playlist %s"
    TRANSPORT_FAILED = "Transport failed for %s: %r"

    # Playlist
    PLAYLIST_RESOLVING = "Resolving playlist %s"
    PLAYLIST_RESOLVED = "Resolved playlist %s into %d sources"

    # Metadata race
    RACE_WINNER = "Metadata race won by branch %d"
    RACE_TIMEOUT = "Metadata race timed out after %.2fs"
    RACE_BRANCH_FAILED = "Metadata race branch %d failed: %r"

    # Search API
    SEARCH_API_REQUEST = "Searching API for '%s'"
    SEARCH_API_FAILED = "Search API request failed for '%s': %r"

    # Queue boundary
    ENQUEUED = "Enqueued %d source(s) for '%s'"
    ENQUEUE_FAILED = "Failed to enqueue '%s': %s"
    SOURCE_DISCARDED = "Discarded source %s"

    # Lifecycle
    APP_STARTING = "Starting media-source ({environment})"
    CONTAINER_SHUTDOWN = "Closing shared HTTP client"
    FATAL_ERROR = "Fatal error: %r"


class UserMessages:
    """User-facing text returned by the command boundary."""

    NOW_PLAYING = "Now Playing"
    QUEUED = "Queuing"
    QUEUED_PLAYLIST = "Queuing {count} from Playlist"
    NO_RESULTS = "No matches found for '{query}'"
    TOOL_MISSING = "Media extractor is not installed on this host"
    TOOL_FAILURE = "Media extractor failed: {detail}"
    DECODE_FAILURE = "Media extractor returned output this version cannot read"
    TRANSPORT_FAILURE = "Could not open the audio stream"
    QUEUE_FULL = "Queue is full"
    EMPTY_QUERY = "No song specified"
