"""Decode newline-delimited extractor output into ExtractionRecords.

Decoding is all-or-nothing: a single bad line fails the batch, because a
partially decoded playlist would break ordering and count guarantees.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError as PydanticValidationError

from media_source.domain.shared.exceptions import DecodeFailedError, NoResultsError
from media_source.domain.shared.messages import ErrorMessages, LogTemplates
from media_source.domain.source.records import ExtractionRecord

logger = logging.getLogger(__name__)


def decode_line(line: str, line_number: int = 1) -> ExtractionRecord:
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        logger.warning(LogTemplates.DECODE_FAILED, line_number, e)
        raise DecodeFailedError(
            ErrorMessages.MALFORMED_LINE.format(line=line_number, error=e), line_number
        ) from e

    if not isinstance(data, dict):
        logger.warning(LogTemplates.DECODE_FAILED, line_number, type(data).__name__)
        raise DecodeFailedError(ErrorMessages.NOT_AN_OBJECT.format(line=line_number), line_number)

    try:
        return ExtractionRecord.model_validate(data)
    except PydanticValidationError as e:
        logger.warning(LogTemplates.DECODE_FAILED, line_number, e)
        raise DecodeFailedError(
            ErrorMessages.MALFORMED_LINE.format(line=line_number, error=e), line_number
        ) from e


def decode(lines: list[str], query: str = "") -> list[ExtractionRecord]:
    """Decode every line, preserving order.

    Raises:
        DecodeFailedError: If any line is malformed.
        NoResultsError: If there were no lines to decode.
    """
    records = [
        decode_line(line, number)
        for number, line in enumerate(lines, start=1)
        if line.strip()
    ]
    if not records:
        logger.info(LogTemplates.DECODE_NO_RESULTS, query)
        raise NoResultsError(query)
    return records
