"""Console log formatting for the CLI."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any


class ColoredFormatter(logging.Formatter):
    """Formatter that tints the level name and dims the logger name.

    Log output goes to stderr so stdout stays machine-readable JSON. Colour
    is applied only when that stream is a TTY and ``NO_COLOR`` is unset;
    ``use_color`` forces it either way.
    """

    LEVEL_COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    DIM = "\033[2m"
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Any = "%",
        *,
        stream: IO[str] | None = None,
        use_color: bool | None = None,
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self.stream = stream
        self.use_color = use_color

    def _color_enabled(self) -> bool:
        if self.use_color is not None:
            return self.use_color
        if "NO_COLOR" in os.environ:
            return False
        stream = self.stream or sys.stderr
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    def format(self, record: logging.LogRecord) -> str:
        if not self._color_enabled():
            return super().format(record)

        # Copy so other handlers sharing the record see plain text.
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, "")
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        record.name = f"{self.DIM}{record.name}{self.RESET}"
        return super().format(record)
