"""ExtractorInvoker implementation that runs yt-dlp as a child process."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Final

from media_source.application.interfaces.extractor import ExtractorInvoker
from media_source.config.settings import ExtractorSettings
from media_source.domain.shared.exceptions import ToolFailedError, ToolMissingError
from media_source.domain.shared.messages import LogTemplates
from media_source.domain.source.value_objects import Query

logger = logging.getLogger(__name__)

LOG_QUERY_TRUNCATE: Final[int] = 80
NO_PLAYLIST_FLAG: Final[str] = "--no-playlist"
FLAT_PLAYLIST_FLAG: Final[str] = "--flat-playlist"


def split_output(stdout: bytes) -> list[str]:
    """Split captured stdout into records, dropping blank lines."""
    text = stdout.decode("utf-8", errors="replace")
    return [line for line in text.split("\n") if line.strip()]


class YtDlpInvoker(ExtractorInvoker):

    def __init__(self, settings: ExtractorSettings | None = None) -> None:
        self._settings = settings or ExtractorSettings()

    @property
    def program(self) -> str:
        return self._settings.program

    def build_args(self, query: Query, result_limit: int = 1) -> list[str]:
        return [
            *self._settings.user_args,
            "-j",
            query.to_extractor_target(result_limit),
            "-f",
            self._settings.format_filter,
            NO_PLAYLIST_FLAG,
        ]

    def build_playlist_args(self, url: str) -> list[str]:
        return [
            *self._settings.user_args,
            "-j",
            FLAT_PLAYLIST_FLAG,
            url,
            "-f",
            self._settings.format_filter,
        ]

    async def _run(self, args: list[str]) -> list[str]:
        logger.debug(
            LogTemplates.EXTRACTOR_INVOKING, self.program, " ".join(args)[:LOG_QUERY_TRUNCATE]
        )
        started = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                self.program,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            logger.error(LogTemplates.EXTRACTOR_MISSING, self.program)
            raise ToolMissingError(self.program) from e
        except OSError as e:
            logger.error(LogTemplates.EXTRACTOR_FAILED, self.program, None, e)
            raise ToolFailedError(self.program, str(e)) from e

        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            logger.warning(LogTemplates.EXTRACTOR_FAILED, self.program, process.returncode, message)
            raise ToolFailedError(self.program, message, process.returncode)

        lines = split_output(stdout)
        logger.debug(
            LogTemplates.EXTRACTOR_FINISHED, self.program, time.monotonic() - started, len(lines)
        )
        return lines

    async def invoke(self, query: Query, result_limit: int = 1) -> list[str]:
        return await self._run(self.build_args(query, result_limit))

    async def invoke_playlist(self, url: str) -> list[str]:
        return await self._run(self.build_playlist_args(url))
