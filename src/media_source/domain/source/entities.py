"""Core domain entities for source resolution."""

from __future__ import annotations

from datetime import timedelta
from typing import Final

from pydantic import BaseModel, ConfigDict

from media_source.domain.shared.types import NonEmptyStr, PositiveInt

STEREO_CHANNELS: Final[int] = 2
SAMPLE_RATE_HZ: Final[int] = 48_000

YOUTUBE_THUMBNAIL_TEMPLATE: Final[str] = "https://i3.ytimg.com/vi/{video_id}/hqdefault.jpg"


class Metadata(BaseModel):
    """Immutable, public-facing summary of one resolved audio item.

    Fallbacks (artist from uploader, date from upload date) are already
    applied by the time an instance exists.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    title: NonEmptyStr | None = None
    artist: NonEmptyStr | None = None
    album: NonEmptyStr | None = None
    track: NonEmptyStr | None = None
    date: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    duration: timedelta | None = None
    channels: PositiveInt = STEREO_CHANNELS
    sample_rate: PositiveInt = SAMPLE_RATE_HZ
    source_url: NonEmptyStr | None = None
    thumbnail: NonEmptyStr | None = None

    @property
    def video_id(self) -> str | None:
        """YouTube video id taken from a ``?v=`` source URL, if any."""
        if not self.source_url or "?v=" not in self.source_url:
            return None
        video_id = self.source_url.split("?v=", 1)[1].split("&", 1)[0]
        return video_id or None

    @property
    def preview_image_url(self) -> str | None:
        video_id = self.video_id
        if video_id:
            return YOUTUBE_THUMBNAIL_TEMPLATE.format(video_id=video_id)
        return self.thumbnail

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        if self.duration is None:
            return "Live"

        total = int(self.duration.total_seconds())
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"
