"""Pydantic model for one decoded extractor output record.

Parsed from the external extractor's JSON output.
The protocol tag and the public Metadata are derived once, when the record
is validated, and never recomputed.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from media_source.domain.shared.types import NonEmptyStr, NonNegativeFloat, NonNegativeInt
from media_source.domain.source.entities import Metadata
from media_source.domain.source.value_objects import TransportKind


class ExtractionRecord(BaseModel):
    """One line of ``yt-dlp -j`` output, trimmed to the fields we use.

    Extra fields from yt-dlp are silently ignored.
    Before-validators coerce garbage in optional fields to None; a missing
    ``url`` is a validation error.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr
    webpage_url: NonEmptyStr | None = None
    title: NonEmptyStr | None = None
    artist: NonEmptyStr | None = None
    album: NonEmptyStr | None = None
    track: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    uploader: NonEmptyStr | None = None
    release_date: NonEmptyStr | None = None
    upload_date: NonEmptyStr | None = None
    thumbnail: NonEmptyStr | None = None
    duration: NonNegativeFloat | None = None
    filesize: NonNegativeInt | None = None
    http_headers: dict[str, str] = Field(default_factory=dict)
    protocol: NonEmptyStr | None = None

    _transport: TransportKind = PrivateAttr(default=TransportKind.DIRECT_HTTP)
    _metadata: Metadata | None = PrivateAttr(default=None)

    @field_validator(
        "webpage_url", "title", "artist", "album", "track", "channel",
        "uploader", "release_date", "upload_date", "thumbnail", "protocol",
        mode="before",
    )
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> float | None:
        """Live streams report no duration; garbage is treated the same way."""
        if v is None or isinstance(v, bool):
            return None
        try:
            val = float(v)
        except (TypeError, ValueError):
            return None
        return val if val >= 0 else None

    @field_validator("filesize", mode="before")
    @classmethod
    def _coerce_filesize(cls, v: Any) -> int | None:
        if v is None or isinstance(v, bool):
            return None
        try:
            val = int(v)
        except (TypeError, ValueError):
            return None
        return val if val >= 0 else None

    @field_validator("http_headers", mode="before")
    @classmethod
    def _coerce_headers(cls, v: Any) -> dict[str, str]:
        """Keep string pairs only; header syntax is checked by the transport."""
        if not isinstance(v, dict):
            return {}
        return {k: val for k, val in v.items() if isinstance(k, str) and isinstance(val, str)}

    def model_post_init(self, __context: Any) -> None:
        self._transport = TransportKind.from_protocol(self.protocol)
        self._metadata = self._derive_metadata()

    def _derive_metadata(self) -> Metadata:
        return Metadata(
            title=self.title,
            artist=self.artist or self.uploader,
            album=self.album,
            track=self.track,
            date=self.release_date or self.upload_date,
            channel=self.channel,
            duration=timedelta(seconds=self.duration) if self.duration is not None else None,
            source_url=self.webpage_url,
            thumbnail=self.thumbnail,
        )

    @property
    def transport(self) -> TransportKind:
        return self._transport

    @property
    def metadata(self) -> Metadata:
        if self._metadata is None:
            self._metadata = self._derive_metadata()
        return self._metadata
