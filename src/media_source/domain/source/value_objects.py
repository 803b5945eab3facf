"""Value objects for the source resolution bounded context."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from media_source.domain.shared.messages import ErrorMessages
from media_source.domain.shared.types import NonEmptyStr, SearchResultCount

SEGMENTED_MANIFEST_PROTOCOL: Final[str] = "m3u8_native"


class TransportKind(StrEnum):
    """How the bytes of a resolved source are delivered."""

    DIRECT_HTTP = "direct_http"
    SEGMENTED_MANIFEST = "segmented_manifest"

    @classmethod
    def from_protocol(cls, protocol: str | None) -> TransportKind:
        if protocol == SEGMENTED_MANIFEST_PROTOCOL:
            return cls.SEGMENTED_MANIFEST
        return cls.DIRECT_HTTP


class ResolutionState(StrEnum):
    """Lifecycle of a source descriptor. Transitions only move forward."""

    UNRESOLVED = "unresolved"
    METADATA_CACHED = "metadata_cached"
    STREAM_ISSUED = "stream_issued"


class UrlQuery(BaseModel):
    """A direct media URL handed to the extractor as-is."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: Literal["url"] = "url"
    url: NonEmptyStr

    @field_validator("url", mode="before")
    @classmethod
    def _strip(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    def to_extractor_target(self, result_limit: int) -> str:
        return self.url

    def __str__(self) -> str:
        return self.url


class SearchQuery(BaseModel):
    """Free-text search terms, rewritten into the extractor's search syntax."""

    model_config = ConfigDict(frozen=True, strict=True)

    kind: Literal["search"] = "search"
    terms: NonEmptyStr
    result_count: SearchResultCount = 1

    @field_validator("terms", mode="before")
    @classmethod
    def _strip(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    def to_extractor_target(self, result_limit: int) -> str:
        if result_limit < 1:
            raise ValueError(ErrorMessages.INVALID_RESULT_COUNT)
        return f"ytsearch{result_limit}:{self.terms}"

    def __str__(self) -> str:
        return self.terms


Query = Annotated[UrlQuery | SearchQuery, Field(discriminator="kind")]
