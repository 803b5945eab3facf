"""MetadataSearch implementation backed by the YouTube Data API v3."""

from __future__ import annotations

import logging
from typing import Final

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from media_source.application.interfaces.search_api import MetadataSearch
from media_source.config.settings import SearchApiSettings
from media_source.domain.shared.exceptions import SearchApiError
from media_source.domain.shared.messages import ErrorMessages, LogTemplates
from media_source.domain.source.entities import Metadata

logger = logging.getLogger(__name__)

WATCH_URL_TEMPLATE: Final[str] = "https://www.youtube.com/watch?v={video_id}"
SEARCH_FIELDS: Final[str] = "items(id(videoId),snippet(title,thumbnails(high(url))))"


# ── Response models ────────────────────────────────────────────────────


class _VideoId(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    video_id: str | None = Field(default=None, alias="videoId")


class _Thumbnail(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str | None = None


class _Thumbnails(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    high: _Thumbnail | None = None


class _Snippet(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str | None = None
    thumbnails: _Thumbnails = Field(default_factory=_Thumbnails)


class SearchItem(BaseModel):
    """One hit from the ``search`` endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: _VideoId = Field(default_factory=_VideoId)
    snippet: _Snippet = Field(default_factory=_Snippet)

    @property
    def watch_url(self) -> str | None:
        if not self.id.video_id:
            return None
        return WATCH_URL_TEMPLATE.format(video_id=self.id.video_id)

    def to_metadata(self) -> Metadata:
        thumbnail = self.snippet.thumbnails.high.url if self.snippet.thumbnails.high else None
        return Metadata(
            title=self.snippet.title or None,
            source_url=self.watch_url,
            thumbnail=thumbnail or None,
        )


class SearchResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    items: list[SearchItem] = Field(default_factory=list)


# ── Client ─────────────────────────────────────────────────────────────


class YouTubeDataApiClient(MetadataSearch):

    def __init__(self, client: httpx.AsyncClient, settings: SearchApiSettings | None = None) -> None:
        self._client = client
        self._settings = settings or SearchApiSettings()

    @property
    def enabled(self) -> bool:
        return self._settings.enabled

    async def search_first(self, terms: str) -> tuple[str, Metadata] | None:
        """Top video hit for ``terms``.

        Raises:
            SearchApiError: If the API is disabled, unreachable, or answers
                with something other than a search result list.
        """
        if not self.enabled:
            raise SearchApiError(ErrorMessages.SEARCH_API_DISABLED)

        logger.debug(LogTemplates.SEARCH_API_REQUEST, terms)
        params = {
            "part": "snippet",
            "type": "video",
            "q": terms,
            "key": self._settings.api_key.get_secret_value(),
            "fields": SEARCH_FIELDS,
            "maxResults": 1,
        }

        try:
            response = await self._client.get(f"{self._settings.base_url}/search", params=params)
            response.raise_for_status()
            payload = SearchResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.warning(LogTemplates.SEARCH_API_FAILED, terms, e)
            raise SearchApiError(
                ErrorMessages.SEARCH_API_HTTP_ERROR.format(error=e),
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.SEARCH_API_FAILED, terms, e)
            raise SearchApiError(ErrorMessages.SEARCH_API_HTTP_ERROR.format(error=e)) from e
        except (ValueError, PydanticValidationError) as e:
            logger.warning(LogTemplates.SEARCH_API_FAILED, terms, e)
            raise SearchApiError(ErrorMessages.SEARCH_API_BAD_RESPONSE) from e

        for item in payload.items:
            if item.watch_url:
                return item.watch_url, item.to_metadata()
        return None
