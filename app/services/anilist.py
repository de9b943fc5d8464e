"""Utilities for communicating with the AniList GraphQL API."""

from __future__ import annotations

import logging
from typing import Any, Union

import httpx
from pydantic import BaseModel, HttpUrl, StrictFloat, StrictInt, StrictStr, ValidationError

from ..config import Settings
from ..models import (
    AnimeFetchFailure,
    AnimeMetadata,
    CompletedEntry,
    InProgressEntry,
    UserFetchFailure,
    UserWatchRecord,
    WatchStatus,
)
from ..results import Result, err, ok

logger = logging.getLogger(__name__)

USER_QUERY = """
query ($username: String!) {
  User(name: $username) {
    id
    name
    avatar {
      large
    }
  }
  completed: MediaListCollection(userName: $username, type: ANIME, status: COMPLETED) {
    lists {
      entries {
        score
        media {
          id
        }
      }
    }
  }
  etc: MediaListCollection(
    userName: $username
    type: ANIME
    status_in: [CURRENT, PAUSED, PLANNING, DROPPED]
  ) {
    lists {
      entries {
        status
        media {
          id
        }
      }
    }
  }
}
"""

ANIME_QUERY = """
query ($id: Int) {
  Media(id: $id, type: ANIME) {
    id
    idMal
    title {
      english
      native
    }
    coverImage {
      large
    }
  }
}
"""


class _MediaRef(BaseModel):
    id: StrictInt


class _Image(BaseModel):
    large: HttpUrl


class _User(BaseModel):
    id: StrictInt
    name: StrictStr
    avatar: _Image


class _CompletedListEntry(BaseModel):
    score: Union[StrictInt, StrictFloat]
    media: _MediaRef


class _EtcListEntry(BaseModel):
    status: WatchStatus
    media: _MediaRef


class _CompletedList(BaseModel):
    entries: list[_CompletedListEntry]


class _EtcList(BaseModel):
    entries: list[_EtcListEntry]


class _CompletedCollection(BaseModel):
    lists: list[_CompletedList]


class _EtcCollection(BaseModel):
    lists: list[_EtcList]


class _UserPayload(BaseModel):
    User: _User
    completed: _CompletedCollection
    etc: _EtcCollection


class _Title(BaseModel):
    native: StrictStr


class _Media(BaseModel):
    id: StrictInt
    title: _Title
    coverImage: _Image


class _MediaPayload(BaseModel):
    Media: _Media


class AniListClient:
    """Thin wrapper around the AniList GraphQL endpoint.

    Every call issues exactly one POST. Missing entities and malformed
    payloads come back as failure values; transport errors are raised.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"{self._settings.app_name} (anipick)",
        }

    async def _query(
        self, query: str, variables: dict[str, Any]
    ) -> tuple[bool, dict[str, Any] | None]:
        """Run ``query`` and return ``(decoded, data)``.

        ``decoded`` is False when the body was not a JSON object at all.
        """

        try:
            response = await self._client.post(
                str(self._settings.anilist_api_url),
                json={"query": query, "variables": variables},
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "AniList request failed (%s): %s", exc.__class__.__name__, exc
            )
            raise

        try:
            body = response.json()
        except ValueError:
            logger.warning(
                "Unexpected non-JSON AniList response (status %s)", response.status_code
            )
            return False, None
        if not isinstance(body, dict):
            return False, None
        if body.get("errors"):
            logger.debug("AniList reported errors: %s", body["errors"])
        data = body.get("data")
        if not isinstance(data, dict):
            return True, None
        return True, data

    async def fetch_user_watch_data(
        self, username: str
    ) -> Result[UserFetchFailure, UserWatchRecord]:
        """Fetch a user's profile plus their completed and in-progress lists."""

        decoded, data = await self._query(USER_QUERY, {"username": username})
        if not decoded:
            return err(UserFetchFailure(type="PARSE_FAILED", username=username))
        if data is None or data.get("User") is None:
            logger.warning("AniList user %s not found", username)
            return err(UserFetchFailure(type="NOT_FOUND", username=username))

        try:
            payload = _UserPayload.model_validate(data)
        except ValidationError as exc:
            logger.warning(
                "AniList user payload for %s failed validation: %s",
                username,
                exc.errors(include_url=False),
            )
            return err(UserFetchFailure(type="PARSE_FAILED", username=username))

        return ok(self._build_record(payload))

    async def fetch_anime_metadata(
        self, anime_id: int
    ) -> Result[AnimeFetchFailure, AnimeMetadata]:
        """Fetch title and cover art for a single anime."""

        decoded, data = await self._query(ANIME_QUERY, {"id": anime_id})
        if not decoded:
            return err(AnimeFetchFailure(type="PARSE_FAILED", id=anime_id))
        if data is None or data.get("Media") is None:
            logger.warning("AniList media %s not found", anime_id)
            return err(AnimeFetchFailure(type="NOT_FOUND", id=anime_id))

        try:
            payload = _MediaPayload.model_validate(data)
        except ValidationError as exc:
            logger.warning(
                "AniList media payload for %s failed validation: %s",
                anime_id,
                exc.errors(include_url=False),
            )
            return err(AnimeFetchFailure(type="PARSE_FAILED", id=anime_id))

        media = payload.Media
        return ok(
            AnimeMetadata(
                id=media.id,
                native_title=media.title.native,
                cover_image_url=str(media.coverImage.large),
            )
        )

    @staticmethod
    def _build_record(payload: _UserPayload) -> UserWatchRecord:
        # Custom lists repeat entries from the status lists; keep the first.
        completed: dict[int, CompletedEntry] = {}
        for media_list in payload.completed.lists:
            for entry in media_list.entries:
                completed.setdefault(
                    entry.media.id,
                    CompletedEntry(anime_id=entry.media.id, score=entry.score),
                )

        in_progress: dict[int, InProgressEntry] = {}
        for media_list in payload.etc.lists:
            for entry in media_list.entries:
                in_progress.setdefault(
                    entry.media.id,
                    InProgressEntry(anime_id=entry.media.id, status=entry.status),
                )

        return UserWatchRecord(
            username=payload.User.name,
            avatar_url=str(payload.User.avatar.large),
            completed=tuple(completed.values()),
            in_progress=tuple(in_progress.values()),
        )
