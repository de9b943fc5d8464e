"""Pydantic models describing watch records, selections and failures."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

WatchStatus = Literal["CURRENT", "PAUSED", "PLANNING", "DROPPED"]
FetchFailureKind = Literal["NOT_FOUND", "PARSE_FAILED"]
Score = Union[int, float]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CompletedEntry(_Frozen):
    """An anime the user finished, with the score they gave it."""

    anime_id: int = Field(serialization_alias="id")
    score: Score


class InProgressEntry(_Frozen):
    """An anime sitting in one of the user's non-completed lists."""

    anime_id: int = Field(serialization_alias="id")
    status: WatchStatus


class UserWatchRecord(_Frozen):
    """Everything fetched for a single user."""

    username: str
    avatar_url: str
    completed: tuple[CompletedEntry, ...] = ()
    in_progress: tuple[InProgressEntry, ...] = ()

    def completed_ids(self) -> list[int]:
        return [entry.anime_id for entry in self.completed]

    def score_for(self, anime_id: int) -> Score | None:
        """Return the user's score if ``anime_id`` is in their completed list."""

        for entry in self.completed:
            if entry.anime_id == anime_id:
                return entry.score
        return None

    def status_for(self, anime_id: int) -> WatchStatus | None:
        for entry in self.in_progress:
            if entry.anime_id == anime_id:
                return entry.status
        return None


class AnimeMetadata(_Frozen):
    """Display metadata for the picked title."""

    id: int
    native_title: str = Field(serialization_alias="titleNative")
    cover_image_url: str = Field(serialization_alias="coverImage")


class ScoreAnnotation(_Frozen):
    username: str
    avatar: str
    score: Score


class StatusAnnotation(_Frozen):
    username: str
    avatar: str
    status: WatchStatus


Annotation = Union[ScoreAnnotation, StatusAnnotation]


class Selection(_Frozen):
    """Successful response body: the picked anime and who has seen it."""

    anime: AnimeMetadata
    users: list[Annotation] = Field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class UserFetchFailure(_Frozen):
    type: FetchFailureKind
    username: str


class AnimeFetchFailure(_Frozen):
    type: FetchFailureKind
    id: int


class FailedFetchUsers(_Frozen):
    """One or more user fetches failed; ``errors`` lists every one of them."""

    type: Literal["FAILED_FETCH_USERS"] = "FAILED_FETCH_USERS"
    errors: list[UserFetchFailure] = Field(default_factory=list)


class NoDuplicate(_Frozen):
    """No anime reached the duplicate threshold."""

    type: Literal["NO_DUPLICATE"] = "NO_DUPLICATE"


class FailedFetchAnime(_Frozen):
    """Metadata for the picked anime could not be fetched."""

    type: Literal["FAILED_FETCH_ANIME"] = "FAILED_FETCH_ANIME"
    anime_id: int = Field(serialization_alias="anilistId")
    reason: FetchFailureKind | None = None


SelectionFailure = Union[FailedFetchUsers, NoDuplicate, FailedFetchAnime]
