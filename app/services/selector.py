"""Pick an anime that a group of AniList users has finished watching."""

from __future__ import annotations

import asyncio
import logging
import random
from collections import Counter
from typing import Callable, Sequence

from ..models import (
    Annotation,
    FailedFetchAnime,
    FailedFetchUsers,
    NoDuplicate,
    ScoreAnnotation,
    Selection,
    SelectionFailure,
    StatusAnnotation,
    UserWatchRecord,
)
from ..results import Result, combine_all, err, is_err, ok
from .anilist import AniListClient

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]


def resolve_dup(raw: object, num_users: int) -> int:
    """Return the duplicate threshold to use for ``num_users`` users.

    Missing, non-integer, or too-large values fall back to ``num_users - 1``.
    Fractional strings such as ``"1.5"`` count as non-integer, since the
    threshold is a whole number of users.
    The result is always clamped to ``[1, num_users]``.
    """

    fallback = num_users - 1
    value: int
    if raw is None or isinstance(raw, bool):
        value = fallback
    elif isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = fallback
    if value > num_users:
        value = fallback
    return max(1, min(value, max(num_users, 1)))


def qualifying_candidates(
    records: Sequence[UserWatchRecord], dup: int
) -> list[int]:
    """Return IDs completed by at least ``dup`` users, in first-seen order."""

    counts: Counter[int] = Counter()
    order: list[int] = []
    for record in records:
        for anime_id in dict.fromkeys(record.completed_ids()):
            if anime_id not in counts:
                order.append(anime_id)
            counts[anime_id] += 1
    return [anime_id for anime_id in order if counts[anime_id] >= dup]


def pick_candidate(candidates: Sequence[int], random_source: RandomSource) -> int:
    """Pick one candidate uniformly using a ``[0, 1)`` random source."""

    if not candidates:
        raise ValueError("Cannot pick from an empty candidate list")
    index = int(random_source() * len(candidates))
    # Guard against sources that return exactly 1.0.
    return candidates[min(index, len(candidates) - 1)]


def reconcile(
    records: Sequence[UserWatchRecord], anime_id: int
) -> list[Annotation]:
    """Annotate ``anime_id`` with each user's score or watch status.

    Users who completed it come first, then users who have it in another
    list. A completed entry wins over an in-progress one for the same user;
    users with neither are left out.
    """

    scored: list[Annotation] = []
    statused: list[Annotation] = []
    for record in records:
        score = record.score_for(anime_id)
        if score is not None:
            scored.append(
                ScoreAnnotation(
                    username=record.username, avatar=record.avatar_url, score=score
                )
            )
            continue
        status = record.status_for(anime_id)
        if status is not None:
            statused.append(
                StatusAnnotation(
                    username=record.username, avatar=record.avatar_url, status=status
                )
            )
    return scored + statused


class DuplicateSelector:
    """Fan out user fetches, intersect completed lists, and pick a title."""

    def __init__(
        self,
        client: AniListClient,
        random_source: RandomSource | None = None,
    ) -> None:
        self._client = client
        self._random = random_source or random.Random().random

    @classmethod
    def seeded(cls, client: AniListClient, seed: int | None) -> "DuplicateSelector":
        return cls(client, random.Random(seed).random)

    async def fetch_users(
        self, usernames: Sequence[str]
    ) -> Result[FailedFetchUsers, list[UserWatchRecord]]:
        """Fetch every user concurrently and wait for all of them to settle.

        A transport error from any fetch is raised only once every other
        fetch has finished.
        """

        results = await asyncio.gather(
            *(self._client.fetch_user_watch_data(username) for username in usernames),
            return_exceptions=True,
        )
        for username, result in zip(usernames, results):
            if isinstance(result, BaseException):
                logger.warning("Fetching AniList user %s raised: %s", username, result)
                raise result
        combined = combine_all(results)
        if is_err(combined):
            return err(FailedFetchUsers(errors=combined.error))
        return combined

    async def select_duplicate(
        self, usernames: Sequence[str], dup: int
    ) -> Result[SelectionFailure, Selection]:
        """Pick an anime completed by at least ``dup`` of ``usernames``."""

        logger.debug("Fetching %s AniList users", len(usernames))
        fetched = await self.fetch_users(usernames)
        if is_err(fetched):
            logger.info(
                "User fetch failed for %s",
                ", ".join(f"{e.username} ({e.type})" for e in fetched.error.errors),
            )
            return fetched
        records = fetched.value

        candidates = qualifying_candidates(records, dup)
        if not candidates:
            logger.info(
                "No anime shared by %s of %s users", dup, len(records)
            )
            return err(NoDuplicate())

        pick = pick_candidate(candidates, self._random)
        logger.debug("Picked %s out of %s candidates", pick, len(candidates))

        anime = await self._client.fetch_anime_metadata(pick)
        if is_err(anime):
            return err(FailedFetchAnime(anime_id=pick, reason=anime.error.type))

        users = reconcile(records, pick)
        logger.info(
            "Selected anime %s for %s (%s annotated users)",
            pick,
            ", ".join(usernames),
            len(users),
        )
        return ok(Selection(anime=anime.value, users=users))
