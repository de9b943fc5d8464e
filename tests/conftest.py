"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# ``app`` sits at the project root; make it importable without an install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.models import (  # noqa: E402
    CompletedEntry,
    InProgressEntry,
    UserWatchRecord,
)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


def avatar_for(username: str) -> str:
    return f"https://s4.anilist.co/file/anilistcdn/user/avatar/large/{username}.png"


def make_record(
    username: str,
    completed: dict[int, int] | None = None,
    in_progress: dict[int, str] | None = None,
) -> UserWatchRecord:
    """Build a watch record from ``{anime_id: score}`` / ``{anime_id: status}``."""

    return UserWatchRecord(
        username=username,
        avatar_url=avatar_for(username),
        completed=tuple(
            CompletedEntry(anime_id=anime_id, score=score)
            for anime_id, score in (completed or {}).items()
        ),
        in_progress=tuple(
            InProgressEntry(anime_id=anime_id, status=status)
            for anime_id, status in (in_progress or {}).items()
        ),
    )


def user_payload(
    username: str,
    completed: dict[int, Any] | None = None,
    in_progress: dict[int, str] | None = None,
) -> dict[str, Any]:
    """Return an AniList ``data`` object for the user query."""

    return {
        "User": {
            "id": abs(hash(username)) % 100_000,
            "name": username,
            "avatar": {"large": avatar_for(username)},
        },
        "completed": {
            "lists": [
                {
                    "entries": [
                        {"score": score, "media": {"id": anime_id}}
                        for anime_id, score in (completed or {}).items()
                    ]
                }
            ]
        },
        "etc": {
            "lists": [
                {
                    "entries": [
                        {"status": status, "media": {"id": anime_id}}
                        for anime_id, status in (in_progress or {}).items()
                    ]
                }
            ]
        },
    }


def media_payload(anime_id: int, native: str = "進撃の巨人") -> dict[str, Any]:
    """Return an AniList ``data`` object for the media query."""

    return {
        "Media": {
            "id": anime_id,
            "idMal": anime_id + 1000,
            "title": {"english": None, "native": native},
            "coverImage": {
                "large": f"https://s4.anilist.co/file/anilistcdn/media/anime/cover/medium/bx{anime_id}.jpg"
            },
        }
    }
