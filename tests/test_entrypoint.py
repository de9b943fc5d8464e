from __future__ import annotations

from typing import Any

import pytest

import anipick
from anipick import __main__ as entrypoint


def test_main_serves_app_factory(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
    monkeypatch.setattr(
        entrypoint.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs))
    )

    entrypoint.main()

    assert len(calls) == 1
    args, kwargs = calls[0]
    assert args == ("app.main:create_app",)
    assert kwargs["factory"] is True
    assert kwargs["log_level"] == entrypoint.get_settings().log_level.lower()


def test_version_is_a_string() -> None:
    assert isinstance(anipick.__version__, str)
