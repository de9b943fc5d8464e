"""Entry point for the FastAPI-powered duplicate picker."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .models import FailedFetchAnime, FailedFetchUsers, NoDuplicate
from .results import is_err
from .services.anilist import AniListClient
from .services.selector import DuplicateSelector, resolve_dup

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    timeout = settings.anilist_timeout_seconds
    anilist_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
        )
    )
    client = AniListClient(settings, anilist_http_client)
    fastapi_app.state.selector = DuplicateSelector.seeded(
        client, settings.selection_seed
    )

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Pick an anime a group of AniList users has all watched",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_selector(app: FastAPI) -> DuplicateSelector:
    selector = getattr(app.state, "selector", None)
    if not isinstance(selector, DuplicateSelector):
        raise RuntimeError("Duplicate selector not initialised")
    return selector


def parse_usernames(raw: str | None) -> list[str]:
    """Split the comma-separated ``anilist`` parameter, dropping blanks."""

    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/")
    async def pick_duplicate(request: Request) -> JSONResponse:
        usernames = parse_usernames(request.query_params.get("anilist"))
        if not usernames:
            return JSONResponse({"message": "NO_USERNAMES"}, status_code=400)

        dup = resolve_dup(request.query_params.get("dup"), len(usernames))
        selector = get_selector(fastapi_app)
        try:
            result = await selector.select_duplicate(usernames, dup)
        except httpx.HTTPError:
            logger.exception("AniList unavailable while picking for %s", usernames)
            return JSONResponse({"message": "UPSTREAM_UNAVAILABLE"}, status_code=502)

        if not is_err(result):
            return JSONResponse(result.value.to_payload())

        failure = result.error
        if isinstance(failure, FailedFetchUsers):
            return JSONResponse(
                {
                    "message": failure.type,
                    "payload": failure.model_dump(by_alias=True),
                },
                status_code=400,
            )
        if isinstance(failure, NoDuplicate):
            return JSONResponse({"message": failure.type}, status_code=404)
        if isinstance(failure, FailedFetchAnime):
            return JSONResponse(
                {
                    "message": failure.type,
                    "payload": failure.model_dump(by_alias=True, exclude_none=True),
                },
                status_code=500,
            )
        logger.error("Unhandled selection failure: %r", failure)
        return JSONResponse({"message": "UNKNOWN_ERROR"}, status_code=500)


app = create_app()
