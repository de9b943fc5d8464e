"""Run the picker with ``python -m anipick`` or the ``anipick`` script."""

from __future__ import annotations

import logging

import uvicorn

from app.config import get_settings

logger = logging.getLogger("anipick")


def main() -> None:
    """Build a fresh app per worker from ``create_app`` and serve it."""

    config = get_settings()
    logger.info(
        "Starting %s on %s:%s against %s",
        config.app_name,
        config.server_host,
        config.server_port,
        config.anilist_api_url,
    )
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=config.environment == "development",
    )


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
