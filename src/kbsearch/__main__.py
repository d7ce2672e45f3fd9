"""Entry point for the API server."""

import asyncio
import contextlib
import sys

import structlog
import uvicorn

from kbsearch.app import create_app
from kbsearch.config import Settings
from kbsearch.logging import configure_logging

logger = structlog.get_logger()


async def serve(settings: Settings) -> None:
    """Run the uvicorn server until it receives SIGINT or SIGTERM.

    Args:
        settings: Server configuration.
    """
    app = create_app(settings)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
        timeout_graceful_shutdown=int(settings.shutdown_timeout),
    )
    server = uvicorn.Server(config)

    logger.info("server_starting", host=settings.host, port=settings.port)
    await server.serve()
    logger.info("server_stopped")


def main() -> None:
    """Entry point for python -m kbsearch."""
    settings = Settings()
    configure_logging(debug=settings.debug, json_logs=settings.json_logs)

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve(settings))

    sys.exit(0)


if __name__ == "__main__":
    main()
