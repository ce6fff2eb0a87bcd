"""Entry point: configure logging, migrate the database, serve the API."""

import asyncio
import structlog
from config.settings import settings
from config.logging_config import setup_logging
from storage.database import close_pool, get_pool, run_migrations
from web.app import create_app

log = structlog.get_logger(__name__)


async def start_web() -> None:
    """Prepare the store and run the web server until shutdown."""
    setup_logging()
    log.info("starting_profile_service", host=settings.web_host, port=settings.web_port)

    await get_pool()
    await run_migrations()

    app = create_app()
    try:
        await app.run_task(host=settings.web_host, port=settings.web_port)
    finally:
        await close_pool()


def main() -> None:
    asyncio.run(start_web())


if __name__ == "__main__":
    main()
