"""Sweep worker entry point.

Run with: python -m src.main
Runs the expiration sweep every SWEEP_INTERVAL_SECONDS against an in-memory
store, writing notifications to the log, until SIGINT/SIGTERM.
"""

import asyncio
import logging
import signal

import uvloop

from config.settings import settings
from src.ll_app.container import build_container
from src.ll_notify.sink import LoggingNotificationSink
from src.ll_store.memory import InMemoryRepository

logger = logging.getLogger(__name__)


async def run_worker() -> None:
    container = build_container(InMemoryRepository(), LoggingNotificationSink())
    scheduler = container.scheduler()
    stop = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    scheduler.start()
    await stop.wait()
    await scheduler.stop()


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Starting %s sweep worker", settings.APP_NAME)
    uvloop.run(run_worker())


if __name__ == "__main__":
    main()
