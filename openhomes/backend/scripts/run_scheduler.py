from __future__ import annotations

import asyncio
import logging

from app.adapters.clients.trademe import TradeMeClient
from app.config import TradeMeConfig, settings
from app.db import build_engine, build_session_maker, create_all
from app.jobs.scheduler import build_scheduler, run_sync_once
from app.logging_config import configure_logging
from app.service_layer.sources import CachedFetchSource, LiveFetchSource


async def main() -> None:
    configure_logging()

    engine = build_engine(settings.OPENHOMES_DB_URL)
    await create_all(engine)
    source = CachedFetchSource(
        build_session_maker(engine),
        LiveFetchSource(TradeMeClient(TradeMeConfig.from_settings(settings))),
    )

    # warm the cache immediately instead of waiting a full interval
    await run_sync_once(source)

    scheduler = build_scheduler(source, settings)
    scheduler.start()
    logging.getLogger(__name__).info("Scheduler started")

    try:
        while True:
            await asyncio.sleep(3600)
    except (KeyboardInterrupt, asyncio.CancelledError):
        scheduler.shutdown()
        await engine.dispose()
        logging.getLogger(__name__).info("Scheduler stopped")


if __name__ == "__main__":
    asyncio.run(main())
