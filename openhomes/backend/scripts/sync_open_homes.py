# scripts/sync_open_homes.py
import asyncio
import sys

from app.adapters.clients.trademe import TradeMeClient
from app.config import TradeMeConfig, settings
from app.db import build_engine, build_session_maker, create_all
from app.errors import OpenHomesError
from app.logging_config import configure_logging
from app.service_layer.sources import CachedFetchSource, LiveFetchSource


async def main() -> int:
    configure_logging()
    engine = build_engine(settings.OPENHOMES_DB_URL)
    try:
        await create_all(engine)
        source = CachedFetchSource(
            build_session_maker(engine),
            LiveFetchSource(TradeMeClient(TradeMeConfig.from_settings(settings))),
        )
        n = await source.sync()
    except OpenHomesError as e:
        print("Sync failed:", e)
        return 1
    finally:
        await engine.dispose()

    print(f"OK: synced {n} open homes into {settings.OPENHOMES_DB_URL}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
