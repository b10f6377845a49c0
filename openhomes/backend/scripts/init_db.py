# scripts/init_db.py
import asyncio

from app.config import settings
from app.db import build_engine, create_all


async def main() -> None:
    engine = build_engine(settings.OPENHOMES_DB_URL)
    try:
        await create_all(engine)
    finally:
        await engine.dispose()
    print("OK: created all tables (idempotent).")


if __name__ == "__main__":
    asyncio.run(main())
