# app/jobs/scheduler.py
from __future__ import annotations

import asyncio
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..config import Settings
from ..errors import OpenHomesError
from ..service_layer.sources import CachedFetchSource

log = logging.getLogger(__name__)


async def run_sync_once(source: CachedFetchSource) -> int | None:
    """
    One live fetch + upsert. Failures are logged, not raised: the next tick
    simply tries again.
    """
    try:
        n = await source.sync()
    except OpenHomesError as e:
        log.warning("Scheduled open home sync failed: %s", e)
        return None
    log.info("Scheduled open home sync wrote %d rows", n)
    return n


def build_scheduler(source: CachedFetchSource, cfg: Settings) -> AsyncIOScheduler:
    sched = AsyncIOScheduler()

    # sync cadence (default: every 60 minutes)
    sched.add_job(
        lambda: asyncio.create_task(run_sync_once(source)),
        "interval",
        minutes=int(cfg.SCHED_SYNC_INTERVAL_MINUTES),
    )

    return sched
