import pytest

from app.adapters.clients.trademe import TradeMeClient
from app.config import Settings, TradeMeConfig
from app.jobs.scheduler import build_scheduler, run_sync_once
from app.service_layer.sources import CachedFetchSource, LiveFetchSource


@pytest.mark.asyncio
async def test_run_sync_once_writes_rows(async_session_maker, trademe_config, transport_factory, make_listing):
    t = transport_factory((200, {"List": [make_listing(), make_listing()]}))
    src = CachedFetchSource(async_session_maker, LiveFetchSource(TradeMeClient(trademe_config, transport=t)))

    assert await run_sync_once(src) == 2
    assert len(await src.list_open_homes()) == 2


@pytest.mark.asyncio
async def test_run_sync_once_swallows_upstream_failure(async_session_maker, transport_factory):
    t = transport_factory((200, {"List": []}))
    no_creds = TradeMeClient(TradeMeConfig(consumer_key=None, consumer_secret=None), transport=t)
    src = CachedFetchSource(async_session_maker, LiveFetchSource(no_creds))

    assert await run_sync_once(src) is None


def test_build_scheduler_registers_interval_job(async_session_maker, trademe_config):
    src = CachedFetchSource(async_session_maker, LiveFetchSource(TradeMeClient(trademe_config)))
    sched = build_scheduler(src, Settings(_env_file=None, SCHED_SYNC_INTERVAL_MINUTES=15))

    jobs = sched.get_jobs()
    assert len(jobs) == 1
    assert jobs[0].trigger.interval.total_seconds() == 15 * 60
