import json
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.adapters.clients.trademe import TradeMeClient
from app.adapters.repos.open_homes import OpenHomeRepository
from app.errors import ConfigurationError, StorageError, SyncUnsupportedError
from app.service_layer.sources import (
    CachedFetchSource,
    LiveFetchSource,
    StaticFixtureSource,
    build_source,
)

FIXTURE = Path(__file__).resolve().parents[1] / "data" / "open_homes.json"


@pytest.mark.asyncio
async def test_static_fixture_filters_once_and_serves_lookup():
    src = StaticFixtureSource.from_path(FIXTURE)

    homes = await src.list_open_homes()

    # 4 listings in the fixture, one without open homes
    assert [h.listing_id for h in homes] == ["4801234567", "4801234568", "4801234570"]
    assert homes[1].location == "Tauranga"
    assert homes[2].location == "Location not specified"
    assert (await src.get_open_home("4801234568")).title == "Townhouse close to the beach"
    assert await src.get_open_home("4801234569") is None


def test_static_fixture_missing_or_broken(tmp_path):
    with pytest.raises(ConfigurationError):
        StaticFixtureSource.from_path(tmp_path / "nope.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        StaticFixtureSource.from_path(bad)


def test_static_fixture_accepts_bare_list(tmp_path, make_listing):
    p = tmp_path / "list.json"
    p.write_text(json.dumps([make_listing(ListingId=1), make_listing(ListingId=2, OpenHomes=[])]), encoding="utf-8")
    assert [h.id for h in StaticFixtureSource.from_path(p).items] == [1]


@pytest.mark.asyncio
async def test_live_lookup_matches_listing_id_or_id(trademe_config, transport_factory, make_listing):
    no_id = make_listing(ListingId=None)
    t = transport_factory((200, {"List": [make_listing(ListingId=77), no_id]}))
    live = LiveFetchSource(TradeMeClient(trademe_config, transport=t))

    assert (await live.get_open_home("77")).listing_id == "77"
    # positional id 2 for the listing without ListingId
    assert (await live.get_open_home("2")).title == no_id["Title"]
    assert await live.get_open_home("404") is None


@pytest.mark.asyncio
async def test_cached_reads_database_then_falls_back_to_live(
    async_session_maker, trademe_config, transport_factory, make_listing
):
    t = transport_factory((200, {"List": [make_listing(ListingId=42, Title="Live only")]}))
    src = CachedFetchSource(async_session_maker, LiveFetchSource(TradeMeClient(trademe_config, transport=t)))

    assert await src.list_open_homes() == []
    assert len(t.requests) == 0

    home = await src.get_open_home("42")
    assert home.title == "Live only"
    assert len(t.requests) == 1


@pytest.mark.asyncio
async def test_cached_sync_fetches_and_upserts(async_session_maker, trademe_config, transport_factory, make_listing):
    t = transport_factory((200, {"List": [make_listing(ListingId=1), make_listing(ListingId=2, OpenHomes=[])]}))
    src = CachedFetchSource(async_session_maker, LiveFetchSource(TradeMeClient(trademe_config, transport=t)))

    assert await src.sync() == 1

    cached = await src.list_open_homes()
    assert [h.listing_id for h in cached] == ["1"]

    # served from the table now; no second upstream call
    assert (await src.get_open_home("1")).listing_id == "1"
    assert len(t.requests) == 1

    async with async_session_maker() as session:
        assert await OpenHomeRepository(session).get("2") is None


def test_build_source_selects_variant(async_session_maker, trademe_config):
    client = TradeMeClient(trademe_config)

    assert isinstance(build_source("live", client=client), LiveFetchSource)
    assert isinstance(build_source("CACHED", client=client, session_maker=async_session_maker), CachedFetchSource)
    assert isinstance(build_source("static", client=client, fixture_path=FIXTURE), StaticFixtureSource)

    with pytest.raises(ConfigurationError):
        build_source("cached", client=client)
    with pytest.raises(ConfigurationError):
        build_source("supabase", client=client)


class _CommitFailsSession(AsyncSession):
    async def commit(self) -> None:
        raise OperationalError("COMMIT", {}, Exception("database is locked"))


@pytest.mark.asyncio
async def test_cached_sync_commit_failure_is_storage_error(engine, trademe_config, transport_factory, make_listing):
    t = transport_factory((200, {"List": [make_listing(ListingId=1)]}))
    maker = async_sessionmaker(engine, expire_on_commit=False, class_=_CommitFailsSession)
    src = CachedFetchSource(maker, LiveFetchSource(TradeMeClient(trademe_config, transport=t)))

    with pytest.raises(StorageError, match="database is locked"):
        await src.sync()

    # rolled back; nothing reached the table
    assert await src.list_open_homes() == []


@pytest.mark.asyncio
async def test_sync_unsupported_outside_cached(trademe_config, transport_factory):
    t = transport_factory((200, {"List": []}))

    with pytest.raises(SyncUnsupportedError):
        await LiveFetchSource(TradeMeClient(trademe_config, transport=t)).sync()
    with pytest.raises(SyncUnsupportedError):
        await StaticFixtureSource.from_path(FIXTURE).sync()
    assert t.requests == []
