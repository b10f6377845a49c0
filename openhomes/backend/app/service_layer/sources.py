# app/service_layer/sources.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..adapters.clients.trademe import TradeMeClient
from ..adapters.repos.open_homes import OpenHomeRepository
from ..domain.open_homes import OpenHomeSummary, filter_open_homes, listings_from_payload
from ..errors import ConfigurationError, StorageError, SyncUnsupportedError

log = logging.getLogger(__name__)

LIVE = "live"
CACHED = "cached"
STATIC = "static"
SOURCE_KINDS = (LIVE, CACHED, STATIC)


class OpenHomeSource(Protocol):
    name: str

    async def list_open_homes(self) -> list[OpenHomeSummary]:
        raise NotImplementedError

    async def get_open_home(self, identifier: str) -> OpenHomeSummary | None:
        raise NotImplementedError

    async def sync(self, summaries: list[OpenHomeSummary] | None = None) -> int:
        """Persist summaries (or a fresh fetch); sources without storage raise SyncUnsupportedError."""
        raise NotImplementedError


def find_open_home(items: list[OpenHomeSummary] | tuple[OpenHomeSummary, ...], identifier: str) -> OpenHomeSummary | None:
    ident = str(identifier).strip()
    for it in items:
        if it.matches(ident):
            return it
    return None


class LiveFetchSource:
    name = LIVE

    def __init__(self, client: TradeMeClient) -> None:
        self.client = client

    async def list_open_homes(self) -> list[OpenHomeSummary]:
        return await self.client.fetch_open_homes()

    async def get_open_home(self, identifier: str) -> OpenHomeSummary | None:
        return find_open_home(await self.client.fetch_open_homes(), identifier)

    async def sync(self, summaries: list[OpenHomeSummary] | None = None) -> int:
        raise SyncUnsupportedError("live source has no storage")


class CachedFetchSource:
    """
    Reads come from the open_homes table; lookups that miss fall back to a
    live fetch. sync() is the only path that writes.
    """

    name = CACHED

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], live: LiveFetchSource) -> None:
        self.session_maker = session_maker
        self.live = live

    async def list_open_homes(self) -> list[OpenHomeSummary]:
        async with self.session_maker() as session:
            return await OpenHomeRepository(session).list_all()

    async def get_open_home(self, identifier: str) -> OpenHomeSummary | None:
        async with self.session_maker() as session:
            home = await OpenHomeRepository(session).get(identifier)
        if home is not None:
            return home
        log.info("Open home %r not cached; falling back to live fetch", identifier)
        return await self.live.get_open_home(identifier)

    async def sync(self, summaries: list[OpenHomeSummary] | None = None) -> int:
        """Upsert the given summaries, or a fresh live fetch when none are given."""
        if not summaries:
            summaries = await self.live.list_open_homes()

        async with self.session_maker() as session:
            try:
                n = await OpenHomeRepository(session).upsert(summaries)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError(f"Failed to save open homes: {e}") from e
            except Exception:
                await session.rollback()
                raise
        return n


@dataclass(frozen=True)
class StaticFixtureSource:
    """
    Offline source for development/demo.

    The fixture can be:
      - a TradeMe search response {"List": [...]}
      - a bare list of listing dicts
    It runs through the same open-home filter as live data, once.
    """

    items: tuple[OpenHomeSummary, ...]
    name: str = STATIC

    @classmethod
    def from_path(cls, path: str | Path) -> "StaticFixtureSource":
        p = Path(path)
        if not p.exists():
            raise ConfigurationError(f"Static fixture not found: {p}")
        try:
            raw: Any = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Static fixture unreadable: {p}: {e}") from e

        items = tuple(filter_open_homes(listings_from_payload(raw)))
        log.info("Loaded %d open homes from %s", len(items), p)
        return cls(items=items)

    async def list_open_homes(self) -> list[OpenHomeSummary]:
        return list(self.items)

    async def get_open_home(self, identifier: str) -> OpenHomeSummary | None:
        return find_open_home(self.items, identifier)

    async def sync(self, summaries: list[OpenHomeSummary] | None = None) -> int:
        raise SyncUnsupportedError("static fixture is read-only")


def build_source(
    kind: str,
    *,
    client: TradeMeClient,
    session_maker: async_sessionmaker[AsyncSession] | None = None,
    fixture_path: str | Path | None = None,
) -> OpenHomeSource:
    kind = (kind or CACHED).strip().lower()
    if kind == STATIC:
        if not fixture_path:
            raise ConfigurationError("STATIC_FIXTURE_PATH is required for the static data source")
        return StaticFixtureSource.from_path(fixture_path)

    live = LiveFetchSource(client)
    if kind == LIVE:
        return live
    if kind == CACHED:
        if session_maker is None:
            raise ConfigurationError("cached data source needs a database session factory")
        return CachedFetchSource(session_maker, live)

    raise ConfigurationError(f"Unknown DATA_SOURCE {kind!r}; expected one of {', '.join(SOURCE_KINDS)}")
