# app/adapters/repos/open_homes.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.open_homes import OpenHomeSummary
from ...errors import StorageError
from ...models import OpenHome

log = logging.getLogger(__name__)


def _to_db_time(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db_time(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def row_to_summary(row: OpenHome) -> OpenHomeSummary:
    return OpenHomeSummary(
        id=row.id,
        listing_id=row.listing_id,
        title=row.title,
        location=row.location or "",
        bedrooms=row.bedrooms or 0,
        bathrooms=row.bathrooms or 0,
        open_home_time=_from_db_time(row.open_home_time),
        price=row.price,
        picture_href=row.picture_href,
    )


def storage_key(summary: OpenHomeSummary) -> str:
    """listing_id, else the summary id as text."""
    return summary.listing_id or str(summary.id)


class OpenHomeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def upsert(self, summaries: Iterable[OpenHomeSummary]) -> int:
        """
        Insert-or-update keyed by listing_id. On conflict every column is
        overwritten (last write wins). Returns number of rows written.
        """
        written = 0
        try:
            for s in summaries:
                key = storage_key(s)
                q = select(OpenHome).where(OpenHome.listing_id == key)
                row = (await self.session.execute(q)).scalars().first()

                if row is None:
                    row = OpenHome(listing_id=key)
                    self.session.add(row)

                row.title = s.title
                row.location = s.location
                row.bedrooms = int(s.bedrooms or 0)
                row.bathrooms = int(s.bathrooms or 0)
                row.open_home_time = _to_db_time(s.open_home_time)
                row.price = s.price
                row.picture_href = s.picture_href
                row.updated_at = datetime.utcnow()
                written += 1

            await self.session.flush()
        except SQLAlchemyError as e:
            log.error("Failed to save open homes: %s", e)
            raise StorageError(f"Failed to save open homes: {e}") from e

        log.info("Saved %d open homes", written)
        return written

    async def list_all(self) -> list[OpenHomeSummary]:
        q = select(OpenHome).order_by(
            OpenHome.open_home_time.is_(None),
            OpenHome.open_home_time.asc(),
            OpenHome.id.asc(),
        )
        try:
            rows = (await self.session.execute(q)).scalars().all()
        except SQLAlchemyError as e:
            log.error("Failed to fetch open homes: %s", e)
            raise StorageError(f"Failed to fetch open homes: {e}") from e
        return [row_to_summary(r) for r in rows]

    async def get(self, identifier: str) -> OpenHomeSummary | None:
        """
        Match listing_id first, then the internal id for numeric identifiers.
        None means "not stored", which is not an error.
        """
        ident = str(identifier).strip()
        try:
            row = (
                await self.session.execute(select(OpenHome).where(OpenHome.listing_id == ident))
            ).scalars().first()
            if row is None and ident.isdigit():
                row = await self.session.get(OpenHome, int(ident))
        except SQLAlchemyError as e:
            log.error("Failed to fetch open home %r: %s", ident, e)
            raise StorageError(f"Failed to fetch open home: {e}") from e
        return row_to_summary(row) if row is not None else None
