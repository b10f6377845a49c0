# app/domain/open_homes.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .parsing import get_first, parse_timestamp, to_int, to_str

log = logging.getLogger(__name__)

LOCATION_PLACEHOLDER = "Location not specified"


def _as_id(x: Any) -> int | str | None:
    """Digit-only ids become ints; anything else is kept verbatim as a string."""
    if isinstance(x, int) and not isinstance(x, bool):
        return x
    s = to_str(x)
    if s is None:
        return None
    return int(s) if s.isascii() and s.isdigit() else s


def _first_id(*candidates: int | str | None) -> int | str:
    return next(c for c in candidates if c is not None)


@dataclass(frozen=True)
class OpenHomeSummary:
    id: int | str
    listing_id: str | None
    title: str | None
    location: str
    bedrooms: int
    bathrooms: int
    open_home_time: datetime | None
    price: str | None
    picture_href: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "listingId": self.listing_id,
            "title": self.title,
            "location": self.location,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "openHomeTime": self.open_home_time.isoformat() if self.open_home_time else None,
            "price": self.price,
            "pictureHref": self.picture_href,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "OpenHomeSummary":
        """Inverse of to_dict(); used by the sync endpoint and fixtures."""
        listing_id = to_str(get_first(d, "listingId", "listing_id"))
        return cls(
            id=_first_id(_as_id(d.get("id")), listing_id, ""),
            listing_id=listing_id,
            title=to_str(d.get("title")),
            location=to_str(d.get("location")) or LOCATION_PLACEHOLDER,
            bedrooms=to_int(d.get("bedrooms")) or 0,
            bathrooms=to_int(d.get("bathrooms")) or 0,
            open_home_time=parse_timestamp(get_first(d, "openHomeTime", "open_home_time")),
            price=to_str(d.get("price")),
            picture_href=to_str(get_first(d, "pictureHref", "picture_href")),
        )

    def matches(self, identifier: str) -> bool:
        return self.listing_id == identifier or str(self.id) == identifier


def open_home_events(listing: dict[str, Any]) -> list[dict[str, Any]]:
    events = listing.get("OpenHomes")
    if not isinstance(events, list):
        return []
    return [e for e in events if isinstance(e, dict)]


def has_open_homes(listing: dict[str, Any]) -> bool:
    return len(open_home_events(listing)) > 0


def to_summary(listing: dict[str, Any], position: int) -> OpenHomeSummary:
    """
    Project one TradeMe listing into an OpenHomeSummary.

    position is the 1-based index within the filtered batch; it only becomes
    the id when the listing carries no ListingId.
    """
    events = open_home_events(listing)
    if not events:
        raise ValueError("listing has no open homes")

    start = events[0].get("Start")
    when = parse_timestamp(start)
    if when is None and start is not None:
        log.warning("Unparseable open home start %r on listing %r", start, listing.get("ListingId"))

    listing_id = to_str(listing.get("ListingId"))
    if listing_id is None:
        log.warning("Listing without ListingId; using positional id %d (not stable across fetches)", position)

    return OpenHomeSummary(
        id=_first_id(_as_id(listing_id), position),
        listing_id=listing_id,
        title=to_str(listing.get("Title")),
        location=to_str(get_first(listing, "Suburb", "District")) or LOCATION_PLACEHOLDER,
        bedrooms=to_int(listing.get("Bedrooms")) or 0,
        bathrooms=to_int(listing.get("Bathrooms")) or 0,
        open_home_time=when,
        price=to_str(listing.get("PriceDisplay")),
        picture_href=to_str(listing.get("PictureHref")),
    )


def filter_open_homes(listings: list[dict[str, Any]]) -> list[OpenHomeSummary]:
    """Keep listings with at least one open home; source order is preserved."""
    kept = [x for x in listings if isinstance(x, dict) and has_open_homes(x)]
    return [to_summary(x, i + 1) for i, x in enumerate(kept)]


def listings_from_payload(payload: Any) -> list[dict[str, Any]]:
    """
    Accept either:
      - TradeMe search response {"List": [...]} (absent List -> [])
      - bare list of listing dicts
    """
    if isinstance(payload, list):
        return [x for x in payload if isinstance(x, dict)]
    if isinstance(payload, dict):
        v = payload.get("List")
        if isinstance(v, list):
            return [x for x in v if isinstance(x, dict)]
    return []
