from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, model_validator

from .domain.open_homes import OpenHomeSummary


class OpenHomeOut(BaseModel):
    id: int | str
    listingId: str | None = None
    title: str | None = None
    location: str
    bedrooms: int = 0
    bathrooms: int = 0
    openHomeTime: datetime | None = None
    price: str | None = None
    pictureHref: str | None = None

    @classmethod
    def from_summary(cls, s: OpenHomeSummary) -> "OpenHomeOut":
        return cls(
            id=s.id,
            listingId=s.listing_id,
            title=s.title,
            location=s.location,
            bedrooms=s.bedrooms,
            bathrooms=s.bathrooms,
            openHomeTime=s.open_home_time,
            price=s.price,
            pictureHref=s.picture_href,
        )


class OpenHomeIn(BaseModel):
    id: int | str | None = None
    listingId: str | int | None = None
    title: str | None = None
    location: str | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    openHomeTime: datetime | str | None = None
    price: str | None = None
    pictureHref: str | None = None

    @model_validator(mode="after")
    def _needs_identity(self) -> "OpenHomeIn":
        if self.listingId in (None, "") and self.id in (None, ""):
            raise ValueError("each open home needs an id or listingId")
        return self

    def to_summary(self) -> OpenHomeSummary:
        return OpenHomeSummary.from_dict(self.model_dump())


class SyncResult(BaseModel):
    message: str
    count: int


class HealthOut(BaseModel):
    status: str
    dataSource: str
    credentialsConfigured: bool
