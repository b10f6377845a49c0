# app/models.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class OpenHome(Base):
    __tablename__ = "open_homes"
    __table_args__ = (UniqueConstraint("listing_id", name="uq_open_homes_listing_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # TradeMe ListingId as text (or the summary id when ListingId was absent)
    listing_id: Mapped[str] = mapped_column(String(40))

    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(120), nullable=True)
    bedrooms: Mapped[int] = mapped_column(Integer, default=0)
    bathrooms: Mapped[int] = mapped_column(Integer, default=0)

    # stored naive UTC; repository re-attaches tzinfo on read
    open_home_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)

    price: Mapped[str | None] = mapped_column(String(120), nullable=True)
    picture_href: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
