# tests/conftest.py
import json
from typing import Any, Callable

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings, TradeMeConfig
from app.models import Base


@pytest.fixture
async def engine():
    """
    Fresh in-memory DB per test. StaticPool makes all connections share the same
    in-memory database for the lifetime of this engine fixture.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=True)


@pytest.fixture
def make_listing() -> Callable[..., dict[str, Any]]:
    counter = {"n": 0}

    def _make(**overrides: Any) -> dict[str, Any]:
        counter["n"] += 1
        listing: dict[str, Any] = {
            "ListingId": 5000 + counter["n"],
            "Title": f"Listing {counter['n']}",
            "Suburb": "Ponsonby",
            "District": "Auckland City",
            "Bedrooms": 3,
            "Bathrooms": 2,
            "PriceDisplay": "By negotiation",
            "PictureHref": f"https://example.com/{counter['n']}.jpg",
            "OpenHomes": [{"Start": "/Date(1792476000000)/", "End": "/Date(1792479600000)/"}],
        }
        listing.update(overrides)
        return listing

    return _make


@pytest.fixture
def trademe_config() -> TradeMeConfig:
    return TradeMeConfig(consumer_key="test-key", consumer_secret="test-secret", environment="sandbox")


class RecordingTransport(httpx.MockTransport):
    """MockTransport that answers from a queue of (status, body) and keeps every request."""

    def __init__(self, responses: list[tuple[int, Any]]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(body, Exception):
            raise body
        return httpx.Response(status, content=json.dumps(body).encode(), headers={"content-type": "application/json"})

    def signature_methods(self) -> list[str]:
        out = []
        for r in self.requests:
            auth = r.headers.get("Authorization", "")
            out.append("PLAINTEXT" if 'oauth_signature_method="PLAINTEXT"' in auth else "HMAC-SHA1")
        return out


@pytest.fixture
def transport_factory() -> Callable[..., RecordingTransport]:
    def _make(*responses: tuple[int, Any]) -> RecordingTransport:
        return RecordingTransport(list(responses))

    return _make


@pytest.fixture
def app_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "DATA_SOURCE": "cached",
            "TRADEME_CONSUMER_KEY": "test-key",
            "TRADEME_CONSUMER_SECRET": "test-secret",
            "TRADEME_ENV": "sandbox",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
