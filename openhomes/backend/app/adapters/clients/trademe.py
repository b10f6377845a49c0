# app/adapters/clients/trademe.py
from __future__ import annotations

import enum
import logging
from typing import Any

import httpx

from ...config import TradeMeConfig
from ...domain.open_homes import OpenHomeSummary, filter_open_homes, has_open_homes, listings_from_payload
from ...errors import ConfigurationError, UpstreamAuthError, UpstreamError
from .oauth1_signer import HMAC_SHA1, PLAINTEXT, OAuth1Signer, SignedRequest

log = logging.getLogger(__name__)


class Attempt(str, enum.Enum):
    primary = "primary"    # HMAC-SHA1
    fallback = "fallback"  # PLAINTEXT, only after a 401
    failed = "failed"


ATTEMPT_METHODS: dict[Attempt, str] = {
    Attempt.primary: HMAC_SHA1,
    Attempt.fallback: PLAINTEXT,
}


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        detail = data.get("ErrorDescription") or data.get("Message")
        if detail:
            return str(detail)
    return resp.reason_phrase or "Unknown error"


class TradeMeClient:
    """
    Low-level HTTP client for TradeMe residential search.
    fetch_listings() returns raw List entries; fetch_open_homes() adds the filter/mapper.
    """

    def __init__(self, config: TradeMeConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport
        # attempt trail of the most recent fetch
        self.attempts: list[Attempt] = []

    def _request(self) -> SignedRequest:
        return SignedRequest(url=self.config.search_url, method="GET", query_params=self.config.search_params())

    async def _send(
        self,
        client: httpx.AsyncClient,
        request: SignedRequest,
        attempt: Attempt,
        trail: list[Attempt],
    ) -> httpx.Response:
        method = ATTEMPT_METHODS[attempt]
        signer = OAuth1Signer(self.config.consumer_key, self.config.consumer_secret, signature_method=method)
        headers = {
            "Authorization": signer.sign(request),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        log.info("TradeMe %s request: %s params=%s signature=%s", self.config.environment, request.url, request.query_params, method)
        trail.append(attempt)
        try:
            return await client.get(request.url, params=request.query_params, headers=headers)
        except httpx.TransportError as e:
            log.error("No response from TradeMe API: %s", e)
            raise UpstreamError("Failed to connect to TradeMe API - no response received") from e

    def _raise_for(self, resp: httpx.Response) -> None:
        detail = _error_message(resp)
        message = f"TradeMe API error: {resp.status_code} - {detail}"
        log.error("TradeMe API error: status=%s detail=%s", resp.status_code, detail)

        if resp.status_code == 401:
            if "consumer key" in detail.lower():
                message += "\n\nTip: Make sure TRADEME_ENV matches your credentials (sandbox or production)."
                message += f"\nCurrent environment: {self.config.environment}"
                message += f"\nCurrent API URL: {self.config.base_url}"
            raise UpstreamAuthError(message)
        raise UpstreamError(message, status_code=resp.status_code)

    async def fetch_listings(self) -> list[dict[str, Any]]:
        if not self.config.has_credentials:
            raise ConfigurationError("TradeMe API credentials not configured")

        request = self._request()
        trail: list[Attempt] = []

        async with httpx.AsyncClient(timeout=self.config.timeout_s, transport=self._transport) as client:
            state = Attempt.primary
            resp = await self._send(client, request, state, trail)

            if resp.status_code == 401:
                log.warning("HMAC-SHA1 failed, trying PLAINTEXT signature method...")
                state = Attempt.fallback
                resp = await self._send(client, request, state, trail)

            if resp.is_error:
                trail.append(Attempt.failed)
                self.attempts = trail
                self._raise_for(resp)

        self.attempts = trail

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError("TradeMe API returned a non-JSON body", status_code=resp.status_code) from e

        if not (isinstance(data, dict) and isinstance(data.get("List"), list)):
            log.warning("TradeMe response has no List; keys=%s", sorted(data) if isinstance(data, dict) else type(data).__name__)

        listings = listings_from_payload(data) if isinstance(data, dict) else []
        log.info(
            "TradeMe returned %d listings (%d with open homes) via %s",
            len(listings),
            sum(1 for x in listings if has_open_homes(x)),
            ATTEMPT_METHODS[state],
        )
        return listings

    async def fetch_open_homes(self) -> list[OpenHomeSummary]:
        return filter_open_homes(await self.fetch_listings())
