# app/adapters/clients/oauth1_signer.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from oauthlib.oauth1 import (
    SIGNATURE_HMAC_SHA1,
    SIGNATURE_PLAINTEXT,
    SIGNATURE_TYPE_AUTH_HEADER,
    Client,
)

from ...errors import ConfigurationError

HMAC_SHA1 = SIGNATURE_HMAC_SHA1
PLAINTEXT = SIGNATURE_PLAINTEXT
SUPPORTED_METHODS = (HMAC_SHA1, PLAINTEXT)


@dataclass(frozen=True)
class SignedRequest:
    url: str
    method: str = "GET"
    query_params: dict[str, Any] = field(default_factory=dict)

    def full_url(self) -> str:
        if not self.query_params:
            return self.url
        return f"{self.url}?{urlencode(self.query_params)}"


class OAuth1Signer:
    """
    Two-legged OAuth 1.0a: consumer key/secret only, no access token.
    The signature itself is oauthlib's job; this only assembles the request.
    """

    def __init__(
        self,
        consumer_key: str | None,
        consumer_secret: str | None,
        signature_method: str = HMAC_SHA1,
    ) -> None:
        if not consumer_key or not consumer_secret:
            raise ConfigurationError("TradeMe API credentials not configured")
        if signature_method not in SUPPORTED_METHODS:
            raise ConfigurationError(f"Unsupported OAuth signature method: {signature_method}")

        self.signature_method = signature_method
        self._client = Client(
            consumer_key,
            client_secret=consumer_secret,
            signature_method=signature_method,
            signature_type=SIGNATURE_TYPE_AUTH_HEADER,
        )

    def sign(self, request: SignedRequest) -> str:
        """Returns the Authorization header value for request."""
        _, headers, _ = self._client.sign(request.full_url(), http_method=request.method.upper())
        return headers["Authorization"]
