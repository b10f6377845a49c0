# app/errors.py
from __future__ import annotations


class OpenHomesError(Exception):
    """Base for every failure a collaborator hands back to the HTTP layer."""


class ConfigurationError(OpenHomesError):
    """Credentials or fixture settings missing/invalid. Fatal to a fetch, not to startup."""


class UpstreamError(OpenHomesError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamAuthError(UpstreamError):
    """TradeMe answered 401."""

    def __init__(self, message: str, *, status_code: int = 401) -> None:
        super().__init__(message, status_code=status_code)


class NotFoundError(OpenHomesError):
    """Lookup miss. Routers answer 404; never logged as a failure."""


class StorageError(OpenHomesError):
    pass


class SyncUnsupportedError(OpenHomesError):
    """The active data source has nowhere to write synced homes."""
