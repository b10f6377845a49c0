from __future__ import annotations

from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

TRADEME_PRODUCTION_BASE_URL = "https://api.trademe.co.nz/v1"
TRADEME_SANDBOX_BASE_URL = "https://api.tmsandbox.co.nz/v1"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    PORT: int = 4000
    OPENHOMES_DB_URL: str = "sqlite+aiosqlite:///./openhomes.db"

    # live | cached | static
    DATA_SOURCE: str = "cached"
    STATIC_FIXTURE_PATH: str = "data/open_homes.json"

    # --- TradeMe (two-legged OAuth 1.0a, consumer credentials only) ---
    TRADEME_CONSUMER_KEY: str | None = None
    TRADEME_CONSUMER_SECRET: str | None = None
    TRADEME_ENV: str = "production"  # sandbox|production
    TRADEME_SEARCH_ROWS: int = 50
    TRADEME_SEARCH_CATEGORY: str | None = None  # e.g. "3399" residential for sale
    TRADEME_HTTP_TIMEOUT_S: float = 30.0

    # --- Scheduler tuning ---
    SCHED_SYNC_INTERVAL_MINUTES: int = 60


@dataclass(frozen=True)
class TradeMeConfig:
    """
    Resolved once at startup and handed to the client/signer.
    Nothing downstream reads the environment.
    """

    consumer_key: str | None
    consumer_secret: str | None
    environment: str = "production"
    rows: int = 50
    category: str | None = None
    timeout_s: float = 30.0

    @property
    def base_url(self) -> str:
        if self.environment == "sandbox":
            return TRADEME_SANDBOX_BASE_URL
        return TRADEME_PRODUCTION_BASE_URL

    @property
    def search_url(self) -> str:
        return f"{self.base_url}/Search/Property/Residential.json"

    @property
    def has_credentials(self) -> bool:
        return bool(self.consumer_key and self.consumer_secret)

    def search_params(self) -> dict[str, str | int]:
        params: dict[str, str | int] = {"rows": int(self.rows)}
        if self.category:
            params["category"] = self.category
        return params

    @classmethod
    def from_settings(cls, s: Settings) -> "TradeMeConfig":
        env = (s.TRADEME_ENV or "production").strip().lower()
        return cls(
            consumer_key=(s.TRADEME_CONSUMER_KEY or "").strip() or None,
            consumer_secret=(s.TRADEME_CONSUMER_SECRET or "").strip() or None,
            environment="sandbox" if env == "sandbox" else "production",
            rows=int(s.TRADEME_SEARCH_ROWS),
            category=(s.TRADEME_SEARCH_CATEGORY or "").strip() or None,
            timeout_s=float(s.TRADEME_HTTP_TIMEOUT_S),
        )


settings = Settings()
