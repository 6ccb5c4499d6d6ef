"""Centralized configuration: all env vars in one place."""

import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "3000"))
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Rate limiting and caching
        self.rate_limit_window_ms: int = int(os.getenv("RATE_LIMIT_WINDOW_MS", "60"))
        self.rate_limit_max_requests: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "5"))
        self.cache_duration_seconds: int = int(os.getenv("CACHE_DURATION_SECONDS", "300"))

        # Credentials
        self.proxy_api_key: str = os.getenv("PROXY_API_KEY", "hello")
        self.weather_api_key: str | None = os.getenv("WEATHER_API_KEY")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of missing required env vars for upstream access."""
        required = ["WEATHER_API_KEY"]
        return [var for var in required if not getattr(self, var.lower())]


settings = Settings()
