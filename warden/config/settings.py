"""Client settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from warden.clients.models import DEFAULT_BASE_URL, ClientConfig


class Settings(BaseSettings):
    # Credentials
    api_key: str = ""  # Must start with "wd_"

    # Endpoint and request policy
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = 10000  # Per-attempt timeout
    max_retries: int = 3  # Extra attempts after the first one

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stdout only

    model_config = SettingsConfigDict(
        env_prefix="WARDEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def to_client_config(self) -> ClientConfig:
        """Build a validated ClientConfig. Raises ConfigurationError."""
        return ClientConfig(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout_ms=self.timeout_ms,
            max_retries=self.max_retries,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
