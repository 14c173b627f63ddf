"""Client configuration model."""

from dataclasses import dataclass

from warden.errors import ConfigurationError

API_KEY_PREFIX = "wd_"
DEFAULT_BASE_URL = "https://api.iitranq.co.uk/api/v1"
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_MAX_RETRIES = 3


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS  # per attempt
    max_retries: int = DEFAULT_MAX_RETRIES  # total attempts = max_retries + 1

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("API key is required")
        if not self.api_key.startswith(API_KEY_PREFIX):
            raise ConfigurationError(f'API key must start with "{API_KEY_PREFIX}"')
        if not self.base_url:
            raise ConfigurationError("Base URL must not be empty")
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int) or self.timeout_ms <= 0:
            raise ConfigurationError("Timeout must be a positive number of milliseconds")
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise ConfigurationError("Retries must be zero or a positive integer")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def create(
        cls,
        api_key: str | None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        max_retries: int | None = None,
    ) -> "ClientConfig":
        """Build a config, applying the documented default for every omitted field.

        Raises:
            ConfigurationError: if the key is missing or any value is invalid.
        """
        return cls(
            api_key=api_key or "",
            base_url=base_url or DEFAULT_BASE_URL,
            timeout_ms=DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms,
            max_retries=DEFAULT_MAX_RETRIES if max_retries is None else max_retries,
        )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks
        return (
            f"ClientConfig(api_key='{API_KEY_PREFIX}***', base_url={self.base_url!r}, "
            f"timeout_ms={self.timeout_ms}, max_retries={self.max_retries})"
        )
