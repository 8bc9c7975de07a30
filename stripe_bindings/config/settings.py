"""Binding settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Default publishable key used by clients that never had one assigned
    publishable_key: str = ""

    # Explicit livemode override for user keys (STRIPE_LIVEMODE=false → test mode)
    livemode: bool | None = None

    # Debug build: key misuse fails fast instead of being logged
    debug: bool = __debug__

    # Transport
    timeout_seconds: float = 60.0
    connect_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stdout only

    model_config = {"env_prefix": "STRIPE_", "env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def requests_test_mode(self) -> bool:
        """True only when the environment explicitly asks for test mode."""
        return self.livemode is False


@lru_cache
def get_settings() -> Settings:
    return Settings()
