"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from ``AGENTFLOW_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="AGENTFLOW_", env_file=".env", extra="ignore")

    # Logging
    log_level: str = "INFO"

    # REST server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Runner
    max_concurrency: int | None = None
    raise_on_stall: bool = False

    # HTTP helper defaults, used when a request leaves them out
    http_timeout: float = 30.0
    http_retry_count: int = 0
    http_backoff: float = 1.0
    default_api_url: str = "https://jsonplaceholder.typicode.com/posts"

    # Claude model for the report summary; canned text when unset
    summary_model: str | None = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
