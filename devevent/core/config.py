import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings read from environment variables."""

    database_url: str = os.getenv("DATABASE_URL", "")
    sql_echo: bool = _env_flag("SQL_ECHO")

    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    # Lifetime of the cached events list, in seconds
    events_cache_ttl: int = int(os.getenv("EVENTS_CACHE_TTL", "3600"))

    # Bearer token required by the events API. Unset means misconfigured.
    api_auth_token: str = os.getenv("API_AUTH_TOKEN", "")

    # Served at /static; uploaded event images land in <static_dir>/events
    static_dir: str = os.getenv("STATIC_DIR", "static")
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def get_redis_url():
    return settings.redis_url
