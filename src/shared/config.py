"""Environment-driven settings for the storefront.

STOREFRONT_ENV selects the runtime overlay:
    - "test"        → WARNING logs, nothing seeded
    - "development" → DEBUG logs, console renderer
    - "production"  → INFO logs, JSON renderer
"""

import os
from dataclasses import dataclass, field

DEFAULT_DATABASE_URL = "sqlite:///storefront.db"

LOG_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    database_url: str = DEFAULT_DATABASE_URL
    echo_sql: bool = False
    seed_catalogue: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])
    log_level: str = "INFO"
    log_dir: str | None = None

    @property
    def is_production(self) -> bool:
        return self.env in ("production", "staging")


def load_settings() -> Settings:
    """Build settings from the process environment."""
    env = (os.getenv("STOREFRONT_ENV") or os.getenv("ENVIRONMENT") or "development").lower()
    return Settings(
        env=env,
        database_url=os.getenv("STOREFRONT_DATABASE_URL", DEFAULT_DATABASE_URL),
        echo_sql=_env_flag("STOREFRONT_ECHO_SQL"),
        seed_catalogue=_env_flag("STOREFRONT_SEED", default=env == "development"),
        cors_origins=_env_list("STOREFRONT_CORS_ORIGINS", ["http://localhost:5173"]),
        log_level=os.getenv("LOG_LEVEL", LOG_LEVELS.get(env, "INFO")).upper(),
        log_dir=os.getenv("STOREFRONT_LOG_DIR") or None,
    )
