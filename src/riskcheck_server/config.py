"""Server settings, read once from ``SERVER_*`` environment variables.

Defaults suit local development against a PostgreSQL on localhost; the
database itself is configured separately in :mod:`riskcheck_db.config`.
"""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080

    # "*" allows any origin (editor UI served from another port in dev)
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # None means v1/ next to pyproject.toml
    ruleset_dir: str | None = None

    log_level: str = "INFO"

    # Copy v1/questions.yaml into an empty question table at startup
    seed_on_startup: bool = True

    # Respondent sessions held in memory; the oldest is evicted past this
    max_active_sessions: int = 1000

    def __post_init__(self) -> None:
        if self.max_active_sessions < 1:
            raise ValueError("max_active_sessions must be at least 1")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def load_settings() -> ServerSettings:
    """Build :class:`ServerSettings` from the environment."""
    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=_env_list("SERVER_CORS_ORIGINS", "*"),
        ruleset_dir=os.getenv("SERVER_RULESET_DIR") or None,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        seed_on_startup=_env_flag("SERVER_SEED_ON_STARTUP", True),
        max_active_sessions=int(os.getenv("MAX_ACTIVE_SESSIONS", "1000")),
    )
