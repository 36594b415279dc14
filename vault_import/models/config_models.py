from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the credential import tool.

Built by ``vault_import.config.loader`` from config/import.yml, or from
built-in defaults when no config file is present.
"""

DEFAULT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "service": ("service", "name", "title", "url", "website", "location", "site"),
    "username": ("username", "user", "login", "email", "id"),
    "password": ("password", "pass", "key", "secret"),
    "notes": ("notes", "note", "comment", "desc", "description", "memo"),
}


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    keywords: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_KEYWORDS))
    preview_rows: int = 5
    table: str = "credentials"  # target table of the PostgreSQL store
    error_log_dir: str = "./logs"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
