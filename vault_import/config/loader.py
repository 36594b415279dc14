from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DEFAULT_KEYWORDS, DatabaseConfig, ImportConfig

"""Config loader.

Responsibilities:
- Load YAML config (default config/import.yml)
- Validate against config_schema.json (shipped next to this module)
- Apply defaults for every key that is absent
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the config
            fails validation (unknown keys, wrong types, ...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None) -> ImportConfig:
    """Load configuration.

    With ``path=None`` the default location is used and a missing file means
    built-in defaults. An explicitly given path must exist.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ImportConfig()
        path = DEFAULT_CONFIG_PATH
    elif not path.exists():
        raise ConfigError(f"config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    table = data.get("table")
    # the schema pattern is applied with re.search, which lets "name\n" through
    if table is not None and not re.fullmatch(r"[A-Za-z0-9_]+", table):
        raise ConfigError(f"config validation failed: invalid table name {table!r}")

    keywords = dict(DEFAULT_KEYWORDS)
    for field, words in (data.get("keywords") or {}).items():
        keywords[field] = tuple(w.lower() for w in words)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    defaults = ImportConfig()
    return ImportConfig(
        keywords=keywords,
        preview_rows=data.get("preview_rows", defaults.preview_rows),
        table=data.get("table", defaults.table),
        error_log_dir=data.get("error_log_dir", defaults.error_log_dir),
        database=db,
    )
