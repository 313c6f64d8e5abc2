from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_PASSWORD_ROUNDS,
    DEFAULT_PAYMENT_DESCRIPTION,
    DEFAULT_SHEET_ALIASES,
    DEFAULT_STUDENT_PASSWORD,
    DatabaseConfig,
    ImportConfig,
)

"""Config loader.

Responsibilities:
- Load YAML config (config/import.yml by default)
- Validate against the bundled config_schema.json
- Apply defaults for every key that is missing
- Fall back to a pure default config when the file does not exist
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the data
            violates it (unknown keys, wrong types, empty alias lists).
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


def default_config() -> ImportConfig:
    return ImportConfig()


def load_config(path: Path | None = None, *, required: bool = False) -> ImportConfig:
    """Load and validate an import config.

    A missing file yields the default config unless ``required`` is set
    (an explicitly requested --config path must exist).
    """
    path = path or DEFAULT_CONFIG_PATH
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return default_config()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    sheets_raw = data.get("sheets", {})
    sheet_aliases = {
        logical: tuple(sheets_raw.get(logical, defaults))
        for logical, defaults in DEFAULT_SHEET_ALIASES.items()
    }
    # schema already rejects unknown database keys
    db = DatabaseConfig(**data.get("database", {}))
    return ImportConfig(
        sheet_aliases=sheet_aliases,
        default_student_password=data.get("default_student_password", DEFAULT_STUDENT_PASSWORD),
        password_rounds=data.get("password_rounds", DEFAULT_PASSWORD_ROUNDS),
        default_payment_description=data.get(
            "default_payment_description", DEFAULT_PAYMENT_DESCRIPTION
        ),
        database=db,
    )
