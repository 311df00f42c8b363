from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/import.yml``)
- Validate it against the bundled JSON schema
- Apply defaults (timeout 5s, ./logs, contact-total check on)
- Let ``COLLEGE_API_BASE_URL`` / ``COLLEGE_API_TOKEN`` override the file
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_LOGS_DIR = "./logs"

ENV_BASE_URL = "COLLEGE_API_BASE_URL"
ENV_TOKEN = "COLLEGE_API_TOKEN"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    timeout_seconds: float
    token: str | None  # environment only, never read from YAML


@dataclass(frozen=True)
class ImportConfig:
    api: ApiConfig
    logs_dir: Path
    enforce_contact_total: bool


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (missing required keys,
            wrong types, unknown keys).
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


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    api_raw = data["api"]
    validation_raw = data.get("validation", {})
    api = ApiConfig(
        base_url=os.getenv(ENV_BASE_URL) or api_raw["base_url"],
        timeout_seconds=float(api_raw.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        token=os.getenv(ENV_TOKEN) or None,
    )
    return ImportConfig(
        api=api,
        logs_dir=Path(data.get("logs_dir", DEFAULT_LOGS_DIR)),
        enforce_contact_total=bool(validation_raw.get("enforce_contact_total", True)),
    )
