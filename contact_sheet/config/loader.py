from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.column_mapping import ColumnMapping

"""Analyze config loader.

Responsibilities:
- Load YAML config (default config/analyze.yml, env CONTACT_SHEET_CONFIG)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults (output_directory=./out, all exports, export_rows=all)
"""

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_EXPORTS",
    "SCHEMA_PATH",
    "AnalyzeConfig",
    "ConfigError",
    "load_config",
    "resolve_config_path",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/analyze.yml")
CONFIG_ENV_VAR = "CONTACT_SHEET_CONFIG"
DEFAULT_EXPORTS: tuple[str, ...] = ("csv", "json", "xlsx", "vcf", "analysis", "groups")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class AnalyzeConfig:
    source_directory: str
    column_mapping: ColumnMapping
    output_directory: str = "./out"
    exports: tuple[str, ...] = field(default=DEFAULT_EXPORTS)
    export_rows: str = "all"


def resolve_config_path(cli_path: str | None = None) -> Path:
    """--config > $CONTACT_SHEET_CONFIG > config/analyze.yml"""
    if cli_path:
        return Path(cli_path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / invalid, or the data violates it
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


def load_config(path: Path) -> AnalyzeConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    return AnalyzeConfig(
        source_directory=data["source_directory"],
        column_mapping=ColumnMapping(data["column_mapping"] or {}),
        output_directory=data.get("output_directory", "./out"),
        exports=tuple(data.get("exports", DEFAULT_EXPORTS)),
        export_rows=data.get("export_rows", "all"),
    )
