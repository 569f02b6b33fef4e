"""
Project configuration (.pg-ddl.json / .pg-ddl.yml) and its merge with CLI options.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from pg_ddl_core.lib.errors import ConfigError

CONFIG_FILENAMES = [
    ".pg-ddl.json",
    ".pg-ddl.yml",
    ".pg-ddl.yaml",
    "pg-ddl.config.json",
]

SQL_DIR_ENV = "SQL_OUTPUT_DIR"
DEFAULT_SQL_DIR = "./sql"


class Defaults(BaseModel):
    left: str = Field("dev", description="Source environment name")
    right: str = Field("prod", description="Target environment name")
    sql_dir: Optional[str] = Field(None, description="Root directory holding one folder per environment")
    output: Optional[str] = Field(None, description="Directory for generated migration files")


class MigrationSettings(BaseModel):
    with_rollback: bool = False
    interactive: bool = False


class CompareSettings(BaseModel):
    ignore_categories: List[str] = Field(default_factory=lambda: ["data"])
    context_lines: int = Field(2, ge=0)


class RcConfig(BaseModel):
    """Contents of a project configuration file; every section is optional."""
    defaults: Defaults = Field(default_factory=Defaults)
    migration: MigrationSettings = Field(default_factory=MigrationSettings)
    compare: CompareSettings = Field(default_factory=CompareSettings)


def find_config_file(start_dir: Optional[str] = None) -> Optional[str]:
    directory = Path(start_dir or os.getcwd())
    for filename in CONFIG_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return str(candidate)
    return None


def _read_config_data(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    if path.endswith((".yml", ".yaml")):
        return yaml.safe_load(content)
    return json.loads(content)


def load_rc_config(start_dir: Optional[str] = None) -> Optional[RcConfig]:
    """
    Load the first configuration file found in start_dir (default: cwd).

    Returns:
        RcConfig, or None when no configuration file exists

    Raises:
        ConfigError: The file exists but cannot be read, parsed or validated
    """
    path = find_config_file(start_dir)
    if path is None:
        logging.debug("No configuration file found")
        return None

    try:
        data = _read_config_data(path)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(path, str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(path, "top-level value must be a mapping")

    try:
        config = RcConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(path, str(e)) from e

    logging.info(f"Loaded configuration from {path}")
    return config


def merge_with_cli_options(config: Optional[RcConfig], options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combine configuration values with CLI options.

    CLI values that are set (not None) take precedence. The SQL root falls back
    to the SQL_OUTPUT_DIR environment variable, then ./sql.
    """
    config = config or RcConfig()
    merged = {
        "left": config.defaults.left,
        "right": config.defaults.right,
        "sql_dir": config.defaults.sql_dir,
        "output": config.defaults.output,
        "with_rollback": config.migration.with_rollback,
        "interactive": config.migration.interactive,
        "ignore_categories": list(config.compare.ignore_categories),
        "context_lines": config.compare.context_lines,
    }
    for key, value in options.items():
        if value is not None:
            merged[key] = value

    if not merged["sql_dir"]:
        merged["sql_dir"] = os.environ.get(SQL_DIR_ENV) or DEFAULT_SQL_DIR
    return merged
