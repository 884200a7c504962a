from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from sales_diff.models.column_map import SemanticField
from sales_diff.models.config_models import (
    DEFAULT_HEADER_LABELS,
    DEFAULT_TRACKED_LABELS,
    CompareConfig,
    SummaryConfig,
)

"""Config loader.

Responsibilities:
- Load YAML (config/compare.yml by default)
- Validate against config_schema.json (unknown keys are rejected)
- Apply defaults for everything not given
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/compare.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or the data violates it
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


def _labels(raw: dict[str, str], defaults: dict[SemanticField, str]) -> dict[SemanticField, str]:
    labels = dict(defaults)
    for key, value in raw.items():
        labels[SemanticField(key)] = value
    return labels


def build_config(data: dict[str, Any]) -> CompareConfig:
    """Validate a parsed config mapping and build a CompareConfig from it."""
    _validate_config_schema(data)

    defaults = CompareConfig()
    summary_raw = data.get("summary", {})
    summary = SummaryConfig(
        model=summary_raw.get("model", defaults.summary.model),
        max_changes=summary_raw.get("max_changes", defaults.summary.max_changes),
        language=summary_raw.get("language", defaults.summary.language),
    )
    return CompareConfig(
        header_labels=_labels(data.get("columns", {}), DEFAULT_HEADER_LABELS),
        tracked_labels=_labels(data.get("tracked_labels", {}), DEFAULT_TRACKED_LABELS),
        empty_value=data.get("empty_value", defaults.empty_value),
        subtotal_label=data.get("subtotal_label", defaults.subtotal_label),
        header_scan_limit=data.get("header_scan_limit", defaults.header_scan_limit),
        summary=summary,
    )


def load_config(path: Path) -> CompareConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return build_config(data)
