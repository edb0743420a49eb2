"""Schema helpers for the CropStudio settings file."""

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    HANDLE_HIT_PADDING_PX,
    MAX_SUGGESTED_PCT,
    MAX_SUGGESTED_PCT_RANGE,
    MIN_CROP_SIZE_PX,
    SETTINGS_SCHEMA_ID,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "cropstudio/settings.schema.json",
    "type": "object",
    "required": ["schema", "editor", "storage"],
    "properties": {
        "schema": {"const": SETTINGS_SCHEMA_ID},
        "editor": {
            "type": "object",
            "properties": {
                "default_aspect": {"type": "string", "enum": ["1:1", "4:5", "free"]},
                "min_crop_size": {"type": "number", "minimum": 1},
                "max_suggested_pct": {
                    "type": "number",
                    "minimum": MAX_SUGGESTED_PCT_RANGE[0],
                    "maximum": MAX_SUGGESTED_PCT_RANGE[1],
                },
                "hit_padding": {"type": "number", "minimum": 0},
            },
            "additionalProperties": True,
        },
        "storage": {
            "type": "object",
            "properties": {
                "database_path": {"type": ["string", "null"]},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": SETTINGS_SCHEMA_ID,
    "editor": {
        "default_aspect": "1:1",
        "min_crop_size": MIN_CROP_SIZE_PX,
        "max_suggested_pct": MAX_SUGGESTED_PCT,
        "hit_padding": HANDLE_HIT_PADDING_PX,
    },
    "storage": {
        "database_path": None,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in ("editor", "storage") and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    path = merged["storage"].get("database_path")
    if path not in {None, ""}:
        try:
            merged["storage"]["database_path"] = os.fspath(path)
        except TypeError:
            merged["storage"]["database_path"] = None
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
