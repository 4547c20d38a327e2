"""JSON schema for the views file. Checked on load, but only advisory."""

from __future__ import annotations

from typing import Any

VIEWS_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "kubexray custom views",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "views": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "columns": {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                    "sortColumn": {
                        "type": "string",
                        "pattern": "^.+:(asc|desc)$",
                    },
                },
            },
        },
    },
    "required": ["views"],
}
