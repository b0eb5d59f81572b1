"""Load marker files exported from the annotation store.

WHY: The CLI and tests feed the engine from JSON files in the
annotation store's wire shape. Malformed files should fail once, up
front, with a message naming the bad field, instead of surfacing as a
KeyError deep inside grouping.

HOW: The raw document is validated against MARKER_FILE_SCHEMA with
jsonschema, then each entry is converted with Marker.from_dict().

RULES:
- Accepts {"markers": [...]} or a bare list of markers
- Field names follow the store: seconds, end_seconds, primary_tag, tags
- Any schema or JSON error raises MarkerFileError (a ValueError)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema

from marker_timeline.core.models import Marker

logger = logging.getLogger(__name__)

_TAG_SCHEMA = {
    "type": "object",
    "required": ["id", "name"],
    "properties": {
        "id": {"type": ["string", "integer"]},
        "name": {"type": "string"},
        "description": {"type": ["string", "null"]},
        "parents": {"type": "array", "items": {"$ref": "#/definitions/tag"}},
    },
}

MARKER_FILE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "definitions": {
        "tag": _TAG_SCHEMA,
        "marker": {
            "type": "object",
            "required": ["id", "seconds", "primary_tag"],
            "properties": {
                "id": {"type": ["string", "integer"]},
                "seconds": {"type": "number", "minimum": 0},
                "end_seconds": {"type": ["number", "null"]},
                "primary_tag": {"$ref": "#/definitions/tag"},
                "tags": {"type": "array", "items": {"$ref": "#/definitions/tag"}},
            },
        },
        "markerList": {"type": "array", "items": {"$ref": "#/definitions/marker"}},
    },
    "oneOf": [
        {"$ref": "#/definitions/markerList"},
        {
            "type": "object",
            "required": ["markers"],
            "properties": {"markers": {"$ref": "#/definitions/markerList"}},
        },
    ],
}


class MarkerFileError(ValueError):
    """A marker file could not be read or does not match the schema."""


def parse_markers(document: Any) -> list[Marker]:
    """Validate a decoded marker document and convert it to Markers."""
    try:
        jsonschema.validate(instance=document, schema=MARKER_FILE_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise MarkerFileError("Invalid marker data at {}: {}".format(location, e.message)) from e

    entries = document["markers"] if isinstance(document, dict) else document
    return [Marker.from_dict(entry) for entry in entries]


def load_markers(path: str | Path) -> list[Marker]:
    """Read and validate a marker JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Markers in file order.
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise MarkerFileError("Marker file not found: {}".format(path)) from None
    except json.JSONDecodeError as e:
        raise MarkerFileError("Marker file is not valid JSON: {} ({})".format(path, e)) from e

    markers = parse_markers(document)
    logger.info("Loaded %d markers from %s", len(markers), path)
    return markers
