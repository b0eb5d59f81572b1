"""JSON layout export.

WHY: Other tools (timeline renderers, QA scripts) need the exact lane
order and track numbers the reviewer sees, without reimplementing the
grouping rules.

HOW: Serialises each swimlane with its tags and markers (track, times,
status) plus the summary counts. The shape is described by
layout_schema.json next to this module.

RULES:
- Lanes in layout order; markers by (start_time, id) within a lane
- "end" is null for point markers
- Output is validated against layout_schema.json before returning;
  jsonschema.ValidationError propagates on failure
- Output is pretty-printed UTF-8 JSON with a trailing newline
- Output suffix: "-layout.json"
- Media type: "application/json"
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from marker_timeline.core.models import TagConfig, TimelineLayout
from marker_timeline.core.status import get_marker_status
from marker_timeline.core.summary import calculate_marker_summary
from marker_timeline.formatters.base import BaseFormatter, FormatterOutput

LAYOUT_SCHEMA_PATH = Path(__file__).resolve().parent / "layout_schema.json"


def _load_schema() -> dict[str, Any]:
    """Load the layout JSON schema shipped next to this module.

    Cached at module level after first call to avoid repeated I/O.
    """
    with open(LAYOUT_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def layout_to_dict(layout: TimelineLayout, config: TagConfig) -> dict[str, Any]:
    """Plain-dict rendition of a layout, matching layout_schema.json."""
    swimlanes: list[dict[str, Any]] = []
    for index, group in enumerate(layout.groups):
        swimlanes.append({
            "name": group.name,
            "order": group.order,
            "track_count": group.track_count,
            "is_rejected": group.is_rejected,
            "tags": [{"id": tag.id, "name": tag.name} for tag in group.tags],
            "markers": [
                {
                    "id": mwt.id,
                    "start": mwt.start_time,
                    "end": mwt.end_time,
                    "track": mwt.track,
                    "status": get_marker_status(mwt.marker, config).value,
                }
                for mwt in layout.lane_markers(index)
            ],
        })

    summary = calculate_marker_summary(
        (mwt.marker for mwt in layout.markers_with_tracks), config,
    )
    return {
        "swimlanes": swimlanes,
        "summary": {
            "confirmed": summary.confirmed,
            "rejected": summary.rejected,
            "unknown": summary.unknown,
        },
    }


class JSONLayoutFormatter(BaseFormatter):
    """Formatter that exports the layout as JSON."""

    @property
    def name(self) -> str:
        return "JSON Layout"

    def format(self, layout: TimelineLayout, config: TagConfig) -> list[FormatterOutput]:
        output = layout_to_dict(layout, config)

        # Validate against the JSON schema
        jsonschema.validate(instance=output, schema=_get_schema())

        content = json.dumps(output, indent=2, ensure_ascii=False)
        return [
            FormatterOutput(
                suffix="-layout.json",
                content=content + "\n",
                media_type="application/json",
            )
        ]
