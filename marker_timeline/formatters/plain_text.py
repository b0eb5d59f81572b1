"""Plain text lane report.

WHY: Reviewers and scripts want a quick look at how a scene's markers
were laid out (which lanes exist, in what order, how many tracks each
needs, and what is still unreviewed) without opening the UI.

HOW: One block per swimlane in layout order. The header line names the
lane and its track count; each marker line shows its track, time range
(mm:ss.mmm), id, and status. A summary line closes the report.

RULES:
- Lanes separated by a blank line, in layout order
- Markers listed by (start_time, id) within a lane
- Point markers show only their start time
- No trailing whitespace on any line
- Output suffix: "-lanes.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from marker_timeline.core.models import MarkerWithTrack, TagConfig, TimelineLayout
from marker_timeline.core.status import get_marker_status
from marker_timeline.core.summary import calculate_marker_summary
from marker_timeline.core.timefmt import format_seconds
from marker_timeline.formatters.base import BaseFormatter, FormatterOutput


def _format_range(mwt: MarkerWithTrack) -> str:
    start = format_seconds(mwt.start_time, with_millis=True)
    if mwt.end_time is None:
        return start
    return "{} - {}".format(start, format_seconds(mwt.end_time, with_millis=True))


class PlainTextFormatter(BaseFormatter):
    """Formatter that lists swimlanes, tracks, and statuses as text."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, layout: TimelineLayout, config: TagConfig) -> list[FormatterOutput]:
        blocks: list[str] = []

        for index, group in enumerate(layout.groups):
            header = "{} ({} track{})".format(
                group.name, group.track_count, "" if group.track_count == 1 else "s",
            )
            if group.is_rejected:
                header += " [rejected]"
            lines = [header]
            for mwt in layout.lane_markers(index):
                lines.append("  [{}] {}  {}  {}".format(
                    mwt.track,
                    _format_range(mwt),
                    mwt.id,
                    get_marker_status(mwt.marker, config).value,
                ))
            blocks.append("\n".join(lines))

        summary = calculate_marker_summary(
            (mwt.marker for mwt in layout.markers_with_tracks), config,
        )
        blocks.append("Summary: {} confirmed, {} rejected, {} unknown".format(
            summary.confirmed, summary.rejected, summary.unknown,
        ))

        return [
            FormatterOutput(
                suffix="-lanes.txt",
                content="\n\n".join(blocks) + "\n",
                media_type="text/plain",
            )
        ]
