"""Status counts for the review header."""

from __future__ import annotations

from typing import Iterable

from marker_timeline.core.models import Marker, MarkerStatus, MarkerSummary, TagConfig
from marker_timeline.core.status import get_marker_status


def calculate_marker_summary(markers: Iterable[Marker], config: TagConfig) -> MarkerSummary:
    """Count markers as confirmed, rejected, or unknown.

    RULES:
    - unknown covers everything not confirmed or rejected, manual included
    - An empty input yields all-zero counts
    """
    summary = MarkerSummary()
    for marker in markers:
        status = get_marker_status(marker, config)
        if status is MarkerStatus.REJECTED:
            summary.rejected += 1
        elif status is MarkerStatus.CONFIRMED:
            summary.confirmed += 1
        else:
            summary.unknown += 1
    return summary
