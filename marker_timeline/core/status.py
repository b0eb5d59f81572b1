"""Review-status classification from marker tags.

WHY: A marker's review state is not a field; it is encoded by which
reserved tags are attached to it (status: confirmed, status: rejected,
source: manual). Navigation, grouping, and the summary header all need
the same answer, so the precedence lives in exactly one place.

HOW: status_precedence() turns the injected TagConfig into an ordered
lookup table of (tag id, status). get_marker_status() returns the
status of the first table entry whose tag id is on the marker.

RULES:
- Precedence: REJECTED > CONFIRMED > MANUAL > UNPROCESSED
- Both confirmed and rejected present → REJECTED, logged as a warning
- An empty tag id in the config disables that table entry
- is_unprocessed() is exactly get_marker_status() == UNPROCESSED
"""

from __future__ import annotations

import logging
from typing import Iterable

from marker_timeline.core.models import Marker, MarkerStatus, TagConfig

logger = logging.getLogger(__name__)


def status_precedence(config: TagConfig) -> tuple[tuple[str, MarkerStatus], ...]:
    """Ordered (tag id, status) lookup table, highest precedence first."""
    table = (
        (config.status_rejected, MarkerStatus.REJECTED),
        (config.status_confirmed, MarkerStatus.CONFIRMED),
        (config.source_manual, MarkerStatus.MANUAL),
    )
    return tuple((tag_id, status) for tag_id, status in table if tag_id)


def is_marker_rejected(marker: Marker, config: TagConfig) -> bool:
    return bool(config.status_rejected) and config.status_rejected in marker.tag_ids


def is_marker_confirmed(marker: Marker, config: TagConfig) -> bool:
    return bool(config.status_confirmed) and config.status_confirmed in marker.tag_ids


def has_conflicting_status(marker: Marker, config: TagConfig) -> bool:
    """True when a marker carries both the confirmed and the rejected tag.

    This should not happen in well-formed data; callers may want to
    surface it as a data-integrity problem.
    """
    return is_marker_rejected(marker, config) and is_marker_confirmed(marker, config)


def get_marker_status(marker: Marker, config: TagConfig) -> MarkerStatus:
    """Classify a marker by its attached tags.

    Args:
        marker: The marker to classify.
        config: Reserved tag ids.

    Returns:
        The first matching status in precedence order, else UNPROCESSED.
    """
    tag_ids = marker.tag_ids
    if has_conflicting_status(marker, config):
        logger.warning(
            "Marker %s has both confirmed and rejected status tags; treating as rejected",
            marker.id,
        )
    for tag_id, status in status_precedence(config):
        if tag_id in tag_ids:
            return status
    return MarkerStatus.UNPROCESSED


def is_unprocessed(marker: Marker, config: TagConfig) -> bool:
    return get_marker_status(marker, config) is MarkerStatus.UNPROCESSED


def is_processed(marker: Marker, config: TagConfig) -> bool:
    """True for markers a reviewer has confirmed or rejected."""
    return is_marker_confirmed(marker, config) or is_marker_rejected(marker, config)


def filter_unprocessed_markers(markers: Iterable[Marker], config: TagConfig) -> list[Marker]:
    """Unprocessed markers, in their original order."""
    return [m for m in markers if is_unprocessed(m, config)]


def check_all_markers_approved(markers: Iterable[Marker], config: TagConfig) -> bool:
    """True when every marker has been confirmed or rejected (vacuously for none)."""
    return all(is_processed(m, config) for m in markers)
