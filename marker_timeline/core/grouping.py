"""Swimlane grouping, lane ordering, and greedy track assignment.

WHY: The timeline shows one lane per kind of marker. AI-generated tags
("Kissing_AI") and their human counterparts ("Kissing") must share a
lane so a reviewer sees both side by side, lanes must come out in the
same order every time, and overlapping markers inside a lane must be
stacked on separate tracks so none hides another.

HOW: Three steps, all recomputed from scratch on every call:
  1. Lane key   — corresponding-tag name, else primary tag name with the
                  AI suffix stripped
  2. Lane order — marker-group number (from a "<prefix>: <n>. <label>"
                  parent tag under the configured parent), optional
                  per-group tag sorting, then lane key
  3. Tracks     — classical greedy interval partitioning per lane

RULES:
- Within a lane markers sort by (start_time, id)
- A marker goes on the lowest track whose end time is <= its start
- Touching endpoints do not overlap; point markers have zero duration
- Malformed intervals (end < start) are treated as zero duration
- Lanes without markers never appear in the output
- Lane order is total: ties always fall back to the lane key
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from marker_timeline.core.models import (
    Marker,
    MarkerWithTrack,
    Tag,
    TagConfig,
    TagGroup,
    TimelineLayout,
)
from marker_timeline.core.status import is_marker_rejected

logger = logging.getLogger(__name__)

_CORRESPONDING_TAG_PREFIX = "Corresponding Tag: "
_SORT_ORDER_PREFIX = "Sort Order: "

# "Marker Group: 3. Foreplay" → prefix "Marker Group", order 3, label "Foreplay"
_GROUP_NAME_RE = re.compile(r"^(?P<prefix>[^:]+):\s*(?P<order>\d+)\.\s*(?P<label>.*)$")


@dataclass(frozen=True)
class MarkerGroupInfo:
    """The numbered marker-group tag a lane belongs to."""

    tag_id: str
    full_name: str
    display_name: str
    order: int


def marker_sort_key(marker: Marker) -> tuple[float, str]:
    """Chronological order with the marker id as tie-break."""
    return (marker.start_time, marker.id)


# ---------------------------------------------------------------------------
# Lane keys and marker-group lookup
# ---------------------------------------------------------------------------


def corresponding_tag_name(tag: Tag) -> Optional[str]:
    """Name from a ``"Corresponding Tag: <name>"`` description line, if any."""
    description = tag.description or ""
    if _CORRESPONDING_TAG_PREFIX not in description:
        return None
    name = description.split(_CORRESPONDING_TAG_PREFIX, 1)[1].split("\n", 1)[0].strip()
    return name or None


def lane_key(tag: Tag, config: TagConfig) -> str:
    """Folded swimlane name for a primary tag.

    RULES:
    - A corresponding tag in the description wins
    - Otherwise a trailing AI suffix is stripped: "Kissing_AI" → "Kissing"
    """
    corresponding = corresponding_tag_name(tag)
    if corresponding:
        return corresponding
    suffix = config.ai_suffix
    if suffix and tag.name.endswith(suffix) and len(tag.name) > len(suffix):
        return tag.name[: -len(suffix)]
    return tag.name


def _parse_group_tag(tag: Tag) -> Optional[MarkerGroupInfo]:
    match = _GROUP_NAME_RE.match(tag.name)
    if not match:
        return None
    return MarkerGroupInfo(
        tag_id=tag.id,
        full_name=tag.name,
        display_name=match.group("label").strip(),
        order=int(match.group("order")),
    )


def get_marker_group(marker: Marker, parent_id: Optional[str]) -> Optional[MarkerGroupInfo]:
    """Find the numbered marker group of a marker's primary tag.

    WHY: Reviewers order lanes by grouping tags under numbered
    "Marker Group: <n>. <label>" tags, which themselves sit under one
    configured parent tag.

    HOW: Checks the primary tag's parents for a numbered tag whose own
    parents include ``parent_id``; then the primary tag itself, if it is
    numbered and a direct child of ``parent_id``.

    Returns:
        MarkerGroupInfo, or None when no ordering parent is configured or
        the tag is not part of any numbered group.
    """
    if not parent_id:
        return None
    primary = marker.primary_tag
    for parent in primary.parents:
        if any(grand.id == parent_id for grand in parent.parents):
            info = _parse_group_tag(parent)
            if info is not None:
                return info
    if any(parent.id == parent_id for parent in primary.parents):
        return _parse_group_tag(primary)
    return None


# ---------------------------------------------------------------------------
# Sort-order description helpers
# ---------------------------------------------------------------------------


def parse_sort_order(description: Optional[str]) -> list[str]:
    """Tag ids from a ``"Sort Order: a, b, c"`` description line."""
    if not description or _SORT_ORDER_PREFIX not in description:
        return []
    line = description.split(_SORT_ORDER_PREFIX, 1)[1].split("\n", 1)[0]
    return [tag_id.strip() for tag_id in line.split(",") if tag_id.strip()]


def create_sort_order_description(tag_ids: Sequence[str], existing: Optional[str] = None) -> str:
    """Write (or replace) the ``Sort Order:`` line in a tag description."""
    line = "{}{}".format(_SORT_ORDER_PREFIX, ", ".join(tag_ids))
    if not existing:
        return line
    if _SORT_ORDER_PREFIX in existing:
        return re.sub(r"Sort Order: [^\n]*", lambda _m: line, existing, count=1)
    return "{}\n{}".format(existing, line)


# ---------------------------------------------------------------------------
# Track assignment
# ---------------------------------------------------------------------------


def assign_tracks(markers: Iterable[Marker]) -> list[tuple[Marker, int]]:
    """Greedy interval partitioning of one lane's markers.

    WHY: Overlapping markers in one lane must render and navigate on
    separate sub-rows. Processing in start order and reusing the lowest
    free track yields the minimum number of tracks.

    HOW: Keeps one end time per open track. Each marker takes the first
    track whose end time is <= its start, else opens a new track.

    Args:
        markers: Markers of a single lane, in any order.

    Returns:
        (marker, track) pairs sorted by (start_time, id).
    """
    track_ends: list[float] = []
    assigned: list[tuple[Marker, int]] = []

    for marker in sorted(markers, key=marker_sort_key):
        if marker.end_time is not None and marker.end_time < marker.start_time:
            logger.warning(
                "Marker %s ends before it starts (%.3f < %.3f); using zero duration",
                marker.id, marker.end_time, marker.start_time,
            )
        for track, end in enumerate(track_ends):
            if end <= marker.start_time:
                track_ends[track] = marker.effective_end
                break
        else:
            track = len(track_ends)
            track_ends.append(marker.effective_end)
        assigned.append((marker, track))

    return assigned


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------


def _lane_order_key(
    name: str,
    group: Optional[MarkerGroupInfo],
    lane_tags: Sequence[Tag],
    tag_sorting: Optional[dict[str, Sequence[str]]],
) -> tuple:
    if group is None:
        return (1, 0, "", 1, 0, name)
    sort_order = list((tag_sorting or {}).get(group.tag_id, ()))
    position = None
    if lane_tags and lane_tags[0].id in sort_order:
        position = sort_order.index(lane_tags[0].id)
    return (
        0,
        group.order,
        group.full_name,
        0 if position is not None else 1,
        position or 0,
        name,
    )


def group_markers_by_tags(
    markers: Iterable[Marker],
    config: TagConfig,
    explicit_order_parent_id: Optional[str] = None,
    tag_sorting: Optional[dict[str, Sequence[str]]] = None,
) -> list[TagGroup]:
    """Partition markers into ordered swimlanes with track counts.

    RULES:
    - Lane key per lane_key(); one TagGroup per distinct key
    - Without an ordering parent, lanes sort by lane key
    - With one, numbered-group lanes come first by group number, then
      by tag_sorting position within the group, then by lane key;
      the remaining lanes follow by lane key

    Args:
        markers: Markers to group (already filtered to the eligible set).
        config: Reserved tag ids and the AI suffix.
        explicit_order_parent_id: Tag id whose numbered children order lanes.
        tag_sorting: Optional {group tag id: [tag id, ...]} ordering.

    Returns:
        TagGroups in display order, ``order`` set to their index.
    """
    lanes: dict[str, list[Marker]] = {}
    for marker in markers:
        lanes.setdefault(lane_key(marker.primary_tag, config), []).append(marker)

    pending = []
    for name, lane in lanes.items():
        lane.sort(key=marker_sort_key)

        lane_tags: list[Tag] = []
        seen_tag_ids = set()
        for marker in lane:
            if marker.primary_tag.id not in seen_tag_ids:
                seen_tag_ids.add(marker.primary_tag.id)
                lane_tags.append(marker.primary_tag)

        group = None
        for marker in lane:
            group = get_marker_group(marker, explicit_order_parent_id)
            if group is not None:
                break

        key = _lane_order_key(name, group, lane_tags, tag_sorting)
        pending.append((key, name, lane, lane_tags))

    pending.sort(key=lambda item: item[0])

    groups: list[TagGroup] = []
    for order, (_key, name, lane, lane_tags) in enumerate(pending):
        tracks = assign_tracks(lane)
        groups.append(TagGroup(
            name=name,
            order=order,
            markers=tuple(lane),
            tags=tuple(lane_tags),
            is_rejected=all(is_marker_rejected(m, config) for m in lane),
            track_count=max(track for _m, track in tracks) + 1,
        ))

    logger.debug("Grouped %d markers into %d swimlanes", sum(len(g.markers) for g in groups), len(groups))
    return groups


def create_markers_with_tracks(groups: Sequence[TagGroup]) -> list[MarkerWithTrack]:
    """Flatten swimlanes into (swimlane, track) projections in lane order."""
    projected: list[MarkerWithTrack] = []
    for swimlane, group in enumerate(groups):
        for marker, track in assign_tracks(group.markers):
            projected.append(MarkerWithTrack(
                marker=marker,
                swimlane=swimlane,
                track=track,
                tag_group=group.name,
            ))
    return projected


def get_track_counts_by_group(groups: Sequence[TagGroup]) -> dict[str, int]:
    """Number of tracks each lane needs, keyed by lane name."""
    return {group.name: group.track_count for group in groups}


def build_timeline_layout(
    markers: Iterable[Marker],
    config: TagConfig,
    explicit_order_parent_id: Optional[str] = None,
    tag_sorting: Optional[dict[str, Sequence[str]]] = None,
) -> TimelineLayout:
    """Group markers and project them onto tracks in one pass.

    This is the shared layout used by both the lane reports and keyboard
    navigation, so lane indices always agree between the two.
    """
    groups = group_markers_by_tags(markers, config, explicit_order_parent_id, tag_sorting)
    return TimelineLayout(
        groups=tuple(groups),
        markers_with_tracks=tuple(create_markers_with_tracks(groups)),
    )


# ---------------------------------------------------------------------------
# Eligible-marker selection
# ---------------------------------------------------------------------------


def is_shot_boundary_marker(marker: Marker, config: TagConfig) -> bool:
    return bool(config.shot_boundary) and marker.primary_tag.id == config.shot_boundary


def action_markers(
    markers: Iterable[Marker],
    config: TagConfig,
    swimlane_filter: Optional[str] = None,
) -> list[Marker]:
    """Markers eligible for grouping and navigation.

    RULES:
    - Shot-boundary markers are excluded
    - Temporary (draft) markers are always kept, whatever their tag
    - With a swimlane filter, only markers of that lane key are kept
    - Original order is preserved
    """
    eligible = [
        m for m in markers
        if m.is_temporary(config.temp_prefix) or not is_shot_boundary_marker(m, config)
    ]
    if swimlane_filter:
        eligible = [m for m in eligible if lane_key(m.primary_tag, config) == swimlane_filter]
    return eligible


def toggle_swimlane_filter(
    current_filter: Optional[str],
    marker: Optional[Marker],
    config: TagConfig,
) -> Optional[str]:
    """Filter to the marker's lane, or clear the filter if already on it.

    With no marker selected the filter is cleared.
    """
    if marker is None:
        return None
    key = lane_key(marker.primary_tag, config)
    return None if current_filter == key else key
