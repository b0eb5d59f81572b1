"""Cursor navigation over the marker timeline.

WHY: Reviewers move through hundreds of markers from the keyboard.
Every key press must land on a predictable marker: the same inputs
always give the same target, the ends of a list clamp instead of
wrapping, and "jump to the next unreviewed marker" behaves the same
whether it searches one lane or the whole scene.

HOW: Every operation is a pure function of the eligible marker list,
the TimelineLayout from the latest grouping pass, and the selected
marker id. Each returns the id to select (or None); none of them holds
or mutates selection state.

RULES:
- Chronological order is (start_time, id) everywhere
- Chronological / within-lane / cross-lane moves clamp at the ends
- No selection (or a stale id) selects the first marker chronologically
- Lane-scoped unprocessed search wraps within the lane and returns the
  current id when nothing is found; the global search returns None
- Within-lane moves fall back to chronological moves before the first
  layout pass; a marker missing from the layout leaves selection as is
- Unknown direction strings raise ValueError (caller bug, not data)
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from marker_timeline.core.grouping import marker_sort_key
from marker_timeline.core.models import Marker, MarkerWithTrack, TagConfig, TimelineLayout
from marker_timeline.core.status import is_unprocessed

logger = logging.getLogger(__name__)

_FORWARD = {"next": True, "prev": False, "right": True, "left": False, "down": True, "up": False}

DEFAULT_PLAYHEAD_DURATION = 30.0
"""Assumed duration of a point marker when testing playhead coverage."""


def _is_forward(direction: str, allowed: Sequence[str]) -> bool:
    if direction not in allowed:
        raise ValueError(
            "Unknown direction {!r}; expected one of: {}".format(direction, ", ".join(allowed))
        )
    return _FORWARD[direction]


def sort_chronologically(markers: Sequence[Marker]) -> list[Marker]:
    return sorted(markers, key=marker_sort_key)


def _find_marker(markers: Sequence[Marker], marker_id: Optional[str]) -> Optional[Marker]:
    if marker_id is None:
        return None
    for marker in markers:
        if marker.id == marker_id:
            return marker
    return None


def _first_marker_id(markers: Sequence[Marker]) -> Optional[str]:
    if not markers:
        return None
    return min(markers, key=marker_sort_key).id


def _step_clamped(ordered: Sequence, index: int, forward: bool) -> str:
    target = index + 1 if forward else index - 1
    target = max(0, min(target, len(ordered) - 1))
    return ordered[target].id


def _has_layout(layout: Optional[TimelineLayout]) -> bool:
    return layout is not None and len(layout) > 0


# ---------------------------------------------------------------------------
# Chronological, within-lane, cross-lane
# ---------------------------------------------------------------------------


def navigate_chronologically(
    markers: Sequence[Marker],
    selected_id: Optional[str],
    direction: str,
) -> Optional[str]:
    """Move one step through all markers in time order.

    Args:
        markers: Eligible markers, any order.
        selected_id: Currently selected marker id, or None.
        direction: "next" or "prev".

    Returns:
        The target id; the same id at either end; the first marker when
        nothing (or a stale id) is selected; None for an empty list.
    """
    forward = _is_forward(direction, ("next", "prev"))
    ordered = sort_chronologically(markers)
    if not ordered:
        return None
    index = next((i for i, m in enumerate(ordered) if m.id == selected_id), -1)
    if index == -1:
        return ordered[0].id
    return _step_clamped(ordered, index, forward)


def navigate_within_swimlane(
    markers: Sequence[Marker],
    layout: Optional[TimelineLayout],
    selected_id: Optional[str],
    direction: str,
) -> Optional[str]:
    """Move one step left or right inside the selected marker's lane.

    RULES:
    - Before the first layout pass, behaves like navigate_chronologically
    - No selection or a stale id → first marker chronologically
    - Selected marker missing from the layout → selection unchanged
    - Clamps at the lane ends
    """
    forward = _is_forward(direction, ("left", "right"))
    if not _has_layout(layout):
        return navigate_chronologically(markers, selected_id, "next" if forward else "prev")

    current = _find_marker(markers, selected_id)
    if current is None:
        return _first_marker_id(markers)

    projected = layout.find(current.id)
    if projected is None:
        logger.debug("Marker %s has no swimlane yet; selection unchanged", current.id)
        return current.id

    lane = layout.lane_markers(projected.swimlane)
    index = next(i for i, m in enumerate(lane) if m.id == current.id)
    return _step_clamped(lane, index, forward)


def navigate_between_swimlanes(
    markers: Sequence[Marker],
    layout: Optional[TimelineLayout],
    selected_id: Optional[str],
    direction: str,
    use_temporal_locality: bool = True,
) -> Optional[str]:
    """Move to the lane above or below the selected marker.

    WHY: Jumping lanes should keep the reviewer at roughly the same point
    in the video, so by default the target is the marker closest in time.
    Holding a modifier selects the lane's first marker instead.

    RULES:
    - Lane index clamps at the first/last lane (no wraparound)
    - Temporal locality: smallest |start difference|, ties → earlier
      start, then id
    - First-marker mode: the lane's first marker by (start_time, id)
    - Target lane empty or same as current → selection unchanged
    """
    forward = _is_forward(direction, ("up", "down"))
    current = _find_marker(markers, selected_id)
    if current is None:
        return _first_marker_id(markers)
    if not _has_layout(layout):
        return current.id

    projected = layout.find(current.id)
    if projected is None:
        return current.id

    last_lane = len(layout.groups) - 1
    target = projected.swimlane + 1 if forward else projected.swimlane - 1
    target = max(0, min(target, last_lane))
    if target == projected.swimlane:
        return current.id

    lane = layout.lane_markers(target)
    if not lane:
        return current.id

    if not use_temporal_locality:
        return lane[0].id

    best = min(
        lane,
        key=lambda m: (abs(m.start_time - current.start_time), m.start_time, m.id),
    )
    return best.id


# ---------------------------------------------------------------------------
# Unprocessed search
# ---------------------------------------------------------------------------


def _scan_with_wrap(
    ordered: Sequence,
    index: int,
    forward: bool,
    matches: Callable[[object], bool],
) -> Optional[str]:
    """Scan away from ``index``, then wrap to the other end, never hitting ``index``."""
    if forward:
        candidates = list(range(index + 1, len(ordered))) + list(range(0, max(index, 0)))
    else:
        candidates = list(range(index - 1, -1, -1)) + list(range(len(ordered) - 1, index, -1))
    for i in candidates:
        if matches(ordered[i]):
            return ordered[i].id
    return None


def find_unprocessed_in_swimlane(
    markers: Sequence[Marker],
    layout: Optional[TimelineLayout],
    selected_id: Optional[str],
    direction: str,
    config: TagConfig,
) -> Optional[str]:
    """Find the next/previous unprocessed marker in the selected marker's lane.

    RULES:
    - Scans after (before) the current marker, then wraps to the far end
      of the lane and continues up to, not including, the current marker
    - Nothing found → the current id (selection does not change)
    - No selection → None; no layout yet or marker not in it → current id
    """
    forward = _is_forward(direction, ("next", "prev"))
    current = _find_marker(markers, selected_id)
    if current is None:
        return None
    if not _has_layout(layout):
        return current.id

    projected = layout.find(current.id)
    if projected is None:
        return current.id

    by_id: dict[str, Marker] = {m.id: m for m in markers}
    lane = layout.lane_markers(projected.swimlane)
    index = next(i for i, m in enumerate(lane) if m.id == current.id)

    def _matches(mwt: MarkerWithTrack) -> bool:
        marker = by_id.get(mwt.id)
        return marker is not None and is_unprocessed(marker, config)

    found = _scan_with_wrap(lane, index, forward, _matches)
    return found if found is not None else current.id


def find_unprocessed_global(
    markers: Sequence[Marker],
    selected_id: Optional[str],
    direction: str,
    config: TagConfig,
) -> Optional[str]:
    """Find the next/previous unprocessed marker across all markers.

    RULES:
    - Same scan-and-wrap as the lane variant over the chronological list
    - No selection → scan the whole list from the start (end for "prev")
    - Nothing found → None
    """
    forward = _is_forward(direction, ("next", "prev"))
    ordered = sort_chronologically(markers)
    index = next((i for i, m in enumerate(ordered) if m.id == selected_id), -1)
    return _scan_with_wrap(ordered, index, forward, lambda m: is_unprocessed(m, config))


def find_next_unprocessed_swimlane(
    markers: Sequence[Marker],
    layout: Optional[TimelineLayout],
    selected_id: Optional[str],
    config: TagConfig,
    from_beginning: bool = False,
) -> Optional[str]:
    """Find the next unprocessed marker reading lanes top-to-bottom.

    WHY: After finishing a lane, reviewers want to continue with the
    next lane that still has work rather than the next marker in time.

    HOW: Starting in the selected marker's lane, looks at markers that
    start strictly later; then each following lane from its start; then
    wraps to the lanes above the current one.

    RULES:
    - No selection, a stale id, or from_beginning → search from lane 0
    - Nothing found anywhere → None
    """
    if not _has_layout(layout):
        return None

    by_id: dict[str, Marker] = {m.id: m for m in markers}

    def _first_unprocessed(lane: Sequence[MarkerWithTrack], after: Optional[float]) -> Optional[str]:
        for mwt in lane:
            if after is not None and mwt.start_time <= after:
                continue
            marker = by_id.get(mwt.id)
            if marker is not None and is_unprocessed(marker, config):
                return marker.id
        return None

    lane_count = len(layout.groups)
    current = _find_marker(markers, selected_id)
    projected = layout.find(current.id) if current is not None else None

    if from_beginning or projected is None:
        order = [(i, None) for i in range(lane_count)]
    else:
        start = projected.swimlane
        order = [(start, current.start_time)]
        order += [(i, None) for i in range(start + 1, lane_count)]
        order += [(i, None) for i in range(0, start)]

    for swimlane, after in order:
        found = _first_unprocessed(layout.lane_markers(swimlane), after)
        if found is not None:
            return found
    return None


# ---------------------------------------------------------------------------
# Playhead and nearest-marker lookups
# ---------------------------------------------------------------------------


def find_markers_at_playhead(
    markers: Sequence[Marker],
    current_time: float,
    default_duration: float = DEFAULT_PLAYHEAD_DURATION,
) -> list[Marker]:
    """Markers whose interval covers ``current_time`` (inclusive both ends).

    Point markers are treated as lasting ``default_duration`` seconds.
    """
    covering = []
    for marker in markers:
        end = marker.end_time if marker.end_time else marker.start_time + default_duration
        if marker.start_time <= current_time <= end:
            covering.append(marker)
    return covering


def cycle_markers_at_playhead(
    markers: Sequence[Marker],
    layout: Optional[TimelineLayout],
    selected_id: Optional[str],
    current_time: float,
    direction: str,
) -> Optional[str]:
    """Cycle through the markers under the playhead, top-to-bottom.

    RULES:
    - Ordered by swimlane index, then primary tag name, then id; markers
      missing from the layout sort after those in it
    - Wraps around in both directions
    - Selection not under the playhead → first ("next") or last ("prev")
    - Nothing under the playhead → None
    """
    forward = _is_forward(direction, ("next", "prev"))
    covering = find_markers_at_playhead(markers, current_time)
    if not covering:
        return None

    def _key(marker: Marker):
        projected = layout.find(marker.id) if layout is not None else None
        lane = projected.swimlane if projected is not None else len(markers)
        return (lane, marker.primary_tag.name, marker.id)

    ordered = sorted(covering, key=_key)
    index = next((i for i, m in enumerate(ordered) if m.id == selected_id), -1)
    if index == -1:
        return ordered[0].id if forward else ordered[-1].id
    step = 1 if forward else -1
    return ordered[(index + step) % len(ordered)].id


def find_nearest_marker(
    markers: Sequence[Marker],
    current_time: float,
    direction: str,
) -> Optional[str]:
    """Closest marker starting strictly after ("next") or before ("prev") a time."""
    forward = _is_forward(direction, ("next", "prev"))
    if forward:
        candidates = [m for m in markers if m.start_time > current_time]
        if not candidates:
            return None
        return min(candidates, key=marker_sort_key).id
    candidates = [m for m in markers if m.start_time < current_time]
    if not candidates:
        return None
    latest = max(m.start_time for m in candidates)
    return min((m for m in candidates if m.start_time == latest), key=lambda m: m.id).id
