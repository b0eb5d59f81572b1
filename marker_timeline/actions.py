"""Named navigation actions, the keyboard-shortcut layer minus the keys.

WHY: The review UI binds keys to action ids ("navigation.swimlaneDown")
and the CLI accepts the same ids. A single registry keeps both in sync
and lets a new action be added in one place.

HOW: NavigationContext bundles everything a navigation operation may
need. ACTIONS maps action ids to small functions that unpack the
context and call the engine. run_action() looks up and runs one.

RULES:
- Action ids use the "navigation.<name>" convention
- Every action returns the id to select, or None
- run_action() raises KeyError for unknown ids, listing the known ones
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from marker_timeline.core import navigation as nav
from marker_timeline.core.models import Marker, TagConfig, TimelineLayout


@dataclass(frozen=True)
class NavigationContext:
    """Inputs of a single navigation request.

    Attributes:
        markers: Eligible (action) markers.
        layout: Layout from the latest grouping pass, or None before one.
        selected_id: Currently selected marker id, or None.
        config: Reserved tag ids for status checks.
        current_time: Playhead position in seconds.
        use_temporal_locality: Cross-lane moves pick the closest marker
                               in time (False → lane's first marker).
    """

    markers: Sequence[Marker]
    layout: Optional[TimelineLayout]
    selected_id: Optional[str]
    config: TagConfig
    current_time: float = 0.0
    use_temporal_locality: bool = True


def _chronological(direction: str) -> Callable[[NavigationContext], Optional[str]]:
    return lambda ctx: nav.navigate_chronologically(ctx.markers, ctx.selected_id, direction)


def _within_lane(direction: str) -> Callable[[NavigationContext], Optional[str]]:
    return lambda ctx: nav.navigate_within_swimlane(
        ctx.markers, ctx.layout, ctx.selected_id, direction,
    )


def _between_lanes(direction: str) -> Callable[[NavigationContext], Optional[str]]:
    return lambda ctx: nav.navigate_between_swimlanes(
        ctx.markers, ctx.layout, ctx.selected_id, direction, ctx.use_temporal_locality,
    )


def _unprocessed_in_lane(direction: str) -> Callable[[NavigationContext], Optional[str]]:
    return lambda ctx: nav.find_unprocessed_in_swimlane(
        ctx.markers, ctx.layout, ctx.selected_id, direction, ctx.config,
    )


def _unprocessed_global(direction: str) -> Callable[[NavigationContext], Optional[str]]:
    return lambda ctx: nav.find_unprocessed_global(
        ctx.markers, ctx.selected_id, direction, ctx.config,
    )


def _at_playhead(direction: str) -> Callable[[NavigationContext], Optional[str]]:
    return lambda ctx: nav.cycle_markers_at_playhead(
        ctx.markers, ctx.layout, ctx.selected_id, ctx.current_time, direction,
    )


def _nearest(direction: str) -> Callable[[NavigationContext], Optional[str]]:
    return lambda ctx: nav.find_nearest_marker(ctx.markers, ctx.current_time, direction)


ACTIONS: dict[str, Callable[[NavigationContext], Optional[str]]] = {
    "navigation.next": _chronological("next"),
    "navigation.previous": _chronological("prev"),
    "navigation.swimlaneLeft": _within_lane("left"),
    "navigation.swimlaneRight": _within_lane("right"),
    "navigation.swimlaneUp": _between_lanes("up"),
    "navigation.swimlaneDown": _between_lanes("down"),
    "navigation.nextUnprocessedInSwimlane": _unprocessed_in_lane("next"),
    "navigation.previousUnprocessedInSwimlane": _unprocessed_in_lane("prev"),
    "navigation.nextUnprocessed": _unprocessed_global("next"),
    "navigation.previousUnprocessed": _unprocessed_global("prev"),
    "navigation.nextUnprocessedSwimlane": lambda ctx: nav.find_next_unprocessed_swimlane(
        ctx.markers, ctx.layout, ctx.selected_id, ctx.config,
    ),
    "navigation.nextAtPlayhead": _at_playhead("next"),
    "navigation.previousAtPlayhead": _at_playhead("prev"),
    "navigation.nearestAfterPlayhead": _nearest("next"),
    "navigation.nearestBeforePlayhead": _nearest("prev"),
}


def run_action(action_id: str, context: NavigationContext) -> Optional[str]:
    """Run one named navigation action and return the id to select."""
    try:
        action = ACTIONS[action_id]
    except KeyError:
        raise KeyError(
            "Unknown action '{}'. Available actions: {}".format(
                action_id, ", ".join(sorted(ACTIONS))
            )
        ) from None
    return action(context)
