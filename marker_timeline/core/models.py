"""Value types for markers, swimlanes, and the derived timeline layout.

WHY: Markers arrive from the annotation store as loosely shaped JSON.
The grouping and navigation logic needs a small, well-typed and
immutable vocabulary so it can compute derived views without ever
touching the caller's data.

HOW: Frozen dataclasses form a hierarchy:
  Tag              — a tag with optional parent tags (marker-group hierarchy)
  Marker           — one time-interval annotation with its tags
  TagConfig        — the reserved tag ids and naming conventions
  TagGroup         — one swimlane: folded name, order, sorted markers
  MarkerWithTrack  — a marker projected onto (swimlane, track)
  TimelineLayout   — all swimlanes plus the flattened track projection
  MarkerSummary    — status counts for display

RULES:
- Markers are immutable; callers replace them wholesale on edit
- Times are float seconds; end_time may be None (point marker)
- Status is never stored on a Marker; it is derived from its tags
- TimelineLayout is created fresh on every grouping pass
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional


class MarkerStatus(str, enum.Enum):
    """Review status of a marker, derived from its tags.

    RULES:
    - confirmed: reviewer accepted the marker
    - rejected: reviewer rejected the marker (wins over confirmed)
    - manual: created by a human, not yet confirmed or rejected
    - unprocessed: machine-generated and still awaiting review
    """

    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    MANUAL = "manual"
    UNPROCESSED = "unprocessed"


@dataclass(frozen=True)
class Tag:
    """A tag from the annotation store.

    Attributes:
        id: Opaque tag identifier.
        name: Display name, e.g. ``"Kissing_AI"``.
        description: Free text; may carry ``"Corresponding Tag: <name>"``
                     or ``"Sort Order: a, b"`` lines.
        parents: Parent tags, used to resolve marker-group membership.
    """

    id: str
    name: str
    description: Optional[str] = None
    parents: tuple[Tag, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tag:
        """Parse a Tag (and its parents, recursively) from a wire dict."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description"),
            parents=tuple(cls.from_dict(p) for p in data.get("parents") or ()),
        )


@dataclass(frozen=True)
class Marker:
    """A time-interval annotation on a video.

    WHY: This is the atomic unit everything else is derived from. It
    carries the primary tag that decides its swimlane and the extra
    tags that decide its review status.

    RULES:
    - start_time: non-negative float seconds
    - end_time: float seconds or None; end_time < start_time is tolerated
    - primary_tag: decides lane membership and shot-boundary exclusion
    - tags: status/source tags consumed by the status classifier
    """

    id: str
    start_time: float
    end_time: Optional[float]
    primary_tag: Tag
    tags: tuple[Tag, ...] = ()

    @property
    def effective_end(self) -> float:
        """End of the interval used for overlap checks.

        Point markers and malformed intervals collapse to zero duration.
        """
        if self.end_time is None:
            return self.start_time
        return max(self.start_time, self.end_time)

    @property
    def tag_ids(self) -> frozenset:
        return frozenset(tag.id for tag in self.tags)

    def is_temporary(self, prefix: str) -> bool:
        """True for not-yet-persisted draft markers (id carries the temp prefix)."""
        return bool(prefix) and self.id.startswith(prefix)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Marker:
        """Parse a Marker from the annotation store's wire shape.

        The store names the fields ``seconds`` / ``end_seconds``.
        """
        end = data.get("end_seconds")
        return cls(
            id=str(data["id"]),
            start_time=float(data["seconds"]),
            end_time=float(end) if end is not None else None,
            primary_tag=Tag.from_dict(data["primary_tag"]),
            tags=tuple(Tag.from_dict(t) for t in data.get("tags") or ()),
        )


@dataclass(frozen=True)
class TagConfig:
    """Reserved tag ids and naming conventions supplied by the application.

    WHY: The classifier and grouping compare tag ids against a handful of
    well-known tags. Injecting them as one value keeps the engine testable
    without a live annotation store.

    RULES:
    - status_confirmed / status_rejected are required for classification
    - source_manual, shot_boundary, marker_group_parent may be empty strings,
      which disables the corresponding rule
    - ai_suffix is stripped from primary tag names to fold AI lanes
    - temp_prefix marks draft marker ids
    """

    status_confirmed: str
    status_rejected: str
    source_manual: str = ""
    shot_boundary: str = ""
    marker_group_parent: str = ""
    ai_suffix: str = "_AI"
    temp_prefix: str = "temp-"


@dataclass(frozen=True)
class MarkerWithTrack:
    """A marker projected onto its swimlane index and track (sub-row)."""

    marker: Marker
    swimlane: int
    track: int
    tag_group: str

    @property
    def id(self) -> str:
        return self.marker.id

    @property
    def start_time(self) -> float:
        return self.marker.start_time

    @property
    def end_time(self) -> Optional[float]:
        return self.marker.end_time


@dataclass(frozen=True)
class TagGroup:
    """One swimlane.

    RULES:
    - name: the folded lane key (AI suffix stripped)
    - order: position in the swimlane list, 0-based
    - markers: the lane's markers sorted by (start_time, id)
    - tags: distinct primary tags folded into this lane, first-seen order
    - is_rejected: True only when every marker in the lane is rejected
    - track_count: number of tracks the lane needs (0 for no markers)
    """

    name: str
    order: int
    markers: tuple[Marker, ...]
    tags: tuple[Tag, ...] = ()
    is_rejected: bool = False
    track_count: int = 0


@dataclass(frozen=True)
class TimelineLayout:
    """Ordered swimlanes plus the flattened (swimlane, track) projection.

    WHY: Navigation needs to answer "which lane is this marker in" and
    "what are the markers of lane N in time order" on every key press.
    Both are derived here from one grouping pass.
    """

    groups: tuple[TagGroup, ...] = ()
    markers_with_tracks: tuple[MarkerWithTrack, ...] = ()
    _by_id: dict[str, MarkerWithTrack] = field(
        default_factory=dict, init=False, repr=False, compare=False,
    )

    def __post_init__(self) -> None:
        index = {mwt.id: mwt for mwt in self.markers_with_tracks}
        object.__setattr__(self, "_by_id", index)

    def __len__(self) -> int:
        return len(self.markers_with_tracks)

    def find(self, marker_id: Optional[str]) -> Optional[MarkerWithTrack]:
        """Return the projection of ``marker_id``, or None if it has none."""
        if marker_id is None:
            return None
        return self._by_id.get(marker_id)

    def lane_markers(self, swimlane: int) -> list[MarkerWithTrack]:
        """Markers of one swimlane sorted by (start_time, id)."""
        lane = [m for m in self.markers_with_tracks if m.swimlane == swimlane]
        lane.sort(key=lambda m: (m.start_time, m.id))
        return lane


@dataclass
class MarkerSummary:
    """Status counts shown in the review header.

    ``unknown`` is everything neither confirmed nor rejected (manual included).
    """

    confirmed: int = 0
    rejected: int = 0
    unknown: int = 0

    @property
    def total(self) -> int:
        return self.confirmed + self.rejected + self.unknown
