"""Shared test fixtures for the marker_timeline test suite.

WHY: Nearly every test builds markers with a primary tag and some
status tags. Centralizing the reserved tag ids and a marker factory
keeps the tests short and guarantees they all agree on which id means
"confirmed".

HOW: tag_config is a fixed TagConfig; make_marker / make_tag return
factory callables; sample_markers is a small realistic scene.

RULES:
- Reserved ids match the annotation store's test installation
- Marker ids are plain strings so tie-breaks are easy to reason about
- Factories never share mutable state between tests
"""

from typing import Optional, Sequence

import pytest

from marker_timeline.core.models import Marker, Tag, TagConfig

STATUS_CONFIRMED = "100001"
STATUS_REJECTED = "100002"
SOURCE_MANUAL = "100003"
SHOT_BOUNDARY = "300001"
MARKER_GROUP_PARENT = "900000"

_STATUS_TAGS = {
    "confirmed": Tag(id=STATUS_CONFIRMED, name="status: confirmed"),
    "rejected": Tag(id=STATUS_REJECTED, name="status: rejected"),
    "manual": Tag(id=SOURCE_MANUAL, name="source: manual"),
}


def _tag_id_for(name: str) -> str:
    return "tag-{}".format(name.lower().replace(" ", "-"))


def build_tag(name: str, tag_id: Optional[str] = None, description: Optional[str] = None,
              parents: Sequence[Tag] = ()) -> Tag:
    return Tag(
        id=tag_id or _tag_id_for(name),
        name=name,
        description=description,
        parents=tuple(parents),
    )


def build_marker(marker_id: str, start: float, end: Optional[float] = None,
                 tag="Kissing", statuses: Sequence[str] = ()) -> Marker:
    primary = tag if isinstance(tag, Tag) else build_tag(tag)
    return Marker(
        id=marker_id,
        start_time=start,
        end_time=end,
        primary_tag=primary,
        tags=tuple(_STATUS_TAGS[s] for s in statuses),
    )


@pytest.fixture
def tag_config():
    """Reserved tag ids used throughout the suite."""
    return TagConfig(
        status_confirmed=STATUS_CONFIRMED,
        status_rejected=STATUS_REJECTED,
        source_manual=SOURCE_MANUAL,
        shot_boundary=SHOT_BOUNDARY,
        marker_group_parent=MARKER_GROUP_PARENT,
    )


@pytest.fixture
def make_marker():
    """Factory: make_marker(id, start, end=None, tag="Kissing", statuses=())."""
    return build_marker


@pytest.fixture
def make_tag():
    """Factory: make_tag(name, tag_id=None, description=None, parents=())."""
    return build_tag


@pytest.fixture
def sample_markers():
    """A small scene: two lanes, AI and human tags folded, mixed statuses.

    Kissing lane:  k1 [0,10] confirmed, k2 [5,15] AI unprocessed, k3 [20,30] unprocessed
    Dancing lane:  d1 [2,4] rejected, d2 [18,22] unprocessed, d3 [40,45] confirmed
    """
    return [
        build_marker("k1", 0.0, 10.0, tag="Kissing", statuses=["confirmed"]),
        build_marker("k2", 5.0, 15.0, tag="Kissing_AI"),
        build_marker("k3", 20.0, 30.0, tag="Kissing"),
        build_marker("d1", 2.0, 4.0, tag="Dancing", statuses=["rejected"]),
        build_marker("d2", 18.0, 22.0, tag="Dancing"),
        build_marker("d3", 40.0, 45.0, tag="Dancing", statuses=["confirmed"]),
    ]
