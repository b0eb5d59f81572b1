"""Unit tests for status classification and the summary aggregator.

WHY: Status drives unprocessed navigation and the review header. The
precedence order must be exact: a marker that is both confirmed and
rejected is rejected, and manual markers count as neither.
"""

import logging

from marker_timeline.core.models import MarkerStatus, TagConfig
from marker_timeline.core.status import (
    check_all_markers_approved,
    filter_unprocessed_markers,
    get_marker_status,
    has_conflicting_status,
    is_processed,
    is_unprocessed,
    status_precedence,
)
from marker_timeline.core.summary import calculate_marker_summary


class TestGetMarkerStatus:
    """get_marker_status follows REJECTED > CONFIRMED > MANUAL > UNPROCESSED."""

    def test_no_status_tags_is_unprocessed(self, make_marker, tag_config):
        assert get_marker_status(make_marker("a", 0), tag_config) is MarkerStatus.UNPROCESSED

    def test_confirmed(self, make_marker, tag_config):
        marker = make_marker("a", 0, statuses=["confirmed"])
        assert get_marker_status(marker, tag_config) is MarkerStatus.CONFIRMED

    def test_rejected(self, make_marker, tag_config):
        marker = make_marker("a", 0, statuses=["rejected"])
        assert get_marker_status(marker, tag_config) is MarkerStatus.REJECTED

    def test_manual(self, make_marker, tag_config):
        marker = make_marker("a", 0, statuses=["manual"])
        assert get_marker_status(marker, tag_config) is MarkerStatus.MANUAL

    def test_rejected_wins_over_confirmed(self, make_marker, tag_config):
        marker = make_marker("a", 0, statuses=["confirmed", "rejected"])
        assert get_marker_status(marker, tag_config) is MarkerStatus.REJECTED

    def test_confirmed_wins_over_manual(self, make_marker, tag_config):
        marker = make_marker("a", 0, statuses=["manual", "confirmed"])
        assert get_marker_status(marker, tag_config) is MarkerStatus.CONFIRMED

    def test_conflict_is_logged(self, make_marker, tag_config, caplog):
        marker = make_marker("a", 0, statuses=["confirmed", "rejected"])
        with caplog.at_level(logging.WARNING, logger="marker_timeline.core.status"):
            get_marker_status(marker, tag_config)
        assert "both confirmed and rejected" in caplog.text
        assert has_conflicting_status(marker, tag_config)

    def test_disabled_manual_tag(self, make_marker):
        config = TagConfig(status_confirmed="100001", status_rejected="100002")
        marker = make_marker("a", 0, statuses=["manual"])
        assert get_marker_status(marker, config) is MarkerStatus.UNPROCESSED


class TestStatusPrecedence:
    def test_table_order(self, tag_config):
        statuses = [status for _tag_id, status in status_precedence(tag_config)]
        assert statuses == [MarkerStatus.REJECTED, MarkerStatus.CONFIRMED, MarkerStatus.MANUAL]


class TestPredicates:
    def test_is_unprocessed(self, make_marker, tag_config):
        assert is_unprocessed(make_marker("a", 0), tag_config)
        assert not is_unprocessed(make_marker("b", 0, statuses=["confirmed"]), tag_config)
        assert not is_unprocessed(make_marker("c", 0, statuses=["manual"]), tag_config)

    def test_is_processed(self, make_marker, tag_config):
        assert is_processed(make_marker("a", 0, statuses=["rejected"]), tag_config)
        assert not is_processed(make_marker("b", 0, statuses=["manual"]), tag_config)

    def test_filter_unprocessed_keeps_order(self, make_marker, tag_config):
        markers = [
            make_marker("z", 9),
            make_marker("y", 1, statuses=["confirmed"]),
            make_marker("x", 5),
        ]
        assert [m.id for m in filter_unprocessed_markers(markers, tag_config)] == ["z", "x"]

    def test_filter_unprocessed_empty(self, tag_config):
        assert filter_unprocessed_markers([], tag_config) == []

    def test_check_all_markers_approved(self, make_marker, tag_config):
        done = [make_marker("a", 0, statuses=["confirmed"]), make_marker("b", 1, statuses=["rejected"])]
        assert check_all_markers_approved(done, tag_config)
        assert not check_all_markers_approved(done + [make_marker("c", 2)], tag_config)
        assert check_all_markers_approved([], tag_config)


class TestCalculateMarkerSummary:
    """Three-bucket summary: manual markers count as unknown."""

    def test_empty(self, tag_config):
        summary = calculate_marker_summary([], tag_config)
        assert (summary.confirmed, summary.rejected, summary.unknown) == (0, 0, 0)

    def test_buckets(self, make_marker, tag_config):
        markers = [
            make_marker("a", 0, statuses=["confirmed"]),
            make_marker("b", 0, statuses=["confirmed"]),
            make_marker("c", 0, statuses=["rejected"]),
            make_marker("d", 0, statuses=["manual"]),
            make_marker("e", 0),
            make_marker("f", 0, statuses=["confirmed", "rejected"]),
        ]
        summary = calculate_marker_summary(markers, tag_config)
        assert summary.confirmed == 2
        assert summary.rejected == 2
        assert summary.unknown == 2
        assert summary.total == 6
