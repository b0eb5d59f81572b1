"""Unit tests for marker file loading.

WHY: Marker files come from an external store. A malformed file must be
rejected up front with a readable MarkerFileError rather than failing
somewhere inside grouping.

HOW: Files are written to tmp_path and loaded back; parse_markers is
also called directly on decoded documents.

RULES:
- All file I/O tests use tmp_path fixtures for isolation.
- MarkerFileError must stay a ValueError so the CLI reports it cleanly.
"""

import json

import pytest

from marker_timeline.loader import MarkerFileError, load_markers, parse_markers

_CONFIRMED = {"id": 100001, "name": "status: confirmed"}


def _wire_marker(marker_id, seconds, end_seconds=None, tag_name="Kissing", tags=()):
    entry = {
        "id": marker_id,
        "seconds": seconds,
        "primary_tag": {"id": "tag-{}".format(tag_name.lower()), "name": tag_name},
        "tags": list(tags),
    }
    if end_seconds is not None:
        entry["end_seconds"] = end_seconds
    return entry


class TestParseMarkers:
    def test_wrapped_document(self):
        document = {"markers": [_wire_marker("m1", 1.5, 3.0, tags=[_CONFIRMED])]}
        markers = parse_markers(document)
        assert len(markers) == 1
        marker = markers[0]
        assert marker.id == "m1"
        assert marker.start_time == 1.5
        assert marker.end_time == 3.0
        assert marker.primary_tag.name == "Kissing"
        assert marker.tag_ids == frozenset({"100001"})

    def test_bare_list(self):
        markers = parse_markers([_wire_marker("a", 0), _wire_marker("b", 2)])
        assert [m.id for m in markers] == ["a", "b"]

    def test_integer_ids_become_strings(self):
        markers = parse_markers([_wire_marker(42, 0)])
        assert markers[0].id == "42"

    def test_point_marker(self):
        marker = parse_markers([_wire_marker("p", 7)])[0]
        assert marker.end_time is None

    def test_null_end_seconds(self):
        entry = _wire_marker("p", 7)
        entry["end_seconds"] = None
        assert parse_markers([entry])[0].end_time is None

    def test_nested_parent_tags(self):
        entry = _wire_marker("a", 0)
        entry["primary_tag"]["parents"] = [{
            "id": "g2",
            "name": "Marker Group: 2. Main",
            "parents": [{"id": 900000, "name": "Marker Groups"}],
        }]
        marker = parse_markers([entry])[0]
        group = marker.primary_tag.parents[0]
        assert group.name == "Marker Group: 2. Main"
        assert group.parents[0].id == "900000"

    def test_missing_primary_tag(self):
        entry = _wire_marker("a", 0)
        del entry["primary_tag"]
        with pytest.raises(MarkerFileError, match="Invalid marker data"):
            parse_markers({"markers": [entry]})

    def test_negative_start(self):
        with pytest.raises(MarkerFileError):
            parse_markers([_wire_marker("a", -1)])

    def test_wrong_top_level_type(self):
        with pytest.raises(MarkerFileError):
            parse_markers("markers")

    def test_is_value_error(self):
        assert issubclass(MarkerFileError, ValueError)


class TestLoadMarkers:
    def test_loads_file(self, tmp_path):
        path = tmp_path / "scene42.json"
        path.write_text(json.dumps({"markers": [_wire_marker("a", 0, 1)]}), encoding="utf-8")
        markers = load_markers(path)
        assert [m.id for m in markers] == ["a"]

    def test_accepts_string_path(self, tmp_path):
        path = tmp_path / "scene42.json"
        path.write_text(json.dumps([_wire_marker("a", 0)]), encoding="utf-8")
        assert len(load_markers(str(path))) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(MarkerFileError, match="not found"):
            load_markers(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(MarkerFileError, match="not valid JSON"):
            load_markers(path)
