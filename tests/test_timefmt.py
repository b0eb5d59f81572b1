"""Unit tests for timestamp formatting and parsing.

WHY: Every time shown to a reviewer goes through format_seconds(), and
every time they type goes through parse_time_string(). Off-by-one
rounding here shows up as markers that appear to start a frame early.

RULES:
- Float comparisons use pytest.approx
- Rounding cases are chosen away from exact .5 ms boundaries
"""

import pytest

from marker_timeline.core.timefmt import (
    FRAME_STEP,
    format_seconds,
    parse_time_string,
    step_frames,
)


class TestFormatSeconds:
    """format_seconds renders mm:ss and mm:ss.mmm."""

    def test_zero(self):
        assert format_seconds(0) == "00:00"
        assert format_seconds(0, with_millis=True) == "00:00.000"

    def test_floors_seconds_without_millis(self):
        assert format_seconds(75.9) == "01:15"

    def test_millis_zero_padded(self):
        assert format_seconds(75.05, with_millis=True) == "01:15.050"

    def test_millis_rounded_to_three_digits(self):
        assert format_seconds(12.3456, with_millis=True) == "00:12.346"

    def test_millis_rounding_carries_into_minutes(self):
        assert format_seconds(59.9996, with_millis=True) == "01:00.000"
        assert format_seconds(59.9996) == "00:59"

    def test_hours_prefix_only_when_needed(self):
        assert format_seconds(3599) == "59:59"
        assert format_seconds(3723.25, with_millis=True) == "1:02:03.250"


class TestParseTimeString:
    """parse_time_string is the inverse of format_seconds."""

    def test_minutes_seconds_millis(self):
        assert parse_time_string("01:15.500") == pytest.approx(75.5)

    def test_missing_millis_defaults_to_zero(self):
        assert parse_time_string("01:15") == pytest.approx(75.0)

    def test_hours(self):
        assert parse_time_string("1:02:03.250") == pytest.approx(3723.25)

    def test_bare_seconds(self):
        assert parse_time_string("42.5") == pytest.approx(42.5)

    def test_surrounding_whitespace(self):
        assert parse_time_string("  00:05.000 ") == pytest.approx(5.0)

    def test_reads_formatted_output_back(self):
        assert parse_time_string(format_seconds(754.125, with_millis=True)) == pytest.approx(754.125)

    @pytest.mark.parametrize("text", ["", "abc", "1:xx", "1::2", "-1:00", "1:2:3:4"])
    def test_invalid_raises(self, text):
        with pytest.raises(ValueError):
            parse_time_string(text)

    @pytest.mark.parametrize("text", ["nan", "inf", "01:inf", "0:00:NaN", "-inf"])
    def test_non_finite_raises(self, text):
        with pytest.raises(ValueError, match="Invalid time string"):
            parse_time_string(text)


class TestFrameStep:
    """Frame nudging uses the shared 1/30 s constant."""

    def test_constant(self):
        assert FRAME_STEP == pytest.approx(1 / 30)

    def test_step_forward(self):
        assert step_frames(1.0, 3) == pytest.approx(1.1)

    def test_step_back_clamps_at_zero(self):
        assert step_frames(0.01, -1) == 0.0
