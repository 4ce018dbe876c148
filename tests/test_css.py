"""
Tests for focus_audit.detectors.css.

This module tests typed parsing of lengths, colors and viewport directives.
"""

import pytest

from focus_audit.detectors.css import (
    CssColor,
    CssLength,
    find_lengths,
    find_style_keyword,
    parse_colors,
    parse_length,
    parse_number,
    parse_viewport_content,
)


class TestParseLength:

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2px", CssLength(2.0, "px")),
            ("0", CssLength(0.0, "")),
            (" 13.5px ", CssLength(13.5, "px")),
            ("1.2em", CssLength(1.2, "em")),
            ("-1px", CssLength(-1.0, "px")),
        ],
    )
    def test_single_lengths(self, text, expected):
        assert parse_length(text) == expected

    @pytest.mark.parametrize("text", [None, "", "medium", "2px solid"])
    def test_non_lengths(self, text):
        assert parse_length(text) is None

    def test_to_px(self):
        assert CssLength(12, "pt").to_px() == pytest.approx(16)
        assert CssLength(1, "rem").to_px() == 16
        assert CssLength(50, "%").to_px() is None


class TestFindLengths:

    def test_skips_numbers_inside_colors(self):
        lengths = find_lengths("rgb(0, 95, 204) solid 2px")
        assert lengths == [CssLength(2.0, "px")]

    def test_box_shadow_offsets(self):
        lengths = find_lengths("rgba(0, 0, 0, 0.5) 0px 2px 4px")
        assert [length.value for length in lengths] == [0, 2, 4]


class TestParseColors:

    def test_rgb_and_rgba(self):
        assert parse_colors("rgb(1, 2, 3)") == [CssColor(1, 2, 3, 1.0)]
        assert parse_colors("rgba(1, 2, 3, 0.5)") == [CssColor(1, 2, 3, 0.5)]

    def test_space_separated_with_slash_alpha(self):
        assert parse_colors("rgb(1 2 3 / 50%)") == [CssColor(1, 2, 3, 0.5)]

    def test_hex(self):
        assert parse_colors("#ff0000") == [CssColor(255, 0, 0, 1.0)]
        assert parse_colors("#f00") == [CssColor(255, 0, 0, 1.0)]
        assert parse_colors("#00000000")[0].alpha == 0

    def test_transparent(self):
        colors = parse_colors("transparent")
        assert len(colors) == 1
        assert not colors[0].visible

    def test_no_colors(self):
        assert parse_colors("none") == []
        assert parse_colors(None) == []


def test_find_style_keyword():
    assert find_style_keyword("2px dashed rgb(0, 0, 0)") == "dashed"
    assert find_style_keyword("rgb(0, 0, 0) none 0px") == "none"
    assert find_style_keyword("") is None


class TestParseViewportContent:

    def test_directives_lower_cased(self):
        directives = parse_viewport_content("Width=device-width, Initial-Scale=1.0, user-scalable=NO")
        assert directives == {
            "width": "device-width",
            "initial-scale": "1.0",
            "user-scalable": "no",
        }

    def test_semicolon_separator_and_junk(self):
        assert parse_viewport_content("width=320; shrink-to-fit") == {"width": "320"}

    def test_empty(self):
        assert parse_viewport_content(None) == {}
        assert parse_viewport_content("") == {}


def test_parse_number():
    assert parse_number("10") == 10
    assert parse_number(" 1.0 ") == 1.0
    assert parse_number("yes") is None
    assert parse_number(None) is None
