"""
Tests for the style sheet.
"""
import copy
import json

import pytest

from webpdf.errors import ConfigError
from webpdf.styles import DEFAULT_STYLES, StyleSheet, default_stylesheet, load_stylesheet


def test_default_stylesheet_covers_every_heading_level():
    sheet = default_stylesheet()
    sizes = [sheet.style_for("heading", level).font_size for level in range(1, 7)]
    assert sizes == [20, 16, 14, 12, 11, 10]


def test_heading_rules_share_font_color_and_spacing_factor():
    rule = default_stylesheet().style_for("heading", 3)
    assert rule.font_role == "bold"
    assert rule.color == "#2C3E50"
    assert rule.spacing == 10
    assert rule.spacing_factor == 2.5


def test_body_rules_resolve_palette_colors():
    sheet = default_stylesheet()
    assert sheet.style_for("paragraph").color == "#333333"
    assert sheet.style_for("quote").color == "#7F8C8D"
    code = sheet.style_for("code")
    assert code.color == "#E74C3C"
    assert code.background == "#F6F8FA"


def test_line_gap_factor_derives_from_line_height():
    sheet = default_stylesheet()
    assert sheet.style_for("paragraph").line_gap_factor == pytest.approx(0.4)
    assert sheet.style_for("code").line_gap_factor == pytest.approx(0.3)
    assert sheet.style_for("quote").line_gap_factor == 0


def test_default_page_is_letter_with_one_inch_margins():
    page = default_stylesheet().page
    assert page.size == (612, 792)
    assert (page.margins.top, page.margins.bottom, page.margins.left, page.margins.right) == (72, 72, 72, 72)
    assert page.padding == 36


def test_unknown_kind_raises_config_error():
    with pytest.raises(ConfigError):
        default_stylesheet().style_for("table")


def test_heading_level_out_of_range_raises_config_error():
    with pytest.raises(ConfigError):
        default_stylesheet().style_for("heading", 7)


def test_missing_heading_level_fails_at_load():
    data = copy.deepcopy(DEFAULT_STYLES)
    del data["heading"][4]
    with pytest.raises(ConfigError, match="level"):
        StyleSheet.from_dict(data)


def test_missing_body_rule_fails_at_load():
    data = copy.deepcopy(DEFAULT_STYLES)
    del data["text"]["quote"]
    with pytest.raises(ConfigError, match="quote"):
        StyleSheet.from_dict(data)


def test_malformed_rule_fails_at_load():
    data = copy.deepcopy(DEFAULT_STYLES)
    data["text"]["paragraph"]["font_size"] = "large"
    with pytest.raises(ConfigError):
        StyleSheet.from_dict(data)


def test_margins_leaving_no_room_fail_at_load():
    data = copy.deepcopy(DEFAULT_STYLES)
    data["page"]["margin"] = {"left": 400, "right": 400}
    with pytest.raises(ConfigError, match="width"):
        StyleSheet.from_dict(data)


def test_load_stylesheet_merges_overrides(tmp_path):
    path = tmp_path / "styles.json"
    path.write_text(json.dumps({
        "heading": {"1": {"font_size": 24}},
        "text": {"quote": {"indent": 40}},
        "page": {"width": 595, "height": 842},
    }))

    sheet = load_stylesheet(path)

    h1 = sheet.style_for("heading", 1)
    assert h1.font_size == 24
    assert h1.spacing == 16
    assert sheet.style_for("quote").indent == 40
    assert sheet.page.size == (595, 842)
    assert sheet.page.margins.left == 72


def test_load_stylesheet_rejects_invalid_json(tmp_path):
    path = tmp_path / "styles.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        load_stylesheet(path)


def test_load_stylesheet_rejects_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_stylesheet(tmp_path / "nope.json")


def test_style_rules_are_immutable():
    rule = default_stylesheet().style_for("paragraph")
    with pytest.raises(AttributeError):
        rule.font_size = 30
