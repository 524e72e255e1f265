"""
Tests for the reportlab drawing surface.
"""
import io
import re

import pytest
from reportlab.pdfbase import pdfmetrics

from webpdf.styles import Margins, PageStyle
from webpdf.surface import DrawingSurface, ReportLabSurface, line_height, wrap_text


LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, "
    "quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat."
)


def page_count(pdf: bytes) -> int:
    return max(int(n) for n in re.findall(rb"/Count (\d+)", pdf))


class TestWrapText:
    def test_short_text_is_a_single_line(self):
        assert wrap_text("hello world", "Helvetica", 10, 400) == ["hello world"]

    def test_explicit_newlines_and_indentation_are_kept(self):
        assert wrap_text("def f():\n    return 1", "Courier", 9, 400) == ["def f():", "    return 1"]

    def test_blank_lines_are_kept(self):
        assert wrap_text("a\n\nb", "Courier", 9, 400) == ["a", "", "b"]

    def test_lines_never_exceed_width(self):
        lines = wrap_text(LOREM, "Helvetica", 10, 150)
        assert len(lines) > 1
        for line in lines:
            assert pdfmetrics.stringWidth(line, "Helvetica", 10) <= 150

    def test_words_wider_than_line_are_broken(self):
        lines = wrap_text("x" * 300, "Courier", 10, 100)
        assert "".join(lines) == "x" * 300
        for line in lines:
            assert pdfmetrics.stringWidth(line, "Courier", 10) <= 100

    def test_wrapping_keeps_every_word(self):
        lines = wrap_text(LOREM, "Helvetica", 10, 120)
        assert " ".join(lines).split() == LOREM.split()


class TestReportLabSurface:
    def test_implements_drawing_surface(self):
        assert isinstance(ReportLabSurface(io.BytesIO()), DrawingSurface)

    def test_measured_height_equals_drawn_height(self):
        surface = ReportLabSurface(io.BytesIO())
        surface.set_font("regular", 10, "#333333")

        measured = surface.measure_height(LOREM, 200, 0.4)
        drawn = surface.draw_text(LOREM, width=200, line_gap_factor=0.4, position=(72, 100))

        assert measured == pytest.approx(drawn)
        assert measured > line_height(10, 0.4)

    def test_measure_with_explicit_font_does_not_change_current_font(self):
        surface = ReportLabSurface(io.BytesIO())
        surface.set_font("regular", 10, "#333333")

        big = surface.measure_height(LOREM, 200, font_role="bold", font_size=20)
        small = surface.measure_height(LOREM, 200)

        assert big > small
        assert small == pytest.approx(surface.draw_text(LOREM, width=200, position=(72, 100)))

    def test_height_is_line_count_times_leading(self):
        surface = ReportLabSurface(io.BytesIO())
        height = surface.measure_height("one\ntwo\nthree", 400, 0.3, font_role="code", font_size=9)
        assert height == pytest.approx(3 * 9 * 1.5)

    def test_page_geometry_reflects_page_style(self):
        style = PageStyle(width=595, height=842, margins=Margins(50, 60, 40, 30), padding=10)
        geometry = ReportLabSurface(io.BytesIO(), page_style=style).page_geometry()

        assert geometry.printable_width == 595 - 40 - 30
        assert geometry.bottom == 842 - 60
        assert geometry.content_top == 60

    def test_empty_document_has_one_page(self):
        sink = io.BytesIO()
        ReportLabSurface(sink).finalize()

        pdf = sink.getvalue()
        assert pdf.startswith(b"%PDF")
        assert page_count(pdf) == 1

    def test_new_page_adds_a_page(self):
        sink = io.BytesIO()
        surface = ReportLabSurface(sink)
        surface.set_font("regular", 10, "#333333")
        surface.draw_text("first page", position=(72, 100))
        surface.new_page()
        surface.draw_text("second page", position=(72, 100))
        surface.finalize()

        assert surface.page_count == 2
        assert page_count(sink.getvalue()) == 2

    def test_draw_text_without_position_follows_internal_cursor(self):
        surface = ReportLabSurface(io.BytesIO())
        surface.set_font("regular", 10, "#333333")

        surface.draw_text("line")
        assert surface._y == pytest.approx(72 + line_height(10))

        surface.new_page()
        assert surface._y == 72

    def test_fill_rect_accepts_rounded_corners(self):
        sink = io.BytesIO()
        surface = ReportLabSurface(sink)
        surface.fill_rect(72, 100, 468, 40, "#F6F8FA", corner_radius=4)
        surface.fill_rect(72, 200, 468, 40, "#F6F8FA")
        surface.finalize()
        assert page_count(sink.getvalue()) == 1

    def test_invalid_color_raises(self):
        surface = ReportLabSurface(io.BytesIO())
        with pytest.raises(ValueError):
            surface.set_font("regular", 10, "not-a-color")

    def test_unknown_font_role_raises(self):
        surface = ReportLabSurface(io.BytesIO())
        with pytest.raises(ValueError):
            surface.set_font("fancy", 10, "#000000")
