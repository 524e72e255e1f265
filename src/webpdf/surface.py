"""
Drawing Surface - The page-drawing capabilities the layout engine needs.

DrawingSurface is the contract; ReportLabSurface implements it on a
reportlab canvas. Coordinates are top-down: y grows towards the bottom of
the page, like the layout cursor. Measuring and drawing share one wrapping
routine, so a measured height is exactly the height that gets drawn.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol, Union, runtime_checkable

from reportlab.lib import colors
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .fonts import FontSet, builtin_fonts
from .styles import Margins, PageStyle


logger = logging.getLogger(__name__)

# Line box height as a multiple of the font size, before any extra line gap
BASE_LEADING = 1.2


@dataclass(frozen=True)
class PageGeometry:
    """Read-only snapshot of the current page's dimensions."""

    width: float
    height: float
    margins: Margins
    padding: float = 0.0

    @property
    def printable_width(self) -> float:
        return self.width - self.margins.left - self.margins.right

    @property
    def bottom(self) -> float:
        """Lowest y a block may reach before a page break."""
        return self.height - self.margins.bottom

    @property
    def content_top(self) -> float:
        """Where the cursor starts on a fresh page."""
        return self.margins.top + self.padding


@runtime_checkable
class DrawingSurface(Protocol):
    """Minimal capability set of a page-drawing backend."""

    page_count: int

    def measure_height(
        self,
        text: str,
        width: float,
        line_gap_factor: float = 0.0,
        font_role: Optional[str] = None,
        font_size: Optional[float] = None,
    ) -> float:
        ...

    def set_font(self, role: str, size: float, color: str) -> None:
        ...

    def draw_text(
        self,
        text: str,
        width: Optional[float] = None,
        indent: float = 0.0,
        line_gap_factor: float = 0.0,
        position: Optional[tuple[float, float]] = None,
    ) -> float:
        ...

    def fill_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: str,
        corner_radius: float = 0.0,
    ) -> None:
        ...

    def new_page(self) -> None:
        ...

    def page_geometry(self) -> PageGeometry:
        ...


def line_height(font_size: float, line_gap_factor: float = 0.0) -> float:
    """Distance between two wrapped lines."""
    return font_size * (BASE_LEADING + line_gap_factor)


def wrap_text(text: str, font_name: str, font_size: float, width: float) -> list[str]:
    """
    Wrap text into lines no wider than width.

    Explicit newlines are kept, leading indentation is preserved (code), and
    words wider than the line are broken between characters.
    """
    lines = []
    for raw in text.expandtabs(4).split("\n"):
        lines.extend(_wrap_line(raw.rstrip(), font_name, font_size, width))
    return lines


def _wrap_line(line: str, font_name: str, font_size: float, width: float) -> list[str]:
    def fits(candidate: str) -> bool:
        return pdfmetrics.stringWidth(candidate, font_name, font_size) <= width

    if fits(line):
        return [line]

    stripped = line.lstrip(" ")
    lead = line[: len(line) - len(stripped)]
    if not fits(lead + "M"):
        lead = ""

    out = []
    cur = lead
    for word in stripped.split():
        candidate = f"{cur} {word}" if cur.strip() else cur + word
        if fits(candidate):
            cur = candidate
            continue

        if cur.strip():
            out.append(cur)
            cur = lead
            if fits(cur + word):
                cur += word
                continue

        # Word is wider than a whole line
        for ch in word:
            if cur.strip() and not fits(cur + ch):
                out.append(cur)
                cur = lead
            cur += ch

    if cur.strip() or not out:
        out.append(cur)
    return out


def _to_color(value: str) -> colors.Color:
    return colors.toColor(value)


class ReportLabSurface:
    """DrawingSurface backed by a reportlab canvas."""

    def __init__(
        self,
        sink: Union[str, BinaryIO],
        page_style: Optional[PageStyle] = None,
        fonts: Optional[FontSet] = None,
        title: Optional[str] = None,
    ):
        """
        Open a drawing session bound to an output sink.

        Args:
            sink: File path or writable binary file object
            page_style: Page size, margins and padding
            fonts: Resolved fonts. Defaults to the built-in PDF fonts.
            title: Document title stored in the PDF metadata
        """
        self.page_style = page_style or PageStyle()
        self.fonts = fonts or builtin_fonts()
        self.page_count = 1

        self._canvas = canvas.Canvas(sink, pagesize=self.page_style.size)
        self._canvas.setCreator("webpdf")
        if title:
            self._canvas.setTitle(title)

        self._font: Optional[tuple[str, float, str]] = None
        self._reset_cursor()

    def _reset_cursor(self):
        self._x = self.page_style.margins.left
        self._y = self.page_style.margins.top

    def _current_font(self) -> tuple[str, float]:
        if self._font is None:
            return self.fonts.for_role("regular"), 12.0
        role, size, _ = self._font
        return self.fonts.for_role(role), size

    def page_geometry(self) -> PageGeometry:
        return PageGeometry(
            width=self.page_style.width,
            height=self.page_style.height,
            margins=self.page_style.margins,
            padding=self.page_style.padding,
        )

    def measure_height(
        self,
        text: str,
        width: float,
        line_gap_factor: float = 0.0,
        font_role: Optional[str] = None,
        font_size: Optional[float] = None,
    ) -> float:
        """Height of text wrapped to width, without drawing anything."""
        font_name, size = self._current_font()
        if font_role is not None:
            font_name = self.fonts.for_role(font_role)
        if font_size is not None:
            size = font_size

        lines = wrap_text(text, font_name, size, width)
        return len(lines) * line_height(size, line_gap_factor)

    def set_font(self, role: str, size: float, color: str) -> None:
        font_name = self.fonts.for_role(role)
        fill = _to_color(color)
        self._canvas.setFont(font_name, size)
        self._canvas.setFillColor(fill)
        self._font = (role, size, color)

    def draw_text(
        self,
        text: str,
        width: Optional[float] = None,
        indent: float = 0.0,
        line_gap_factor: float = 0.0,
        position: Optional[tuple[float, float]] = None,
    ) -> float:
        """Wrap and draw text with its top edge at the given position."""
        x, y = position if position is not None else (self._x, self._y)
        x += indent
        if width is None:
            width = self.page_style.width - self.page_style.margins.right - x

        font_name, size = self._current_font()
        leading = line_height(size, line_gap_factor)
        lines = wrap_text(text, font_name, size, width)

        text_obj = self._canvas.beginText()
        text_obj.setFont(font_name, size, leading)
        text_obj.setTextOrigin(x, self.page_style.height - (y + size))
        for line in lines:
            text_obj.textLine(line)
        self._canvas.drawText(text_obj)

        height = len(lines) * leading
        self._y = y + height
        return height

    def fill_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: str,
        corner_radius: float = 0.0,
    ) -> None:
        """Draw a filled rectangle whose top-left corner is at (x, y)."""
        bottom = self.page_style.height - (y + height)
        self._canvas.saveState()
        self._canvas.setFillColor(_to_color(color))
        if corner_radius > 0:
            self._canvas.roundRect(x, bottom, width, height, corner_radius, stroke=0, fill=1)
        else:
            self._canvas.rect(x, bottom, width, height, stroke=0, fill=1)
        self._canvas.restoreState()

    def new_page(self) -> None:
        self._canvas.showPage()
        self.page_count += 1
        self._reset_cursor()
        # showPage resets the graphics state
        if self._font is not None:
            self.set_font(*self._font)

    def finalize(self) -> None:
        """Close the last page and write the document to the sink."""
        self._canvas.showPage()
        self._canvas.save()
        logger.debug("Surface finalized with %d page(s)", self.page_count)
