"""
Pytest configuration and shared fixtures for webpdf tests.
"""
import math
from dataclasses import replace
from typing import Optional

import pytest

from webpdf.errors import ExtractionError
from webpdf.models import Code, ExtractedPage, Heading, PageMetadata, Paragraph, Quote
from webpdf.styles import Margins
from webpdf.surface import PageGeometry


# ============================================================================
# Fake drawing surface
# ============================================================================

class RecordingSurface:
    """
    DrawingSurface double with deterministic metrics.

    Every character is half an em wide; a line is 1.2 em plus the line gap.
    Heights for specific texts can be pinned through ``heights``.
    """

    def __init__(
        self,
        width: float = 612,
        height: float = 792,
        margins: Margins = Margins(72, 72, 72, 72),
        padding: float = 36,
        heights: Optional[dict] = None,
    ):
        self.geometry = PageGeometry(width, height, margins, padding)
        self.heights = heights or {}
        self.page_count = 1
        self.calls = []
        self.font = ("regular", 12.0, "#000000")

    def page_geometry(self):
        return self.geometry

    def measure_height(self, text, width, line_gap_factor=0.0, font_role=None, font_size=None):
        size = font_size if font_size is not None else self.font[1]
        self.calls.append(("measure_height", text, width, line_gap_factor, font_role, size))
        return self._height(text, width, size, line_gap_factor)

    def _height(self, text, width, size, line_gap_factor):
        if text in self.heights:
            return self.heights[text]
        per_line = max(1, int(width // (size * 0.5)))
        lines = sum(max(1, math.ceil(len(line) / per_line)) for line in text.split("\n"))
        return lines * size * (1.2 + line_gap_factor)

    def set_font(self, role, size, color):
        self.font = (role, size, color)
        self.calls.append(("set_font", role, size, color))

    def draw_text(self, text, width=None, indent=0.0, line_gap_factor=0.0, position=None):
        self.calls.append(("draw_text", text, width, line_gap_factor, position, self.page_count))
        return self._height(text, width, self.font[1], line_gap_factor)

    def fill_rect(self, x, y, width, height, color, corner_radius=0.0):
        self.calls.append(("fill_rect", x, y, width, height, color, corner_radius))

    def new_page(self):
        self.page_count += 1
        self.calls.append(("new_page",))

    def calls_named(self, *names):
        return [call for call in self.calls if call[0] in names]

    @property
    def draw_calls(self):
        return self.calls_named("draw_text", "fill_rect")


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def make_surface():
    """Factory for surfaces with pinned heights or custom geometry."""
    return RecordingSurface


# ============================================================================
# Content fixtures
# ============================================================================

@pytest.fixture
def sample_blocks():
    return [
        Heading(level=1, text="Getting Started"),
        Paragraph(text="Install the package and run the converter against any article URL."),
        Quote(text="Simplicity is prerequisite for reliability.", citation="Edsger Dijkstra"),
        Code(text="pip install webpdf\nwebpdf convert https://example.com", language="bash"),
        Heading(level=2, text="Next steps"),
        Paragraph(text="Tune the style sheet to taste."),
    ]


@pytest.fixture
def sample_page(sample_blocks) -> ExtractedPage:
    return ExtractedPage(
        title="My Post",
        elements=sample_blocks,
        metadata=PageMetadata(author="Jane Doe", site_name="Example Blog", excerpt="A short post."),
        source_url="https://example.com/post",
    )


@pytest.fixture
def fake_extractor(sample_page):
    """A ContentExtractor stand-in returning sample_page without network access."""

    class FakeExtractor:
        requested = []

        def __init__(self, *args, **kwargs):
            pass

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            self.close()

        def close(self):
            pass

        def extract(self, url):
            FakeExtractor.requested.append(url)
            return replace(sample_page, source_url=url)

    return FakeExtractor


@pytest.fixture
def failing_extractor(fake_extractor):
    class FailingExtractor(fake_extractor):
        def extract(self, url):
            raise ExtractionError(f"Could not fetch {url}: 404 Not Found")

    return FailingExtractor
