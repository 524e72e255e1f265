"""
Layout Engine - Place content blocks onto fixed-size pages.

Blocks are laid out strictly in order. For each block the engine measures
the height it needs at the current printable width, breaks to a new page
when it would cross the bottom margin, applies the block's style and draws
it through the DrawingSurface, then advances its own vertical cursor.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, NamedTuple, Optional

from .errors import RenderError, WebPDFError
from .models import BLOCK_KINDS, Code, Heading, Paragraph, Quote, parse_block
from .styles import StyleRule, StyleSheet, default_stylesheet
from .surface import DrawingSurface, PageGeometry


module_logger = logging.getLogger(__name__)

DRAWABLE_TYPES = (Heading, Paragraph, Quote, Code)


@dataclass
class LayoutCursor:
    """Running vertical position, owned by a single layout run."""

    current_y: float
    page_number: int = 1


@dataclass(frozen=True)
class Placement:
    """Where a block ended up."""

    index: int
    kind: str
    page: int
    y: float
    height: float


@dataclass
class LayoutResult:
    """Outcome of laying out one document."""

    page_count: int = 1
    placements: list[Placement] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class Metrics(NamedTuple):
    x: float
    width: float
    measured: float
    required: float


class LayoutEngine:
    """Paginate content blocks onto a DrawingSurface."""

    def __init__(self, stylesheet: Optional[StyleSheet] = None, logger: Optional[logging.Logger] = None):
        """
        Initialize the layout engine.

        Args:
            stylesheet: Typography rules. Defaults to the built-in style sheet.
            logger: Where warnings go. Defaults to this module's logger.
        """
        self.stylesheet = stylesheet or default_stylesheet()
        self.logger = logger or module_logger

    def layout(self, blocks: Iterable[Any], surface: DrawingSurface) -> LayoutResult:
        """
        Lay out blocks in order on the surface.

        Args:
            blocks: Content blocks, or their dictionary form
            surface: Drawing surface positioned on its first page

        Returns:
            LayoutResult with the page count, placements and warnings

        Raises:
            RenderError: If a block cannot fit on a page or a surface call fails
            ConfigError: If the style sheet has no rule for a block
        """
        geometry = surface.page_geometry()
        cursor = LayoutCursor(current_y=geometry.content_top)
        result = LayoutResult()

        for index, block in enumerate(blocks):
            kind = _kind_of(block)
            try:
                if isinstance(block, dict):
                    block = parse_block(block)
                    kind = block.kind
                if kind not in BLOCK_KINDS or not isinstance(block, DRAWABLE_TYPES):
                    self._warn_unsupported(result, index, kind)
                    continue
                self._place(index, block, surface, cursor, result)
            except WebPDFError:
                raise
            except Exception as e:
                raise RenderError(str(e) or type(e).__name__, index=index, kind=kind) from e

        result.page_count = cursor.page_number
        return result

    def _place(
        self,
        index: int,
        block: Any,
        surface: DrawingSurface,
        cursor: LayoutCursor,
        result: LayoutResult,
    ) -> None:
        rule = self._style_for(block)
        geometry = surface.page_geometry()
        metrics = self._measure(index, block, rule, geometry, surface)
        self._check_fits(index, block.kind, metrics, geometry)

        if cursor.current_y + metrics.required > geometry.bottom:
            self._break_page(index, surface, cursor)
            new_geometry = surface.page_geometry()
            if new_geometry != geometry:
                geometry = new_geometry
                metrics = self._measure(index, block, rule, geometry, surface)
                self._check_fits(index, block.kind, metrics, geometry)
            cursor.current_y = geometry.content_top

        surface.set_font(rule.font_role, rule.font_size, rule.color)

        y = cursor.current_y
        if block.kind == "code":
            advance = self._draw_code(block, rule, geometry, metrics, surface, y)
        else:
            surface.draw_text(
                _display_text(block),
                width=metrics.width,
                line_gap_factor=rule.line_gap_factor,
                position=(metrics.x, y),
            )
            advance = metrics.measured + rule.spacing * rule.spacing_factor

        result.placements.append(
            Placement(index=index, kind=block.kind, page=cursor.page_number, y=y, height=metrics.required)
        )
        cursor.current_y += advance

    def _style_for(self, block: Any) -> StyleRule:
        if block.kind == "heading":
            return self.stylesheet.style_for("heading", block.level)
        return self.stylesheet.style_for(block.kind)

    def _measure(
        self,
        index: int,
        block: Any,
        rule: StyleRule,
        geometry: PageGeometry,
        surface: DrawingSurface,
    ) -> Metrics:
        """Compute the text box and the total height a block needs."""
        x = geometry.margins.left
        width = geometry.printable_width

        # Quotes narrow both sides, code is inset by its padding
        if block.kind == "quote":
            x += rule.indent
            width -= 2 * rule.indent
        elif block.kind == "code":
            x += rule.padding_x
            width -= 2 * rule.padding_x

        if width <= 0:
            raise RenderError("no printable width left after indentation", index=index, kind=block.kind)

        measured = surface.measure_height(
            _display_text(block),
            width,
            rule.line_gap_factor,
            font_role=rule.font_role,
            font_size=rule.font_size,
        )

        required = measured
        if block.kind == "code":
            required += 2 * rule.padding_y

        return Metrics(x=x, width=width, measured=measured, required=required)

    def _check_fits(self, index: int, kind: str, metrics: Metrics, geometry: PageGeometry) -> None:
        capacity = geometry.bottom - geometry.content_top
        if metrics.required > capacity:
            raise RenderError(
                f"needs {metrics.required:.1f}pt but a page holds {capacity:.1f}pt",
                index=index,
                kind=kind,
            )

    def _break_page(self, index: int, surface: DrawingSurface, cursor: LayoutCursor) -> None:
        surface.new_page()
        cursor.page_number += 1
        self.logger.debug("Page break before block %d, now on page %d", index, cursor.page_number)

    def _draw_code(
        self,
        block: Code,
        rule: StyleRule,
        geometry: PageGeometry,
        metrics: Metrics,
        surface: DrawingSurface,
        y: float,
    ) -> float:
        """Draw the background first, then the code text on top of it."""
        if rule.background:
            surface.fill_rect(
                geometry.margins.left,
                y - rule.background_offset,
                geometry.printable_width,
                metrics.measured + 2 * rule.padding_y,
                rule.background,
                corner_radius=rule.corner_radius,
            )

        surface.draw_text(
            block.text,
            width=metrics.width,
            line_gap_factor=rule.line_gap_factor,
            position=(metrics.x, y),
        )
        return metrics.measured + rule.spacing * rule.spacing_factor

    def _warn_unsupported(self, result: LayoutResult, index: int, kind: Optional[str]) -> None:
        message = f"Unsupported element type {kind!r} at block {index}, skipped"
        self.logger.warning(message)
        result.warnings.append(message)


def _kind_of(block: Any) -> Optional[str]:
    if isinstance(block, dict):
        return block.get("type")
    return getattr(block, "kind", type(block).__name__)


def _display_text(block: Any) -> str:
    """The text a block draws; quotes carry their citation on a last line."""
    if isinstance(block, Quote) and block.citation:
        return f"{block.text}\n— {block.citation}"
    return block.text


def layout_blocks(blocks: Iterable[Any], surface: DrawingSurface, stylesheet: Optional[StyleSheet] = None) -> LayoutResult:
    """Convenience function to lay out blocks with a fresh engine."""
    return LayoutEngine(stylesheet).layout(blocks, surface)
