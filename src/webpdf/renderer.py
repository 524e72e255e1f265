"""
PDF Renderer - Assemble a paginated PDF from content blocks.

Opens the output sink and a reportlab-backed drawing surface, runs the
layout engine over every block, then flushes the document to the sink.
The sink is closed on every exit path; layout errors reach the caller
unchanged.
"""

import io
import logging
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Iterator, Optional, Union

from .errors import OutputError
from .fonts import FontProvider, FontSet, builtin_fonts
from .layout import LayoutEngine, LayoutResult
from .models import ExtractedPage
from .styles import StyleSheet, default_stylesheet
from .surface import ReportLabSurface


logger = logging.getLogger(__name__)

# Suppress fontTools chatter from TrueType subsetting
logging.getLogger("fontTools").setLevel(logging.ERROR)

Output = Union[str, Path, BinaryIO, None]


class PDFRenderer:
    """Render content blocks to a paginated PDF."""

    def __init__(
        self,
        stylesheet: Optional[StyleSheet] = None,
        font_provider: Optional[FontProvider] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the PDF renderer.

        Args:
            stylesheet: Typography rules. Defaults to the built-in style sheet.
            font_provider: Resolves custom fonts. Built-in fonts when omitted.
            logger: Logger handed to the layout engine for its warnings.
        """
        self.stylesheet = stylesheet or default_stylesheet()
        self.font_provider = font_provider
        self.logger = logger
        self.last_result: Optional[LayoutResult] = None

    def _fonts(self) -> FontSet:
        if self.font_provider is None:
            return builtin_fonts()
        return self.font_provider.load_fonts()

    def generate(
        self,
        blocks: Iterable[Any],
        output: Output = None,
        title: Optional[str] = None,
    ) -> Optional[bytes]:
        """
        Render blocks to PDF.

        Args:
            blocks: Ordered content blocks
            output: Path or binary file object to write to. If None, returns bytes.
            title: Document title for the PDF metadata

        Returns:
            PDF bytes if output is None, otherwise None

        Raises:
            OutputError: If the sink cannot be opened or written
            RenderError: If a block cannot be laid out
            ConfigError: If the style sheet is missing a rule
        """
        if output is None:
            buffer = io.BytesIO()
            self._generate_into(blocks, buffer, title)
            return buffer.getvalue()

        with _open_sink(output) as sink:
            self._generate_into(blocks, sink, title)
        logger.info("PDF document finalized: %s", _describe(output))
        return None

    def _generate_into(self, blocks: Iterable[Any], sink: BinaryIO, title: Optional[str]) -> None:
        surface = ReportLabSurface(
            sink,
            page_style=self.stylesheet.page,
            fonts=self._fonts(),
            title=title,
        )
        engine = LayoutEngine(self.stylesheet, logger=self.logger)
        self.last_result = engine.layout(blocks, surface)

        try:
            surface.finalize()
        except OSError as e:
            raise OutputError(f"Failed to write PDF: {e}") from e

        logger.debug(
            "Laid out %d block(s) on %d page(s)",
            len(self.last_result.placements),
            self.last_result.page_count,
        )

    def render_page(self, page: ExtractedPage, output: Output = None) -> Optional[bytes]:
        """Render an extracted webpage, using its title as document title."""
        return self.generate(page.elements, output=output, title=page.title)


@contextmanager
def _open_sink(output: Union[str, Path, BinaryIO]) -> Iterator[BinaryIO]:
    """Yield a writable binary sink; files we open are closed on exit."""
    if hasattr(output, "write"):
        yield output
        try:
            output.flush()
        except OSError as e:
            raise OutputError(f"Failed to flush PDF output: {e}") from e
        return

    path = Path(output)
    try:
        handle = open(path, "wb")
    except OSError as e:
        raise OutputError(f"Cannot open {path} for writing: {e}") from e

    try:
        yield handle
    except BaseException:
        # The original error wins over a failing close
        with suppress(OSError):
            handle.close()
        raise

    try:
        handle.close()
    except OSError as e:
        raise OutputError(f"Failed to close {path}: {e}") from e


def _describe(output: Any) -> str:
    if isinstance(output, (str, Path)):
        return str(output)
    return getattr(output, "name", type(output).__name__)


def render_to_pdf(
    blocks: Iterable[Any],
    output_path: Union[str, Path],
    title: Optional[str] = None,
    stylesheet: Optional[StyleSheet] = None,
) -> None:
    """
    Convenience function to render blocks to a PDF file.

    Args:
        blocks: Ordered content blocks
        output_path: Path to save the PDF
        title: Document title
        stylesheet: Typography rules
    """
    PDFRenderer(stylesheet).generate(blocks, output=output_path, title=title)


def render_to_bytes(
    blocks: Iterable[Any],
    title: Optional[str] = None,
    stylesheet: Optional[StyleSheet] = None,
) -> bytes:
    """Convenience function to render blocks to PDF bytes."""
    return PDFRenderer(stylesheet).generate(blocks, output=None, title=title)
