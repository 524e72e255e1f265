"""
webpdf - Webpage to PDF Converter

Extract the readable outline of a webpage (headings, paragraphs, quotes,
code blocks) and lay it out onto consistently styled, paginated PDF pages.
"""

__version__ = "0.1.0"

from .errors import ConfigError, OutputError, RenderError, WebPDFError
from .extractor import ContentExtractor
from .layout import LayoutEngine
from .models import Code, ExtractedPage, Heading, Paragraph, Quote
from .renderer import PDFRenderer
from .styles import StyleSheet, default_stylesheet

__all__ = [
    "__version__",
    "Code",
    "ConfigError",
    "ContentExtractor",
    "ExtractedPage",
    "Heading",
    "LayoutEngine",
    "OutputError",
    "PDFRenderer",
    "Paragraph",
    "Quote",
    "RenderError",
    "StyleSheet",
    "WebPDFError",
    "default_stylesheet",
]
