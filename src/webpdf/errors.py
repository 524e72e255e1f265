"""
Error types raised by webpdf.

Every error keeps its own kind all the way to the caller, so the CLI and
the web API can tell bad input apart from a backend or IO failure.
"""

from typing import Optional


class WebPDFError(Exception):
    """Base class for all webpdf errors."""


class ConfigError(WebPDFError):
    """A style sheet is missing a required rule or has a malformed one."""


class RenderError(WebPDFError):
    """A block could not be measured, drawn, or placed on a page."""

    def __init__(self, message: str, index: Optional[int] = None, kind: Optional[str] = None):
        self.index = index
        self.kind = kind
        if index is not None:
            message = f"block {index} ({kind}): {message}"
        super().__init__(message)


class OutputError(WebPDFError, IOError):
    """The output sink could not be opened or flushed."""


class ExtractionError(WebPDFError):
    """A webpage could not be fetched or parsed."""
