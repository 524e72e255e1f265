"""
Font Provider - Register custom TrueType fonts with graceful fallback.

Each font role resolves either to a registered custom font or to one of
the built-in PDF fonts. Loading never raises: a missing or unreadable
font file is logged and the fallback is used instead.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont


logger = logging.getLogger(__name__)


FONT_SPEC = {
    "main": {
        "regular": {
            "path": "open_sans/OpenSans-Regular.ttf",
            "name": "OpenSans",
            "fallback": "Helvetica",
        },
        "bold": {
            "path": "open_sans/OpenSans-Bold.ttf",
            "name": "OpenSans-Bold",
            "fallback": "Helvetica-Bold",
        },
        "italic": {
            "path": "open_sans/OpenSans-Italic.ttf",
            "name": "OpenSans-Italic",
            "fallback": "Helvetica-Oblique",
        },
    },
    "code": {
        "regular": {
            "path": "fira/FiraCode-Regular.ttf",
            "name": "FiraCode",
            "fallback": "Courier",
        },
        "medium": {
            "path": "fira/FiraCode-Medium.ttf",
            "name": "FiraCode-Medium",
            "fallback": "Courier-Bold",
        },
    },
}


@dataclass(frozen=True)
class ResolvedFont:
    """A font name usable by the surface, and whether it is a fallback."""

    name: str
    used_fallback: bool = False


@dataclass(frozen=True)
class MainFonts:
    regular: ResolvedFont
    bold: ResolvedFont
    italic: ResolvedFont


@dataclass(frozen=True)
class CodeFonts:
    regular: ResolvedFont
    medium: ResolvedFont


@dataclass(frozen=True)
class FontSet:
    main: MainFonts
    code: CodeFonts

    def for_role(self, role: str) -> str:
        """Map a style font role to a font name."""
        roles = {
            "regular": self.main.regular,
            "bold": self.main.bold,
            "italic": self.main.italic,
            "code": self.code.regular,
            "code_medium": self.code.medium,
        }
        try:
            return roles[role].name
        except KeyError:
            raise ValueError(f"Unknown font role: {role!r}") from None


def builtin_fonts() -> FontSet:
    """A FontSet made only of built-in PDF fonts."""

    def fallback(group: str, style: str) -> ResolvedFont:
        return ResolvedFont(FONT_SPEC[group][style]["fallback"], used_fallback=True)

    return FontSet(
        main=MainFonts(
            regular=fallback("main", "regular"),
            bold=fallback("main", "bold"),
            italic=fallback("main", "italic"),
        ),
        code=CodeFonts(
            regular=fallback("code", "regular"),
            medium=fallback("code", "medium"),
        ),
    )


class FontProvider:
    """Resolve the fonts used by the PDF surface."""

    def __init__(self, fonts_dir: Optional[Path] = None, spec: Optional[dict] = None):
        """
        Initialize the font provider.

        Args:
            fonts_dir: Directory containing font files. Defaults to ./fonts.
            spec: Font specification, defaults to FONT_SPEC.
        """
        if fonts_dir is None:
            fonts_dir = Path.cwd() / "fonts"

        self.fonts_dir = Path(fonts_dir)
        self.spec = spec or FONT_SPEC

    def load_fonts(self) -> FontSet:
        """Register every configured font, falling back where needed."""
        main = self.spec["main"]
        code = self.spec["code"]
        return FontSet(
            main=MainFonts(
                regular=self._resolve("main", "regular", main["regular"]),
                bold=self._resolve("main", "bold", main["bold"]),
                italic=self._resolve("main", "italic", main["italic"]),
            ),
            code=CodeFonts(
                regular=self._resolve("code", "regular", code["regular"]),
                medium=self._resolve("code", "medium", code["medium"]),
            ),
        )

    def _resolve(self, group: str, style: str, font: dict) -> ResolvedFont:
        font_path = self.fonts_dir / font["path"]
        if not font_path.exists():
            logger.info("Using fallback for %s %s font (%s not found)", group, style, font_path)
            return ResolvedFont(font["fallback"], used_fallback=True)

        if font["name"] in pdfmetrics.getRegisteredFontNames():
            return ResolvedFont(font["name"])

        try:
            pdfmetrics.registerFont(TTFont(font["name"], str(font_path)))
        except Exception as e:
            # reportlab raises TTFError and assorted struct errors on bad files
            logger.warning(
                "Error loading %s %s font from %s, using fallback: %s",
                group, style, font_path, e,
            )
            return ResolvedFont(font["fallback"], used_fallback=True)

        logger.debug("Registered font %s from %s", font["name"], font_path)
        return ResolvedFont(font["name"])
