"""
Style Sheet - Typography and page geometry for each block kind.

The defaults live in DEFAULT_STYLES as plain nested data. A StyleSheet is
built from that data once, validated for completeness, and then shared
read-only by the layout engine.
"""

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .errors import ConfigError


DEFAULT_STYLES: dict[str, Any] = {
    "colors": {
        "heading": "#2C3E50",
        "text": "#333333",
        "quote": "#7F8C8D",
        "code": "#E74C3C",
        "code_background": "#F6F8FA",
    },
    "heading": {
        1: {"font_size": 20, "spacing": 16},
        2: {"font_size": 16, "spacing": 12},
        3: {"font_size": 14, "spacing": 10},
        4: {"font_size": 12, "spacing": 8},
        5: {"font_size": 11, "spacing": 8},
        6: {"font_size": 10, "spacing": 8},
    },
    "heading_defaults": {
        "font_role": "bold",
        "color": "heading",
        "spacing_factor": 2.5,
    },
    "text": {
        "paragraph": {
            "font_role": "regular",
            "font_size": 10,
            "spacing": 12,
            "line_height": 1.4,
            "color": "text",
        },
        "quote": {
            "font_role": "italic",
            "font_size": 10,
            "spacing": 12,
            "indent": 30,
            "color": "quote",
        },
        "code": {
            "font_role": "code",
            "font_size": 9,
            "spacing": 12,
            "line_height": 1.3,
            "color": "code",
            "background": "code_background",
            "padding_x": 15,
            "padding_y": 5,
            "corner_radius": 4,
            "background_offset": 5,
        },
    },
    "page": {
        "width": 612,  # US letter
        "height": 792,
        "margin": {"top": 72, "bottom": 72, "left": 72, "right": 72},
        "padding": 36,
    },
}

BODY_KINDS = ("paragraph", "quote", "code")
HEADING_LEVELS = range(1, 7)


@dataclass(frozen=True)
class StyleRule:
    """Typography for one block kind (or one heading level)."""

    font_role: str
    font_size: float
    color: str
    spacing: float
    line_height: float = 1.0
    spacing_factor: float = 1.0
    indent: float = 0.0
    background: Optional[str] = None
    padding_x: float = 0.0
    padding_y: float = 0.0
    corner_radius: float = 0.0
    background_offset: float = 0.0

    @property
    def line_gap_factor(self) -> float:
        """Extra gap between wrapped lines, as a multiple of the font size."""
        return max(0.0, self.line_height - 1.0)


@dataclass(frozen=True)
class Margins:
    top: float
    bottom: float
    left: float
    right: float


@dataclass(frozen=True)
class PageStyle:
    """Page size, margins and the padding applied below the top margin."""

    width: float = 612
    height: float = 792
    margins: Margins = Margins(72, 72, 72, 72)
    padding: float = 36

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)


class StyleSheet:
    """Immutable lookup of StyleRules by block kind and heading level."""

    def __init__(
        self,
        headings: Mapping[int, StyleRule],
        body: Mapping[str, StyleRule],
        page: Optional[PageStyle] = None,
    ):
        missing = [level for level in HEADING_LEVELS if level not in headings]
        if missing:
            raise ConfigError(f"Missing heading style for level(s): {missing}")
        missing = [kind for kind in BODY_KINDS if kind not in body]
        if missing:
            raise ConfigError(f"Missing style for block kind(s): {missing}")

        self._headings = dict(headings)
        self._body = dict(body)
        self.page = page or PageStyle()

    def style_for(self, kind: str, level: Optional[int] = None) -> StyleRule:
        """
        Look up the rule for a block kind.

        Args:
            kind: Block kind (heading, paragraph, quote, code)
            level: Heading level, required when kind is "heading"

        Returns:
            The StyleRule for the block

        Raises:
            ConfigError: If no rule exists for the kind or heading level
        """
        if kind == "heading":
            try:
                return self._headings[level]
            except KeyError:
                raise ConfigError(f"No heading style for level {level!r}") from None
        try:
            return self._body[kind]
        except KeyError:
            raise ConfigError(f"No style for block kind {kind!r}") from None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StyleSheet":
        """Build a validated StyleSheet from nested configuration data."""
        try:
            colors = data.get("colors", {})
            heading_defaults = data.get("heading_defaults", {})

            headings = {}
            for level, values in data["heading"].items():
                merged = {**heading_defaults, **values}
                headings[int(level)] = _build_rule(merged, colors, f"heading {level}")

            body = {}
            for kind, values in data["text"].items():
                body[kind] = _build_rule(values, colors, kind)

            page = _build_page(data.get("page", {}))
        except ConfigError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Malformed style configuration: {e}") from e

        return cls(headings, body, page)


def _resolve_color(value: Optional[str], colors: Mapping[str, str]) -> Optional[str]:
    """Resolve a color name from the palette, or pass a literal through."""
    if value is None:
        return None
    return colors.get(value, value)


def _build_rule(values: Mapping[str, Any], colors: Mapping[str, str], name: str) -> StyleRule:
    for key in ("font_role", "font_size", "spacing"):
        if key not in values:
            raise ConfigError(f"Style for {name} is missing {key!r}")

    return StyleRule(
        font_role=str(values["font_role"]),
        font_size=float(values["font_size"]),
        color=_resolve_color(values.get("color", "#000000"), colors),
        spacing=float(values["spacing"]),
        line_height=float(values.get("line_height", 1.0)),
        spacing_factor=float(values.get("spacing_factor", 1.0)),
        indent=float(values.get("indent", 0)),
        background=_resolve_color(values.get("background"), colors),
        padding_x=float(values.get("padding_x", 0)),
        padding_y=float(values.get("padding_y", 0)),
        corner_radius=float(values.get("corner_radius", 0)),
        background_offset=float(values.get("background_offset", values.get("padding_y", 0))),
    )


def _build_page(values: Mapping[str, Any]) -> PageStyle:
    defaults = DEFAULT_STYLES["page"]
    margin = {**defaults["margin"], **values.get("margin", {})}
    page = PageStyle(
        width=float(values.get("width", defaults["width"])),
        height=float(values.get("height", defaults["height"])),
        margins=Margins(
            top=float(margin["top"]),
            bottom=float(margin["bottom"]),
            left=float(margin["left"]),
            right=float(margin["right"]),
        ),
        padding=float(values.get("padding", defaults["padding"])),
    )
    if page.width - page.margins.left - page.margins.right <= 0:
        raise ConfigError("Page margins leave no printable width")
    if page.height - page.margins.top - page.margins.bottom - page.padding <= 0:
        raise ConfigError("Page margins leave no printable height")
    return page


def _deep_merge(base: dict, override: Mapping[str, Any]) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        # JSON object keys are strings, heading levels are ints
        if isinstance(key, str) and key.isdigit():
            key = int(key)
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def default_stylesheet() -> StyleSheet:
    """Return the built-in style sheet."""
    return StyleSheet.from_dict(DEFAULT_STYLES)


def load_stylesheet(path: Union[str, Path]) -> StyleSheet:
    """
    Load style overrides from a JSON file on top of the defaults.

    Raises:
        ConfigError: If the file cannot be read or the result is incomplete
    """
    path = Path(path)
    try:
        overrides = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot load style sheet {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigError(f"Style sheet {path} must contain a JSON object")

    return StyleSheet.from_dict(_deep_merge(DEFAULT_STYLES, overrides))
