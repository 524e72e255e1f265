"""
Content models - the typed blocks that flow from extraction to layout.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class Heading:
    """A section heading, level 1 to 6."""

    level: int
    text: str
    kind: str = field(default="heading", init=False)

    def __post_init__(self):
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be within 1..6, got {self.level}")


@dataclass(frozen=True)
class Paragraph:
    text: str
    kind: str = field(default="paragraph", init=False)


@dataclass(frozen=True)
class Quote:
    text: str
    citation: Optional[str] = None
    kind: str = field(default="quote", init=False)


@dataclass(frozen=True)
class Code:
    text: str
    language: Optional[str] = None
    kind: str = field(default="code", init=False)


@dataclass(frozen=True)
class UnsupportedBlock:
    """A block of a kind the layout engine does not draw."""

    kind: str
    payload: Mapping[str, Any] = field(default_factory=dict)


ContentBlock = Union[Heading, Paragraph, Quote, Code]

BLOCK_KINDS = ("heading", "paragraph", "quote", "code")


def parse_block(data: Mapping[str, Any]) -> Union[ContentBlock, UnsupportedBlock]:
    """
    Build a block from its loose dictionary form.

    Accepts ``{"type": "heading", "level": 2, "content": "..."}``, with
    ``text`` as an alias of ``content``. Unknown types come back as an
    UnsupportedBlock so the caller decides what to do with them.
    """
    kind = str(data.get("type", "")).lower()
    text = data.get("content", data.get("text", ""))

    if kind == "heading":
        return Heading(level=int(data.get("level", 1)), text=text)
    if kind == "paragraph":
        return Paragraph(text=text)
    if kind == "quote":
        return Quote(text=text, citation=data.get("citation"))
    if kind == "code":
        return Code(text=text, language=data.get("language") or None)

    return UnsupportedBlock(kind=kind, payload=dict(data))


@dataclass
class PageMetadata:
    """Optional descriptive metadata of an extracted page."""

    author: Optional[str] = None
    site_name: Optional[str] = None
    excerpt: Optional[str] = None


@dataclass
class ExtractedPage:
    """Represents the content outline extracted from a webpage."""

    title: str
    elements: list[ContentBlock] = field(default_factory=list)
    metadata: PageMetadata = field(default_factory=PageMetadata)
    source_url: str = ""

    @property
    def word_count(self) -> int:
        """Calculate approximate word count."""
        return sum(len(block.text.split()) for block in self.elements)

    @property
    def reading_time_minutes(self) -> int:
        """Estimate reading time (average 200 words per minute)."""
        return max(1, self.word_count // 200)
