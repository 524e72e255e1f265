"""
Content Extractor - Fetch a webpage and extract its content outline.

Uses httpx for fetching and readability-lxml for main-content detection,
falling back to the raw DOM when readability finds nothing usable. The
outline is an ordered list of headings, paragraphs, quotes and code blocks.
"""

import logging
import re
from typing import Optional, Union
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup, Tag
from readability import Document

from .errors import ExtractionError
from .models import Code, ContentBlock, ExtractedPage, Heading, PageMetadata, Paragraph, Quote


logger = logging.getLogger(__name__)

BLOCK_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "pre", "blockquote"]
HEADING_RE = re.compile(r"^h([1-6])$")
LANGUAGE_RE = re.compile(r"^(?:language|lang)-(.+)$")


class ContentExtractor:
    """Extract a content outline from web URLs."""

    # Common user agents to avoid bot detection
    USER_AGENTS = [
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    ]

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None):
        """Initialize extractor with configurable timeout."""
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
                headers={
                    "User-Agent": self.USER_AGENTS[0],
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                    "Accept-Language": "en-US,en;q=0.9",
                    "Accept-Encoding": "gzip, deflate",
                },
            )
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def extract(self, url: str) -> ExtractedPage:
        """
        Extract the content outline of a URL.

        Args:
            url: The webpage URL to extract from

        Returns:
            ExtractedPage with title, ordered blocks and metadata

        Raises:
            ExtractionError: If the page cannot be fetched
        """
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Content extraction failed for %s: %s", url, e)
            raise ExtractionError(f"Could not fetch {url}: {e}") from e

        return self.extract_html(response.text, url=str(response.url))

    def extract_html(self, html: str, url: str = "") -> ExtractedPage:
        """Extract the content outline of an HTML document."""
        original_soup = BeautifulSoup(html, "lxml")

        metadata = PageMetadata(
            author=self._extract_author(original_soup),
            site_name=self._extract_source_name(original_soup, url),
            excerpt=self._extract_excerpt(original_soup),
        )

        title = ""
        elements: list[ContentBlock] = []
        try:
            doc = Document(html)
            title = doc.short_title() or doc.title()
            summary = BeautifulSoup(doc.summary(html_partial=True), "lxml")
            elements = extract_blocks(summary)
        except Exception as e:
            # readability raises its own Unparseable and lxml errors on odd markup
            logger.warning("Readability failed on %s, using raw DOM: %s", url or "document", e)

        if not elements:
            logger.info("No main content detected, falling back to DOM traversal")
            elements = extract_blocks(original_soup.body or original_soup)

        if not title or title == "[no-title]":
            title_tag = original_soup.find("title")
            title = title_tag.get_text(strip=True) if title_tag else ""

        logger.debug("Extracted %d block(s) from %s", len(elements), url or "document")
        return ExtractedPage(
            title=title or "webpage",
            elements=elements,
            metadata=metadata,
            source_url=url,
        )

    def _extract_author(self, soup: BeautifulSoup) -> Optional[str]:
        """Extract author from meta tags or common patterns."""
        # Try meta tags first
        meta_author = soup.find("meta", attrs={"name": "author"})
        if meta_author and meta_author.get("content"):
            return meta_author["content"]

        # Try Open Graph
        og_author = soup.find("meta", attrs={"property": "article:author"})
        if og_author and og_author.get("content"):
            return og_author["content"]

        # Try schema.org
        author_elem = soup.find(attrs={"itemprop": "author"})
        if author_elem:
            name_elem = author_elem.find(attrs={"itemprop": "name"})
            if name_elem:
                return name_elem.get_text(strip=True)
            return author_elem.get_text(strip=True)

        # Try common class patterns
        for cls in ["author", "byline", "post-author", "entry-author"]:
            elem = soup.find(class_=re.compile(cls, re.I))
            if elem:
                text = elem.get_text(strip=True)
                # Clean up "By Author Name" patterns
                text = re.sub(r"^[Bb]y\s+", "", text)
                if text and len(text) < 100:
                    return text

        return None

    def _extract_excerpt(self, soup: BeautifulSoup) -> Optional[str]:
        """Extract the page description."""
        for attrs in ({"name": "description"}, {"property": "og:description"}):
            meta = soup.find("meta", attrs=attrs)
            if meta and meta.get("content", "").strip():
                return meta["content"].strip()
        return None

    def _extract_source_name(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        """Extract the publication/site name."""
        # Try Open Graph site name
        og_site = soup.find("meta", attrs={"property": "og:site_name"})
        if og_site and og_site.get("content"):
            return og_site["content"]

        # Try title tag - often includes site name
        title_elem = soup.find("title")
        if title_elem:
            title = title_elem.get_text()
            # Look for common separators
            for sep in [" | ", " - ", " — ", " :: ", " » "]:
                if sep in title:
                    parts = title.split(sep)
                    # Site name is usually last
                    return parts[-1].strip()

        if not url:
            return None

        # Fall back to domain name
        domain = re.sub(r"^www\.", "", urlparse(url).netloc)
        return domain.replace(".", " ").title() or None


def extract_blocks(root: Union[BeautifulSoup, Tag]) -> list[ContentBlock]:
    """
    Walk a parsed tree and return its blocks in document order.

    Empty elements are dropped. Elements nested inside an already captured
    pre or blockquote are part of that block and are not emitted again.
    """
    blocks: list[ContentBlock] = []
    for node in root.find_all(BLOCK_TAGS):
        if node.find_parent(["pre", "blockquote"]) is not None:
            continue

        name = node.name.lower()
        if name == "pre":
            text = node.get_text().strip("\n").rstrip()
        else:
            text = " ".join(node.get_text(" ", strip=True).split())
        if not text.strip():
            continue

        heading = HEADING_RE.match(name)
        if heading:
            blocks.append(Heading(level=int(heading.group(1)), text=text))
        elif name == "p":
            blocks.append(Paragraph(text=text))
        elif name == "pre":
            blocks.append(Code(text=text, language=_code_language(node)))
        elif name == "blockquote":
            quote_text, citation = _split_citation(node)
            if quote_text:
                blocks.append(Quote(text=quote_text, citation=citation))

    return blocks


def _code_language(node: Tag) -> Optional[str]:
    candidates = [node]
    code = node.find("code")
    if code is not None:
        candidates.append(code)

    for elem in candidates:
        for cls in elem.get("class", []) or []:
            match = LANGUAGE_RE.match(cls)
            if match:
                return match.group(1)
    return None


def _split_citation(node: Tag) -> tuple[str, Optional[str]]:
    """Separate a blockquote's text from its cite/footer attribution."""
    citation = node.get("cite") or None
    parts = []
    for child in node.children:
        if isinstance(child, Tag) and child.name in ("cite", "footer"):
            attribution = " ".join(child.get_text(" ", strip=True).split())
            citation = attribution.lstrip("-— ").strip() or citation
            continue
        text = child.get_text(" ", strip=True) if isinstance(child, Tag) else str(child).strip()
        if text:
            parts.append(text)
    return " ".join(" ".join(parts).split()), citation


def extract_from_url(url: str) -> ExtractedPage:
    """Convenience function to extract content from a URL."""
    with ContentExtractor() as extractor:
        return extractor.extract(url)
