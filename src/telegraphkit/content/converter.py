"""
HTML-to-content-node converter.

Parses arbitrary markup with BeautifulSoup on the html5lib tree builder, which
builds the same tree a browser would (synthesised ``<html>``/``<body>``, text
left untouched), and rewrites the ``<body>`` subtree into the restricted node tree the API accepts: unsupported tags are mapped to
their closest supported equivalent, only ``href``/``src`` attributes survive,
and ``<script>``/``<style>`` are dropped with their contents.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from telegraphkit.content.nodes import ContentNode, ElementNode, TextNode
from telegraphkit.errors import MarkupParseError

logger = structlog.get_logger(__name__)

SUPPORTED_TAGS: FrozenSet[str] = frozenset(
    {
        "a", "aside", "b", "blockquote", "br", "code", "em", "figcaption", "figure", "h3", "h4", "hr",
        "i", "iframe", "img", "li", "ol", "p", "pre", "s", "strong", "u", "ul", "video",
    }
)

TAG_REMAP: Dict[str, str] = {
    "h1": "h3",
    "h2": "h3",
    "b": "strong",
    "i": "em",
    "div": "p",
    "span": "p",
}

DROPPED_TAGS: FrozenSet[str] = frozenset({"script", "style"})
KEPT_ATTRIBUTES: Tuple[str, ...] = ("href", "src")
FALLBACK_TAG = "p"

META_FIELDS: Dict[str, str] = {
    "author": "author_name",
    "url": "author_url",
    "description": "description",
}


def map_tag(tag: str) -> str:
    """Map any tag name to a supported one."""
    name = tag.lower()
    if name in TAG_REMAP:
        return TAG_REMAP[name]
    if name in SUPPORTED_TAGS:
        return name
    return FALLBACK_TAG


@dataclass(frozen=True)
class ConversionOverrides:
    """Metadata that replaces whatever the document itself declares."""

    title: Optional[str] = None
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ConvertedPage:
    title: str
    author_name: str
    author_url: str
    description: str
    content: Tuple[ContentNode, ...]


class MarkupConverter:
    """Stateless; one instance can serve concurrent callers."""

    def __init__(self, parser: str = "html5lib") -> None:
        self.parser = parser

    def convert(self, markup: str, overrides: Optional[ConversionOverrides] = None) -> ConvertedPage:
        """
        Convert an HTML document into page metadata plus content nodes.

        Args:
            markup: Raw HTML text
            overrides: Metadata taking precedence over the document's own

        Returns:
            ConvertedPage; ``content`` is empty when the body has no content

        Raises:
            MarkupParseError: input is not text or contains no document structure
        """
        soup = self._parse(markup)
        metadata = self._extract_metadata(soup)

        if overrides is not None:
            for key in ("title", "author_name", "author_url", "description"):
                value = getattr(overrides, key)
                if value:
                    metadata[key] = value

        body = soup.find("body")
        content: Tuple[ContentNode, ...] = ()
        if isinstance(body, Tag):
            content = tuple(self._convert_children(body))
        else:
            logger.debug("Markup has no body element")

        return ConvertedPage(
            title=metadata["title"],
            author_name=metadata["author_name"],
            author_url=metadata["author_url"],
            description=metadata["description"],
            content=content,
        )

    def _parse(self, markup: str) -> BeautifulSoup:
        if isinstance(markup, bytes):
            markup = markup.decode("utf-8", errors="replace")
        if not isinstance(markup, str):
            raise MarkupParseError(f"markup must be text, got {type(markup).__name__}")
        if not markup.strip():
            raise MarkupParseError("failed to parse HTML: document is empty")

        soup = BeautifulSoup(markup, self.parser)
        if soup.find(True) is None:
            logger.warning("Markup produced no elements", length=len(markup))
            raise MarkupParseError("failed to parse HTML: no document structure found")
        return soup

    def _extract_metadata(self, soup: BeautifulSoup) -> Dict[str, str]:
        metadata = {"title": "", "author_name": "", "author_url": "", "description": ""}

        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            metadata["title"] = title_tag.get_text()

        seen = set()
        for meta in soup.find_all("meta"):
            name = meta.get("name")
            key = META_FIELDS.get(name) if isinstance(name, str) else None
            if key is None or key in seen:
                continue
            seen.add(key)
            content = meta.get("content")
            metadata[key] = content if isinstance(content, str) else ""

        return metadata

    def _convert_children(self, parent: Tag) -> List[ContentNode]:
        nodes: List[ContentNode] = []
        for child in parent.children:
            if isinstance(child, NavigableString):
                # Comments, doctypes, CDATA and processing instructions
                if isinstance(child, PreformattedString):
                    continue
                text = str(child)
                if text:
                    nodes.append(TextNode(text))
                continue

            if not isinstance(child, Tag):
                continue

            if child.name.lower() in DROPPED_TAGS:
                continue

            attrs: Dict[str, str] = {}
            for key in KEPT_ATTRIBUTES:
                value = child.get(key)
                if isinstance(value, str):
                    attrs[key] = value

            nodes.append(
                ElementNode(
                    tag=map_tag(child.name),
                    attrs=attrs,
                    children=tuple(self._convert_children(child)),
                )
            )
        return nodes


_default_converter = MarkupConverter()


def convert_html(markup: str, overrides: Optional[ConversionOverrides] = None) -> ConvertedPage:
    """Convert markup with the default html5lib-backed converter."""
    return _default_converter.convert(markup, overrides)
