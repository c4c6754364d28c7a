"""
Fluent helper for assembling page content by hand.
"""

from __future__ import annotations

from typing import List, Tuple

from telegraphkit.content.nodes import ContentNode, ElementNode, TextNode, node_text


class ContentBuilder:
    """Accumulates top-level content nodes; every ``add_*`` returns ``self``."""

    def __init__(self) -> None:
        self._nodes: List[ContentNode] = []

    def _add(self, node: ContentNode) -> ContentBuilder:
        self._nodes.append(node)
        return self

    def add_paragraph(self, text: str) -> ContentBuilder:
        return self._add(ElementNode("p", children=(TextNode(text),)))

    def add_heading(self, text: str, level: int = 3) -> ContentBuilder:
        """Only h3 and h4 exist; any level other than 4 yields h3."""
        tag = "h4" if level == 4 else "h3"
        return self._add(ElementNode(tag, children=(TextNode(text),)))

    def add_link(self, text: str, url: str) -> ContentBuilder:
        link = ElementNode("a", attrs={"href": url}, children=(TextNode(text),))
        return self._add(ElementNode("p", children=(link,)))

    def add_image(self, src: str) -> ContentBuilder:
        return self._add(ElementNode("img", attrs={"src": src}))

    def add_blockquote(self, text: str) -> ContentBuilder:
        return self._add(ElementNode("blockquote", children=(TextNode(text),)))

    def add_code_block(self, code: str) -> ContentBuilder:
        return self._add(ElementNode("pre", children=(TextNode(code),)))

    def add_line_break(self) -> ContentBuilder:
        return self._add(ElementNode("br"))

    def build(self) -> Tuple[ContentNode, ...]:
        return tuple(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __str__(self) -> str:
        return "".join(node_text(node) for node in self._nodes)
