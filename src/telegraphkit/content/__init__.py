"""
Page content: the node tree, its wire codec, the HTML converter and a builder.
"""

from .builder import ContentBuilder
from .converter import (
    SUPPORTED_TAGS,
    ConversionOverrides,
    ConvertedPage,
    MarkupConverter,
    convert_html,
    map_tag,
)
from .nodes import (
    ContentNode,
    ElementNode,
    TextNode,
    node_from_wire,
    node_text,
    node_to_wire,
    nodes_from_wire,
    nodes_to_wire,
)

__all__ = [
    "SUPPORTED_TAGS",
    "ContentBuilder",
    "ContentNode",
    "ConversionOverrides",
    "ConvertedPage",
    "ElementNode",
    "MarkupConverter",
    "TextNode",
    "convert_html",
    "map_tag",
    "node_from_wire",
    "node_text",
    "node_to_wire",
    "nodes_from_wire",
    "nodes_to_wire",
]
