"""
Content node tree exchanged with the page authoring methods.

A node is either a ``TextNode`` (a run of text) or an ``ElementNode`` (a tag
with attributes and children). On the wire a text node is a bare JSON string
and an element is ``{"tag": ..., "attrs": {...}, "children": [...]}`` with
empty ``attrs`` / ``children`` left out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Tuple, Union


@dataclass(slots=True, frozen=True)
class TextNode:
    """Leaf node carrying text verbatim."""

    text: str


@dataclass(slots=True, frozen=True)
class ElementNode:
    """Element node; never carries text of its own."""

    tag: str
    attrs: Mapping[str, str] = field(default_factory=dict)
    children: Tuple["ContentNode", ...] = ()

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("element node requires a tag")
        object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))
        object.__setattr__(self, "children", tuple(self.children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElementNode):
            return NotImplemented
        return self.tag == other.tag and dict(self.attrs) == dict(other.attrs) and self.children == other.children

    def __hash__(self) -> int:
        return hash((self.tag, frozenset(self.attrs.items()), self.children))


ContentNode = Union[TextNode, ElementNode]


def node_to_wire(node: ContentNode) -> Union[str, dict]:
    if isinstance(node, TextNode):
        return node.text
    wire: dict = {"tag": node.tag}
    if node.attrs:
        wire["attrs"] = dict(node.attrs)
    if node.children:
        wire["children"] = [node_to_wire(child) for child in node.children]
    return wire


def nodes_to_wire(nodes: Iterable[ContentNode]) -> List[Union[str, dict]]:
    return [node_to_wire(node) for node in nodes]


def node_from_wire(value: Any) -> ContentNode:
    """Decode one wire node. Raises ValueError on anything malformed."""
    if isinstance(value, (TextNode, ElementNode)):
        return value
    if isinstance(value, str):
        return TextNode(value)
    if not isinstance(value, Mapping):
        raise ValueError(f"content node must be a string or an object, got {type(value).__name__}")

    tag = value.get("tag")
    if not isinstance(tag, str) or not tag:
        raise ValueError("element node requires a non-empty 'tag'")

    attrs = value.get("attrs") or {}
    if not isinstance(attrs, Mapping) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in attrs.items()
    ):
        raise ValueError(f"'attrs' of <{tag}> must map strings to strings")

    children = value.get("children") or []
    if not isinstance(children, list):
        raise ValueError(f"'children' of <{tag}> must be a list")

    return ElementNode(tag=tag, attrs=attrs, children=tuple(node_from_wire(child) for child in children))


def nodes_from_wire(value: Any) -> Tuple[ContentNode, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise ValueError("content must be a list of nodes")
    return tuple(node_from_wire(item) for item in value)


def node_text(node: ContentNode) -> str:
    """Concatenated text of a node and all its descendants."""
    if isinstance(node, TextNode):
        return node.text
    return "".join(node_text(child) for child in node.children)
