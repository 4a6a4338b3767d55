#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/ast/nodes.py
"""Document tree nodes for Org export.

A document is a tree of :class:`Node` values. Every node carries a kind
tag drawn from a closed set, a mapping of kind-specific properties and an
ordered list of children. Nodes keep a non-owning back-reference to their
parent for navigation.

Node Kinds
----------
Elements are block-level:
    - document, section, headline, paragraph, plain-list, item
    - src-block, example-block, export-block, fixed-width
    - quote-block, center-block, verse-block, special-block
    - drawer, dynamic-block, property-drawer, node-property
    - keyword, table, table-row, horizontal-rule, latex-environment
    - footnote-definition, planning, clock, comment, comment-block

Objects are inline:
    - plain-text, bold, italic, underline, strike-through
    - code, verbatim, inline-src-block, link, footnote-reference
    - latex-fragment, line-break, target, radio-target, timestamp
    - entity, export-snippet, statistics-cookie, subscript, superscript
    - table-cell

Node identity is what caches key on: nodes compare and hash by identity,
never by value.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Literal, Optional, get_args

NodeKind = Literal[
    # elements
    "document",
    "section",
    "headline",
    "paragraph",
    "plain-list",
    "item",
    "src-block",
    "example-block",
    "export-block",
    "fixed-width",
    "quote-block",
    "center-block",
    "verse-block",
    "special-block",
    "drawer",
    "dynamic-block",
    "property-drawer",
    "node-property",
    "keyword",
    "table",
    "table-row",
    "horizontal-rule",
    "latex-environment",
    "footnote-definition",
    "planning",
    "clock",
    "comment",
    "comment-block",
    # objects
    "plain-text",
    "bold",
    "italic",
    "underline",
    "strike-through",
    "code",
    "verbatim",
    "inline-src-block",
    "link",
    "footnote-reference",
    "latex-fragment",
    "line-break",
    "target",
    "radio-target",
    "timestamp",
    "entity",
    "export-snippet",
    "statistics-cookie",
    "subscript",
    "superscript",
    "table-cell",
]

ALL_KINDS: frozenset[str] = frozenset(get_args(NodeKind))

OBJECT_KINDS: frozenset[str] = frozenset(
    {
        "plain-text",
        "bold",
        "italic",
        "underline",
        "strike-through",
        "code",
        "verbatim",
        "inline-src-block",
        "link",
        "footnote-reference",
        "latex-fragment",
        "line-break",
        "target",
        "radio-target",
        "timestamp",
        "entity",
        "export-snippet",
        "statistics-cookie",
        "subscript",
        "superscript",
        "table-cell",
    }
)

ELEMENT_KINDS: frozenset[str] = ALL_KINDS - OBJECT_KINDS

# Elements that hold other elements
GREATER_ELEMENTS: frozenset[str] = frozenset(
    {
        "document",
        "section",
        "headline",
        "plain-list",
        "item",
        "quote-block",
        "center-block",
        "special-block",
        "drawer",
        "dynamic-block",
        "property-drawer",
        "table",
        "footnote-definition",
    }
)

# Kinds whose content lives in a ``value`` property rather than in children
LEAF_KINDS: frozenset[str] = frozenset(
    {
        "src-block",
        "example-block",
        "export-block",
        "fixed-width",
        "keyword",
        "node-property",
        "horizontal-rule",
        "latex-environment",
        "planning",
        "clock",
        "comment",
        "comment-block",
        "plain-text",
        "code",
        "verbatim",
        "inline-src-block",
        "latex-fragment",
        "line-break",
        "target",
        "timestamp",
        "entity",
        "export-snippet",
        "statistics-cookie",
    }
)

# Properties holding secondary strings (lists of objects owned by the node)
SECONDARY_PROPERTIES: tuple[str, ...] = ("title", "tag", "caption")


@dataclass(eq=False)
class Node:
    """A single element or object of a parsed Org document.

    Parameters
    ----------
    kind : NodeKind
        Kind tag, one of the closed set in :data:`ALL_KINDS`
    properties : dict, default = empty dict
        Kind-specific properties (strings, numbers, symbols or nested nodes)
    children : list of Node, default = empty list
        Ordered child nodes; empty for leaf kinds
    parent : Node or None, default = None
        Back-reference maintained by the tree; navigation only

    Raises
    ------
    ValueError
        If ``kind`` is not a known node kind

    Examples
    --------
    >>> para = Node("paragraph", children=[Node("plain-text", {"value": "Hello"})])
    >>> para.children[0].parent is para
    True

    """

    kind: NodeKind
    properties: dict[str, Any] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    parent: Optional[Node] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate the kind and adopt children and secondary strings."""
        if self.kind not in ALL_KINDS:
            raise ValueError(f"Unknown node kind: {self.kind!r}")
        for child in self.children:
            child.parent = self
        for key in SECONDARY_PROPERTIES:
            for obj in _secondary_nodes(self.properties.get(key)):
                obj.parent = self

    def __repr__(self) -> str:
        """Compact representation without the parent link."""
        if self.kind == "plain-text":
            return f"Node(plain-text {self.properties.get('value', '')!r})"
        return f"Node({self.kind}, children={len(self.children)})"

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @property
    def is_object(self) -> bool:
        """Return True for inline kinds."""
        return self.kind in OBJECT_KINDS

    @property
    def is_element(self) -> bool:
        """Return True for block-level kinds."""
        return self.kind in ELEMENT_KINDS

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return a property value or ``default``."""
        return self.properties.get(key, default)

    @property
    def value(self) -> Any:
        """Shortcut for the ``value`` property."""
        return self.properties.get("value")

    @property
    def post_blank(self) -> int:
        """Blank lines (elements) or spaces (objects) following this node."""
        return int(self.properties.get("post_blank", 0) or 0)

    def set_property(self, key: str, value: Any) -> None:
        """Set a property, adopting nodes placed in a secondary string."""
        self.properties[key] = value
        if key in SECONDARY_PROPERTIES:
            for obj in _secondary_nodes(value):
                obj.parent = self

    # ------------------------------------------------------------------
    # Children (narrow mutation API used by filters)
    # ------------------------------------------------------------------

    def append_child(self, child: Node) -> Node:
        """Append ``child`` and make this node its parent."""
        child.parent = self
        self.children.append(child)
        return child

    def insert_child(self, index: int, child: Node) -> Node:
        """Insert ``child`` at ``index`` and make this node its parent."""
        child.parent = self
        self.children.insert(index, child)
        return child

    def remove_child(self, child: Node) -> None:
        """Detach ``child`` from this node.

        Raises
        ------
        ValueError
            If ``child`` is not a child of this node

        """
        for i, existing in enumerate(self.children):
            if existing is child:
                del self.children[i]
                child.parent = None
                return
        raise ValueError(f"{child!r} is not a child of {self!r}")

    def replace_child(self, old: Node, new: Node) -> None:
        """Replace ``old`` by ``new`` at the same position."""
        for i, existing in enumerate(self.children):
            if existing is old:
                self.children[i] = new
                new.parent = self
                old.parent = None
                return
        raise ValueError(f"{old!r} is not a child of {self!r}")

    def index_in_parent(self) -> int:
        """Return the position of this node among its parent's children, or -1."""
        if self.parent is None:
            return -1
        for i, sibling in enumerate(self.parent.children):
            if sibling is self:
                return i
        return -1

    def iter_descendants(self) -> Iterator[Node]:
        """Yield every descendant in document order (children only, no secondary strings)."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()


def _secondary_nodes(value: Any) -> list[Node]:
    if isinstance(value, Node):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, Node)]
    return []


def secondary_nodes(node: Node, key: str) -> list[Node]:
    """Return the objects stored in a secondary string property of ``node``."""
    return _secondary_nodes(node.properties.get(key))


__all__ = [
    "Node",
    "NodeKind",
    "ALL_KINDS",
    "ELEMENT_KINDS",
    "OBJECT_KINDS",
    "GREATER_ELEMENTS",
    "LEAF_KINDS",
    "SECONDARY_PROPERTIES",
    "secondary_nodes",
]
