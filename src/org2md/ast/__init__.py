#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/ast/__init__.py
"""Document tree for Org export.

The tree is a set of :class:`~org2md.ast.nodes.Node` values tagged with a
kind from a closed set. Parsers produce it, filters may rewrite it through
the narrow mutation API, and backends read it.

"""

from org2md.ast import builder
from org2md.ast.nodes import (
    ALL_KINDS,
    ELEMENT_KINDS,
    GREATER_ELEMENTS,
    LEAF_KINDS,
    OBJECT_KINDS,
    SECONDARY_PROPERTIES,
    Node,
    NodeKind,
    secondary_nodes,
)
from org2md.ast.utils import (
    first_ancestor,
    is_descendant,
    lineage,
    normalize_whitespace,
    parent_element,
    root_of,
    siblings,
    text_content,
    walk,
)

__all__ = [
    "builder",
    "Node",
    "NodeKind",
    "ALL_KINDS",
    "ELEMENT_KINDS",
    "OBJECT_KINDS",
    "GREATER_ELEMENTS",
    "LEAF_KINDS",
    "SECONDARY_PROPERTIES",
    "secondary_nodes",
    "walk",
    "lineage",
    "first_ancestor",
    "root_of",
    "parent_element",
    "is_descendant",
    "siblings",
    "text_content",
    "normalize_whitespace",
]
