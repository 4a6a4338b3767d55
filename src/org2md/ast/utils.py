#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/ast/utils.py
"""Tree navigation helpers.

These functions are context-free: they do not know which nodes an export
ignores. Export-aware variants (previous/next element skipping ignored
nodes, headline analyses) live in :mod:`org2md.export.references`.

"""

from __future__ import annotations

from typing import Callable, Collection, Iterator, Optional, Union

from org2md.ast.nodes import SECONDARY_PROPERTIES, Node, secondary_nodes

KindFilter = Union[str, Collection[str], None]


def _kind_matches(node: Node, kinds: KindFilter) -> bool:
    if kinds is None:
        return True
    if isinstance(kinds, str):
        return node.kind == kinds
    return node.kind in kinds


def walk(
    root: Union[Node, list[Node]],
    kinds: KindFilter = None,
    *,
    skip: Optional[Callable[[Node], bool]] = None,
    with_secondary: bool = True,
    include_root: bool = True,
) -> Iterator[Node]:
    """Yield nodes in document order.

    Parameters
    ----------
    root : Node or list of Node
        Where to start; a list is walked as a sequence of roots
    kinds : str or collection of str, optional
        Only yield nodes of these kinds (traversal still descends everywhere)
    skip : callable, optional
        Predicate; a node for which it returns True is neither yielded nor
        descended into
    with_secondary : bool, default True
        Also visit objects held in secondary strings (titles, tags, captions)
    include_root : bool, default True
        Yield the root node itself when it matches

    Yields
    ------
    Node
        Matching nodes, parents before children

    """
    roots = root if isinstance(root, list) else [root]
    stack: list[tuple[Node, bool]] = [(n, include_root) for n in reversed(roots)]
    while stack:
        current, yield_it = stack.pop()
        if skip is not None and skip(current):
            continue
        if yield_it and _kind_matches(current, kinds):
            yield current
        pending: list[Node] = []
        if with_secondary:
            for key in SECONDARY_PROPERTIES:
                pending.extend(secondary_nodes(current, key))
        pending.extend(current.children)
        for child in reversed(pending):
            stack.append((child, True))


def lineage(node: Node, kinds: KindFilter = None, with_self: bool = False) -> Iterator[Node]:
    """Yield the ancestors of ``node``, closest first."""
    current: Optional[Node] = node if with_self else node.parent
    while current is not None:
        if _kind_matches(current, kinds):
            yield current
        current = current.parent


def first_ancestor(node: Node, kinds: KindFilter, with_self: bool = False) -> Optional[Node]:
    """Return the closest ancestor of the given kinds, or None."""
    return next(lineage(node, kinds, with_self=with_self), None)


def root_of(node: Node) -> Node:
    """Return the top of the tree containing ``node``."""
    current = node
    while current.parent is not None:
        current = current.parent
    return current


def parent_element(node: Node) -> Optional[Node]:
    """Return the closest ancestor that is an element."""
    for ancestor in lineage(node):
        if ancestor.is_element:
            return ancestor
    return None


def is_descendant(node: Node, ancestor: Node) -> bool:
    """Return True when ``ancestor`` is ``node`` or one of its ancestors."""
    return any(candidate is ancestor for candidate in lineage(node, with_self=True))


def siblings(node: Node) -> list[Node]:
    """Return the sequence ``node`` belongs to (children or secondary string)."""
    parent = node.parent
    if parent is None:
        return [node]
    for key in SECONDARY_PROPERTIES:
        objs = secondary_nodes(parent, key)
        if any(obj is node for obj in objs):
            return objs
    return parent.children


def text_content(node: Union[Node, list[Node], None]) -> str:
    """Concatenate the raw text of plain-text and value-bearing objects.

    Used for matching (fuzzy links, radio targets), never for output.

    """
    if node is None:
        return ""
    if isinstance(node, list):
        return "".join(text_content(n) for n in node)
    if node.kind == "plain-text":
        return str(node.get("value", ""))
    if node.kind in ("code", "verbatim", "entity", "latex-fragment", "statistics-cookie", "export-snippet"):
        if node.kind == "entity":
            return str(node.get("utf8") or node.get("name", ""))
        return str(node.get("value", ""))
    if node.kind == "line-break":
        return "\n"
    if node.kind == "link" and not node.children:
        body = str(node.get("raw_link", ""))
    else:
        body = "".join(text_content(child) for child in node.children)
    return body + (" " * node.post_blank if node.is_object else "")


def normalize_whitespace(value: str) -> str:
    """Collapse runs of whitespace to single spaces and strip."""
    return " ".join(value.split())


__all__ = [
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
