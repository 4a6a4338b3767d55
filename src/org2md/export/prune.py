#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/prune.py
"""Export scope.

Computes which nodes an export skips. Only the roots of skipped subtrees
are recorded; traversals treat everything below them as skipped too.

"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from org2md.ast.nodes import Node
from org2md.ast.utils import lineage, walk
from org2md.constants import ARCHIVE_TAG

logger = logging.getLogger(__name__)

_ALWAYS_SKIPPED = frozenset({"comment", "comment-block", "footnote-definition"})


def _inherited_tags(headline: Node) -> set[str]:
    tags: set[str] = set()
    for ancestor in lineage(headline, "headline", with_self=True):
        tags.update(ancestor.get("tags") or ())
    return tags


def selected_trees(tree: Node, select_tags: tuple[str, ...]) -> set[Node]:
    """Return headlines kept by select tags, or an empty set when none is used.

    A headline carrying a select tag keeps itself, its ancestors and all
    headlines below it.

    """
    if not select_tags:
        return set()
    selected: set[Node] = set()
    for headline in walk(tree, "headline", with_secondary=False):
        if headline in selected:
            continue
        if any(tag in select_tags for tag in headline.get("tags") or ()):
            selected.update(lineage(headline, "headline"))
            selected.update(walk(headline, "headline", with_secondary=False))
    return selected


def _match_drawer(name: str, with_drawers: Any) -> bool:
    """Return True when a drawer named ``name`` is exported."""
    if with_drawers is True:
        return True
    if not with_drawers:
        return False
    names = [str(item) for item in with_drawers] if isinstance(with_drawers, (list, tuple)) else [str(with_drawers)]
    if names and names[0] == "not":
        return name.upper() not in {n.upper() for n in names[1:]}
    return name.upper() in {n.upper() for n in names}


def _skip_headline(headline: Node, options: Mapping[str, Any], selected: set[Node]) -> bool:
    tags = _inherited_tags(headline)
    exclude_tags = tuple(options.get("exclude_tags") or ())
    if any(tag in tags for tag in exclude_tags):
        return True
    if selected and headline not in selected:
        return True
    if headline.get("commented"):
        return True
    if not options.get("with_archived_trees") and ARCHIVE_TAG in (headline.get("tags") or ()):
        return True
    todo = headline.get("todo_keyword")
    if todo:
        with_tasks = options.get("with_tasks", True)
        if not with_tasks:
            return True
        if with_tasks in ("todo", "done") and headline.get("todo_type") != with_tasks:
            return True
        if isinstance(with_tasks, (list, tuple)) and todo not in with_tasks:
            return True
    return False


def _skip_timestamp(timestamp: Node, with_timestamps: Any) -> bool:
    if with_timestamps is True:
        return False
    if not with_timestamps:
        return True
    kind = str(timestamp.get("type", "active"))
    if with_timestamps == "active":
        return kind not in ("active", "active-range")
    if with_timestamps == "inactive":
        return kind not in ("inactive", "inactive-range")
    return False


def should_skip(node: Node, options: Mapping[str, Any], selected: set[Node]) -> bool:
    """Return True when ``node`` (and its subtree) is outside the export scope."""
    kind = node.kind
    if kind in _ALWAYS_SKIPPED:
        return True
    if kind == "headline":
        return _skip_headline(node, options, selected)
    if kind == "planning":
        return not options.get("with_planning")
    if kind == "clock":
        return not options.get("with_clocks")
    if kind == "property-drawer":
        return not options.get("with_properties")
    if kind == "node-property":
        wanted = options.get("with_properties")
        if isinstance(wanted, (list, tuple)):
            return str(node.get("key", "")).upper() not in {str(w).upper() for w in wanted}
        return not wanted
    if kind == "drawer":
        return not _match_drawer(str(node.get("drawer_name", "")), options.get("with_drawers", True))
    if kind == "fixed-width":
        return not options.get("with_fixed_width", True)
    if kind == "table":
        return not options.get("with_tables", True)
    if kind == "timestamp":
        return _skip_timestamp(node, options.get("with_timestamps", True))
    if kind == "statistics-cookie":
        return not options.get("with_statistics_cookies", True)
    if kind == "footnote-reference":
        return not options.get("with_footnotes", True)
    return False


def compute_ignored(tree: Node, options: Mapping[str, Any]) -> set[Node]:
    """Return the roots of every subtree the export skips.

    Parameters
    ----------
    tree : Node
        Document root
    options : mapping
        Resolved export options

    Returns
    -------
    set of Node
        Skipped subtree roots; with ``with_archived_trees`` set to
        "headline", the contents of archived headlines are included

    """
    selected = selected_trees(tree, tuple(options.get("select_tags") or ()))
    ignored: set[Node] = set()
    archived_mode = options.get("with_archived_trees")

    def skip(node: Node) -> bool:
        if node is tree:
            return False
        if should_skip(node, options, selected):
            ignored.add(node)
            return True
        return False

    for node in walk(tree, "headline", skip=skip):
        if archived_mode == "headline" and ARCHIVE_TAG in (node.get("tags") or ()):
            ignored.update(node.children)

    logger.debug(f"Export scope: {len(ignored)} subtree(s) ignored")
    return ignored


__all__ = ["compute_ignored", "selected_trees", "should_skip"]
