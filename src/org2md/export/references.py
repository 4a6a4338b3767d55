#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/references.py
"""Reference resolution and whole-document analyses.

Everything here reads the tree through an
:class:`~org2md.export.context.ExportContext`: nodes outside the export
scope are invisible, and results that need a full traversal (headline
numbering, footnote order) are computed once per export and cached on the
context.

Link resolution
---------------
``resolve_fuzzy_link``, ``resolve_id_link`` and ``resolve_coderef`` raise
:class:`~org2md.exceptions.LinkResolutionError` when nothing matches; the
transcoder turns that into a locally rendered broken link. ``resolve_id_link``
may return a plain string (a file name from the ``id_locations`` option)
instead of a node.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from org2md.ast.nodes import Node
from org2md.ast.utils import (
    first_ancestor,
    lineage,
    normalize_whitespace,
    siblings,
    text_content,
    walk,
)
from org2md.constants import DEFAULT_CODEREF_LABEL_FORMAT
from org2md.exceptions import LinkResolutionError
from org2md.export.context import ExportContext

logger = logging.getLogger(__name__)

Destination = Union[Node, str]


# ----------------------------------------------------------------------
# Scope-aware navigation
# ----------------------------------------------------------------------


def walk_exported(
    root: Union[Node, list[Node]],
    kinds: Union[str, Iterable[str], None],
    ctx: ExportContext,
    *,
    with_secondary: bool = True,
    include_root: bool = True,
) -> Iterator[Node]:
    """Walk like :func:`org2md.ast.utils.walk` but skip ignored subtrees."""
    kind_filter = kinds if (kinds is None or isinstance(kinds, str)) else frozenset(kinds)
    return walk(
        root,
        kind_filter,
        skip=ctx.is_ignored,
        with_secondary=with_secondary,
        include_root=include_root,
    )


def get_previous_element(node: Node, ctx: ExportContext) -> Optional[Node]:
    """Return the closest preceding sibling that is not ignored."""
    seq = siblings(node)
    index = next((i for i, sibling in enumerate(seq) if sibling is node), -1)
    for candidate in reversed(seq[:index]):
        if not ctx.is_ignored(candidate):
            return candidate
    return None


def get_next_element(node: Node, ctx: ExportContext) -> Optional[Node]:
    """Return the closest following sibling that is not ignored."""
    seq = siblings(node)
    index = next((i for i, sibling in enumerate(seq) if sibling is node), len(seq))
    for candidate in seq[index + 1 :]:
        if not ctx.is_ignored(candidate):
            return candidate
    return None


def preceding_text(node: Node, ctx: ExportContext) -> str:
    """Return the raw text of the exported sibling just before ``node``."""
    previous = get_previous_element(node, ctx)
    return text_content(previous) if previous is not None else ""


def is_first_sibling(node: Node, ctx: ExportContext) -> bool:
    """Return True when the exported element before ``node`` is not of its kind."""
    previous = get_previous_element(node, ctx)
    return previous is None or previous.kind != node.kind


def get_anchor(node: Node, ctx: ExportContext) -> str:
    """Return the anchor of ``node``: its ``CUSTOM_ID`` when set, else its reference."""
    custom_id = node.get("CUSTOM_ID")
    if isinstance(custom_id, str) and custom_id:
        return custom_id
    return ctx.get_reference(node)


def get_node_property(node: Node, prop: str, inherit: bool = False) -> Any:
    """Return an Org node property (upper-case key), optionally inherited from ancestors."""
    if not inherit:
        return node.get(prop)
    for ancestor in lineage(node, ("headline", "document"), with_self=True):
        value = ancestor.get(prop)
        if value is not None:
            return value
    return None


def _not_nil(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, str) and value.strip().lower() in ("", "nil"):
        return False
    return True


# ----------------------------------------------------------------------
# Headlines
# ----------------------------------------------------------------------


def min_level(ctx: ExportContext) -> int:
    """Return the smallest level among top-level exported headlines (1 if none)."""

    def compute() -> int:
        levels = [
            int(child.get("level", 1))
            for child in ctx.tree.children
            if child.kind == "headline" and not ctx.is_ignored(child)
        ]
        return min(levels) if levels else 1

    return ctx.cached("min_level", compute)


def relative_level(headline: Node, ctx: ExportContext) -> int:
    """Return the headline level relative to the shallowest exported headline."""
    return int(headline.get("level", 1)) - min_level(ctx) + 1


def is_numbered(headline: Node, ctx: ExportContext) -> bool:
    """Return True when the headline gets a section number.

    ``section_numbers`` may be a bool or an int limiting numbering depth;
    an inherited ``UNNUMBERED`` property disables numbering.

    """
    if _not_nil(get_node_property(headline, "UNNUMBERED", inherit=True)):
        return False
    section_numbers = ctx.get("section_numbers", True)
    if isinstance(section_numbers, bool):
        return section_numbers
    if isinstance(section_numbers, int):
        return relative_level(headline, ctx) <= section_numbers
    return _not_nil(section_numbers)


def is_low_level(headline: Node, ctx: ExportContext) -> int:
    """Return how far the headline sits below ``headline_levels`` (0 when it does not)."""
    limit = ctx.get("headline_levels", 3)
    level = relative_level(headline, ctx)
    if isinstance(limit, bool) or not isinstance(limit, int):
        return 0
    return level - limit if level > limit else 0


def headline_numbering(ctx: ExportContext) -> dict[Node, tuple[int, ...]]:
    """Return the section number of every numbered headline, in one pass."""

    def compute() -> dict[Node, tuple[int, ...]]:
        numbering: list[int] = []
        result: dict[Node, tuple[int, ...]] = {}
        for headline in walk_exported(ctx.tree, "headline", ctx, with_secondary=False):
            if headline.get("footnote_section") or not is_numbered(headline, ctx):
                continue
            depth = relative_level(headline, ctx)
            if len(numbering) < depth:
                numbering.extend([0] * (depth - len(numbering)))
            numbering[depth - 1] += 1
            for index in range(depth, len(numbering)):
                numbering[index] = 0
            result[headline] = tuple(numbering[:depth])
        return result

    return ctx.cached("headline_numbering", compute)


def headline_number(headline: Node, ctx: ExportContext) -> Optional[tuple[int, ...]]:
    """Return the section number of ``headline`` or None when unnumbered."""
    return headline_numbering(ctx).get(headline)


def collect_headlines(ctx: ExportContext, n: Optional[int] = None, scope: Optional[Node] = None) -> list[Node]:
    """Collect headlines for a table of contents.

    Parameters
    ----------
    ctx : ExportContext
        Export context
    n : int, optional
        Depth limit; ``headline_levels`` bounds it in any case
    scope : Node, optional
        Restrict to the subtree of this headline, or of the closest
        headline containing this node; the whole document when None

    Returns
    -------
    list of Node
        Headlines in document order, without footnote sections and
        headlines whose inherited ``UNNUMBERED`` is "notoc"

    """
    if scope is None:
        root = ctx.tree
    elif scope.kind == "headline":
        root = scope
    else:
        root = first_ancestor(scope, "headline") or ctx.tree

    limit = ctx.get("headline_levels", 3)
    if isinstance(limit, bool) or not isinstance(limit, int):
        limit = 3
    if isinstance(n, int) and not isinstance(n, bool) and n >= 0:
        depth = n if root.kind == "document" else relative_level(root, ctx) + n
        depth = min(depth, limit)
    else:
        depth = limit

    result = []
    for headline in walk_exported(root.children, "headline", ctx, with_secondary=False):
        if headline.get("footnote_section"):
            continue
        if str(get_node_property(headline, "UNNUMBERED", inherit=True) or "").lower() == "notoc":
            continue
        if relative_level(headline, ctx) <= depth:
            result.append(headline)
    return result


def get_tags(node: Node, ctx: ExportContext, inherited: bool = False) -> list[str]:
    """Return the headline's tags without select and exclude tags."""
    tags: list[str] = []
    headlines = list(lineage(node, "headline", with_self=True)) if inherited else [node]
    for headline in reversed(headlines):
        for tag in headline.get("tags") or []:
            if tag not in tags:
                tags.append(tag)
    hidden = set(ctx.get("select_tags") or ()) | set(ctx.get("exclude_tags") or ())
    return [tag for tag in tags if tag not in hidden]


def make_tag_string(tags: list[str]) -> str:
    """Return ``:a:b:`` for tags, or an empty string."""
    return f":{':'.join(tags)}:" if tags else ""


def get_alt_title(headline: Node, ctx: ExportContext) -> list[Node]:
    """Return the ``ALT_TITLE`` property as objects, else the title."""
    alt = headline.get("ALT_TITLE")
    if isinstance(alt, str) and alt.strip():
        return [Node("plain-text", {"value": alt})]
    if isinstance(alt, list):
        return alt
    return list(headline.get("title") or [])


def headline_raw_title(headline: Node) -> str:
    """Return the headline title as written, for matching."""
    raw = headline.get("raw_value")
    if isinstance(raw, str):
        return raw
    return text_content(headline.get("title") or [])


# ----------------------------------------------------------------------
# Lists and ordinals
# ----------------------------------------------------------------------


def item_number(item: Node) -> int:
    """Return the number of an item among its siblings, honouring ``[@N]`` counters."""
    number = 0
    parent = item.parent
    for sibling in parent.children if parent is not None else [item]:
        if sibling.kind != "item":
            continue
        counter = sibling.get("counter")
        number = int(counter) if counter is not None else number + 1
        if sibling is item:
            return number
    return number


def item_number_path(item: Node) -> tuple[int, ...]:
    """Return the numbers of ``item`` and its enclosing items, outermost first."""
    path = [item_number(ancestor) for ancestor in lineage(item, "item", with_self=True)]
    return tuple(reversed(path))


def get_ordinal(
    element: Node,
    ctx: ExportContext,
    kinds: Optional[Iterable[str]] = None,
    predicate: Optional[Callable[[Node, ExportContext], bool]] = None,
) -> Union[int, tuple[int, ...], None]:
    """Return the ordinal of a link destination.

    A headline returns its section number, an item its number path and a
    footnote its number. A target uses the closest enclosing headline,
    item or table. Any other element returns its 1-based position among
    exported elements of the same kind (or of ``kinds``), counting only
    those satisfying ``predicate`` when given.

    """
    if element.kind in ("target", "radio-target"):
        container = first_ancestor(element, ("footnote-definition", "footnote-reference", "headline", "item", "table"))
        if container is None:
            return None
        element = container

    if element.kind == "headline":
        return headline_number(element, ctx)
    if element.kind == "item":
        return item_number_path(element)
    if element.kind in ("footnote-definition", "footnote-reference"):
        return footnote_number(element, ctx)

    search = frozenset(kinds) if kinds is not None else frozenset({element.kind})
    counter = 0
    for candidate in walk_exported(ctx.tree, search, ctx):
        if candidate is element:
            return counter + 1
        if predicate is None or predicate(candidate, ctx):
            counter += 1
    return None


# ----------------------------------------------------------------------
# Link resolution
# ----------------------------------------------------------------------


def _fuzzy_index(ctx: ExportContext) -> dict[str, Any]:
    def compute() -> dict[str, Any]:
        targets: dict[str, Node] = {}
        names: dict[str, Node] = {}
        headlines: dict[str, Node] = {}
        for node in walk_exported(ctx.tree, None, ctx):
            if node.kind in ("target", "radio-target"):
                key = normalize_whitespace(str(node.get("value", "")))
                targets.setdefault(key, node)
            elif node.kind == "headline":
                headlines.setdefault(normalize_whitespace(headline_raw_title(node)), node)
            if node.is_element and isinstance(node.get("name"), str):
                names.setdefault(normalize_whitespace(node.get("name")), node)
        return {"targets": targets, "names": names, "headlines": headlines}

    return ctx.cached("fuzzy_index", compute)


def resolve_fuzzy_link(link: Node, ctx: ExportContext) -> Node:
    """Resolve a fuzzy link to a target, a named element or a headline.

    A path starting with ``*`` only matches headline titles. Otherwise
    ``<<targets>>`` come first, then elements named with ``#+NAME:``, then
    headline titles. Whitespace is normalized before matching.

    Raises
    ------
    LinkResolutionError
        If nothing matches

    """
    path = str(link.get("path", ""))
    index = _fuzzy_index(ctx)
    if path.startswith("*"):
        match = index["headlines"].get(normalize_whitespace(path[1:]))
    else:
        key = normalize_whitespace(path)
        match = index["targets"].get(key) or index["names"].get(key) or index["headlines"].get(key)
    if match is None:
        raise LinkResolutionError(f"Unable to resolve link: {path}", link_path=path)
    return match


def resolve_id_link(link: Node, ctx: ExportContext) -> Destination:
    """Resolve a ``custom-id`` or ``id`` link.

    Returns a headline, or a file name (str) for an ``id`` listed in the
    ``id_locations`` option.

    Raises
    ------
    LinkResolutionError
        If the identifier is unknown

    """
    path = str(link.get("path", ""))
    for headline in walk_exported(ctx.tree, "headline", ctx, with_secondary=False):
        if headline.get("CUSTOM_ID") == path or headline.get("ID") == path:
            return headline
    locations = ctx.get("id_locations") or {}
    if link.get("type") == "id" and path in locations:
        return str(locations[path])
    raise LinkResolutionError(f"Unable to resolve link: {path}", link_path=path)


def resolve_link_path(path: str, ctx: ExportContext) -> Destination:
    """Resolve a link written as a string (e.g., a ToC ``:target``)."""
    if path.startswith("#"):
        return resolve_id_link(Node("link", {"type": "custom-id", "path": path[1:]}), ctx)
    if path.startswith("id:"):
        return resolve_id_link(Node("link", {"type": "id", "path": path[3:]}), ctx)
    return resolve_fuzzy_link(Node("link", {"type": "fuzzy", "path": path}), ctx)


def resolve_radio_link(link: Node, ctx: ExportContext) -> Optional[Node]:
    """Return the radio target matching the link text, case-insensitively, or None."""
    key = normalize_whitespace(str(link.get("path", ""))).lower()
    for radio in walk_exported(ctx.tree, "radio-target", ctx):
        if normalize_whitespace(text_content(radio.children) or str(radio.get("value", ""))).lower() == key:
            return radio
    return None


def coderef_regexp(label_format: str, label: Optional[str] = None) -> re.Pattern[str]:
    """Return a regexp matching a coderef label at the end of a code line."""
    name = re.escape(label) if label is not None else r"[-\w]+"
    fmt = re.escape(label_format).replace(re.escape("%s"), f"({name})")
    return re.compile(rf"[ \t]*{fmt}[ \t]*$")


def get_loc(element: Node, ctx: ExportContext) -> Optional[int]:
    """Return the number of lines preceding ``element``'s first numbered line."""
    number_lines = element.get("number_lines")
    if not number_lines:
        return None
    loc = 0
    for block in walk_exported(ctx.tree, ("src-block", "example-block"), ctx, with_secondary=False):
        if block is element:
            return loc + int(number_lines[1]) if number_lines[0] == "continued" else int(number_lines[1])
        other = block.get("number_lines")
        if not other:
            continue
        lines = len(str(block.get("value", "")).rstrip("\n").split("\n"))
        if other[0] == "new":
            loc = int(other[1]) + lines
        else:
            loc += int(other[1]) + lines
    return None


def unravel_code(element: Node) -> tuple[str, dict[int, str]]:
    """Split a block's code from its coderef labels.

    Returns
    -------
    tuple
        Code without labels, and line number (1-based) -> label

    """
    label_format = element.get("label_fmt") or DEFAULT_CODEREF_LABEL_FORMAT
    pattern = coderef_regexp(label_format)
    refs: dict[int, str] = {}
    lines = []
    for number, line in enumerate(str(element.get("value", "")).rstrip("\n").split("\n"), start=1):
        match = pattern.search(line)
        if match:
            refs[number] = match.group(1)
            line = line[: match.start()]
        lines.append(line)
    return "\n".join(lines), refs


def format_code(element: Node, ctx: ExportContext) -> str:
    """Return a block's code with line numbers and retained labels applied.

    The result ends with a newline, or is empty for an empty block.

    """
    code, refs = unravel_code(element)
    if not code.strip():
        return ""
    lines = code.split("\n")
    start = get_loc(element, ctx)
    keep_labels = element.get("retain_labels", True)
    width = len(str(len(lines) + start)) if start is not None else 0
    output = []
    for number, line in enumerate(lines, start=1):
        prefix = f"{number + start:>{width}}  " if start is not None else ""
        suffix = f" ({refs[number]})" if keep_labels and number in refs else ""
        output.append((prefix + line + suffix).rstrip() if (prefix or suffix) else line)
    return "\n".join(output) + "\n"


def resolve_coderef(label: str, ctx: ExportContext) -> Union[int, str]:
    """Return the line number (or the label itself) a coderef points to.

    Raises
    ------
    LinkResolutionError
        If no block defines the label

    """
    for block in walk_exported(ctx.tree, ("src-block", "example-block"), ctx, with_secondary=False):
        code, refs = unravel_code(block)
        for number, found in refs.items():
            if found != label:
                continue
            if block.get("use_labels", True):
                return label
            return number + (get_loc(block, ctx) or 0)
    raise LinkResolutionError(f"Unable to resolve code reference: {label}", link_path=label)


def get_coderef_format(path: str, description: Optional[str]) -> str:
    """Return a ``%s`` format for a coderef link's text."""
    if not description:
        return "%s"
    return description.replace("%", "%%").replace(path, "%s")


def is_inline_image(link: Node, extensions: Iterable[str], types: Iterable[str]) -> bool:
    """Return True when a link points to an image that can be inlined.

    Only links without a description qualify.

    """
    if link.children:
        return False
    if link.get("type") not in tuple(types):
        return False
    path = str(link.get("path", "")).lower()
    return any(path.endswith("." + ext.lower()) for ext in extensions)


def get_caption(element: Optional[Node]) -> list[Node]:
    """Return the caption objects of an element (empty when none)."""
    if element is None:
        return []
    return list(element.get("caption") or [])


# ----------------------------------------------------------------------
# Footnotes
# ----------------------------------------------------------------------


@dataclass
class FootnoteEntry:
    """One footnote in first-reference order.

    Parameters
    ----------
    number : int
        Footnote number
    label : str or None
        Label; None for an anonymous inline footnote
    first_reference : Node
        Reference that introduced the footnote
    contents : list of Node
        Definition elements (standard) or objects (inline)

    """

    number: int
    label: Optional[str]
    first_reference: Node
    contents: list[Node]


def _definition_index(ctx: ExportContext) -> dict[str, Node]:
    def compute() -> dict[str, Node]:
        index: dict[str, Node] = {}
        for node in walk(ctx.tree, ("footnote-definition", "footnote-reference")):
            label = node.get("label")
            if not label:
                continue
            if node.kind == "footnote-definition" or (node.get("type") == "inline" and node.children):
                index.setdefault(label, node)
        return index

    return ctx.cached("footnote_definitions", compute)


def get_footnote_definition(reference: Node, ctx: ExportContext) -> list[Node]:
    """Return the definition contents for a reference.

    Inline footnotes carry their own definition; standard ones are looked
    up by label across the whole document.

    """
    if reference.get("type") == "inline" and reference.children:
        return list(reference.children)
    label = reference.get("label")
    definition = _definition_index(ctx).get(label) if label else None
    if definition is None:
        logger.warning(f"Definition not found for footnote {label}")
        return []
    return list(definition.children)


def _footnote_key(reference: Node) -> Any:
    return reference.get("label") or reference


def _skip_for_footnotes(ctx: ExportContext) -> Callable[[Node], bool]:
    return lambda node: ctx.is_ignored(node) or node.kind == "footnote-definition"


def _footnote_order(ctx: ExportContext) -> dict[Any, FootnoteEntry]:
    def compute() -> dict[Any, FootnoteEntry]:
        entries: dict[Any, FootnoteEntry] = {}
        skip = _skip_for_footnotes(ctx)

        def visit(data: Union[Node, list[Node]]) -> None:
            for reference in walk(data, "footnote-reference", skip=skip):
                key = _footnote_key(reference)
                if key in entries:
                    continue
                contents = get_footnote_definition(reference, ctx)
                entries[key] = FootnoteEntry(len(entries) + 1, reference.get("label"), reference, contents)
                if reference.get("type") != "inline":
                    visit(contents)

        visit(ctx.tree)
        return entries

    return ctx.cached("footnote_order", compute)


def collect_footnote_definitions(ctx: ExportContext) -> list[FootnoteEntry]:
    """Return every referenced footnote in first-reference order.

    A footnote referenced from inside another definition is numbered right
    after the footnote containing it.

    """
    return list(_footnote_order(ctx).values())


def footnote_number(reference: Node, ctx: ExportContext) -> int:
    """Return the number of the footnote a reference (or definition) points to."""
    order = _footnote_order(ctx)
    key = _footnote_key(reference)
    entry = order.get(key)
    if entry is None:
        entry = FootnoteEntry(len(order) + 1, reference.get("label"), reference, [])
        order[key] = entry
    return entry.number


def is_first_reference(reference: Node, ctx: ExportContext) -> bool:
    """Return True when ``reference`` is the first one to its footnote."""
    footnote_number(reference, ctx)
    return _footnote_order(ctx)[_footnote_key(reference)].first_reference is reference


__all__ = [
    "Destination",
    "FootnoteEntry",
    "walk_exported",
    "get_previous_element",
    "get_next_element",
    "is_first_sibling",
    "preceding_text",
    "get_anchor",
    "get_node_property",
    "min_level",
    "relative_level",
    "is_numbered",
    "is_low_level",
    "headline_numbering",
    "headline_number",
    "collect_headlines",
    "get_tags",
    "make_tag_string",
    "get_alt_title",
    "headline_raw_title",
    "item_number",
    "item_number_path",
    "get_ordinal",
    "resolve_fuzzy_link",
    "resolve_id_link",
    "resolve_link_path",
    "resolve_radio_link",
    "coderef_regexp",
    "get_loc",
    "unravel_code",
    "format_code",
    "resolve_coderef",
    "get_coderef_format",
    "is_inline_image",
    "get_caption",
    "collect_footnote_definitions",
    "get_footnote_definition",
    "footnote_number",
    "is_first_reference",
]
