#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/ast/builder.py
"""Builder helpers for constructing document trees.

The parser and the test-suite build trees through these helpers so that
property names stay consistent. Every helper accepts plain ``str`` values
wherever child objects are expected and wraps them as ``plain-text`` nodes.

Examples
--------
    >>> from org2md.ast import builder as b
    >>> doc = b.document(
    ...     b.headline("Intro", b.section(b.paragraph("Hello ", b.bold("world")))),
    ... )
    >>> doc.children[0].get("level")
    1

"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from org2md.ast.nodes import Node

Child = Union[Node, str]


def _objects(items: Iterable[Child]) -> list[Node]:
    """Wrap strings as plain-text nodes."""
    return [text(item) if isinstance(item, str) else item for item in items]


def node(kind: str, *children: Child, **properties: Any) -> Node:
    """Create a node of any kind.

    Parameters
    ----------
    kind : str
        Node kind
    *children : Node or str
        Children; strings become plain-text nodes
    **properties
        Node properties

    Returns
    -------
    Node
        The new node

    """
    return Node(kind, dict(properties), _objects(children))


# ----------------------------------------------------------------------
# Objects
# ----------------------------------------------------------------------


def text(value: str, post_blank: int = 0) -> Node:
    """Create a plain-text node."""
    props: dict[str, Any] = {"value": value}
    if post_blank:
        props["post_blank"] = post_blank
    return Node("plain-text", props)


def bold(*children: Child) -> Node:
    """Create a bold object."""
    return node("bold", *children)


def italic(*children: Child) -> Node:
    """Create an italic object."""
    return node("italic", *children)


def underline(*children: Child) -> Node:
    """Create an underline object."""
    return node("underline", *children)


def strike_through(*children: Child) -> Node:
    """Create a strike-through object."""
    return node("strike-through", *children)


def code(value: str) -> Node:
    """Create a code object (``~code~``)."""
    return Node("code", {"value": value})


def verbatim(value: str) -> Node:
    """Create a verbatim object (``=verbatim=``)."""
    return Node("verbatim", {"value": value})


def inline_src_block(value: str, language: str = "") -> Node:
    """Create an inline source block object."""
    return Node("inline-src-block", {"value": value, "language": language})


def link(path: str, *description: Child, type: str = "fuzzy", raw_link: Optional[str] = None, **props: Any) -> Node:
    """Create a link object.

    Parameters
    ----------
    path : str
        Link path without the type prefix
    *description : Node or str
        Description objects; empty for a bare link
    type : str, default "fuzzy"
        Link type ("fuzzy", "custom-id", "id", "file", "http", "radio", ...)
    raw_link : str, optional
        Link as written; derived from type and path when omitted

    """
    if raw_link is None:
        if type == "fuzzy" or type == "radio":
            raw_link = path
        elif type == "custom-id":
            raw_link = f"#{path}"
        else:
            raw_link = f"{type}:{path}"
    return node("link", *description, type=type, path=path, raw_link=raw_link, **props)


def footnote_reference(label: Optional[str], *definition: Child) -> Node:
    """Create a footnote reference.

    A reference with ``definition`` objects is an inline footnote
    (``[fn:label:text]`` or ``[fn::text]``).

    """
    ref_type = "inline" if definition else "standard"
    return node("footnote-reference", *definition, label=label, type=ref_type)


def latex_fragment(value: str) -> Node:
    """Create a LaTeX fragment object (value includes its delimiters)."""
    return Node("latex-fragment", {"value": value})


def line_break() -> Node:
    """Create a forced line break."""
    return Node("line-break")


def target(value: str) -> Node:
    """Create a ``<<target>>`` object."""
    return Node("target", {"value": value})


def radio_target(*children: Child) -> Node:
    """Create a ``<<<radio target>>>`` object."""
    return node("radio-target", *children, value="".join(c for c in children if isinstance(c, str)))


def timestamp(value: str, type: str = "active") -> Node:
    """Create a timestamp object."""
    return Node("timestamp", {"value": value, "type": type})


def entity(name: str, html: str, utf8: str = "", use_brackets: bool = False) -> Node:
    """Create an entity object (``\\alpha``)."""
    return Node("entity", {"name": name, "html": html, "utf8": utf8, "use_brackets": use_brackets})


def export_snippet(backend: str, value: str) -> Node:
    """Create an ``@@backend:value@@`` object."""
    return Node("export-snippet", {"backend": backend, "value": value})


def statistics_cookie(value: str) -> Node:
    """Create a statistics cookie (``[1/3]`` or ``[33%]``)."""
    return Node("statistics-cookie", {"value": value})


def subscript(*children: Child, use_brackets: bool = True) -> Node:
    """Create a subscript object."""
    return node("subscript", *children, use_brackets=use_brackets)


def superscript(*children: Child, use_brackets: bool = True) -> Node:
    """Create a superscript object."""
    return node("superscript", *children, use_brackets=use_brackets)


def table_cell(*children: Child) -> Node:
    """Create a table cell."""
    return node("table-cell", *children)


# ----------------------------------------------------------------------
# Elements
# ----------------------------------------------------------------------


def document(*children: Node, **properties: Any) -> Node:
    """Create the root document node."""
    return Node("document", dict(properties), list(children))


def section(*children: Node) -> Node:
    """Create a section (the contents of a headline before its sub-headlines)."""
    return Node("section", {}, list(children))


def headline(
    title: Union[Child, list[Child]],
    *children: Node,
    level: int = 1,
    todo: Optional[str] = None,
    todo_type: Optional[str] = None,
    priority: Optional[str] = None,
    tags: Iterable[str] = (),
    **properties: Any,
) -> Node:
    """Create a headline.

    Parameters
    ----------
    title : str, Node or list
        Title objects
    *children : Node
        A leading section followed by sub-headlines
    level : int, default 1
        Number of stars
    todo : str, optional
        TODO keyword
    todo_type : {"todo", "done"}, optional
        Keyword class; derived from the keyword when omitted
    priority : str, optional
        Priority cookie letter
    tags : iterable of str
        Local tags
    **properties
        Further properties; upper-case keys are Org node properties
        (``CUSTOM_ID``, ``ID``, ``UNNUMBERED``, ...)

    """
    title_items = title if isinstance(title, list) else [title]
    if todo and todo_type is None:
        todo_type = "done" if todo == "DONE" else "todo"
    props: dict[str, Any] = {
        "title": _objects(title_items),
        "level": level,
        "todo_keyword": todo,
        "todo_type": todo_type,
        "priority": priority,
        "tags": list(tags),
    }
    props.update(properties)
    return Node("headline", props, list(children))


def paragraph(*children: Child, **properties: Any) -> Node:
    """Create a paragraph."""
    return node("paragraph", *children, **properties)


def plain_list(*items: Node, type: str = "unordered") -> Node:
    """Create a plain list of ``type`` "unordered", "ordered" or "descriptive"."""
    return Node("plain-list", {"type": type}, list(items))


def item(
    *children: Node,
    checkbox: Optional[str] = None,
    tag: Optional[list[Child]] = None,
    counter: Optional[int] = None,
    bullet: str = "- ",
    post_blank: int = 0,
) -> Node:
    """Create a list item.

    Parameters
    ----------
    *children : Node
        Item contents (paragraphs, sub-lists, ...)
    checkbox : {"on", "off", "trans"}, optional
        Checkbox state
    tag : list, optional
        Description-list tag objects
    counter : int, optional
        ``[@N]`` counter
    bullet : str, default "- "
        Bullet as written
    post_blank : int, default 0
        Blank lines after the item

    """
    props: dict[str, Any] = {
        "checkbox": checkbox,
        "counter": counter,
        "bullet": bullet,
        "post_blank": post_blank,
    }
    if tag is not None:
        props["tag"] = _objects(tag)
    return Node("item", props, list(children))


def src_block(value: str, language: str = "", **properties: Any) -> Node:
    """Create a source block."""
    return Node("src-block", {"value": value, "language": language, **properties})


def example_block(value: str, **properties: Any) -> Node:
    """Create an example block."""
    return Node("example-block", {"value": value, **properties})


def export_block(type: str, value: str) -> Node:
    """Create an export block (``#+BEGIN_EXPORT type``)."""
    return Node("export-block", {"type": type.upper(), "value": value})


def fixed_width(value: str) -> Node:
    """Create a fixed-width area (``: text`` lines)."""
    return Node("fixed-width", {"value": value})


def quote_block(*children: Node) -> Node:
    """Create a quote block."""
    return Node("quote-block", {}, list(children))


def center_block(*children: Node) -> Node:
    """Create a center block."""
    return Node("center-block", {}, list(children))


def verse_block(*children: Child) -> Node:
    """Create a verse block; its children are objects."""
    return node("verse-block", *children)


def special_block(type: str, *children: Node) -> Node:
    """Create a special block (``#+BEGIN_type``)."""
    return Node("special-block", {"type": type}, list(children))


def drawer(name: str, *children: Node) -> Node:
    """Create a drawer."""
    return Node("drawer", {"drawer_name": name}, list(children))


def property_drawer(properties: dict[str, str]) -> Node:
    """Create a property drawer from a mapping."""
    return Node(
        "property-drawer",
        {},
        [Node("node-property", {"key": key, "value": value}) for key, value in properties.items()],
    )


def keyword(key: str, value: str) -> Node:
    """Create a ``#+KEY: value`` keyword."""
    return Node("keyword", {"key": key.upper(), "value": value})


def table(*rows: Node) -> Node:
    """Create a table."""
    return Node("table", {"type": "org"}, list(rows))


def table_row(*cells: Child, type: str = "standard") -> Node:
    """Create a table row; ``type="rule"`` for a separator line."""
    return Node("table-row", {"type": type}, [table_cell(c) if isinstance(c, str) else c for c in cells])


def horizontal_rule() -> Node:
    """Create a horizontal rule."""
    return Node("horizontal-rule")


def latex_environment(value: str, **properties: Any) -> Node:
    """Create a LaTeX environment element."""
    return Node("latex-environment", {"value": value, **properties})


def footnote_definition(label: str, *children: Node) -> Node:
    """Create a ``[fn:label]`` definition."""
    return Node("footnote-definition", {"label": label}, list(children))


def planning(**timestamps: str) -> Node:
    """Create a planning line, e.g. ``planning(scheduled="<2025-01-01 Wed>")``."""
    return Node("planning", {key: value for key, value in timestamps.items()})


def clock(value: str, duration: Optional[str] = None) -> Node:
    """Create a CLOCK line."""
    return Node("clock", {"value": value, "duration": duration})


def comment(value: str) -> Node:
    """Create a comment line."""
    return Node("comment", {"value": value})


__all__ = [
    "node",
    "text",
    "bold",
    "italic",
    "underline",
    "strike_through",
    "code",
    "verbatim",
    "inline_src_block",
    "link",
    "footnote_reference",
    "latex_fragment",
    "line_break",
    "target",
    "radio_target",
    "timestamp",
    "entity",
    "export_snippet",
    "statistics_cookie",
    "subscript",
    "superscript",
    "table_cell",
    "document",
    "section",
    "headline",
    "paragraph",
    "plain_list",
    "item",
    "src_block",
    "example_block",
    "export_block",
    "fixed_width",
    "quote_block",
    "center_block",
    "verse_block",
    "special_block",
    "drawer",
    "property_drawer",
    "keyword",
    "table",
    "table_row",
    "horizontal_rule",
    "latex_environment",
    "footnote_definition",
    "planning",
    "clock",
    "comment",
]
