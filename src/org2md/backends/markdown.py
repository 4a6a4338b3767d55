#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/backends/markdown.py
"""Markdown export backend.

The ``md`` backend derives from ``html``: it overrides the translators for
what Markdown expresses natively and lets everything else (tables, center
and special blocks, underline, timestamps, ...) fall through to the HTML
rules.

Headline styles
---------------
- ``atx``: ``#`` markers, levels 1-6
- ``setext``: ``=``/``-`` underlines, levels 1-2
- ``mixed``: setext for levels 1-2, atx for 3-6

A headline beyond its style's range, or below ``headline_levels``, is
rendered as a list item with its contents indented by four spaces.

Spacing
-------
The ``parse-tree`` filter :func:`md_separate_elements` gives every element
one blank line after it, except list items (left as parsed), table rows
and the first paragraph of an item directly followed by a final sub-list.

"""

from __future__ import annotations

import logging
import os.path
import re
from typing import TYPE_CHECKING, Any, Optional

from org2md.ast.nodes import ELEMENT_KINDS, Node
from org2md.ast.utils import parent_element
from org2md.backends.base import OptionSpec
from org2md.backends.html import (
    TOC_ENTRY_TRANSLATORS,
    dotted,
    link_path,
    parse_toc_keyword,
    rewrite_org_path,
)
from org2md.constants import (
    DEFAULT_MD_FOOTNOTE_FORMAT,
    DEFAULT_MD_FOOTNOTES_SECTION,
    DEFAULT_MD_HEADLINE_STYLE,
    DEFAULT_MD_LINK_ORG_FILES_AS_MD,
    DEFAULT_MD_TOPLEVEL_HLEVEL,
    HTML_INLINE_IMAGE_LINK_TYPES,
    MARKDOWN_EXTENSION,
    MD_LIST_INDENT,
    MD_MAX_HEADLINE_LEVEL,
    MD_TAGS_SEPARATOR,
)
from org2md.exceptions import LinkResolutionError
from org2md.export.context import ExportContext
from org2md.export.protocols import custom_protocol_maybe
from org2md.export.references import (
    collect_footnote_definitions,
    collect_headlines,
    format_code,
    get_alt_title,
    get_anchor,
    get_caption,
    get_coderef_format,
    get_next_element,
    get_ordinal,
    get_tags,
    headline_number,
    is_first_sibling,
    is_inline_image,
    is_low_level,
    item_number,
    make_tag_string,
    preceding_text,
    relative_level,
    resolve_coderef,
    resolve_fuzzy_link,
    resolve_id_link,
    resolve_radio_link,
    walk_exported,
)
from org2md.export.text import (
    activate_smart_quotes,
    convert_special_strings,
    org_trim,
    prefix_lines,
    remove_indentation,
    string_nw_p,
    translate,
)

if TYPE_CHECKING:
    from org2md.backends.registry import BackendRegistry

logger = logging.getLogger(__name__)

HEADLINE_STYLES = ("atx", "setext", "mixed")

MD_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec("md_headline_style", DEFAULT_MD_HEADLINE_STYLE),
    OptionSpec("md_toplevel_hlevel", DEFAULT_MD_TOPLEVEL_HLEVEL),
    OptionSpec("md_footnote_format", DEFAULT_MD_FOOTNOTE_FORMAT),
    OptionSpec("md_footnotes_section", DEFAULT_MD_FOOTNOTES_SECTION),
    OptionSpec("md_link_org_files_as_md", DEFAULT_MD_LINK_ORG_FILES_AS_MD),
)

_SPECIAL_CHARS_RE = re.compile(r"[`*_\\]")
_TRAILING_BLANKS_RE = re.compile(r"[ \t]*\n")

# Spacing is not forced on these kinds
_UNSPACED_KINDS = frozenset({"document", "item", "table-row"})


def _int_option(value: Any) -> Optional[int]:
    """Return ``value`` when it is an int (and not a bool), else None."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


# ----------------------------------------------------------------------
# Filters
# ----------------------------------------------------------------------


def md_separate_elements(tree: Node, backend: str, ctx: ExportContext) -> Node:
    """Set ``post_blank`` so elements are separated by exactly one blank line.

    The first paragraph of an item gets no blank line when the only thing
    after it is a sub-list, so the sub-list stays attached. Items and table
    rows keep their parsed spacing.

    """
    kinds = ELEMENT_KINDS - _UNSPACED_KINDS
    for element in walk_exported(tree, kinds, ctx, with_secondary=False):
        tight = False
        if element.kind == "paragraph" and element.parent is not None and element.parent.kind == "item":
            if is_first_sibling(element, ctx):
                following = get_next_element(element, ctx)
                tight = (
                    following is not None
                    and following.kind == "plain-list"
                    and get_next_element(following, ctx) is None
                )
        element.set_property("post_blank", 0 if tight else 1)
    return tree


# ----------------------------------------------------------------------
# Headlines and ToC
# ----------------------------------------------------------------------


def md_headline_title(
    style: str, level: int, title: str, anchor: Optional[str] = None, tags: Optional[str] = None
) -> str:
    """Format a headline title line.

    Parameters
    ----------
    style : str
        "atx", "setext" or "mixed"
    level : int
        Heading level, 1-based
    title : str
        Transcoded title (keyword and priority included)
    anchor : str, optional
        HTML anchor placed on its own line before the title
    tags : str, optional
        Tag string appended to the title

    Returns
    -------
    str
        Title block, surrounded by blank lines

    """
    anchor_lines = f"{anchor}\n\n" if anchor else ""
    tags = tags or ""
    if style in ("setext", "mixed") and level < 3:
        underline = ("=" if level == 1 else "-") * len(title)
        return f"\n{anchor_lines}{title}{tags}\n{underline}\n\n"
    return f"\n{anchor_lines}{'#' * level} {title}{tags}\n\n"


def referred_headlines(ctx: ExportContext) -> set[Node]:
    """Return the headlines that need an anchor.

    A headline is referred to when it appears in the global ToC or in a
    ``#+TOC: headlines`` list (the same headlines :func:`md_keyword`
    renders, so ``local`` and ``:target`` scopes apply), or when an
    internal link resolves to it.

    """

    def compute() -> set[Node]:
        referred: set[Node] = set()
        with_toc = ctx.get("with_toc")
        if with_toc:
            referred.update(collect_headlines(ctx, _int_option(with_toc)))

        for keyword in walk_exported(ctx.tree, "keyword", ctx):
            if str(keyword.get("key", "")).upper() != "TOC":
                continue
            spec = parse_toc_keyword(keyword, ctx)
            if spec is None:
                continue
            depth, scope = spec
            referred.update(collect_headlines(ctx, depth, scope))

        for link in walk_exported(ctx.tree, "link", ctx):
            link_type = link.get("type")
            if link_type not in ("custom-id", "id", "fuzzy"):
                continue
            try:
                destination = resolve_fuzzy_link(link, ctx) if link_type == "fuzzy" else resolve_id_link(link, ctx)
            except LinkResolutionError:
                continue
            if isinstance(destination, Node) and destination.kind == "headline":
                referred.add(destination)
        return referred

    return ctx.cached("md_referred_headlines", compute)


def md_build_toc(
    ctx: ExportContext,
    n: Optional[int] = None,
    keyword: Optional[Node] = None,
    scope: Optional[Node] = None,
) -> Optional[str]:
    """Build a Markdown table of contents.

    Parameters
    ----------
    ctx : ExportContext
        Export context
    n : int, optional
        Depth limit
    keyword : Node, optional
        ``#+TOC:`` keyword the ToC replaces; when given, no title is added
    scope : Node, optional
        Restrict entries to this subtree

    Returns
    -------
    str or None
        The ToC, or None when no headline qualifies

    """
    with_tags = ctx.get("with_tags", True)
    entries = []
    for headline in collect_headlines(ctx, n, scope):
        indentation = " " * (4 * (relative_level(headline, ctx) - 1))
        number = headline_number(headline, ctx)
        if number:
            prefix = f"{number[-1]}."
            bullet = prefix + " " * max(1, 4 - len(prefix))
        else:
            bullet = "-   "
        title = ctx.export_data(get_alt_title(headline, ctx), backend="md-toc-entry")
        entry = f"[{title}](#{get_anchor(headline, ctx)})"
        tags = make_tag_string(get_tags(headline, ctx)) if with_tags and with_tags != "not-in-toc" else ""
        entries.append(indentation + bullet + entry + tags)

    if not entries:
        return None
    toc = "\n".join(entries)
    if keyword is not None:
        return toc
    heading = md_headline_title(
        ctx.get("md_headline_style", DEFAULT_MD_HEADLINE_STYLE),
        int(ctx.get("md_toplevel_hlevel", DEFAULT_MD_TOPLEVEL_HLEVEL)),
        translate("Table of Contents", ctx.get("language", "en")),
    )
    return heading + toc + "\n"


def md_headline(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Render a headline in the configured style, degrading to a list item."""
    if node.get("footnote_section"):
        return None
    level = relative_level(node, ctx) + int(ctx.get("md_toplevel_hlevel", DEFAULT_MD_TOPLEVEL_HLEVEL)) - 1
    title = ctx.export_data(node.get("title"))

    todo = node.get("todo_keyword")
    todo_text = f"{todo} " if todo and ctx.get("with_todo_keywords", True) else ""
    tag_list = get_tags(node, ctx) if ctx.get("with_tags", True) else []
    tags = MD_TAGS_SEPARATOR + make_tag_string(tag_list) if tag_list else ""
    priority = node.get("priority")
    priority_text = f"[#{priority}] " if priority and ctx.get("with_priority") else ""
    heading = todo_text + priority_text + title

    style = ctx.get("md_headline_style", DEFAULT_MD_HEADLINE_STYLE)
    contents = contents or ""
    if is_low_level(node, ctx) or style not in HEADLINE_STYLES or level > MD_MAX_HEADLINE_LEVEL[style]:
        number = headline_number(node, ctx)
        bullet = f"{number[-1]}." if number else "-"
        return f"{bullet}{' ' * (4 - len(bullet))}{heading}{tags}\n\n" + prefix_lines(contents, MD_LIST_INDENT)

    anchor = f'<a id="{get_anchor(node, ctx)}"></a>' if node in referred_headlines(ctx) else None
    return md_headline_title(style, level, heading, anchor, tags) + contents


# ----------------------------------------------------------------------
# Objects
# ----------------------------------------------------------------------


def md_plain_text(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    """Protect Markdown syntax in text.

    Smart quotes and special strings are applied first, then ``\\ ` * _``
    are escaped, a ``#`` starting a line and ``![`` are protected, and
    finally trailing blanks before newlines become hard breaks when
    ``preserve_breaks`` is set. The order matters.

    """
    text = str(node.value or "")
    if ctx.get("with_smart_quotes"):
        text = activate_smart_quotes(text, ctx.get("language", "en"), preceding_text(node, ctx))
    if ctx.get("with_special_strings"):
        text = convert_special_strings(text)
    text = _SPECIAL_CHARS_RE.sub(r"\\\g<0>", text)
    text = text.replace("\n#", "\n\\#")
    text = text.replace("![", "\\![")
    if ctx.get("preserve_breaks"):
        text = _TRAILING_BLANKS_RE.sub("  \n", text)
    return text


def md_bold(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f"**{contents or ''}**"


def md_italic(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f"*{contents or ''}*"


def md_verbatim(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    """Render code as a backtick span, widening the fence around backticks."""
    value = str(node.value or "")
    if "`" not in value:
        return f"`{value}`"
    if value.startswith("`") or value.endswith("`"):
        return f"`` {value} ``"
    return f"``{value}``"


def md_line_break(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return "  \n"


def md_latex_fragment(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    with_latex = ctx.get("with_latex", True)
    if not with_latex:
        return None
    fragment = str(node.value or "")
    if with_latex == "verbatim":
        return fragment
    if fragment.startswith("\\("):
        return "$" + fragment[2:-2] + "$"
    if fragment.startswith("\\["):
        return "$$" + fragment[2:-2] + "$$"
    return fragment


def md_link(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Render a link, classifying it by type.

    Precedence: custom protocol, internal link (custom-id, id, fuzzy),
    inline image, coderef, radio link, then a generic link.

    """
    link_type = node.get("type")
    raw_path = str(node.get("path", ""))
    rewrite = MARKDOWN_EXTENSION if ctx.get("md_link_org_files_as_md", True) else None
    path = link_path(node, rewrite)
    description = contents if string_nw_p(contents) else None

    custom = custom_protocol_maybe(node, description, ctx)
    if custom is not None:
        return custom

    if link_type in ("custom-id", "id", "fuzzy"):
        destination = resolve_fuzzy_link(node, ctx) if link_type == "fuzzy" else resolve_id_link(node, ctx)
        if isinstance(destination, str):
            target = rewrite_org_path(destination, rewrite) if rewrite else destination
            return f"[{description}]({target})" if description else f"<{target}>"
        if destination.kind == "headline":
            if description:
                text = description
            else:
                number = headline_number(destination, ctx)
                text = dotted(number) if number else ctx.export_data(destination.get("title"))
            return f"[{text}](#{get_anchor(destination, ctx)})"
        ordinal = get_ordinal(destination, ctx)
        text = description or (dotted(ordinal) if ordinal else None)
        if text is None:
            return None
        return f"[{text}](#{ctx.get_reference(destination)})"

    if is_inline_image(node, ctx.get("html_inline_image_extensions", ()), HTML_INLINE_IMAGE_LINK_TYPES):
        if link_type != "file":
            image_path = f"{link_type}:{raw_path}"
        elif raw_path.startswith("~"):
            image_path = os.path.expanduser(raw_path)
        else:
            image_path = raw_path
        caption = ctx.export_data(get_caption(parent_element(node)))
        if string_nw_p(caption):
            return f'![img]({image_path} "{caption}")'
        return f"![img]({image_path})"

    if link_type == "coderef":
        return get_coderef_format(raw_path, description) % resolve_coderef(raw_path, ctx)

    if link_type == "radio":
        radio = resolve_radio_link(node, ctx)
        if radio is None:
            return description
        return f'<a href="#{ctx.get_reference(radio)}">{description or ""}</a>'

    return f"[{description}]({path})" if description else f"<{path}>"


# ----------------------------------------------------------------------
# Elements
# ----------------------------------------------------------------------


def md_contents(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    return contents


def md_convert_to_html(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Export the whole element with the ``html`` backend."""
    return ctx.export_data(node, backend="html") or None


def md_example_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return prefix_lines(remove_indentation(format_code(node, ctx)), MD_LIST_INDENT)


def md_export_block(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    if str(node.get("type", "")).upper() in ("MARKDOWN", "MD"):
        return remove_indentation(str(node.value or ""))
    return ctx.with_backend("html", node, contents)


def md_horizontal_rule(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return "---"


def md_item(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    """Render a list item with its bullet, checkbox and tag."""
    list_type = node.parent.get("type") if node.parent is not None else "unordered"
    bullet = f"{item_number(node)}." if list_type == "ordered" else "-"
    checkbox = {"on": "[X] ", "trans": "[-] ", "off": "[ ] "}.get(node.get("checkbox"), "")
    tag = node.get("tag")
    tag_text = f"**{ctx.export_data(tag)}:** " if tag else ""
    body = org_trim(prefix_lines(contents, MD_LIST_INDENT)) if contents else ""
    return bullet + " " * (4 - len(bullet)) + checkbox + tag_text + body


def md_keyword(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Pass Markdown keywords through, build ``#+TOC:`` lists, defer the rest to HTML."""
    key = str(node.get("key", "")).upper()
    if key in ("MARKDOWN", "MD"):
        return str(node.value or "")
    if key == "TOC":
        spec = parse_toc_keyword(node, ctx)
        if spec is None:
            return None
        depth, scope = spec
        toc = md_build_toc(ctx, depth, node, scope)
        return remove_indentation(toc) if toc is not None else None
    return ctx.with_backend("html", node, contents)


def md_latex_environment(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    if not ctx.get("with_latex", True):
        return None
    value = remove_indentation(str(node.value or ""))
    name = node.get("name")
    if not string_nw_p(name):
        return value
    first, sep, rest = value.partition("\n")
    return f"{first}\n\\label{{{name}}}{sep}{rest}"


def md_node_property(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    value = node.value
    return f"{node.get('key', '')}:" + (f" {value}" if value else "")


def md_paragraph(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Protect a paragraph starting with ``#`` from reading as a heading."""
    first = node.children[0] if node.children else None
    if contents and first is not None and first.kind == "plain-text" and str(first.value or "").startswith("#"):
        return "\\" + contents
    return contents


def md_property_drawer(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    if not string_nw_p(contents):
        return None
    return prefix_lines(contents or "", MD_LIST_INDENT)


def md_quote_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    body = contents or ""
    if body.endswith("\n"):
        body = body[:-1]
    return prefix_lines(body, "> ")


# ----------------------------------------------------------------------
# Document
# ----------------------------------------------------------------------


def md_footnote_section(ctx: ExportContext) -> Optional[str]:
    """Render the footnote section, or None when there are no footnotes."""
    entries = collect_footnote_definitions(ctx)
    if not entries:
        return None
    fmt = ctx.get("md_footnote_format", DEFAULT_MD_FOOTNOTE_FORMAT)
    formatted = []
    for entry in entries:
        text = org_trim(ctx.export_data(entry.contents))
        anchor = f'<a id="fn.{entry.number}" href="#fnr.{entry.number}">{entry.number}</a>'
        formatted.append(fmt % anchor + " " + text + "\n")
    title = md_headline_title(
        ctx.get("md_headline_style", DEFAULT_MD_HEADLINE_STYLE),
        int(ctx.get("md_toplevel_hlevel", DEFAULT_MD_TOPLEVEL_HLEVEL)),
        translate("Footnotes", ctx.get("language", "en")),
    )
    return ctx.get("md_footnotes_section", DEFAULT_MD_FOOTNOTES_SECTION) % (title, "\n".join(formatted))


def md_inner_template(contents: str, ctx: ExportContext) -> str:
    """Assemble ToC, body and footnote section."""
    with_toc = ctx.get("with_toc")
    toc = md_build_toc(ctx, _int_option(with_toc)) if with_toc else None
    return (toc + "\n" if toc else "") + contents + "\n" + (md_footnote_section(ctx) or "")


def md_template(contents: str, ctx: ExportContext) -> str:
    return contents


MD_TRANSLATORS: dict[str, Any] = {
    "bold": md_bold,
    "center-block": md_convert_to_html,
    "code": md_verbatim,
    "drawer": md_contents,
    "dynamic-block": md_contents,
    "example-block": md_example_block,
    "export-block": md_export_block,
    "fixed-width": md_example_block,
    "headline": md_headline,
    "horizontal-rule": md_horizontal_rule,
    "inline-src-block": md_verbatim,
    "italic": md_italic,
    "item": md_item,
    "keyword": md_keyword,
    "latex-environment": md_latex_environment,
    "latex-fragment": md_latex_fragment,
    "line-break": md_line_break,
    "link": md_link,
    "node-property": md_node_property,
    "paragraph": md_paragraph,
    "plain-list": md_contents,
    "plain-text": md_plain_text,
    "property-drawer": md_property_drawer,
    "quote-block": md_quote_block,
    "section": md_contents,
    "special-block": md_convert_to_html,
    "src-block": md_example_block,
    "table": md_convert_to_html,
    "verbatim": md_verbatim,
    "inner-template": md_inner_template,
    "template": md_template,
}


def register(registry: BackendRegistry) -> None:
    """Register the ``md`` backend and its ToC entry backend."""
    registry.define_derived_backend(
        "md",
        "html",
        translators=MD_TRANSLATORS,
        filters={"parse-tree": [md_separate_elements]},
        options=MD_OPTIONS,
        description="Markdown export",
    )
    registry.define_derived_backend(
        "md-toc-entry",
        "md",
        translators=TOC_ENTRY_TRANSLATORS,
        description="Markdown table of contents entries",
    )


__all__ = [
    "HEADLINE_STYLES",
    "MD_OPTIONS",
    "MD_TRANSLATORS",
    "md_build_toc",
    "md_footnote_section",
    "md_headline_title",
    "md_separate_elements",
    "referred_headlines",
    "register",
]
