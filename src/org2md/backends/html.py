#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/backends/html.py
"""HTML export backend.

The ``html`` backend translates every node kind. It is the parent of the
``md`` backend, which falls back to it for anything Markdown cannot
express (tables, underline, sub/superscripts, timestamps, ...).

Translators
-----------
Every translator has the signature ``(node, contents, ctx)`` and returns
a string or None. ``contents`` is the already transcoded children, or None
for leaf kinds.

"""

from __future__ import annotations

import logging
import re
from html import escape
from typing import TYPE_CHECKING, Any, Optional

from org2md.ast.nodes import Node
from org2md.backends.base import OptionSpec, Translator
from org2md.constants import (
    DEFAULT_HTML_DOCTYPE,
    DEFAULT_HTML_FOOTNOTE_FORMAT,
    DEFAULT_HTML_FOOTNOTE_SEPARATOR,
    DEFAULT_HTML_INLINE_IMAGE_EXTENSIONS,
    DEFAULT_HTML_LINK_ORG_FILES_AS_HTML,
    DEFAULT_HTML_TOPLEVEL_HLEVEL,
    HTML_EXTENSION,
    HTML_INLINE_IMAGE_LINK_TYPES,
    SOURCE_EXTENSION,
)
from org2md.exceptions import LinkResolutionError
from org2md.export.context import ExportContext
from org2md.export.protocols import custom_protocol_maybe
from org2md.export.references import (
    collect_footnote_definitions,
    collect_headlines,
    footnote_number,
    format_code,
    get_alt_title,
    get_anchor,
    get_caption,
    get_coderef_format,
    get_ordinal,
    get_previous_element,
    get_tags,
    headline_number,
    is_first_reference,
    is_inline_image,
    is_low_level,
    preceding_text,
    relative_level,
    resolve_coderef,
    resolve_fuzzy_link,
    resolve_id_link,
    resolve_link_path,
    resolve_radio_link,
)
from org2md.export.text import (
    activate_smart_quotes,
    convert_special_strings,
    file_uri,
    org_trim,
    remove_indentation,
    string_nw_p,
    translate,
)

if TYPE_CHECKING:
    from org2md.backends.registry import BackendRegistry

logger = logging.getLogger(__name__)

URL_LINK_TYPES = ("http", "https", "ftp", "mailto", "news")

HTML_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec("html_footnote_format", DEFAULT_HTML_FOOTNOTE_FORMAT),
    OptionSpec("html_footnote_separator", DEFAULT_HTML_FOOTNOTE_SEPARATOR),
    OptionSpec("html_inline_image_extensions", DEFAULT_HTML_INLINE_IMAGE_EXTENSIONS),
    OptionSpec("html_doctype", DEFAULT_HTML_DOCTYPE, keyword="HTML_DOCTYPE"),
    OptionSpec("html_link_org_files_as_html", DEFAULT_HTML_LINK_ORG_FILES_AS_HTML),
    OptionSpec("html_toplevel_hlevel", DEFAULT_HTML_TOPLEVEL_HLEVEL),
)

_TOC_HEADLINES_RE = re.compile(r"\bheadlines\b", re.IGNORECASE)
_TOC_DEPTH_RE = re.compile(r"\b[0-9]+\b")
_TOC_TARGET_RE = re.compile(r':target +("[^"]+?"|\S+)', re.IGNORECASE)
_TOC_LOCAL_RE = re.compile(r"\blocal\b", re.IGNORECASE)


# ----------------------------------------------------------------------
# Shared helpers
# ----------------------------------------------------------------------


def dotted(number: Any) -> str:
    """Return ``1.2`` for a tuple, ``3`` for an int."""
    if isinstance(number, (tuple, list)):
        return ".".join(str(n) for n in number)
    return str(number)


def rewrite_org_path(path: str, extension: str) -> str:
    """Swap a trailing ``.org`` extension for ``extension``."""
    if path.lower().endswith(SOURCE_EXTENSION):
        return path[: -len(SOURCE_EXTENSION)] + extension
    return path


def link_path(link: Node, org_extension: Optional[str]) -> str:
    """Return the destination of an external link.

    Parameters
    ----------
    link : Node
        Link object
    org_extension : str, optional
        Rewrite ``.org`` file links to this extension; no rewrite when None

    """
    link_type = link.get("type")
    path = str(link.get("path", ""))
    if link_type in URL_LINK_TYPES:
        return f"{link_type}:{path}"
    if link_type == "file":
        if org_extension:
            path = rewrite_org_path(path, org_extension)
        return file_uri(path)
    return path


def parse_toc_keyword(keyword: Node, ctx: ExportContext) -> Optional[tuple[Optional[int], Optional[Node]]]:
    """Read a ``#+TOC:`` keyword.

    Returns
    -------
    tuple or None
        (depth, scope) for a ``headlines`` ToC, None for any other kind.
        ``:target`` wins over ``local`` when both are present.

    """
    value = str(keyword.get("value", ""))
    if not _TOC_HEADLINES_RE.search(value):
        return None
    depth_match = _TOC_DEPTH_RE.search(value)
    depth = int(depth_match.group()) if depth_match else None
    scope: Optional[Node] = None
    target_match = _TOC_TARGET_RE.search(value)
    if target_match:
        target = target_match.group(1).strip('"')
        try:
            destination = resolve_link_path(target, ctx)
        except LinkResolutionError:
            logger.warning(f"Unable to resolve ToC target: {target}")
        else:
            scope = destination if isinstance(destination, Node) else None
    elif _TOC_LOCAL_RE.search(value):
        scope = keyword
    return depth, scope


def html_tags(tags: list[str]) -> str:
    """Return tags as HTML spans."""
    spans = "&#xa0;".join(f'<span class="{escape(tag)}">{escape(tag)}</span>' for tag in tags)
    return f'<span class="tag">{spans}</span>'


# ----------------------------------------------------------------------
# Objects
# ----------------------------------------------------------------------


def html_plain_text(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    """Escape text, then apply smart quotes, special strings and breaks."""
    output = escape(str(node.value or ""), quote=False)
    if ctx.get("with_smart_quotes"):
        output = activate_smart_quotes(output, ctx.get("language", "en"), preceding_text(node, ctx))
    if ctx.get("with_special_strings"):
        output = convert_special_strings(output)
    if ctx.get("preserve_breaks"):
        output = re.sub(r"\n", "<br />\n", output)
    return output


def html_bold(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f"<b>{contents or ''}</b>"


def html_italic(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f"<i>{contents or ''}</i>"


def html_underline(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f'<span class="underline">{contents or ""}</span>'


def html_strike_through(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f"<del>{contents or ''}</del>"


def html_code(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f"<code>{escape(str(node.value or ''), quote=False)}</code>"


def html_inline_src_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    language = escape(str(node.get("language") or ""))
    return f'<code class="src src-{language}">{escape(str(node.value or ""), quote=False)}</code>'


def html_entity(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    if not ctx.get("with_entities", True):
        return f"\\{node.get('name', '')}" + ("{}" if node.get("use_brackets") else "")
    return str(node.get("html", ""))


def html_export_snippet(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Pass the snippet through when it targets a backend in the export chain."""
    if node.get("backend") in ctx.backend_chain():
        return str(node.value or "")
    return None


def html_footnote_reference(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    """Render a numbered footnote marker linking to its definition."""
    previous = get_previous_element(node, ctx)
    separator = ""
    if previous is not None and previous.kind == "footnote-reference":
        separator = ctx.get("html_footnote_separator", "")
    number = footnote_number(node, ctx)
    suffix = "" if is_first_reference(node, ctx) else ".100"
    anchor = (
        f'<a id="fnr.{number}{suffix}" class="footref" href="#fn.{number}" role="doc-backlink">{number}</a>'
    )
    return separator + ctx.get("html_footnote_format", DEFAULT_HTML_FOOTNOTE_FORMAT) % anchor


def html_latex_fragment(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return str(node.value or "")


def html_line_break(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return "<br />\n"


def html_link(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Render a link.

    Custom protocols come first, then internal links, inline images,
    coderefs, radio links and finally plain anchors.

    """
    link_type = node.get("type")
    description = contents if string_nw_p(contents) else None
    rewrite = HTML_EXTENSION if ctx.get("html_link_org_files_as_html", True) else None
    path = link_path(node, rewrite)

    custom = custom_protocol_maybe(node, description, ctx)
    if custom is not None:
        return custom

    if link_type in ("custom-id", "id", "fuzzy"):
        destination = resolve_fuzzy_link(node, ctx) if link_type == "fuzzy" else resolve_id_link(node, ctx)
        if isinstance(destination, str):
            href = rewrite_org_path(destination, rewrite) if rewrite else destination
            return f'<a href="{escape(href)}">{description or escape(href, quote=False)}</a>'
        href = "#" + get_anchor(destination, ctx)
        if destination.kind == "headline":
            number = headline_number(destination, ctx)
            text = description or (dotted(number) if number else ctx.export_data(destination.get("title")))
            return f'<a href="{escape(href)}">{text}</a>'
        ordinal = get_ordinal(destination, ctx)
        text = description or (dotted(ordinal) if ordinal else None)
        if text is None:
            return None
        return f'<a href="{escape(href)}">{text}</a>'

    if is_inline_image(node, ctx.get("html_inline_image_extensions", ()), HTML_INLINE_IMAGE_LINK_TYPES):
        alt = path.rsplit("/", 1)[-1]
        return f'<img src="{escape(path)}" alt="{escape(alt)}" />'

    if link_type == "coderef":
        label = str(node.get("path", ""))
        fmt = get_coderef_format(label, description)
        return f'<a href="#coderef-{escape(label)}" class="coderef">{fmt % resolve_coderef(label, ctx)}</a>'

    if link_type == "radio":
        radio = resolve_radio_link(node, ctx)
        if radio is None:
            return description
        return f'<a href="#{get_anchor(radio, ctx)}">{description or ""}</a>'

    if not path:
        return description
    return f'<a href="{escape(path)}">{description or escape(path, quote=False)}</a>'


def html_radio_target(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f'<a id="{get_anchor(node, ctx)}"></a>{contents or ""}'


def html_statistics_cookie(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f"<code>{escape(str(node.value or ''), quote=False)}</code>"


def _script(tag: str) -> Translator:
    marker = "_" if tag == "sub" else "^"

    def translate_script(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
        setting = ctx.get("with_sub_superscript", True)
        if not setting or (setting == "{}" and not node.get("use_brackets")):
            body = contents or ""
            return marker + (f"{{{body}}}" if node.get("use_brackets") else body)
        return f"<{tag}>{contents or ''}</{tag}>"

    return translate_script


def html_table_cell(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    row = node.parent
    table = row.parent if row is not None else None
    header = False
    if row is not None and table is not None:
        groups = _row_groups(table, ctx)
        header = len(groups) > 1 and any(r is row for r in groups[0])
    if header:
        return f'<th scope="col" class="org-left">{contents or ""}</th>\n'
    return f'<td class="org-left">{contents or ""}</td>\n'


def html_target(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f'<a id="{get_anchor(node, ctx)}"></a>'


def html_timestamp(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    value = escape(str(node.value or ""), quote=False)
    return f'<span class="timestamp-wrapper"><span class="timestamp">{value}</span></span>'


# ----------------------------------------------------------------------
# Elements
# ----------------------------------------------------------------------


def html_center_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f'<div class="org-center">\n{contents or ""}</div>'


def html_clock(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    duration = node.get("duration")
    duration_html = f' <span class="timestamp">({escape(str(duration))})</span>' if duration else ""
    return (
        '<p>\n<span class="timestamp-wrapper"><span class="timestamp-kwd">CLOCK:</span> '
        f'<span class="timestamp">{escape(str(node.value or ""))}</span>{duration_html}</span>\n</p>'
    )


def html_contents(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Return contents unchanged (drawers, dynamic blocks, documents)."""
    return contents


def html_example_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f'<pre class="example">\n{escape(format_code(node, ctx), quote=False)}</pre>'


def html_export_block(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    if str(node.get("type", "")).upper() == "HTML":
        return remove_indentation(str(node.value or ""))
    return None


def html_fixed_width(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    value = remove_indentation(str(node.value or "")).rstrip("\n") + "\n"
    return f'<pre class="example">\n{escape(value, quote=False)}</pre>'


def html_headline_text(node: Node, ctx: ExportContext) -> str:
    """Return TODO keyword, priority, title and tags of a headline as HTML."""
    parts = []
    todo = node.get("todo_keyword")
    if todo and ctx.get("with_todo_keywords", True):
        todo_class = "done" if node.get("todo_type") == "done" else "todo"
        parts.append(f'<span class="{todo_class} {escape(todo)}">{escape(todo)}</span> ')
    priority = node.get("priority")
    if priority and ctx.get("with_priority"):
        parts.append(f'<span class="priority">[{escape(priority)}]</span> ')
    parts.append(ctx.export_data(node.get("title")))
    tags = get_tags(node, ctx) if ctx.get("with_tags", True) else []
    if tags:
        parts.append("&#xa0;&#xa0;&#xa0;" + html_tags(tags))
    return "".join(parts)


def html_headline(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Render a headline as an outline container, or a list item when low-level."""
    if node.get("footnote_section"):
        return None
    anchor = get_anchor(node, ctx)
    text = html_headline_text(node, ctx)
    number = headline_number(node, ctx)
    contents = contents or ""
    if is_low_level(node, ctx):
        tag = "ol" if number else "ul"
        return f'<{tag} class="org-{tag}">\n<li><a id="{anchor}"></a>{text}<br />\n{contents}</li>\n</{tag}>'
    level = relative_level(node, ctx) + int(ctx.get("html_toplevel_hlevel", DEFAULT_HTML_TOPLEVEL_HLEVEL)) - 1
    number_html = f'<span class="section-number-{level}">{dotted(number)}.</span> ' if number else ""
    return (
        f'<div id="outline-container-{anchor}" class="outline-{level}">\n'
        f'<h{level} id="{anchor}">{number_html}{text}</h{level}>\n'
        f"{contents}</div>"
    )


def html_horizontal_rule(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return "<hr />"


def html_item(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    """Render a list item; descriptive items become ``<dt>``/``<dd>`` pairs."""
    list_type = node.parent.get("type") if node.parent is not None else "unordered"
    checkbox = {
        "on": "<code>[X]</code> ",
        "off": "<code>[&#xa0;]</code> ",
        "trans": "<code>[-]</code> ",
    }.get(node.get("checkbox"), "")
    body = org_trim(contents or "")
    if list_type == "descriptive":
        term = ctx.export_data(node.get("tag")) or "(no term)"
        return f"<dt>{checkbox}{term}</dt><dd>{body}</dd>"
    counter = node.get("counter")
    value = f' value="{counter}"' if counter is not None and list_type == "ordered" else ""
    return f"<li{value}>{checkbox}{body}</li>"


def html_keyword(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    key = str(node.get("key", "")).upper()
    if key == "HTML":
        return str(node.value or "")
    if key == "TOC":
        spec = parse_toc_keyword(node, ctx)
        if spec is None:
            return None
        depth, scope = spec
        return html_toc(ctx, depth, scope)
    return None


def html_latex_environment(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return remove_indentation(str(node.value or ""))


def html_node_property(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    value = node.value
    return f"{node.get('key', '')}:" + (f" {value}" if value else "")


def html_paragraph(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    """Wrap in ``<p>``, except the first paragraph of an item."""
    parent = node.parent
    if parent is not None and parent.kind == "item" and get_previous_element(node, ctx) is None:
        return contents or ""
    return f"<p>\n{contents or ''}</p>"


def html_plain_list(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    tag = {"ordered": "ol", "descriptive": "dl"}.get(node.get("type"), "ul")
    return f'<{tag} class="org-{tag}">\n{contents or ""}</{tag}>'


def html_planning(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    parts = []
    for key in ("closed", "deadline", "scheduled"):
        value = node.get(key)
        if value:
            parts.append(
                f'<span class="timestamp-kwd">{key.upper()}:</span> '
                f'<span class="timestamp">{escape(str(value), quote=False)}</span>'
            )
    return "<p>\n" + " ".join(parts) + "</p>"


def html_property_drawer(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    if not string_nw_p(contents):
        return None
    return f'<pre class="example">\n{escape(contents or "", quote=False)}</pre>'


def html_quote_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    return f"<blockquote>\n{contents or ''}</blockquote>"


def html_section(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    parent = node.parent
    if parent is None or parent.kind != "headline" or is_low_level(parent, ctx):
        return contents
    level = relative_level(parent, ctx) + int(ctx.get("html_toplevel_hlevel", DEFAULT_HTML_TOPLEVEL_HLEVEL)) - 1
    return f'<div class="outline-text-{level}" id="text-{get_anchor(parent, ctx)}">\n{contents or ""}</div>'


def html_special_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    block_type = escape(str(node.get("type", "")).lower())
    return f'<div class="{block_type}">\n{contents or ""}</div>'


def html_src_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    language = escape(str(node.get("language") or ""))
    code = escape(format_code(node, ctx), quote=False)
    return f'<div class="org-src-container">\n<pre class="src src-{language}">{code}</pre>\n</div>'


def _row_groups(table: Node, ctx: ExportContext) -> list[list[Node]]:
    """Split a table's standard rows into groups separated by rule rows."""
    cache = ctx.cached("html_row_groups", dict)
    if table not in cache:
        groups: list[list[Node]] = [[]]
        for row in table.children:
            if ctx.is_ignored(row):
                continue
            if row.get("type") == "rule":
                if groups[-1]:
                    groups.append([])
            else:
                groups[-1].append(row)
        cache[table] = [group for group in groups if group]
    return cache[table]


def html_table_row(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Render a row, opening and closing ``thead``/``tbody`` groups around it."""
    if node.get("type") == "rule" or node.parent is None:
        return None
    groups = _row_groups(node.parent, ctx)
    for index, group in enumerate(groups):
        if any(row is node for row in group):
            tag = "thead" if index == 0 and len(groups) > 1 else "tbody"
            start = f"<{tag}>\n" if group[0] is node else ""
            end = f"\n</{tag}>" if group[-1] is node else ""
            return f"{start}<tr>\n{contents or ''}</tr>{end}"
    return None


def _has_caption(element: Node, ctx: ExportContext) -> bool:
    return bool(element.get("caption"))


def html_table(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    caption = get_caption(node)
    caption_html = ""
    if caption:
        number = get_ordinal(node, ctx, predicate=_has_caption)
        caption_html = (
            f'<caption class="t-above"><span class="table-number">Table {number}:</span> '
            f"{ctx.export_data(caption)}</caption>\n"
        )
    return (
        '<table border="2" cellspacing="0" cellpadding="6" rules="groups" frame="hsides">\n'
        f"{caption_html}{contents or ''}</table>"
    )


def html_verse_block(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    body = re.sub(r"^[ \t]+", lambda m: "&#xa0;" * len(m.group()), contents or "", flags=re.MULTILINE)
    body = re.sub(r"(?<!<br />)\n(?!\Z)", "<br />\n", body)
    return f'<p class="verse">\n{body}</p>'


def html_ignore(node: Node, contents: Optional[str], ctx: ExportContext) -> None:
    """Translator for kinds with no output (comments, footnote definitions)."""
    return None


# ----------------------------------------------------------------------
# Document
# ----------------------------------------------------------------------


def _toc_text(entries: list[tuple[str, int]]) -> str:
    """Nest ToC entries (html, relative level) into lists."""
    if not entries:
        return ""
    prev_level = entries[0][1] - 1
    start_level = prev_level
    parts = []
    for text, level in entries:
        count = level - prev_level
        times = count - 1 if count > 0 else -count
        prev_level = level
        if count > 0:
            parts.append("\n<ul>\n<li>" * times + "\n<ul>\n<li>")
        else:
            parts.append("</li>\n</ul>\n" * times + "</li>\n<li>")
        parts.append(text)
    parts.append("</li>\n</ul>\n" * (prev_level - start_level))
    return "".join(parts)


def html_toc(ctx: ExportContext, depth: Optional[int] = None, scope: Optional[Node] = None) -> Optional[str]:
    """Build an HTML table of contents, or None when there are no headlines."""
    headlines = collect_headlines(ctx, depth, scope)
    if not headlines:
        return None
    entries = []
    for headline in headlines:
        number = headline_number(headline, ctx)
        number_text = f"{dotted(number)}. " if number else ""
        title = ctx.export_data(get_alt_title(headline, ctx), backend="html-toc-entry")
        tags = get_tags(headline, ctx)
        show_tags = tags and ctx.get("with_tags", True) not in (False, "not-in-toc")
        tags_html = "&#xa0;&#xa0;&#xa0;" + html_tags(tags) if show_tags else ""
        link = f'<a href="#{get_anchor(headline, ctx)}">{number_text}{title}{tags_html}</a>'
        entries.append((link, relative_level(headline, ctx)))
    heading = escape(translate("Table of Contents", ctx.get("language", "en")), quote=False)
    return (
        '<div id="table-of-contents" role="doc-toc">\n'
        f"<h2>{heading}</h2>\n"
        '<div id="text-table-of-contents" role="doc-toc">'
        f"{_toc_text(entries)}</div>\n</div>\n"
    )


def html_footnote_section(ctx: ExportContext) -> Optional[str]:
    """Render the footnote definitions, or None when there are none."""
    entries = collect_footnote_definitions(ctx)
    if not entries:
        return None
    definitions = []
    for entry in entries:
        body = org_trim(ctx.export_data(entry.contents))
        if entry.contents and all(item.is_object for item in entry.contents):
            body = f'<p class="footpara">{body}</p>'
        number = entry.number
        definitions.append(
            f'<div class="footdef"><sup><a id="fn.{number}" class="footnum" href="#fnr.{number}" '
            f'role="doc-backlink">{number}</a></sup> <div class="footpara" role="doc-footnote">{body}</div></div>'
        )
    title = escape(translate("Footnotes", ctx.get("language", "en")), quote=False)
    return (
        '<div id="footnotes">\n'
        f'<h2 class="footnotes">{title}: </h2>\n'
        '<div id="text-footnotes">\n' + "\n\n".join(definitions) + "\n</div>\n</div>\n"
    )


def html_inner_template(contents: str, ctx: ExportContext) -> str:
    """Add the ToC before and footnotes after the body."""
    depth = ctx.get("with_toc")
    toc = None
    if depth:
        toc = html_toc(ctx, depth if isinstance(depth, int) and not isinstance(depth, bool) else None)
    return (toc or "") + contents + (html_footnote_section(ctx) or "")


def html_template(contents: str, ctx: ExportContext) -> str:
    """Wrap the body in a standalone HTML page."""
    language = escape(str(ctx.get("language") or "en"))
    title = ctx.get("title")
    author = ctx.get("author")
    head = ['<meta charset="utf-8" />']
    if title:
        head.append(f"<title>{escape(str(title), quote=False)}</title>")
    if author:
        head.append(f'<meta name="author" content="{escape(str(author))}" />')
    title_html = f'<h1 class="title">{escape(str(title), quote=False)}</h1>\n' if title else ""
    return (
        f"{ctx.get('html_doctype', DEFAULT_HTML_DOCTYPE)}\n"
        f'<html lang="{language}">\n<head>\n' + "\n".join(head) + "\n</head>\n<body>\n"
        f'<div id="content" class="content">\n{title_html}{contents}</div>\n</body>\n</html>\n'
    )


HTML_TRANSLATORS: dict[str, Any] = {
    "bold": html_bold,
    "center-block": html_center_block,
    "clock": html_clock,
    "code": html_code,
    "comment": html_ignore,
    "comment-block": html_ignore,
    "drawer": html_contents,
    "dynamic-block": html_contents,
    "entity": html_entity,
    "example-block": html_example_block,
    "export-block": html_export_block,
    "export-snippet": html_export_snippet,
    "fixed-width": html_fixed_width,
    "footnote-definition": html_ignore,
    "footnote-reference": html_footnote_reference,
    "headline": html_headline,
    "horizontal-rule": html_horizontal_rule,
    "inline-src-block": html_inline_src_block,
    "italic": html_italic,
    "item": html_item,
    "keyword": html_keyword,
    "latex-environment": html_latex_environment,
    "latex-fragment": html_latex_fragment,
    "line-break": html_line_break,
    "link": html_link,
    "node-property": html_node_property,
    "paragraph": html_paragraph,
    "plain-list": html_plain_list,
    "plain-text": html_plain_text,
    "planning": html_planning,
    "property-drawer": html_property_drawer,
    "quote-block": html_quote_block,
    "radio-target": html_radio_target,
    "section": html_section,
    "special-block": html_special_block,
    "src-block": html_src_block,
    "statistics-cookie": html_statistics_cookie,
    "strike-through": html_strike_through,
    "subscript": _script("sub"),
    "superscript": _script("sup"),
    "table": html_table,
    "table-cell": html_table_cell,
    "table-row": html_table_row,
    "target": html_target,
    "timestamp": html_timestamp,
    "underline": html_underline,
    "verbatim": html_code,
    "verse-block": html_verse_block,
    "inner-template": html_inner_template,
    "template": html_template,
}


def toc_entry_link(node: Node, contents: Optional[str], ctx: ExportContext) -> str:
    """Render a link inside a ToC entry as its description only."""
    if contents:
        return contents
    return ctx.export_data(Node("plain-text", {"value": str(node.get("raw_link") or node.get("path", ""))}))


def toc_entry_contents(node: Node, contents: Optional[str], ctx: ExportContext) -> Optional[str]:
    return contents


# Overrides for ToC entry backends: no footnote markers, anchors or nested links
TOC_ENTRY_TRANSLATORS: dict[str, Any] = {
    "footnote-reference": html_ignore,
    "target": html_ignore,
    "link": toc_entry_link,
    "radio-target": toc_entry_contents,
}


def register(registry: BackendRegistry) -> None:
    """Register the ``html`` backend and its ToC entry backend."""
    registry.define_backend(
        "html",
        translators=HTML_TRANSLATORS,
        options=HTML_OPTIONS,
        description="HTML export, parent of the Markdown backend",
    )
    registry.define_derived_backend(
        "html-toc-entry",
        "html",
        translators=TOC_ENTRY_TRANSLATORS,
        description="HTML table of contents entries",
    )


__all__ = [
    "HTML_OPTIONS",
    "HTML_TRANSLATORS",
    "TOC_ENTRY_TRANSLATORS",
    "URL_LINK_TYPES",
    "dotted",
    "html_footnote_section",
    "html_toc",
    "link_path",
    "parse_toc_keyword",
    "register",
    "rewrite_org_path",
]
