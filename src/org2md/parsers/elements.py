#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/parsers/elements.py
"""Org element parser.

Reads the lines of a section (the text between two headlines) into
element nodes: paragraphs, plain lists, blocks, drawers, tables,
keywords, comments, fixed-width areas, horizontal rules, footnote
definitions, LaTeX environments, planning and clock lines.

Blank lines following an element become its ``post_blank``. Affiliated
keywords (``#+NAME:``, ``#+CAPTION:``, ``#+ATTR_...:``) attach to the
element on the next line.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional

from org2md.ast import builder as b
from org2md.ast.nodes import Node
from org2md.export.text import remove_indentation
from org2md.parsers.inline import InlineParser

logger = logging.getLogger(__name__)

_BLANK_RE = re.compile(r"^\s*$")
_BLOCK_BEGIN_RE = re.compile(r"^\s*#\+BEGIN_(\S+)(?:[ \t]+(.*))?$", re.IGNORECASE)
_DYNAMIC_BEGIN_RE = re.compile(r"^\s*#\+BEGIN:[ \t]*(\S+)?(.*)$", re.IGNORECASE)
_DYNAMIC_END_RE = re.compile(r"^\s*#\+END:?\s*$", re.IGNORECASE)
_DRAWER_BEGIN_RE = re.compile(r"^\s*:([\w-]+):\s*$")
_DRAWER_END_RE = re.compile(r"^\s*:END:\s*$", re.IGNORECASE)
_NODE_PROPERTY_RE = re.compile(r"^\s*:(\S+?)(\+)?:(?:[ \t]+(.*?))?\s*$")
_LATEX_BEGIN_RE = re.compile(r"^\s*\\begin\{([A-Za-z0-9*]+)\}")
_AFFILIATED_RE = re.compile(
    r"^\s*#\+(CAPTION|NAME|LABEL|TBLNAME|RESULTS|PLOT|HEADERS?|ATTR_[-\w]+)(?:\[([^\]]*)\])?:[ \t]*(.*?)\s*$",
    re.IGNORECASE,
)
_KEYWORD_RE = re.compile(r"^\s*#\+(\S+?):(?:[ \t]+(.*?))?\s*$")
_COMMENT_RE = re.compile(r"^\s*#(?:[ \t](.*)|)$")
_FIXED_WIDTH_RE = re.compile(r"^\s*:(?:[ \t](.*)|)$")
_RULE_RE = re.compile(r"^\s*-{5,}\s*$")
_FOOTNOTE_DEF_RE = re.compile(r"^\[fn:([-\w]+)\](?:[ \t]+(.*)|)$")
_TABLE_RE = re.compile(r"^\s*\|")
_TABLE_RULE_RE = re.compile(r"^\s*\|-")
_TBLFM_RE = re.compile(r"^\s*#\+TBLFM:(.*)$", re.IGNORECASE)
_CLOCK_RE = re.compile(r"^\s*CLOCK:[ \t]*(.*?)(?:[ \t]+=>[ \t]*(\S+))?\s*$")
_PLANNING_RE = re.compile(r"^\s*(?:(?:CLOSED|DEADLINE|SCHEDULED):\s*(?:<[^>\n]+>|\[[^\]\n]+\])\s*)+$")
_PLANNING_ITEM_RE = re.compile(r"(CLOSED|DEADLINE|SCHEDULED):\s*(<[^>\n]+>|\[[^\]\n]+\])")
_ITEM_RE = re.compile(
    r"^(?P<indent>[ \t]*)(?P<bullet>[-+]|(?<=[ \t])\*|\d+[.)])(?:[ \t]+|$)"
    r"(?:\[@(?P<counter>\d+)\][ \t]*)?"
    r"(?:\[(?P<checkbox>[ Xx-])\](?:[ \t]+|$))?"
    r"(?P<rest>.*)$"
)
_ITEM_TAG_RE = re.compile(r"^(.*?)[ \t]+::(?:[ \t]+|$)(.*)$")
_COMMA_ESCAPE_RE = re.compile(r"^([ \t]*),(?=,*(?:\*|#\+))")

_CHECKBOXES = {" ": "off", "X": "on", "x": "on", "-": "trans"}


def unescape_code(lines: list[str]) -> list[str]:
    """Remove the comma protecting ``*`` and ``#+`` at the start of code lines."""
    return [_COMMA_ESCAPE_RE.sub(r"\1", line) for line in lines]


def parse_switches(switches: str) -> dict[str, Any]:
    """Read ``-n``/``+n``, ``-r``, ``-k``, ``-i`` and ``-l`` block switches.

    Returns
    -------
    dict
        ``number_lines`` (None or ("new"|"continued", lines before the
        first)), ``retain_labels``, ``use_labels``, ``label_fmt`` and
        ``preserve_indent``

    Examples
    --------
    >>> parse_switches("-n 10 -r")["number_lines"]
    ('new', 9)

    """
    number_lines = None
    match = re.search(r"([-+])n\b(?:[ \t]+(\d+))?", switches)
    if match:
        before = int(match.group(2)) - 1 if match.group(2) else 0
        number_lines = ("new" if match.group(1) == "-" else "continued", before)
    has_r = re.search(r"-r\b", switches) is not None
    has_k = re.search(r"-k\b", switches) is not None
    retain_labels = not has_r or (number_lines is not None and has_k)
    label_match = re.search(r'-l[ \t]+"([^"]+)"', switches)
    return {
        "number_lines": number_lines,
        "retain_labels": retain_labels,
        "use_labels": retain_labels and not has_k,
        "label_fmt": label_match.group(1) if label_match else None,
        "preserve_indent": re.search(r"-i\b", switches) is not None,
    }


def _split_block_parameters(raw: str) -> tuple[str, str, str]:
    """Split ``python -n :results output`` into language, switches and parameters."""
    raw = raw.strip()
    params_at = re.search(r"(?:^|[ \t]):\w", raw)
    parameters = raw[params_at.start() :].strip() if params_at else ""
    head = raw[: params_at.start()] if params_at else raw
    tokens = head.split(None, 1)
    if not tokens or tokens[0].startswith(("-", "+")):
        return "", head.strip(), parameters
    return tokens[0], tokens[1].strip() if len(tokens) > 1 else "", parameters


class ElementParser:
    """Parse section lines into element nodes.

    Parameters
    ----------
    inline : InlineParser
        Parser for the objects inside paragraphs, titles and cells

    """

    def __init__(self, inline: InlineParser):
        """Keep the inline parser used for object contents."""
        self.inline = inline
        self._matchers: list[Callable[[list[str], int], Optional[tuple[Node, int]]]] = [
            self._block,
            self._dynamic_block,
            self._drawer,
            self._latex_environment,
            self._keyword,
            self._comment,
            self._fixed_width,
            self._horizontal_rule,
            self._footnote_definition,
            self._table,
            self._plain_list,
            self._clock,
        ]

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse_section(self, lines: list[str]) -> tuple[list[Node], dict[str, str]]:
        """Parse a headline's section, reading its planning line and property drawer.

        Returns
        -------
        tuple
            Elements, and node properties (upper-case keys) from the
            property drawer

        """
        elements: list[Node] = []
        properties: dict[str, str] = {}
        i = 0
        if i < len(lines) and _PLANNING_RE.match(lines[i]):
            planning = {key.lower(): value for key, value in _PLANNING_ITEM_RE.findall(lines[i])}
            elements.append(b.planning(**planning))
            i += 1
        if i < len(lines) and lines[i].strip().upper() == ":PROPERTIES:":
            found = self._drawer(lines, i)
            if found is not None:
                drawer, i = found
                elements.append(drawer)
                for prop in drawer.children:
                    properties[str(prop.get("key", "")).upper()] = str(prop.get("value") or "")
        if elements:
            i = self._absorb_blanks(lines, i, elements[-1])
        elements.extend(self.parse(lines[i:]))
        return elements, properties

    def parse(self, lines: list[str]) -> list[Node]:
        """Parse ``lines`` into a list of elements.

        Parameters
        ----------
        lines : list of str
            Source lines without line terminators

        Returns
        -------
        list of Node
            Elements in document order

        """
        elements: list[Node] = []
        affiliated: dict[str, Any] = {}
        affiliated_lines: list[str] = []
        i = 0
        n = len(lines)
        while i < n:
            line = lines[i]
            if _BLANK_RE.match(line):
                if affiliated_lines:
                    # Affiliated keywords not followed by an element are plain keywords
                    elements.extend(self._plain_keywords(affiliated_lines))
                    affiliated, affiliated_lines = {}, []
                start = i
                while i < n and _BLANK_RE.match(lines[i]):
                    i += 1
                if elements:
                    elements[-1].set_property("post_blank", elements[-1].post_blank + i - start)
                continue

            match = _AFFILIATED_RE.match(line)
            if match:
                self._add_affiliated(affiliated, match)
                affiliated_lines.append(line)
                i += 1
                continue

            element, i = self._element_at(lines, i)
            if affiliated:
                for key, value in affiliated.items():
                    element.set_property(key, value)
                affiliated, affiliated_lines = {}, []
            elements.append(element)

        if affiliated_lines:
            elements.extend(self._plain_keywords(affiliated_lines))
        return elements

    def _element_at(self, lines: list[str], i: int) -> tuple[Node, int]:
        for matcher in self._matchers:
            found = matcher(lines, i)
            if found is not None:
                return found
        return self._paragraph(lines, i)

    def _starts_element(self, lines: list[str], i: int) -> bool:
        """Return True when the line at ``i`` interrupts a paragraph."""
        if _AFFILIATED_RE.match(lines[i]):
            return True
        return any(matcher(lines, i) is not None for matcher in self._matchers)

    @staticmethod
    def _absorb_blanks(lines: list[str], i: int, element: Node) -> int:
        start = i
        while i < len(lines) and _BLANK_RE.match(lines[i]):
            i += 1
        if i > start:
            element.set_property("post_blank", element.post_blank + i - start)
        return i

    # ------------------------------------------------------------------
    # Affiliated keywords
    # ------------------------------------------------------------------

    def _add_affiliated(self, affiliated: dict[str, Any], match: re.Match[str]) -> None:
        key = match.group(1).upper()
        value = match.group(3)
        if key == "CAPTION":
            caption = list(affiliated.get("caption") or [])
            if caption:
                caption.append(b.text(" "))
            caption.extend(self.inline.parse(value))
            affiliated["caption"] = caption
            if match.group(2):
                affiliated["short_caption"] = self.inline.parse(match.group(2))
        elif key in ("NAME", "LABEL", "TBLNAME"):
            affiliated["name"] = value
        elif key.startswith("ATTR_"):
            attr = "attr_" + key[len("ATTR_") :].lower().replace("-", "_")
            affiliated[attr] = list(affiliated.get(attr) or []) + [value]
        else:
            affiliated[key.lower()] = value

    @staticmethod
    def _plain_keywords(lines: list[str]) -> list[Node]:
        result = []
        for line in lines:
            match = _KEYWORD_RE.match(line)
            if match:
                result.append(b.keyword(match.group(1), match.group(2) or ""))
        return result

    # ------------------------------------------------------------------
    # Element matchers: each returns (node, next line index) or None
    # ------------------------------------------------------------------

    def _block(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        match = _BLOCK_BEGIN_RE.match(lines[i])
        if not match:
            return None
        name = match.group(1)
        end_re = re.compile(rf"^\s*#\+END_{re.escape(name)}\s*$", re.IGNORECASE)
        end = next((j for j in range(i + 1, len(lines)) if end_re.match(lines[j])), None)
        if end is None:
            return None
        body = lines[i + 1 : end]
        args = match.group(2) or ""
        return self._make_block(name, args, body), end + 1

    def _make_block(self, name: str, args: str, body: list[str]) -> Node:
        kind = name.upper()
        if kind in ("SRC", "EXAMPLE"):
            code = unescape_code(body)
            value = "\n".join(code) + "\n" if code else ""
            if kind == "SRC":
                language, switches, parameters = _split_block_parameters(args)
                props = parse_switches(switches)
                return b.src_block(value, language, switches=switches, parameters=parameters, **props)
            return b.example_block(value, switches=args.strip(), **parse_switches(args))
        if kind == "EXPORT":
            code = unescape_code(body)
            export_type = args.split()[0] if args.split() else ""
            return b.export_block(export_type, "\n".join(code) + "\n" if code else "")
        if kind == "QUOTE":
            return b.quote_block(*self.parse(body))
        if kind == "CENTER":
            return b.center_block(*self.parse(body))
        if kind == "VERSE":
            text = "\n".join(body) + "\n" if body else ""
            return b.verse_block(*self.inline.parse(text))
        if kind == "COMMENT":
            return Node("comment-block", {"value": "\n".join(body) + "\n" if body else ""})
        block = b.special_block(name, *self.parse(body))
        block.set_property("parameters", args.strip() or None)
        return block

    def _dynamic_block(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        match = _DYNAMIC_BEGIN_RE.match(lines[i])
        if not match:
            return None
        end = next((j for j in range(i + 1, len(lines)) if _DYNAMIC_END_RE.match(lines[j])), None)
        if end is None:
            return None
        props = {"block_name": match.group(1) or "", "arguments": (match.group(2) or "").strip()}
        return Node("dynamic-block", props, self.parse(lines[i + 1 : end])), end + 1

    def _drawer(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        match = _DRAWER_BEGIN_RE.match(lines[i])
        if not match or match.group(1).upper() == "END":
            return None
        end = next((j for j in range(i + 1, len(lines)) if _DRAWER_END_RE.match(lines[j])), None)
        if end is None:
            return None
        name = match.group(1)
        body = lines[i + 1 : end]
        if name.upper() == "PROPERTIES":
            props = []
            for line in body:
                prop = _NODE_PROPERTY_RE.match(line)
                if prop:
                    key = prop.group(1) + ("+" if prop.group(2) else "")
                    props.append(Node("node-property", {"key": key, "value": prop.group(3) or ""}))
            return Node("property-drawer", {}, props), end + 1
        return b.drawer(name, *self.parse(body)), end + 1

    def _latex_environment(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        match = _LATEX_BEGIN_RE.match(lines[i])
        if not match:
            return None
        end_re = re.compile(rf"\\end\{{{re.escape(match.group(1))}\}}\s*$")
        end = next((j for j in range(i, len(lines)) if end_re.search(lines[j])), None)
        if end is None:
            return None
        value = "\n".join(lines[i : end + 1]) + "\n"
        return b.latex_environment(remove_indentation(value)), end + 1

    def _keyword(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        match = _KEYWORD_RE.match(lines[i])
        if not match or _AFFILIATED_RE.match(lines[i]):
            return None
        return b.keyword(match.group(1), match.group(2) or ""), i + 1

    def _comment(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        if not _COMMENT_RE.match(lines[i]):
            return None
        values = []
        j = i
        while j < len(lines):
            match = _COMMENT_RE.match(lines[j])
            if not match:
                break
            values.append(match.group(1) or "")
            j += 1
        return b.comment("\n".join(values)), j

    def _fixed_width(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        if not _FIXED_WIDTH_RE.match(lines[i]):
            return None
        values = []
        j = i
        while j < len(lines):
            match = _FIXED_WIDTH_RE.match(lines[j])
            if not match:
                break
            values.append(match.group(1) or "")
            j += 1
        return b.fixed_width("\n".join(values) + "\n"), j

    def _horizontal_rule(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        if not _RULE_RE.match(lines[i]):
            return None
        return b.horizontal_rule(), i + 1

    def _footnote_definition(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        match = _FOOTNOTE_DEF_RE.match(lines[i])
        if not match:
            return None
        body = [match.group(2) or ""]
        j = i + 1
        blanks = 0
        while j < len(lines):
            line = lines[j]
            if _FOOTNOTE_DEF_RE.match(line):
                break
            if _BLANK_RE.match(line):
                blanks += 1
                if blanks >= 2:
                    break
            else:
                blanks = 0
            body.append(line)
            j += 1
        # Trailing blank lines belong to the definition's post_blank
        while len(body) > 1 and _BLANK_RE.match(body[-1]):
            body.pop()
            j -= 1
        return b.footnote_definition(match.group(1), *self.parse(body)), j

    def _table(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        if not _TABLE_RE.match(lines[i]):
            return None
        rows = []
        j = i
        while j < len(lines) and _TABLE_RE.match(lines[j]):
            rows.append(self._table_row(lines[j]))
            j += 1
        formulas = []
        while j < len(lines):
            tblfm = _TBLFM_RE.match(lines[j])
            if not tblfm:
                break
            formulas.append(tblfm.group(1).strip())
            j += 1
        table = b.table(*rows)
        if formulas:
            table.set_property("tblfm", formulas)
        return table, j

    def _table_row(self, line: str) -> Node:
        if _TABLE_RULE_RE.match(line):
            return b.table_row(type="rule")
        content = line.strip()[1:]
        if content.endswith("|"):
            content = content[:-1]
        cells = [b.table_cell(*self.inline.parse(cell.strip())) for cell in content.split("|")]
        return b.table_row(*cells)

    def _clock(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        match = _CLOCK_RE.match(lines[i])
        if not match:
            return None
        return b.clock(match.group(1), match.group(2)), i + 1

    def _plain_list(self, lines: list[str], i: int) -> Optional[tuple[Node, int]]:
        first = _ITEM_RE.match(lines[i])
        if not first:
            return None
        indent = len(first.group("indent").expandtabs())
        items: list[Node] = []
        list_type: Optional[str] = None
        j = i
        n = len(lines)
        while j < n:
            match = _ITEM_RE.match(lines[j])
            if not match or len(match.group("indent").expandtabs()) != indent:
                break
            end = j + 1
            blanks = 0
            while end < n:
                line = lines[end]
                if _BLANK_RE.match(line):
                    blanks += 1
                    if blanks >= 2:
                        break
                    end += 1
                    continue
                if len(line) - len(line.lstrip()) <= indent:
                    break
                blanks = 0
                end += 1
            # Blank lines before the next line stay outside the item body
            body_end = end
            while body_end > j + 1 and _BLANK_RE.match(lines[body_end - 1]):
                body_end -= 1
            if list_type is None:
                list_type = self._list_type(match)
            items.append(self._item(match, lines[j + 1 : body_end]))
            trailing = end - body_end
            j = end
            next_is_item = False
            if j < n:
                following = _ITEM_RE.match(lines[j])
                next_is_item = bool(following and len(following.group("indent").expandtabs()) == indent)
            if next_is_item:
                items[-1].set_property("post_blank", trailing)
            else:
                # Blank lines after the last item belong to the list
                j = body_end
                break

        plain_list = b.plain_list(*items, type=list_type or "unordered")
        return plain_list, j

    def _list_type(self, match: re.Match[str]) -> str:
        if match.group("bullet")[0].isdigit():
            return "ordered"
        if _ITEM_TAG_RE.match(match.group("rest")):
            return "descriptive"
        return "unordered"

    def _item(self, match: re.Match[str], continuation: list[str]) -> Node:
        bullet = match.group("bullet")
        rest = match.group("rest")
        tag = None
        if not bullet[0].isdigit():
            tagged = _ITEM_TAG_RE.match(rest)
            if tagged:
                tag = self.inline.parse(tagged.group(1).strip())
                rest = tagged.group(2)
        content_column = match.start("rest")
        body = ([" " * content_column + rest] if rest.strip() else []) + continuation
        counter = int(match.group("counter")) if match.group("counter") else None
        checkbox = _CHECKBOXES.get(match.group("checkbox")) if match.group("checkbox") else None
        return b.item(*self.parse(body), checkbox=checkbox, tag=tag, counter=counter, bullet=bullet + " ")

    def _paragraph(self, lines: list[str], i: int) -> tuple[Node, int]:
        j = i + 1
        while j < len(lines) and not _BLANK_RE.match(lines[j]) and not self._starts_element(lines, j):
            j += 1
        text = remove_indentation("\n".join(lines[i:j]) + "\n")
        return b.paragraph(*self.inline.parse(text)), j


__all__ = ["ElementParser", "parse_switches", "unescape_code"]
