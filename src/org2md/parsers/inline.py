#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/parsers/inline.py
"""Org inline object parser.

Turns the text of a paragraph, headline title, table cell or item tag into
a list of object nodes: emphasis, code and verbatim, links, footnote
references, targets, timestamps, entities, LaTeX fragments, line breaks,
export snippets, statistics cookies, sub/superscripts and inline source
blocks. Everything else is plain text.

Trailing spaces after an object are recorded as its ``post_blank`` rather
than kept in the following plain text, so an object dropped from the
export takes its spacing with it.

"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from org2md.ast import builder as b
from org2md.ast.nodes import Node
from org2md.constants import ENTITIES, LINK_TYPES
from org2md.export.protocols import registered_link_types

logger = logging.getLogger(__name__)

EMPHASIS_KINDS = {
    "*": "bold",
    "/": "italic",
    "_": "underline",
    "+": "strike-through",
    "=": "verbatim",
    "~": "code",
}
_VERBATIM_MARKERS = frozenset("=~")

_EMPHASIS_PRE = frozenset(" \t\n-('\"{")
_EMPHASIS_POST = r"""(?=[-\s.,:!?;'")}\[\\]|$)"""
_EMPHASIS_RES = {
    marker: re.compile(
        re.escape(marker)
        + r"([^\s"
        + re.escape(marker)
        + r"]|\S.*?\S)"
        + re.escape(marker)
        + _EMPHASIS_POST,
        re.DOTALL,
    )
    for marker in EMPHASIS_KINDS
}

_TRIGGER_RE = re.compile(r"[*/_+=~\[<\\$@^]|\b[^\W_]")

_BRACKET_LINK_RE = re.compile(r"\[\[((?:[^\[\]\\]|\\.)+)\](?:\[(.+?)\])?\]", re.DOTALL)
_FOOTNOTE_RE = re.compile(r"\[fn:([-\w]*)(\]|:)")
_INACTIVE_TS_RE = re.compile(r"\[\d{4}-\d{2}-\d{2}[^\]\n]*\](?:--\[\d{4}-\d{2}-\d{2}[^\]\n]*\])?")
_ACTIVE_TS_RE = re.compile(r"<\d{4}-\d{2}-\d{2}[^>\n]*>(?:--<\d{4}-\d{2}-\d{2}[^>\n]*>)?")
_COOKIE_RE = re.compile(r"\[(\d*%|\d*/\d*)\]")
_RADIO_TARGET_RE = re.compile(r"<<<([^<>\n]+?)>>>")
_TARGET_RE = re.compile(r"<<([^<>\s](?:[^<>\n]*[^<>\s])?)>>")
_ANGLE_LINK_RE = re.compile(r"<([a-zA-Z][-\w+]*):([^>\n]+)>")
_LINE_BREAK_RE = re.compile(r"\\\\[ \t]*(?:\n|$)")
_LATEX_PAREN_RE = re.compile(r"\\\((.*?)\\\)", re.DOTALL)
_LATEX_BRACKET_RE = re.compile(r"\\\[(.*?)\\\]", re.DOTALL)
_LATEX_DOUBLE_DOLLAR_RE = re.compile(r"\$\$(.+?)\$\$", re.DOTALL)
_LATEX_DOLLAR_RE = re.compile(r"""\$(?:[^\s,;.$]|[^\s,;.$][^$]*?[^\s,.$])\$(?=[-.,?;:'")\s]|$)""")
_ENTITY_RE = re.compile(r"\\([a-zA-Z]+)(\{\})?")
_LATEX_COMMAND_RE = re.compile(r"\\[a-zA-Z]+\*?(?:\[[^\]\n{}]*\]|\{[^{}\n]*\})*")
_SNIPPET_RE = re.compile(r"@@([-\w]+):(.*?)@@", re.DOTALL)
_INLINE_SRC_RE = re.compile(r"src_([^\s\[{]+?)(?:\[([^\]\n]*)\])?\{([^}\n]*)\}")
_SCRIPT_RE = re.compile(r"[_^](?:\{([^{}\n]*)\}|(\*)|([+-]?(?:[^\W_]|[.,\\])*[^\W_]))")

_CODEREF_RE = re.compile(r"\(([-\w ]+)\)")
_LINK_TYPE_RE = re.compile(r"([a-zA-Z][-\w+.]*):(.*)", re.DOTALL)
_FILE_PREFIXES = ("/", "./", "../", "~/")


def link_types() -> frozenset[str]:
    """Return every link type recognized as ``type:path``."""
    return frozenset(LINK_TYPES) | registered_link_types()


def classify_link(raw: str) -> dict[str, object]:
    """Split a bracket link's destination into type, path and options.

    Parameters
    ----------
    raw : str
        Destination as written between the first pair of brackets

    Returns
    -------
    dict
        ``type``, ``path`` and, for file links with ``::``, ``search_option``

    Examples
    --------
    >>> classify_link("#intro")
    {'type': 'custom-id', 'path': 'intro'}
    >>> classify_link("file:notes.org::*Tasks")["search_option"]
    '*Tasks'

    """
    target = re.sub(r"\\([\[\]\\])", r"\1", raw)
    target = re.sub(r"\s*\n\s*", " ", target)
    if target.startswith("#"):
        return {"type": "custom-id", "path": target[1:]}
    coderef = _CODEREF_RE.fullmatch(target)
    if coderef:
        return {"type": "coderef", "path": coderef.group(1)}
    typed = _LINK_TYPE_RE.match(target)
    if typed and typed.group(1) in link_types():
        link_type, path = typed.group(1), typed.group(2)
        if link_type == "file":
            return _file_link(path)
        return {"type": link_type, "path": path}
    if target.startswith(_FILE_PREFIXES):
        return _file_link(target)
    return {"type": "fuzzy", "path": target}


def _file_link(path: str) -> dict[str, object]:
    result: dict[str, object] = {"type": "file"}
    if "::" in path:
        path, search = path.split("::", 1)
        result["search_option"] = search
    result["path"] = path
    return result


def _balanced_end(text: str, start: int) -> int:
    """Return the index of the ``]`` closing a bracket opened before ``start``, or -1."""
    depth = 1
    for i in range(start, len(text)):
        char = text[i]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return i
    return -1


class InlineParser:
    """Parse Org inline markup into object nodes.

    Parameters
    ----------
    radio_targets : iterable of str, optional
        Texts of the document's radio targets; matching words in plain
        text become radio links

    Examples
    --------
    >>> nodes = InlineParser().parse("some *bold* text")
    >>> [n.kind for n in nodes]
    ['plain-text', 'bold', 'plain-text']

    """

    def __init__(self, radio_targets: Iterable[str] = ()):
        """Compile the radio link matcher for the given targets."""
        targets = sorted({t.strip() for t in radio_targets if t.strip()}, key=len, reverse=True)
        self._radio_re: Optional[re.Pattern[str]] = None
        if targets:
            alternatives = "|".join(r"\s+".join(re.escape(word) for word in t.split()) for t in targets)
            self._radio_re = re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)", re.IGNORECASE)

    def parse(self, text: str, in_link: bool = False) -> list[Node]:
        """Parse ``text`` into a list of objects.

        Parameters
        ----------
        text : str
            Raw Org text
        in_link : bool, default False
            Parsing a link description: links, footnote references,
            targets and line breaks are not recognized

        Returns
        -------
        list of Node
            Objects in document order

        """
        nodes: list[Node] = []
        start = 0
        pos = 0
        length = len(text)
        while pos < length:
            trigger = _TRIGGER_RE.search(text, pos)
            if trigger is None:
                break
            candidate = trigger.start()
            found = self._match_at(text, candidate, in_link)
            if found is None:
                pos = candidate + 1
                continue
            obj, end = found
            if candidate > start:
                nodes.append(b.text(text[start:candidate]))
            if obj.kind != "line-break":
                blank_end = end
                while blank_end < length and text[blank_end] in " \t":
                    blank_end += 1
                if blank_end > end:
                    obj.set_property("post_blank", blank_end - end)
                    end = blank_end
            nodes.append(obj)
            start = pos = end
        if start < length:
            nodes.append(b.text(text[start:]))
        return nodes

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _match_at(self, text: str, pos: int, in_link: bool) -> Optional[tuple[Node, int]]:
        char = text[pos]
        previous = text[pos - 1] if pos > 0 else None

        if char in EMPHASIS_KINDS:
            found = self._emphasis(text, pos, previous)
            if found is not None:
                return found
        if char in "_^":
            return self._script(text, pos, previous)
        if char == "[":
            return self._bracket(text, pos, in_link)
        if char == "<":
            return self._angle(text, pos, in_link)
        if char == "\\":
            return self._backslash(text, pos, in_link)
        if char == "$":
            return self._dollar(text, pos, previous)
        if char == "@":
            return self._snippet(text, pos)
        if char.isalnum():
            return self._word(text, pos, previous, in_link)
        return None

    # ------------------------------------------------------------------
    # Object matchers
    # ------------------------------------------------------------------

    def _emphasis(self, text: str, pos: int, previous: Optional[str]) -> Optional[tuple[Node, int]]:
        if previous is not None and previous not in _EMPHASIS_PRE:
            return None
        marker = text[pos]
        match = _EMPHASIS_RES[marker].match(text, pos)
        if match is None or match.group(1).count("\n") > 1:
            return None
        body = match.group(1)
        kind = EMPHASIS_KINDS[marker]
        if marker in _VERBATIM_MARKERS:
            return Node(kind, {"value": body}), match.end()
        return Node(kind, {}, self.parse(body)), match.end()

    def _script(self, text: str, pos: int, previous: Optional[str]) -> Optional[tuple[Node, int]]:
        if previous is None or previous.isspace():
            return None
        match = _SCRIPT_RE.match(text, pos)
        if match is None:
            return None
        braced, star, bare = match.groups()
        body = braced if braced is not None else (star or bare or "")
        kind = "subscript" if text[pos] == "_" else "superscript"
        return Node(kind, {"use_brackets": braced is not None}, self.parse(body)), match.end()

    def _bracket(self, text: str, pos: int, in_link: bool) -> Optional[tuple[Node, int]]:
        if not in_link:
            match = _BRACKET_LINK_RE.match(text, pos)
            if match is not None:
                return self._bracket_link(match), match.end()
            match = _FOOTNOTE_RE.match(text, pos)
            if match is not None:
                return self._footnote_reference(text, match)
        match = _INACTIVE_TS_RE.match(text, pos)
        if match is not None:
            kind = "inactive-range" if "--[" in match.group() else "inactive"
            return b.timestamp(match.group(), type=kind), match.end()
        match = _COOKIE_RE.match(text, pos)
        if match is not None:
            return b.statistics_cookie(match.group()), match.end()
        return None

    def _bracket_link(self, match: re.Match[str]) -> Node:
        raw, description = match.group(1), match.group(2)
        props = classify_link(raw)
        children = self.parse(description, in_link=True) if description else []
        return Node("link", {**props, "raw_link": raw, "format": "bracket"}, children)

    def _footnote_reference(self, text: str, match: re.Match[str]) -> Optional[tuple[Node, int]]:
        label = match.group(1) or None
        if match.group(2) == "]":
            if label is None:
                return None
            return b.footnote_reference(label), match.end()
        end = _balanced_end(text, match.end())
        if end < 0:
            return None
        definition = text[match.end() : end]
        ref = Node("footnote-reference", {"label": label, "type": "inline"}, self.parse(definition))
        return ref, end + 1

    def _angle(self, text: str, pos: int, in_link: bool) -> Optional[tuple[Node, int]]:
        if not in_link:
            match = _RADIO_TARGET_RE.match(text, pos)
            if match is not None:
                radio = Node("radio-target", {"value": match.group(1)}, self.parse(match.group(1), in_link=True))
                return radio, match.end()
            match = _TARGET_RE.match(text, pos)
            if match is not None:
                return b.target(match.group(1)), match.end()
        match = _ACTIVE_TS_RE.match(text, pos)
        if match is not None:
            kind = "active-range" if "--<" in match.group() else "active"
            return b.timestamp(match.group(), type=kind), match.end()
        if not in_link:
            match = _ANGLE_LINK_RE.match(text, pos)
            if match is not None and match.group(1) in link_types():
                raw = f"{match.group(1)}:{match.group(2)}"
                props = classify_link(raw)
                return Node("link", {**props, "raw_link": raw, "format": "angle"}), match.end()
        return None

    def _backslash(self, text: str, pos: int, in_link: bool) -> Optional[tuple[Node, int]]:
        if not in_link:
            match = _LINE_BREAK_RE.match(text, pos)
            if match is not None:
                return b.line_break(), match.end()
        for pattern in (_LATEX_PAREN_RE, _LATEX_BRACKET_RE):
            match = pattern.match(text, pos)
            if match is not None:
                return b.latex_fragment(match.group()), match.end()
        match = _ENTITY_RE.match(text, pos)
        if match is not None:
            name, brackets = match.group(1), match.group(2)
            end = match.end()
            if name in ENTITIES and (brackets or end >= len(text) or not text[end].isalpha()):
                html, utf8 = ENTITIES[name]
                return b.entity(name, html, utf8, use_brackets=bool(brackets)), end
        match = _LATEX_COMMAND_RE.match(text, pos)
        if match is not None:
            return b.latex_fragment(match.group()), match.end()
        return None

    def _dollar(self, text: str, pos: int, previous: Optional[str]) -> Optional[tuple[Node, int]]:
        if previous == "$":
            return None
        match = _LATEX_DOUBLE_DOLLAR_RE.match(text, pos)
        if match is not None:
            return b.latex_fragment(match.group()), match.end()
        match = _LATEX_DOLLAR_RE.match(text, pos)
        if match is not None:
            return b.latex_fragment(match.group()), match.end()
        return None

    def _snippet(self, text: str, pos: int) -> Optional[tuple[Node, int]]:
        match = _SNIPPET_RE.match(text, pos)
        if match is None:
            return None
        return b.export_snippet(match.group(1), match.group(2)), match.end()

    def _word(self, text: str, pos: int, previous: Optional[str], in_link: bool) -> Optional[tuple[Node, int]]:
        if previous is not None and (previous.isalnum() or previous == "_"):
            return None
        if text.startswith("src_", pos):
            match = _INLINE_SRC_RE.match(text, pos)
            if match is not None:
                props = {"language": match.group(1), "parameters": match.group(2), "value": match.group(3)}
                return Node("inline-src-block", props), match.end()
        if in_link:
            return None
        match = self._plain_link_re().match(text, pos)
        if match is not None:
            raw = match.group()
            props = classify_link(raw)
            return Node("link", {**props, "raw_link": raw, "format": "plain"}), match.end()
        if self._radio_re is not None:
            match = self._radio_re.match(text, pos)
            if match is not None:
                found = match.group()
                radio = b.link(found, found, type="radio", raw_link=found)
                return radio, match.end()
        return None

    def _plain_link_re(self) -> re.Pattern[str]:
        types = "|".join(sorted((re.escape(t) for t in link_types()), key=len, reverse=True))
        return _plain_link_pattern(types)


_PLAIN_LINK_CACHE: dict[str, re.Pattern[str]] = {}


def _plain_link_pattern(types: str) -> re.Pattern[str]:
    pattern = _PLAIN_LINK_CACHE.get(types)
    if pattern is None:
        pattern = re.compile(rf"""(?:{types}):[^\s()<>\[\]]*[^\s()<>\[\].,;:!?'"*=~+]""")
        _PLAIN_LINK_CACHE[types] = pattern
    return pattern


__all__ = ["InlineParser", "classify_link", "link_types", "EMPHASIS_KINDS"]
