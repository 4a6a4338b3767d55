#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/parsers/org.py
"""Org-Mode to document tree parser.

The outline (headline levels, TODO keywords, priorities and titles) is read
with orgparse. The text of each section is then parsed into elements and
objects by :mod:`org2md.parsers.elements` and :mod:`org2md.parsers.inline`.

"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import IO, Any, Optional, Union

from org2md.ast import builder as b
from org2md.ast.nodes import Node
from org2md.constants import COMMENT_KEYWORD, DEPS_ORG
from org2md.exceptions import ParsingError
from org2md.options.org import OrgParserOptions
from org2md.parsers.elements import ElementParser
from org2md.parsers.inline import InlineParser
from org2md.utils.decorators import requires_dependencies
from org2md.utils.encoding import load_text

logger = logging.getLogger(__name__)

# Same header rule orgparse uses to split the outline
_HEADLINE_RE = re.compile(r"^\*+ ")
_HEADLINE_TAGS_RE = re.compile(r"[ \t]+:((?:[\w@#%]+:)+)[ \t]*$")
_TODO_KEYWORD_RE = re.compile(r"^\s*#\+(?:SEQ_|TYP_)?TODO:[ \t]*(.*)$", re.IGNORECASE)
_RADIO_TARGET_RE = re.compile(r"<<<([^<>\n]+?)>>>")


class OrgParser:
    r"""Convert Org-Mode text into a document tree.

    Parameters
    ----------
    options : OrgParserOptions or None, default = None
        Parser configuration options

    Notes
    -----
    orgparse splits the buffer into headlines wherever a line starts with
    stars and a space, including inside blocks. The element parser sees
    each section's lines as written, after the headline line.

    Examples
    --------
    Basic parsing:

        >>> parser = OrgParser()
        >>> doc = parser.parse("* Heading\n\nThis is *bold*.")
        >>> doc.children[0].kind
        'headline'

    """

    def __init__(self, options: OrgParserOptions | None = None):
        """Initialize the Org parser with options."""
        if options is not None and not isinstance(options, OrgParserOptions):
            raise TypeError(f"Expected OrgParserOptions, got {type(options).__name__}")
        self.options: OrgParserOptions = options or OrgParserOptions()

    @requires_dependencies("org", DEPS_ORG)
    def parse(self, input_data: Union[str, Path, IO[bytes], IO[str], bytes]) -> Node:
        """Parse Org input into a document tree.

        Parameters
        ----------
        input_data : str, Path, IO or bytes
            Org input to parse. Can be:
            - File path (str or Path)
            - File-like object
            - Raw Org bytes
            - Org string

        Returns
        -------
        Node
            The ``document`` root

        Raises
        ------
        DependencyError
            If orgparse is not installed
        ParsingError
            If parsing fails

        """
        filename = str(input_data) if isinstance(input_data, Path) else "<string>"
        text = load_text(input_data)
        return self.parse_text(text, filename=filename)

    def parse_text(self, text: str, filename: str = "<string>") -> Node:
        """Parse an Org string; see :meth:`parse`."""
        import orgparse
        from orgparse.node import OrgEnv

        todos, dones = self._todo_keywords(text)
        env = OrgEnv(todos=todos, dones=dones, filename=filename)
        try:
            root = orgparse.loads(text, filename=filename, env=env)
        except Exception as e:
            raise ParsingError(f"Failed to parse Org outline: {e}", parsing_stage="outline", original_error=e) from e

        lines = text.splitlines()
        outline = list(root[1:])
        starts = [i for i, line in enumerate(lines) if _HEADLINE_RE.match(line)]
        if len(starts) != len(outline):
            raise ParsingError(
                f"Outline mismatch: found {len(starts)} headline lines but orgparse returned {len(outline)} nodes",
                parsing_stage="outline",
            )

        radio_targets = _RADIO_TARGET_RE.findall(text)
        inline = InlineParser(radio_targets)
        elements = ElementParser(inline)

        try:
            document = b.document()
            preamble = lines[: starts[0]] if starts else lines
            body = elements.parse(preamble)
            if body:
                document.append_child(b.section(*body))

            stack: list[tuple[int, Node]] = [(0, document)]
            for index, (org_node, start) in enumerate(zip(outline, starts)):
                end = starts[index + 1] if index + 1 < len(starts) else len(lines)
                headline = self._headline(org_node, lines[start], lines[start + 1 : end], inline, elements, dones)
                level = headline.get("level")
                while stack[-1][0] >= level:
                    stack.pop()
                stack[-1][1].append_child(headline)
                stack.append((level, headline))
        except ParsingError:
            raise
        except Exception as e:
            raise ParsingError(f"Failed to parse Org body: {e}", parsing_stage="body", original_error=e) from e

        logger.debug(f"Parsed {len(outline)} headlines from {filename}")
        return document

    def _todo_keywords(self, text: str) -> tuple[list[str], list[str]]:
        """Merge option keywords with ``#+TODO:`` lines of the document."""
        todos = list(self.options.todo_keywords)
        dones = list(self.options.done_keywords)
        for line in text.splitlines():
            match = _TODO_KEYWORD_RE.match(line)
            if not match:
                continue
            spec = match.group(1)
            before, _, after = spec.partition("|")
            words = [re.sub(r"\(.*\)$", "", w) for w in before.split()]
            done_words = [re.sub(r"\(.*\)$", "", w) for w in after.split()]
            if not done_words and words:
                done_words = [words.pop()]
            todos.extend(w for w in words if w not in todos)
            dones.extend(w for w in done_words if w not in dones)
        return todos, dones

    def _headline(
        self,
        org_node: Any,
        heading_line: str,
        section_lines: list[str],
        inline: InlineParser,
        elements: ElementParser,
        dones: list[str],
    ) -> Node:
        """Build a headline node from an orgparse node and its section lines."""
        raw_title = (
            org_node.get_heading(format="raw") if hasattr(org_node, "get_heading") else (org_node.heading or "")
        ).strip()
        commented = False
        if raw_title == COMMENT_KEYWORD or raw_title.startswith(COMMENT_KEYWORD + " "):
            commented = True
            raw_title = raw_title[len(COMMENT_KEYWORD) :].strip()

        tags_match = _HEADLINE_TAGS_RE.search(heading_line)
        if tags_match:
            tags = [tag for tag in tags_match.group(1).split(":") if tag]
        else:
            tags = sorted(getattr(org_node, "shallow_tags", None) or ())

        todo = org_node.todo or None
        todo_type: Optional[str] = None
        if todo:
            todo_type = "done" if todo in dones else "todo"

        section_elements, properties = elements.parse_section(section_lines)
        children: list[Node] = [b.section(*section_elements)] if section_elements else []

        headline = b.headline(
            inline.parse(raw_title),
            *children,
            level=org_node.level,
            todo=todo,
            todo_type=todo_type,
            priority=org_node.priority or None,
            tags=tags,
            raw_value=raw_title,
            commented=commented,
            footnote_section=raw_title == self.options.footnote_section_title,
        )
        if self.options.parse_properties:
            for key, value in properties.items():
                headline.set_property(key, value)
        return headline


__all__ = ["OrgParser"]
