#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/options.py
"""Export option specs and three-layer option resolution.

Layers, highest precedence first:

1. Document keywords: ``#+OPTIONS:`` items and backend-declared keywords
   such as ``#+TITLE:`` or ``#+EXCLUDE_TAGS:``
2. User values: option dataclasses, CLI flags and config files
3. Backend defaults, resolved along the derivation chain, falling back to
   the general defaults below

"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from org2md.ast.nodes import Node
from org2md.ast.utils import walk
from org2md.backends.base import OptionSpec
from org2md.constants import (
    DEFAULT_EXCLUDE_TAGS,
    DEFAULT_HEADLINE_LEVELS,
    DEFAULT_LANGUAGE,
    DEFAULT_PRESERVE_BREAKS,
    DEFAULT_SECTION_NUMBERS,
    DEFAULT_SELECT_TAGS,
    DEFAULT_WITH_ARCHIVED_TREES,
    DEFAULT_WITH_BROKEN_LINKS,
    DEFAULT_WITH_CLOCKS,
    DEFAULT_WITH_DRAWERS,
    DEFAULT_WITH_ENTITIES,
    DEFAULT_WITH_FIXED_WIDTH,
    DEFAULT_WITH_FOOTNOTES,
    DEFAULT_WITH_LATEX,
    DEFAULT_WITH_PLANNING,
    DEFAULT_WITH_PRIORITY,
    DEFAULT_WITH_PROPERTIES,
    DEFAULT_WITH_SMART_QUOTES,
    DEFAULT_WITH_SPECIAL_STRINGS,
    DEFAULT_WITH_STATISTICS_COOKIES,
    DEFAULT_WITH_SUB_SUPERSCRIPT,
    DEFAULT_WITH_TABLES,
    DEFAULT_WITH_TAGS,
    DEFAULT_WITH_TASKS,
    DEFAULT_WITH_TIMESTAMPS,
    DEFAULT_WITH_TOC,
    DEFAULT_WITH_TODO_KEYWORDS,
)
from org2md.exceptions import ValidationError

if TYPE_CHECKING:
    from org2md.backends.registry import BackendRegistry

logger = logging.getLogger(__name__)

GENERAL_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec("title", None, keyword="TITLE", behavior="space"),
    OptionSpec("author", None, keyword="AUTHOR", behavior="space"),
    OptionSpec("date", None, keyword="DATE"),
    OptionSpec("email", None, keyword="EMAIL"),
    OptionSpec("language", DEFAULT_LANGUAGE, keyword="LANGUAGE"),
    OptionSpec("select_tags", DEFAULT_SELECT_TAGS, keyword="SELECT_TAGS", behavior="split"),
    OptionSpec("exclude_tags", DEFAULT_EXCLUDE_TAGS, keyword="EXCLUDE_TAGS", behavior="split"),
    OptionSpec("with_toc", DEFAULT_WITH_TOC, item="toc"),
    OptionSpec("headline_levels", DEFAULT_HEADLINE_LEVELS, item="H"),
    OptionSpec("section_numbers", DEFAULT_SECTION_NUMBERS, item="num"),
    OptionSpec("with_tags", DEFAULT_WITH_TAGS, item="tags"),
    OptionSpec("with_todo_keywords", DEFAULT_WITH_TODO_KEYWORDS, item="todo"),
    OptionSpec("with_priority", DEFAULT_WITH_PRIORITY, item="pri"),
    OptionSpec("with_footnotes", DEFAULT_WITH_FOOTNOTES, item="f"),
    OptionSpec("with_smart_quotes", DEFAULT_WITH_SMART_QUOTES, item="'"),
    OptionSpec("with_special_strings", DEFAULT_WITH_SPECIAL_STRINGS, item="-"),
    OptionSpec("preserve_breaks", DEFAULT_PRESERVE_BREAKS, item="\\n"),
    OptionSpec("with_fixed_width", DEFAULT_WITH_FIXED_WIDTH, item=":"),
    OptionSpec("with_tables", DEFAULT_WITH_TABLES, item="|"),
    OptionSpec("with_drawers", DEFAULT_WITH_DRAWERS, item="d"),
    OptionSpec("with_properties", DEFAULT_WITH_PROPERTIES, item="prop"),
    OptionSpec("with_planning", DEFAULT_WITH_PLANNING, item="p"),
    OptionSpec("with_clocks", DEFAULT_WITH_CLOCKS, item="c"),
    OptionSpec("with_timestamps", DEFAULT_WITH_TIMESTAMPS, item="<"),
    OptionSpec("with_latex", DEFAULT_WITH_LATEX, item="tex"),
    OptionSpec("with_sub_superscript", DEFAULT_WITH_SUB_SUPERSCRIPT, item="^"),
    OptionSpec("with_entities", DEFAULT_WITH_ENTITIES, item="e"),
    OptionSpec("with_statistics_cookies", DEFAULT_WITH_STATISTICS_COOKIES, item="stat"),
    OptionSpec("with_archived_trees", DEFAULT_WITH_ARCHIVED_TREES, item="arch"),
    OptionSpec("with_tasks", DEFAULT_WITH_TASKS, item="tasks"),
    OptionSpec("with_broken_links", DEFAULT_WITH_BROKEN_LINKS, item="broken-links"),
    # Engine keys, settable by the user layer only
    OptionSpec("id_locations", None),
    OptionSpec("input_file", None),
    OptionSpec("filters", None),
)

_OPTIONS_ITEM_RE = re.compile(r'(\S+?):("(?:\\.|[^"\\])*"|\([^)]*\)|\S+)')
_INT_RE = re.compile(r"^[-+]?\d+$")
_LIST_ITEM_RE = re.compile(r'"((?:\\.|[^"\\])*)"|(\S+)')


def read_option_value(raw: str) -> Any:
    """Read an ``#+OPTIONS:`` value using Org conventions.

    ``t`` is True, ``nil`` is False, integers are ints, quoted strings are
    unquoted and parenthesised lists become tuples. Anything else is
    returned as the bare symbol string.

    Examples
    --------
    >>> read_option_value("nil")
    False
    >>> read_option_value("2")
    2
    >>> read_option_value('(not "LOGBOOK")')
    ('not', 'LOGBOOK')

    """
    if raw == "t":
        return True
    if raw == "nil":
        return False
    if _INT_RE.match(raw):
        return int(raw)
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return raw[1:-1].replace('\\"', '"')
    if raw.startswith("(") and raw.endswith(")"):
        items = []
        for match in _LIST_ITEM_RE.finditer(raw[1:-1]):
            quoted, bare = match.groups()
            items.append(quoted.replace('\\"', '"') if quoted is not None else bare)
        return tuple(items)
    return raw


def parse_options_line(line: str) -> dict[str, Any]:
    """Parse the value of one ``#+OPTIONS:`` keyword into item -> value."""
    return {match.group(1): read_option_value(match.group(2)) for match in _OPTIONS_ITEM_RE.finditer(line)}


def collect_keywords(tree: Node) -> list[tuple[str, str]]:
    """Return (KEY, value) for every keyword in the tree, in document order."""
    return [(str(kw.get("key", "")).upper(), str(kw.get("value", ""))) for kw in walk(tree, "keyword")]


def document_options(
    keywords: Iterable[tuple[str, str]],
    specs: Mapping[str, OptionSpec],
) -> dict[str, Any]:
    """Compute the document layer from keywords.

    Parameters
    ----------
    keywords : iterable of (str, str)
        Keyword key and value pairs, in document order
    specs : mapping
        Option specs available for the export backend

    Returns
    -------
    dict
        Option key -> value found in the document

    """
    by_item = {spec.item: spec for spec in specs.values() if spec.item}
    by_keyword = {spec.keyword: spec for spec in specs.values() if spec.keyword}
    result: dict[str, Any] = {}
    for key, value in keywords:
        if key == "OPTIONS":
            for item, item_value in parse_options_line(value).items():
                spec = by_item.get(item)
                if spec is None:
                    logger.warning(f"Ignoring unknown #+OPTIONS item '{item}'")
                    continue
                result[spec.key] = item_value
            continue
        spec = by_keyword.get(key)
        if spec is None:
            continue
        value = value.strip()
        if spec.behavior == "split":
            result[spec.key] = tuple(result.get(spec.key, ())) + tuple(value.split())
        elif spec.behavior == "space" and spec.key in result:
            result[spec.key] = f"{result[spec.key]} {value}"
        elif spec.behavior == "newline" and spec.key in result:
            result[spec.key] = f"{result[spec.key]}\n{value}"
        else:
            result[spec.key] = value
    return result


def subtree_keywords(headline: Node) -> list[tuple[str, str]]:
    """Return keywords carried by ``EXPORT_*`` properties of a headline.

    ``EXPORT_OPTIONS`` maps to ``OPTIONS`` and ``EXPORT_TITLE`` to ``TITLE``
    and so on, so a subtree export can override buffer settings.

    """
    result: list[tuple[str, str]] = []
    for key, value in headline.properties.items():
        if isinstance(key, str) and key.startswith("EXPORT_") and isinstance(value, str):
            result.append((key[len("EXPORT_") :], value))
    return result


def resolve_options(
    registry: BackendRegistry,
    backend: str,
    user_options: Optional[Mapping[str, Any]] = None,
    tree: Optional[Node] = None,
    subtree: Optional[Node] = None,
) -> dict[str, Any]:
    """Resolve the full option map for one export.

    Parameters
    ----------
    registry : BackendRegistry
        Registry holding the backend
    backend : str
        Export backend name
    user_options : mapping, optional
        User layer (dataclass fields, CLI and config values)
    tree : Node, optional
        Document to read keywords from
    subtree : Node, optional
        Headline being exported; its ``EXPORT_*`` properties override the
        buffer keywords

    Returns
    -------
    dict
        Resolved option key -> value

    Raises
    ------
    ValidationError
        If the user layer names an option no backend declares

    """
    specs: dict[str, OptionSpec] = {spec.key: spec for spec in GENERAL_OPTIONS}
    specs.update(registry.all_options(backend))

    values: dict[str, Any] = {key: spec.default for key, spec in specs.items()}

    if user_options:
        known = set(specs) | registry.known_option_keys()
        for key, value in user_options.items():
            if key not in known:
                raise ValidationError(
                    f"Unknown export option '{key}'", parameter_name=key, parameter_value=value
                )
            if key in specs:
                values[key] = value
            else:
                logger.debug(f"Option '{key}' does not apply to backend '{backend}', ignoring")

    if tree is not None:
        keywords = collect_keywords(tree)
        if subtree is not None:
            keywords.extend(subtree_keywords(subtree))
        doc_values = document_options(keywords, specs)
        if doc_values:
            logger.debug(f"Document options: {doc_values}")
        values.update(doc_values)

    return values


__all__ = [
    "GENERAL_OPTIONS",
    "read_option_value",
    "parse_options_line",
    "collect_keywords",
    "document_options",
    "subtree_keywords",
    "resolve_options",
]
