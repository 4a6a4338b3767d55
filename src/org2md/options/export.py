#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/options/export.py
"""General export options shared by every backend.

Each field maps one-to-one to an export option key. Values given here form
the user layer: they override backend defaults and are themselves
overridden by ``#+OPTIONS:`` and other document keywords.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from org2md.export.filters import validate_user_filters
from org2md.options.base import UNSET, BaseExportOptions


@dataclass(frozen=True)
class ExportOptions(BaseExportOptions):
    """Options understood by every export backend.

    Parameters
    ----------
    title, author, date, email : str, optional
        Document metadata; ``#+TITLE:`` and friends take precedence
    language : str, optional
        Language code used for localized section titles and smart quotes
    with_toc : bool or int, optional
        Table of contents: True for ``headline_levels`` deep, an int for
        an explicit depth, False for none
    headline_levels : int, optional
        Deepest headline level exported as a headline; deeper headlines
        become list items
    section_numbers : bool or int, optional
        Number headlines, or only the first N levels
    with_tags : bool or "not-in-toc", optional
    with_todo_keywords, with_priority : bool, optional
    with_footnotes : bool, optional
    with_smart_quotes, with_special_strings : bool, optional
    preserve_breaks : bool, optional
        Turn every newline into a forced line break
    with_fixed_width, with_tables, with_latex : bool, optional
    with_drawers : bool or sequence, optional
        True, False, drawer names to keep, or ``("not", names...)``
    with_properties : bool or sequence, optional
        Export property drawers, or only the listed keys
    with_planning, with_clocks : bool, optional
    with_timestamps : bool or {"active", "inactive"}, optional
    with_sub_superscript, with_entities, with_statistics_cookies : bool, optional
    with_archived_trees : bool or "headline", optional
    with_tasks : bool, {"todo", "done"} or sequence, optional
    with_broken_links : bool or "mark", optional
        True to warn and keep the link text, "mark" to insert a marker,
        False to drop the link
    select_tags, exclude_tags : sequence of str, optional
    id_locations : mapping, optional
        ID -> file name for ``id:`` links that leave the document
    input_file : str, optional
        Path of the exported file, used for relative links
    filters : mapping, optional
        Stage -> filter callable(s), run after the backend's own filters

    Examples
    --------
    >>> ExportOptions(with_toc=False).to_option_dict()
    {'with_toc': False}

    """

    title: str | object = field(default=UNSET, metadata={"help": "Document title", "importance": "core"})
    author: str | object = field(default=UNSET, metadata={"help": "Document author", "importance": "core"})
    date: str | object = field(default=UNSET, metadata={"help": "Document date", "importance": "advanced"})
    email: str | object = field(default=UNSET, metadata={"help": "Author email", "importance": "advanced"})
    language: str | object = field(
        default=UNSET,
        metadata={"help": "Language code for translated section titles and smart quotes", "importance": "core"},
    )
    with_toc: bool | int | object = field(
        default=UNSET,
        metadata={"help": "Include a table of contents (True, False or a depth)", "importance": "core"},
    )
    headline_levels: int | object = field(
        default=UNSET,
        metadata={"help": "Deepest headline level exported as a headline", "type": int, "importance": "core"},
    )
    section_numbers: bool | int | object = field(
        default=UNSET,
        metadata={"help": "Number headlines (True, False or a depth)", "importance": "core"},
    )
    with_tags: bool | str | object = field(
        default=UNSET,
        metadata={"help": "Export headline tags (True, False or 'not-in-toc')", "importance": "advanced"},
    )
    with_todo_keywords: bool | object = field(
        default=UNSET, metadata={"help": "Export TODO keywords", "importance": "advanced"}
    )
    with_priority: bool | object = field(
        default=UNSET, metadata={"help": "Export priority cookies", "importance": "advanced"}
    )
    with_footnotes: bool | object = field(default=UNSET, metadata={"help": "Export footnotes", "importance": "core"})
    with_smart_quotes: bool | object = field(
        default=UNSET, metadata={"help": "Convert quotes to typographic quotes", "importance": "advanced"}
    )
    with_special_strings: bool | object = field(
        default=UNSET, metadata={"help": "Convert ---, -- and ... to entities", "importance": "advanced"}
    )
    preserve_breaks: bool | object = field(
        default=UNSET, metadata={"help": "Preserve line breaks inside paragraphs", "importance": "advanced"}
    )
    with_fixed_width: bool | object = field(
        default=UNSET, metadata={"help": "Export fixed-width areas", "importance": "advanced"}
    )
    with_tables: bool | object = field(default=UNSET, metadata={"help": "Export tables", "importance": "advanced"})
    with_drawers: bool | Sequence[str] | object = field(
        default=UNSET, metadata={"help": "Export drawers (True, False or drawer names)", "importance": "advanced"}
    )
    with_properties: bool | Sequence[str] | object = field(
        default=UNSET, metadata={"help": "Export property drawers (True, False or keys)", "importance": "advanced"}
    )
    with_planning: bool | object = field(
        default=UNSET, metadata={"help": "Export planning lines", "importance": "advanced"}
    )
    with_clocks: bool | object = field(default=UNSET, metadata={"help": "Export CLOCK lines", "importance": "advanced"})
    with_timestamps: bool | str | object = field(
        default=UNSET,
        metadata={"help": "Export timestamps (True, False, 'active' or 'inactive')", "importance": "advanced"},
    )
    with_latex: bool | object = field(
        default=UNSET, metadata={"help": "Export LaTeX fragments and environments", "importance": "advanced"}
    )
    with_sub_superscript: bool | object = field(
        default=UNSET, metadata={"help": "Interpret _ and ^ as sub/superscripts", "importance": "advanced"}
    )
    with_entities: bool | object = field(default=UNSET, metadata={"help": "Export entities", "importance": "advanced"})
    with_statistics_cookies: bool | object = field(
        default=UNSET, metadata={"help": "Export statistics cookies", "importance": "advanced"}
    )
    with_archived_trees: bool | str | object = field(
        default=UNSET,
        metadata={"help": "Archived subtrees (True, False or 'headline')", "importance": "advanced"},
    )
    with_tasks: bool | str | Sequence[str] | object = field(
        default=UNSET,
        metadata={"help": "Export tasks (True, False, 'todo', 'done' or keywords)", "importance": "advanced"},
    )
    with_broken_links: bool | str | object = field(
        default=UNSET,
        metadata={"help": "Broken link handling (True, False or 'mark')", "importance": "core"},
    )
    select_tags: Sequence[str] | object = field(
        default=UNSET, metadata={"help": "Tags selecting subtrees to export", "importance": "core"}
    )
    exclude_tags: Sequence[str] | object = field(
        default=UNSET, metadata={"help": "Tags excluding subtrees from export", "importance": "core"}
    )
    id_locations: Mapping[str, str] | object = field(
        default=UNSET,
        metadata={"help": "ID -> file name for id: links outside the document", "importance": "advanced"},
    )
    input_file: str | object = field(
        default=UNSET, metadata={"help": "Path of the exported file", "importance": "advanced"}
    )
    filters: Mapping[str, Callable[..., Any] | Sequence[Callable[..., Any]]] | object = field(
        default=UNSET,
        metadata={"help": "Stage -> filter callables run after backend filters", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate user filters.

        Raises
        ------
        ValidationError
            If a filter targets an unknown stage or is not callable

        """
        if self.filters is not UNSET:
            validate_user_filters(self.filters)  # type: ignore[arg-type]


__all__ = ["ExportOptions"]
