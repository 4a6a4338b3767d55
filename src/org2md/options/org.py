#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/options/org.py
"""Configuration options for Org-Mode parsing.

This module defines options for reading Org documents into a node tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from org2md.constants import DEFAULT_DONE_KEYWORDS, DEFAULT_FOOTNOTE_SECTION_TITLE, DEFAULT_TODO_KEYWORDS
from org2md.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class OrgParserOptions(CloneFrozenMixin):
    """Configuration options for Org-to-tree parsing.

    Parameters
    ----------
    todo_keywords : list[str], default ["TODO"]
        Keywords of the "todo" class. ``#+TODO:`` lines in the document
        add to them.
    done_keywords : list[str], default ["DONE"]
        Keywords of the "done" class
    footnote_section_title : str, default "Footnotes"
        Headline title marking the footnote section; such a headline is
        never exported as a headline
    parse_properties : bool, default True
        Whether to read property drawers into headline properties

    Examples
    --------
    Custom TODO keywords:
        >>> options = OrgParserOptions(todo_keywords=["TODO", "WAITING"], done_keywords=["DONE", "CANCELLED"])

    """

    todo_keywords: list[str] = field(
        default_factory=lambda: list(DEFAULT_TODO_KEYWORDS),
        metadata={"help": "TODO keywords of the todo class", "cli_name": "todo-keywords", "importance": "core"},
    )
    done_keywords: list[str] = field(
        default_factory=lambda: list(DEFAULT_DONE_KEYWORDS),
        metadata={"help": "TODO keywords of the done class", "cli_name": "done-keywords", "importance": "core"},
    )
    footnote_section_title: str = field(
        default=DEFAULT_FOOTNOTE_SECTION_TITLE,
        metadata={"help": "Title of the footnote section headline", "importance": "advanced"},
    )
    parse_properties: bool = field(
        default=True,
        metadata={
            "help": "Parse property drawers into headline properties",
            "cli_name": "no-parse-properties",
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate keyword lists.

        Raises
        ------
        ValueError
            If a keyword is both a todo and a done keyword

        """
        overlap = set(self.todo_keywords) & set(self.done_keywords)
        if overlap:
            raise ValueError(f"Keywords cannot be both todo and done: {sorted(overlap)}")


__all__ = ["OrgParserOptions"]
