#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/options/markdown.py
"""Configuration options for Markdown export."""

from __future__ import annotations

from dataclasses import dataclass, field

from org2md.constants import HeadlineStyle
from org2md.options.base import UNSET
from org2md.options.export import ExportOptions


@dataclass(frozen=True)
class MarkdownExportOptions(ExportOptions):
    """Options for the ``md`` backend.

    Parameters
    ----------
    md_headline_style : {"atx", "setext", "mixed"}, optional
        ``atx`` writes ``#`` prefixes up to level 6; ``setext`` underlines
        levels 1-2 with ``=`` and ``-``; ``mixed`` uses setext for levels
        1-2 and atx for 3-6. Deeper headlines become list items.
    md_toplevel_hlevel : int, optional
        Markdown level of the top-level headlines (default 1)
    md_footnote_format : str, optional
        ``%s`` format wrapping a footnote number in the text
    md_footnotes_section : str, optional
        ``%s%s`` format taking the section title and the definitions
    md_link_org_files_as_md : bool, optional
        Rewrite links to ``.org`` files as links to ``.md`` files

    Examples
    --------
    >>> MarkdownExportOptions(md_headline_style="setext").to_option_dict()
    {'md_headline_style': 'setext'}

    """

    md_headline_style: HeadlineStyle | object = field(
        default=UNSET,
        metadata={"help": "Headline style", "choices": ["atx", "setext", "mixed"], "importance": "core"},
    )
    md_toplevel_hlevel: int | object = field(
        default=UNSET,
        metadata={"help": "Markdown level of top-level headlines", "type": int, "importance": "core"},
    )
    md_footnote_format: str | object = field(
        default=UNSET,
        metadata={"help": "Format string for footnote numbers", "importance": "advanced"},
    )
    md_footnotes_section: str | object = field(
        default=UNSET,
        metadata={"help": "Format string for the footnote section (title, definitions)", "importance": "advanced"},
    )
    md_link_org_files_as_md: bool | object = field(
        default=UNSET,
        metadata={"help": "Rewrite .org links to .md", "importance": "core"},
    )


__all__ = ["MarkdownExportOptions"]
