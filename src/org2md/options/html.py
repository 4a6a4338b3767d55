#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/options/html.py
"""Configuration options for HTML export.

The ``md`` backend derives from ``html``, so these options also affect
the parts of a Markdown export rendered as HTML (tables, footnote
references, special blocks).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from org2md.options.base import UNSET
from org2md.options.export import ExportOptions


@dataclass(frozen=True)
class HtmlExportOptions(ExportOptions):
    """Options for the ``html`` backend.

    Parameters
    ----------
    html_footnote_format : str, optional
        ``%s`` format wrapping a footnote reference
    html_footnote_separator : str, optional
        Text between adjacent footnote references
    html_inline_image_extensions : sequence of str, optional
        Extensions of links rendered as inline images
    html_doctype : str, optional
        Doctype line of standalone documents
    html_link_org_files_as_html : bool, optional
        Rewrite links to ``.org`` files as links to ``.html`` files
    html_toplevel_hlevel : int, optional
        HTML heading level of top-level headlines (default 2)

    """

    html_footnote_format: str | object = field(
        default=UNSET, metadata={"help": "Format string for footnote references", "importance": "advanced"}
    )
    html_footnote_separator: str | object = field(
        default=UNSET, metadata={"help": "Separator between adjacent footnote references", "importance": "advanced"}
    )
    html_inline_image_extensions: Sequence[str] | object = field(
        default=UNSET, metadata={"help": "File extensions rendered as inline images", "importance": "advanced"}
    )
    html_doctype: str | object = field(
        default=UNSET, metadata={"help": "Doctype of standalone documents", "importance": "advanced"}
    )
    html_link_org_files_as_html: bool | object = field(
        default=UNSET, metadata={"help": "Rewrite .org links to .html", "importance": "core"}
    )
    html_toplevel_hlevel: int | object = field(
        default=UNSET,
        metadata={"help": "HTML heading level of top-level headlines", "type": int, "importance": "core"},
    )


__all__ = ["HtmlExportOptions"]
