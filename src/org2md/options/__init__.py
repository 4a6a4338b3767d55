#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for org2md.

This module provides dataclass-based configuration options for parsing and
export. Export option objects form the user layer of option resolution:
fields left at ``UNSET`` defer to backend defaults, and document keywords
override whatever is set here.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from org2md.options.base import UNSET, BaseExportOptions, CloneFrozenMixin
from org2md.options.export import ExportOptions
from org2md.options.html import HtmlExportOptions
from org2md.options.markdown import MarkdownExportOptions
from org2md.options.org import OrgParserOptions

OPTIONS_CLASSES: dict[str, type[ExportOptions]] = {
    "md": MarkdownExportOptions,
    "html": HtmlExportOptions,
}


def create_updated_options(options: Any, **kwargs: Any) -> Any:
    """Create a new options instance with updated values.

    Parameters
    ----------
    options : Any
        The original options instance (must be a dataclass)
    **kwargs : Any
        Field names and their new values

    Returns
    -------
    Any
        New instance with updated values

    """
    return replace(options, **kwargs)


def options_class_for(backend: str) -> type[ExportOptions]:
    """Return the export options class for ``backend``, or :class:`ExportOptions`."""
    return OPTIONS_CLASSES.get(backend, ExportOptions)


__all__ = [
    "UNSET",
    "CloneFrozenMixin",
    "BaseExportOptions",
    "ExportOptions",
    "MarkdownExportOptions",
    "HtmlExportOptions",
    "OrgParserOptions",
    "OPTIONS_CLASSES",
    "create_updated_options",
    "options_class_for",
]
