"""org2md - Org-Mode export to Markdown.

org2md reads Org-Mode documents and exports them through named backends.
The ``md`` backend derives from the ``html`` backend: it overrides the
node kinds Markdown can express natively (headlines, emphasis, lists,
code, links, quotes) and inherits HTML output for everything else
(tables, underline, sub/superscript, drawers).

Key Features
------------
- Backend registry with derivation: a backend only overrides what differs
- Filter pipeline at the parse-tree, body, final-output and per-kind stages
- Option resolution from ``#+OPTIONS:`` keywords, option objects and
  backend defaults
- ATX, Setext and mixed headline styles, with list fallback below the
  headline level cutoff
- Table of contents, footnote section and section numbering
- Internal link resolution (targets, custom IDs, fuzzy titles, radio
  targets, code references)

Requirements
------------
- Python 3.10+
- orgparse for reading the Org outline

Examples
--------
Basic usage for file export:

    >>> from org2md import export_file
    >>> export_file("notes.org")
    PosixPath('notes.md')

Exporting a string with options:

    >>> from org2md import MarkdownExportOptions, export_to_string
    >>> options = MarkdownExportOptions(md_headline_style="setext", with_toc=False)
    >>> print(export_to_string("* Intro\\nHello", options=options))
    Intro
    =====
    <BLANKLINE>
    Hello

Defining a derived backend:

    >>> from org2md import backend_registry
    >>> _ = backend_registry.define_derived_backend(
    ...     "my-md", "md", translators={"bold": lambda node, contents, ctx: f"__{contents}__"}
    ... )
    >>> export_to_string("*x*", "my-md", body_only=True)
    '__x__\\n'

See Also
--------
org2md.backends : Backend records and the registry
org2md.export : Generic export engine
org2md.ast : Document tree nodes and builders

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "org2md requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from org2md.api import export_as, export_file, export_files, export_to_string
from org2md.ast.nodes import Node
from org2md.backends import Backend, BackendRegistry, backend_registry
from org2md.exceptions import (
    ConfigurationError,
    DependencyError,
    ExportCancelledError,
    MissingTranslatorError,
    Org2MdError,
    ParsingError,
    TranscodingError,
    UnknownBackendError,
    ValidationError,
)
from org2md.export.protocols import register_link_protocol
from org2md.options import (
    UNSET,
    ExportOptions,
    HtmlExportOptions,
    MarkdownExportOptions,
    OrgParserOptions,
)
from org2md.parsers import OrgParser

__all__ = [
    "__version__",
    "export_as",
    "export_to_string",
    "export_file",
    "export_files",
    "Node",
    "OrgParser",
    "Backend",
    "BackendRegistry",
    "backend_registry",
    "register_link_protocol",
    "UNSET",
    "ExportOptions",
    "MarkdownExportOptions",
    "HtmlExportOptions",
    "OrgParserOptions",
    "Org2MdError",
    "ValidationError",
    "ConfigurationError",
    "UnknownBackendError",
    "MissingTranslatorError",
    "ParsingError",
    "TranscodingError",
    "ExportCancelledError",
    "DependencyError",
]
