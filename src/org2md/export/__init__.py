#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/__init__.py
"""Generic export engine.

Option resolution, pruning, the filter pipeline and the post-order
transcoder. Backends supply the translators; this package drives them.

"""

from org2md.export.context import CancelCheck, ExportContext
from org2md.export.filters import apply_filters, validate_user_filters
from org2md.export.options import GENERAL_OPTIONS, resolve_options
from org2md.export.protocols import register_link_protocol, registered_link_types, unregister_link_protocol
from org2md.export.prune import compute_ignored
from org2md.export.transcoder import Transcoder, export_document, exported_kinds

__all__ = [
    "CancelCheck",
    "ExportContext",
    "GENERAL_OPTIONS",
    "Transcoder",
    "apply_filters",
    "compute_ignored",
    "export_document",
    "exported_kinds",
    "register_link_protocol",
    "registered_link_types",
    "resolve_options",
    "unregister_link_protocol",
    "validate_user_filters",
]
