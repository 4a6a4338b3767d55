#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/protocols.py
"""Custom link protocols.

A link type such as ``doi:`` or ``issue:`` can register an exporter that
renders the link for any backend. Link translators consult this table
before their own rules.

Examples
--------
>>> def export_issue(path, description, backend, ctx):
...     return f"[{description or '#' + path}](https://example.org/issues/{path})"
>>> register_link_protocol("issue", export_issue)

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from org2md.ast.nodes import Node

if TYPE_CHECKING:
    from org2md.export.context import ExportContext

logger = logging.getLogger(__name__)

# (path, description, backend_name, context) -> output or None
LinkExporter = Callable[[str, Optional[str], str, "ExportContext"], Optional[str]]

_BUILTIN_TYPES = frozenset({"coderef", "custom-id", "fuzzy", "radio", "id"})

_protocols: dict[str, LinkExporter] = {}


def register_link_protocol(link_type: str, exporter: LinkExporter) -> None:
    """Register an exporter for links of ``link_type``.

    Raises
    ------
    ValueError
        If ``link_type`` is one of the internal link types
    """
    if link_type in _BUILTIN_TYPES:
        raise ValueError(f"Cannot override internal link type '{link_type}'")
    if link_type in _protocols:
        logger.warning(f"Link protocol '{link_type}' already registered, overwriting")
    _protocols[link_type] = exporter
    logger.debug(f"Registered link protocol: {link_type}")


def unregister_link_protocol(link_type: str) -> None:
    """Remove the exporter for ``link_type`` if there is one."""
    _protocols.pop(link_type, None)


def registered_link_types() -> frozenset[str]:
    """Return the link types that have a registered exporter."""
    return frozenset(_protocols)


def custom_protocol_maybe(link: Node, description: Optional[str], ctx: ExportContext) -> Optional[str]:
    """Render ``link`` with its registered protocol exporter, or return None."""
    link_type = str(link.get("type", ""))
    if link_type in _BUILTIN_TYPES:
        return None
    exporter = _protocols.get(link_type)
    if exporter is None:
        return None
    return exporter(str(link.get("path", "")), description, ctx.backend_name, ctx)


__all__ = [
    "LinkExporter",
    "register_link_protocol",
    "unregister_link_protocol",
    "registered_link_types",
    "custom_protocol_maybe",
]
