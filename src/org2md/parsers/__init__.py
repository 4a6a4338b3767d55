#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/parsers/__init__.py
"""Org parsing package.

:class:`OrgParser` reads Org text into the document tree consumed by the
export engine.
"""

from org2md.parsers.elements import ElementParser
from org2md.parsers.inline import InlineParser
from org2md.parsers.org import OrgParser

__all__ = ["OrgParser", "ElementParser", "InlineParser"]
