#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/utils/__init__.py
"""Shared utilities for org2md."""

from org2md.utils.decorators import debug_timer, requires_dependencies

__all__ = ["debug_timer", "requires_dependencies"]
