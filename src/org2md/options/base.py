#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/options/base.py
"""Base classes for export and parser options.

This module defines the foundation classes for the option objects that form
the user layer of option resolution. Export option fields default to
:data:`UNSET`; only fields given a value override the backend defaults, and
document keywords override both.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

UNSET = object()


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseExportOptions(CloneFrozenMixin):
    """Base class for export options.

    Subclasses declare one field per export option key, defaulting to
    :data:`UNSET`. Field names are the option keys used by the backends.

    Notes
    -----
    A field left at :data:`UNSET` is absent from :meth:`to_option_dict`, so
    the backend default (or a document keyword) applies.

    """

    def to_option_dict(self) -> dict[str, Any]:
        """Return the fields that were given a value, keyed by option name.

        Returns
        -------
        dict
            Option key -> value, UNSET fields omitted

        """
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is UNSET:
                continue
            if isinstance(value, list):
                value = tuple(value)
            result[f.name] = value
        return result

    @classmethod
    def option_names(cls) -> list[str]:
        """Return the option keys this class can set."""
        return [f.name for f in fields(cls)]


__all__ = ["UNSET", "CloneFrozenMixin", "BaseExportOptions"]
