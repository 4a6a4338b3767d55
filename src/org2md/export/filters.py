#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/filters.py
"""Filter pipeline.

Filters run at fixed stages: ``parse-tree`` receives the document root,
``body`` the transcoded body, ``final-output`` the finished string, and a
node kind receives the string produced for each node of that kind.

For one stage, the export backend's filters run first, then each parent's
along the derivation chain, then user filters passed through the
``filters`` option. A filter returning None leaves the value unchanged.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Union

from org2md.backends.base import Filter, is_valid_stage, normalize_filters
from org2md.exceptions import ValidationError

if TYPE_CHECKING:
    from org2md.export.context import ExportContext

logger = logging.getLogger(__name__)


def user_filters(ctx: ExportContext, stage: str) -> tuple[Filter, ...]:
    """Return filters supplied through the ``filters`` option for ``stage``."""
    return normalize_filters(ctx.get("filters")).get(stage, ())


def validate_user_filters(filters: Optional[Mapping[str, Union[Sequence[Filter], Filter]]]) -> None:
    """Check that every user filter targets a known stage and is callable.

    Raises
    ------
    ValidationError
        On an unknown stage or a non-callable filter

    """
    for stage, fns in normalize_filters(filters).items():
        if not is_valid_stage(stage):
            raise ValidationError(f"Unknown filter stage '{stage}'", parameter_name="filters", parameter_value=stage)
        for fn in fns:
            if not callable(fn):
                raise ValidationError(
                    f"Filter for stage '{stage}' is not callable", parameter_name="filters", parameter_value=fn
                )


def filter_chain(stage: str, ctx: ExportContext) -> list[Filter]:
    """Return the filters for ``stage`` in the order they run."""
    return list(ctx.registry.all_filters(ctx.backend, stage)) + list(user_filters(ctx, stage))


def run_filters(chain: Sequence[Filter], value: Any, ctx: ExportContext) -> Any:
    """Thread ``value`` through ``chain``; a None result keeps the previous value."""
    backend_name = ctx.backend_name
    for fn in chain:
        result = fn(value, backend_name, ctx)
        if result is not None:
            value = result
    return value


def apply_filters(stage: str, value: Any, ctx: ExportContext) -> Any:
    """Thread ``value`` through every filter registered for ``stage``.

    Parameters
    ----------
    stage : str
        Pipeline stage or node kind
    value : Any
        Tree root or string
    ctx : ExportContext
        Current export context

    Returns
    -------
    Any
        The filtered value

    """
    return run_filters(filter_chain(stage, ctx), value, ctx)


__all__ = ["apply_filters", "filter_chain", "run_filters", "user_filters", "validate_user_filters"]
