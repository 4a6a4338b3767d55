#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/backends/base.py
"""Backend records.

A backend is data, not a class hierarchy: a name, an optional parent name,
a table of translators keyed by node kind, filters keyed by stage and the
option specs it declares. Derivation is resolved by
:class:`~org2md.backends.registry.BackendRegistry` walking parent names.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Sequence

from org2md.ast.nodes import ALL_KINDS, Node

if TYPE_CHECKING:
    from org2md.export.context import ExportContext

# (node, contents, context) -> output or None
Translator = Callable[[Node, Optional[str], "ExportContext"], Optional[str]]

# (contents, context) -> output
TemplateTranslator = Callable[[str, "ExportContext"], str]

# (value, backend_name, context) -> new value or None to keep the value
Filter = Callable[[Any, str, "ExportContext"], Any]

TEMPLATE_KINDS: frozenset[str] = frozenset({"inner-template", "template"})

TRANSLATOR_KEYS: frozenset[str] = ALL_KINDS | TEMPLATE_KINDS

# Stages run by the pipeline; any node kind is also a valid (string) stage
PIPELINE_STAGES: tuple[str, ...] = ("parse-tree", "body", "final-output")


def is_valid_stage(stage: str) -> bool:
    """Return True for a pipeline stage or a per-kind string filter stage."""
    return stage in PIPELINE_STAGES or stage in ALL_KINDS


@dataclass(frozen=True)
class OptionSpec:
    """Declaration of one export option.

    Parameters
    ----------
    key : str
        Option key in the export context (e.g., "with_toc")
    default : Any
        Default value when no other layer supplies one
    keyword : str, optional
        Document keyword carrying the option (``#+KEYWORD:``), the
        outward-facing property name
    item : str, optional
        Item name inside ``#+OPTIONS:`` lines (e.g., "toc")
    behavior : {"split", "space", "newline"}, optional
        How repeated or multi-word keyword values combine: split into a
        tuple of words, join with spaces, or join with newlines. The last
        value wins when omitted.

    """

    key: str
    default: Any = None
    keyword: Optional[str] = None
    item: Optional[str] = None
    behavior: Optional[str] = None


@dataclass(frozen=True)
class Backend:
    """A named, derivable set of translators, filters and option specs.

    Parameters
    ----------
    name : str
        Unique backend name
    parent : str, optional
        Name of the backend this one derives from
    translators : mapping
        Node kind (or template pseudo-kind) to translator
    filters : mapping
        Stage to an ordered tuple of filters
    options : tuple of OptionSpec
        Options declared by this backend
    description : str
        Short human-readable description

    """

    name: str
    parent: Optional[str] = None
    translators: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    filters: Mapping[str, tuple[Filter, ...]] = field(default_factory=dict)
    options: tuple[OptionSpec, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        """Freeze the tables so a defined backend cannot be altered in place."""
        object.__setattr__(self, "translators", MappingProxyType(dict(self.translators)))
        object.__setattr__(
            self, "filters", MappingProxyType({stage: tuple(fns) for stage, fns in self.filters.items()})
        )
        object.__setattr__(self, "options", tuple(self.options))

    def own_translator(self, kind: str) -> Optional[Callable[..., Any]]:
        """Return the translator defined by this backend itself, if any."""
        return self.translators.get(kind)


def normalize_filters(filters: Optional[Mapping[str, Sequence[Filter] | Filter]]) -> dict[str, tuple[Filter, ...]]:
    """Coerce a stage -> filter(s) mapping into stage -> tuple of filters."""
    result: dict[str, tuple[Filter, ...]] = {}
    for stage, value in (filters or {}).items():
        if callable(value):
            result[stage] = (value,)
        else:
            result[stage] = tuple(value)
    return result


__all__ = [
    "Translator",
    "TemplateTranslator",
    "Filter",
    "TEMPLATE_KINDS",
    "TRANSLATOR_KEYS",
    "PIPELINE_STAGES",
    "is_valid_stage",
    "OptionSpec",
    "Backend",
    "normalize_filters",
]
