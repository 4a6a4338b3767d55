#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/backends/__init__.py
"""Export backends.

Backends are named records of translators, filters and option specs. The
``html`` backend renders every node kind; ``md`` derives from it and
overrides what Markdown can express natively.

"""

from org2md.backends.base import (
    PIPELINE_STAGES,
    TEMPLATE_KINDS,
    Backend,
    Filter,
    OptionSpec,
    TemplateTranslator,
    Translator,
)
from org2md.backends.registry import BackendRegistry, backend_registry

__all__ = [
    "Backend",
    "BackendRegistry",
    "Filter",
    "OptionSpec",
    "PIPELINE_STAGES",
    "TEMPLATE_KINDS",
    "TemplateTranslator",
    "Translator",
    "backend_registry",
]
