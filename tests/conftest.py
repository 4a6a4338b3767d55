"""Pytest configuration and shared fixtures for the org2md test suite.

This module provides shared fixtures, test configuration, and helpers
that are used across the entire test suite.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable

import pytest
from hypothesis import Phase, Verbosity, settings

from org2md.api import export_as
from org2md.ast.nodes import Node
from org2md.backends.registry import BackendRegistry
from org2md.export.context import ExportContext
from org2md.export.options import resolve_options
from org2md.export.prune import compute_ignored
from org2md.parsers.org import OrgParser

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests using Hypothesis")


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers and propagation changes made by the CLI so caplog keeps working."""
    yield
    package_logger = logging.getLogger("org2md")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def registry() -> BackendRegistry:
    """Provide a fresh registry holding only the built-in backends."""
    return BackendRegistry.create_isolated(with_builtins=True)


@pytest.fixture
def export_md(registry: BackendRegistry) -> Callable[..., str]:
    """Export a tree with the ``md`` backend of an isolated registry, body only.

    Keyword arguments are passed as export options.
    """

    def _export(tree: Node, **options: Any) -> str:
        return export_as(tree, "md", options, body_only=True, registry=registry)

    return _export


@pytest.fixture
def org_to_md(export_md: Callable[..., str]) -> Callable[..., str]:
    """Parse Org text and export it to Markdown."""

    def _convert(text: str, **options: Any) -> str:
        return export_md(OrgParser().parse(text), **options)

    return _convert


@pytest.fixture
def make_context(registry: BackendRegistry) -> Callable[..., ExportContext]:
    """Build an md export context for a tree with its ignore set computed, without transcoding."""

    def _make(tree: Node, **options: Any) -> ExportContext:
        resolved = resolve_options(registry, "md", options, tree=tree)
        ctx = ExportContext(resolved, registry.get_backend("md"), registry, tree)
        ctx.ignored = compute_ignored(tree, ctx)
        return ctx

    return _make


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding the Org fixture files."""
    return FIXTURES_DIR
