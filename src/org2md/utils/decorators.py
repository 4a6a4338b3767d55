#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/utils/decorators.py
"""Utility decorators for org2md parsers and exporters.

This module provides the dependency check applied to optional parser
backends and a debug timing helper.

"""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from org2md.exceptions import DependencyError


def requires_dependencies(converter_name: str, packages: List[Tuple[str, str, str]]) -> Callable:
    """Check required dependencies before method execution.

    Parameters
    ----------
    converter_name : str
        Name of the component (e.g., "org"). This appears in error messages
        to help users identify which component needs dependencies.
    packages : list of tuple
        Required packages as (install_name, import_name, version_spec) tuples where:
        - install_name: Package name for pip install (e.g., "orgparse")
        - import_name: Module name for import statement (e.g., "orgparse")
        - version_spec: Version requirement shown in the error message ("" for any)

    Returns
    -------
    Callable
        Decorated method that checks dependencies before execution

    Raises
    ------
    DependencyError
        If any required package cannot be imported. The error lists the
        missing packages with an installation command and chains the
        original ImportError.

    Examples
    --------
        >>> @requires_dependencies("org", [("orgparse", "orgparse", "")])
        ... def parse(self, input_data):
        ...     import orgparse
        ...     # parsing logic here

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            missing = []
            original_error = None

            for install_name, import_name, version_spec in packages:
                try:
                    importlib.import_module(import_name)
                except ImportError as e:
                    missing.append((install_name, version_spec))
                    if original_error is None:
                        original_error = e

            if missing:
                raise DependencyError(
                    converter_name=converter_name,
                    missing_packages=missing,
                    original_error=original_error,
                ) from original_error

            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Context manager for timing operations with DEBUG-level logging.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the operation being timed (e.g., "Parsing (org)")

    Yields
    ------
    None
        Control flow to the code block being timed

    Examples
    --------
        >>> with debug_timer(logger, "Parsing (org)"):
        ...     tree = parser.parse(text)
        ... # Logs: "Parsing (org) completed in 0.02s" at DEBUG level

    Notes
    -----
    Time is only measured when the logger has DEBUG enabled.

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.2f}s")
    else:
        yield
