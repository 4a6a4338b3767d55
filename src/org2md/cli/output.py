"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/org2md/cli/output.py
import argparse
import sys
from typing import TextIO

from rich.console import Console
from rich.markdown import Markdown


def should_use_rich_output(args: argparse.Namespace, stream: TextIO | None = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Rich output is used when the --rich flag is set and the target stream
    is a terminal.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments
    stream : optional, default None
        Uses sys.stdout unless otherwise specified.

    Returns
    -------
    bool
        True if Rich output should be used

    """
    if not args.rich:
        return False

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def print_rich_markdown(content: str, stream: TextIO | None = None) -> None:
    """Render Markdown to the terminal with rich."""
    console = Console(file=stream or sys.stdout)
    console.print(Markdown(content))


def emit_output(content: str, args: argparse.Namespace, stream: TextIO | None = None) -> None:
    """Write exported content to stdout, through rich when requested."""
    if should_use_rich_output(args, stream) and args.backend == "md":
        print_rich_markdown(content, stream)
        return
    target = stream or sys.stdout
    target.write(content)
    target.flush()

