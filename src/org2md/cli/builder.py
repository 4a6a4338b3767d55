#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line argument builder for org2md.

Export flags are declared explicitly; parser flags are generated from the
field metadata of :class:`~org2md.options.org.OrgParserOptions`.
"""

from __future__ import annotations

import argparse
import difflib
import logging
from dataclasses import MISSING, fields
from typing import Any, Dict, Optional, Type

from org2md.exceptions import (
    ConfigurationError,
    DependencyError,
    FileError,
    ValidationError,
)
from org2md.export.options import read_option_value
from org2md.options import OPTIONS_CLASSES, OrgParserOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_FILE_ERROR = 4

_TRUE_WORDS = {"true", "yes", "on"}
_FALSE_WORDS = {"false", "no", "off"}


def parse_option_assignment(value: str) -> tuple[str, Any]:
    """Parse a ``KEY=VALUE`` pair given to ``--option``.

    Values follow ``#+OPTIONS:`` conventions (``t``, ``nil``, integers,
    quoted strings, parenthesised lists); ``true``/``false`` are accepted
    as well.

    Raises
    ------
    argparse.ArgumentTypeError
        If the value has no ``=``

    """
    key, sep, raw = value.partition("=")
    key = key.strip().replace("-", "_")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{value}'")
    raw = raw.strip()
    if raw.lower() in _TRUE_WORDS:
        return key, True
    if raw.lower() in _FALSE_WORDS:
        return key, False
    return key, read_option_value(raw)


def known_export_option_names() -> list[str]:
    """Return every export option name declared by an options class."""
    names: set[str] = set()
    for options_class in OPTIONS_CLASSES.values():
        names.update(options_class.option_names())
    return sorted(names)


def suggest_option_name(unknown: str) -> Optional[str]:
    """Return the closest known export option name, if any is close enough."""
    matches = difflib.get_close_matches(unknown, known_export_option_names(), n=1, cutoff=0.6)
    return matches[0] if matches else None


class DynamicCLIBuilder:
    """Builds CLI arguments from options dataclass metadata.

    Fields may carry ``help``, ``cli_name``, ``choices`` and ``type`` in
    their metadata. Boolean fields whose ``cli_name`` starts with ``no-``
    become ``store_false`` flags.
    """

    def __init__(self) -> None:
        """Initialize the CLI builder."""
        self.dest_to_cli_flag: Dict[str, str] = {}

    @staticmethod
    def snake_to_kebab(name: str) -> str:
        """Convert a snake_case field name to a kebab-case flag name."""
        return name.replace("_", "-")

    def get_argument_kwargs(self, field: Any, prefix: str) -> tuple[str, Dict[str, Any]]:
        """Return the flag and ``add_argument`` keyword arguments for ``field``."""
        metadata = field.metadata
        cli_name = metadata.get("cli_name") or self.snake_to_kebab(field.name)
        flag = f"--{cli_name}"
        kwargs: Dict[str, Any] = {"dest": f"{prefix}{field.name}", "default": argparse.SUPPRESS}
        help_text = metadata.get("help", "")

        default = field.default if field.default is not MISSING else None
        if isinstance(default, bool):
            kwargs["action"] = "store_false" if default else "store_true"
        elif field.default_factory is not MISSING:
            kwargs["action"] = "append"
            kwargs["metavar"] = field.name.upper().rstrip("S")
            help_text = f"{help_text} (repeatable)"
        else:
            kwargs["type"] = metadata.get("type", str)
            if "choices" in metadata:
                kwargs["choices"] = metadata["choices"]
        kwargs["help"] = help_text
        return flag, kwargs

    def add_options_class_arguments(
        self, parser: argparse.ArgumentParser, options_class: Type[Any], prefix: str, title: str
    ) -> None:
        """Add one argument per field of ``options_class`` in its own group."""
        group = parser.add_argument_group(title)
        for field in fields(options_class):
            flag, kwargs = self.get_argument_kwargs(field, prefix)
            group.add_argument(flag, **kwargs)
            self.dest_to_cli_flag[kwargs["dest"]] = flag
            logger.debug(f"Added CLI argument {flag} for {options_class.__name__}.{field.name}")

    def build_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        from org2md import __version__

        parser = argparse.ArgumentParser(
            prog="org2md",
            description="Export Org-Mode documents to Markdown (or HTML).",
            epilog="Document keywords such as #+OPTIONS: override command-line options.",
        )
        parser.add_argument("input", nargs="*", help="Org files to export ('-' reads standard input)")
        parser.add_argument("--version", action="version", version=f"org2md {__version__}")

        output = parser.add_argument_group("output")
        output.add_argument("-o", "--out", dest="out", metavar="PATH", help="Output file (single input only)")
        output.add_argument(
            "--output-dir", metavar="DIR", help="Directory for exported files; x.org becomes x.md there"
        )
        output.add_argument("--rich", action="store_true", help="Pretty-print Markdown to the terminal with rich")
        output.add_argument("--body-only", action="store_true", help="Export the body without the document template")

        export = parser.add_argument_group("export")
        export.add_argument("--backend", help="Export backend (default: md)")
        export.add_argument(
            "--headline-style",
            dest="md_headline_style",
            choices=["atx", "setext", "mixed"],
            help="Markdown headline style",
        )
        export.add_argument(
            "--toplevel-hlevel", dest="md_toplevel_hlevel", type=int, metavar="N", help="Level of top headlines"
        )
        toc = export.add_mutually_exclusive_group()
        toc.add_argument("--toc", dest="with_toc", type=int, metavar="N", help="Table of contents N levels deep")
        toc.add_argument(
            "--no-toc", dest="with_toc", action="store_false", default=None, help="Omit the table of contents"
        )
        export.add_argument(
            "--no-section-numbers",
            dest="section_numbers",
            action="store_false",
            default=None,
            help="Do not number headlines",
        )
        export.add_argument(
            "--option",
            dest="extra_options",
            action="append",
            type=parse_option_assignment,
            default=[],
            metavar="KEY=VALUE",
            help="Set any export option, e.g. --option with_tags=nil (repeatable)",
        )

        self.add_options_class_arguments(parser, OrgParserOptions, "parser_", "parser")

        config = parser.add_argument_group("configuration")
        config.add_argument("--config", metavar="PATH", help="Configuration file (TOML, YAML or JSON)")
        config.add_argument("--no-config", action="store_true", help="Ignore discovered configuration files")

        logging_group = parser.add_argument_group("logging")
        logging_group.add_argument(
            "--log-level",
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Logging level (default: WARNING)",
        )
        logging_group.add_argument("--log-file", metavar="PATH", help="Also write log records to this file")
        logging_group.add_argument("--verbose", "-v", action="store_true", help="Shortcut for --log-level DEBUG")
        logging_group.add_argument("--trace", action="store_true", help="Debug logging with timestamps")

        self.parser = parser
        return parser


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    return DynamicCLIBuilder().build_parser()


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR

    if isinstance(exception, (ValidationError, ConfigurationError, argparse.ArgumentTypeError)):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_ERROR

    return EXIT_ERROR


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_ERROR",
    "EXIT_VALIDATION_ERROR",
    "EXIT_FILE_ERROR",
    "DynamicCLIBuilder",
    "create_parser",
    "get_exit_code_for_exception",
    "parse_option_assignment",
    "suggest_option_name",
]
