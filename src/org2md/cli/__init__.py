"""Command-line interface for org2md.

This module provides the ``org2md`` command, which exports Org-Mode files
to Markdown (or HTML) using the org2md library.

Configuration files (``.org2md.toml``, ``.org2md.yaml``, ``.org2md.yml``,
``.org2md.json`` or ``[tool.org2md]`` in pyproject.toml) are discovered
from the working directory upward, then in the home directory. The
``ORG2MD_CONFIG`` environment variable names a file explicitly. Command
line flags override configuration values; document keywords override
both.

Examples
--------
Export to standard output::

    $ org2md notes.org

Specify output file::

    $ org2md notes.org -o notes.md

Export several files, keeping .org links valid::

    $ org2md *.org --output-dir ./site

Setext headlines without a table of contents::

    $ org2md notes.org --headline-style setext --no-toc

Set any export option::

    $ org2md notes.org --option with_tags=nil --option "exclude_tags=(noexport draft)"

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import os
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict

from org2md.api import export_file, export_files, export_to_string, write_output
from org2md.cli.builder import (
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    DynamicCLIBuilder,
    create_parser,
    get_exit_code_for_exception,
    suggest_option_name,
)
from org2md.cli.config import CONFIG_ENV_VAR, load_config_file, load_config_with_priority, split_config
from org2md.cli.output import emit_output
from org2md.exceptions import Org2MdError, ValidationError
from org2md.logging_utils import configure_logging
from org2md.options import OrgParserOptions

logger = logging.getLogger(__name__)

__all__ = [
    "main",
    "DynamicCLIBuilder",
    "create_parser",
]

# CLI destinations that map one-to-one onto export options
_EXPORT_FLAG_DESTS = ("md_headline_style", "md_toplevel_hlevel", "with_toc", "section_numbers")


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command-line arguments

    """
    # --trace takes highest precedence, then --verbose, then --log-level
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and parsed_args.log_level == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _load_config(parsed_args: argparse.Namespace) -> Dict[str, Any]:
    """Load the configuration file selected by the arguments and environment."""
    if parsed_args.config:
        return load_config_file(parsed_args.config)
    if parsed_args.no_config:
        return {}
    return load_config_with_priority(env_var_path=os.environ.get(CONFIG_ENV_VAR))


def _collect_options(parsed_args: argparse.Namespace) -> tuple[str, Dict[str, Any], OrgParserOptions]:
    """Merge configuration and command-line values.

    Returns
    -------
    tuple
        ``(backend, export_options, parser_options)``

    Raises
    ------
    argparse.ArgumentTypeError
        If the configuration cannot be loaded
    TypeError, ValueError
        If the parser options are invalid

    """
    config_backend, export_options, parser_kwargs = split_config(_load_config(parsed_args))
    if export_options:
        logger.debug(f"Configuration options: {export_options}")

    backend = parsed_args.backend or config_backend or "md"

    for dest in _EXPORT_FLAG_DESTS:
        value = getattr(parsed_args, dest, None)
        if value is not None:
            export_options[dest] = value
    export_options.update(dict(parsed_args.extra_options))

    for field in fields(OrgParserOptions):
        dest = f"parser_{field.name}"
        if hasattr(parsed_args, dest):
            parser_kwargs[field.name] = getattr(parsed_args, dest)

    return backend, export_options, OrgParserOptions(**parser_kwargs)


def _validate_inputs(parsed_args: argparse.Namespace) -> int | None:
    """Check input and output arguments; return an exit code on failure."""
    inputs = parsed_args.input
    if not inputs:
        print("Error: Input file is required", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    if parsed_args.out and parsed_args.output_dir:
        print("Error: --out and --output-dir cannot be combined", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    if len(inputs) > 1:
        if parsed_args.out:
            print("Error: --out requires a single input; use --output-dir for several files", file=sys.stderr)
            return EXIT_VALIDATION_ERROR
        if "-" in inputs:
            print("Error: standard input ('-') cannot be part of a batch", file=sys.stderr)
            return EXIT_VALIDATION_ERROR

    for item in inputs:
        if item != "-" and not Path(item).is_file():
            print(f"Error: Input file not found: {item}", file=sys.stderr)
            return EXIT_FILE_ERROR

    return None


def _run_export(
    parsed_args: argparse.Namespace,
    backend: str,
    export_options: Dict[str, Any],
    parser_options: OrgParserOptions,
) -> int:
    """Export every input according to the output arguments."""
    inputs = parsed_args.input
    body_only = parsed_args.body_only

    if parsed_args.output_dir or len(inputs) > 1:
        written = export_files(
            inputs,
            parsed_args.output_dir,
            backend,
            export_options,
            parser_options=parser_options,
            body_only=body_only,
        )
        for path in written:
            print(f"Wrote {path}", file=sys.stderr)
        return EXIT_SUCCESS

    source = inputs[0]
    if source != "-" and parsed_args.out:
        export_file(
            source,
            parsed_args.out,
            backend,
            export_options,
            parser_options=parser_options,
            body_only=body_only,
        )
        return EXIT_SUCCESS

    if source == "-":
        content = export_to_string(
            sys.stdin.read(), backend, export_options, parser_options=parser_options, body_only=body_only
        )
    else:
        content = export_to_string(
            Path(source),
            backend,
            export_options,
            parser_options=parser_options,
            body_only=body_only,
            input_file=source,
        )

    if parsed_args.out:
        write_output(Path(parsed_args.out), content)
    else:
        emit_output(content, parsed_args)
    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Execute the org2md command line."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    input_error = _validate_inputs(parsed_args)
    if input_error is not None:
        return input_error

    try:
        backend, export_options, parser_options = _collect_options(parsed_args)
    except (argparse.ArgumentTypeError, TypeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    parsed_args.backend = backend

    try:
        return _run_export(parsed_args, backend, export_options, parser_options)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.parameter_name:
            suggestion = suggest_option_name(e.parameter_name)
            if suggestion:
                print(f"Did you mean '{suggestion}'?", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except Org2MdError as e:
        logger.debug(f"Export failed: {e!r}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)


if __name__ == "__main__":
    sys.exit(main())
