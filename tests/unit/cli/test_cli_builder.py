#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/cli/test_cli_builder.py
"""Unit tests for the org2md argument parser and exit code mapping."""

import argparse

import pytest

from org2md.cli.builder import (
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_VALIDATION_ERROR,
    DynamicCLIBuilder,
    create_parser,
    get_exit_code_for_exception,
    known_export_option_names,
    parse_option_assignment,
    suggest_option_name,
)
from org2md.exceptions import (
    ConfigurationError,
    ExportCancelledError,
    FileError,
    OutputWriteError,
    TranscodingError,
    ValidationError,
)
from org2md.options import OrgParserOptions


@pytest.mark.unit
@pytest.mark.cli
class TestOptionAssignment:
    """Test ``--option KEY=VALUE`` parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("with_tags=nil", ("with_tags", False)),
            ("with_toc=t", ("with_toc", True)),
            ("with-toc=2", ("with_toc", 2)),
            ("section_numbers=false", ("section_numbers", False)),
            ("with_smart_quotes=Yes", ("with_smart_quotes", True)),
            ("exclude_tags=(noexport draft)", ("exclude_tags", ("noexport", "draft"))),
            ('title="My notes"', ("title", "My notes")),
            ("with_tags=not-in-toc", ("with_tags", "not-in-toc")),
        ],
    )
    def test_values(self, raw: str, expected: tuple) -> None:
        """Test value conversion."""
        assert parse_option_assignment(raw) == expected

    @pytest.mark.parametrize("raw", ["with_toc", "=2", ""])
    def test_invalid(self, raw: str) -> None:
        """Test that assignments need a key and an equals sign."""
        with pytest.raises(argparse.ArgumentTypeError, match="Expected KEY=VALUE"):
            parse_option_assignment(raw)


@pytest.mark.unit
@pytest.mark.cli
class TestOptionNames:
    """Test option name lookup and suggestions."""

    def test_known_names(self) -> None:
        """Test that names from every options class are known."""
        names = known_export_option_names()
        assert "md_headline_style" in names
        assert "html_footnote_format" in names
        assert "with_toc" in names
        assert names == sorted(names)

    def test_suggestion(self) -> None:
        """Test a close misspelling."""
        assert suggest_option_name("with_tco") == "with_toc"

    def test_no_suggestion(self) -> None:
        """Test that unrelated names get no suggestion."""
        assert suggest_option_name("zzzzzz") is None


@pytest.mark.unit
@pytest.mark.cli
class TestParser:
    """Test the argument parser."""

    def test_defaults(self) -> None:
        """Test unset flags."""
        args = create_parser().parse_args(["notes.org"])
        assert args.input == ["notes.org"]
        assert args.with_toc is None
        assert args.section_numbers is None
        assert args.md_headline_style is None
        assert args.extra_options == []
        assert args.log_level == "WARNING"
        assert not hasattr(args, "parser_todo_keywords")

    def test_export_flags(self) -> None:
        """Test the dedicated export flags."""
        args = create_parser().parse_args(
            ["a.org", "--headline-style", "setext", "--toplevel-hlevel", "2", "--no-toc", "--no-section-numbers"]
        )
        assert args.md_headline_style == "setext"
        assert args.md_toplevel_hlevel == 2
        assert args.with_toc is False
        assert args.section_numbers is False

    def test_toc_depth(self) -> None:
        """Test --toc N."""
        assert create_parser().parse_args(["a.org", "--toc", "2"]).with_toc == 2

    def test_toc_flags_exclusive(self) -> None:
        """Test that --toc and --no-toc cannot be combined."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["a.org", "--toc", "2", "--no-toc"])

    def test_invalid_headline_style(self) -> None:
        """Test choices validation."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["a.org", "--headline-style", "underline"])

    def test_repeated_option(self) -> None:
        """Test that --option accumulates."""
        args = create_parser().parse_args(["a.org", "--option", "with_tags=nil", "--option", "with_toc=1"])
        assert args.extra_options == [("with_tags", False), ("with_toc", 1)]

    def test_parser_option_flags(self) -> None:
        """Test the flags generated from OrgParserOptions."""
        args = create_parser().parse_args(
            [
                "a.org",
                "--todo-keywords",
                "NEXT",
                "--todo-keywords",
                "WAIT",
                "--no-parse-properties",
                "--footnote-section-title",
                "Notes",
            ]
        )
        assert args.parser_todo_keywords == ["NEXT", "WAIT"]
        assert args.parser_parse_properties is False
        assert args.parser_footnote_section_title == "Notes"

    def test_builder_records_flags(self) -> None:
        """Test that the builder maps destinations back to flags."""
        builder = DynamicCLIBuilder()
        builder.add_options_class_arguments(argparse.ArgumentParser(), OrgParserOptions, "parser_", "parser")
        assert builder.dest_to_cli_flag["parser_done_keywords"] == "--done-keywords"
        assert builder.dest_to_cli_flag["parser_parse_properties"] == "--no-parse-properties"

    def test_snake_to_kebab(self) -> None:
        """Test flag name conversion."""
        assert DynamicCLIBuilder.snake_to_kebab("footnote_section_title") == "footnote-section-title"


@pytest.mark.unit
@pytest.mark.cli
class TestExitCodes:
    """Test exception to exit code mapping."""

    @pytest.mark.parametrize(
        "exception,code",
        [
            (FileError("missing"), EXIT_FILE_ERROR),
            (OutputWriteError("out.md"), EXIT_FILE_ERROR),
            (ValidationError("bad option"), EXIT_VALIDATION_ERROR),
            (ConfigurationError("bad config"), EXIT_VALIDATION_ERROR),
            (argparse.ArgumentTypeError("bad value"), EXIT_VALIDATION_ERROR),
            (TranscodingError("failed"), EXIT_ERROR),
            (ExportCancelledError(), EXIT_ERROR),
            (RuntimeError("other"), EXIT_ERROR),
        ],
    )
    def test_mapping(self, exception: Exception, code: int) -> None:
        """Test each exception family."""
        assert get_exit_code_for_exception(exception) == code
