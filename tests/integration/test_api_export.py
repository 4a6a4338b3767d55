#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_api_export.py
"""Integration tests for the public export API.

These tests parse real Org files and run them through the whole export
pipeline: option resolution, pruning, filters, transcoding and templates.
"""

import shutil
from pathlib import Path

import pytest

from org2md import OrgParser, export_as, export_to_string
from org2md.api import export_extension, export_file, export_files
from org2md.exceptions import ExportCancelledError, FileError, UnknownBackendError, ValidationError
from org2md.options import MarkdownExportOptions


@pytest.fixture
def notes_path(fixtures_dir: Path, tmp_path: Path) -> Path:
    """Copy the field notes fixture into a scratch directory."""
    target = tmp_path / "field_notes.org"
    shutil.copy(fixtures_dir / "field_notes.org", target)
    return target


@pytest.mark.integration
class TestExportDocument:
    """Test exporting a complete document to Markdown."""

    def test_full_document(self, notes_path: Path) -> None:
        """Test the main features of a typical notes file."""
        out = export_to_string(notes_path)

        assert out.startswith("\n# Table of Contents\n\n1.  [Setup](#setup)\n")
        assert '<a id="setup"></a>\n\n# Setup' in out
        assert "Install the tools listed in [the tool list](tools.md)." in out
        assert "## TODO Calibrate" in out and ":lab:" in out
        assert "-   [X] scale\n-   [ ] thermometer" in out
        assert "See [the setup](#setup) and [2.1](#org" in out
        assert '    print("hello")' in out
        assert "Measured **twice**." in out

    def test_noexport_and_footnotes(self, notes_path: Path) -> None:
        """Test pruning and the footnote section."""
        out = export_to_string(notes_path)

        assert "Hidden text" not in out
        assert "Private" not in out
        assert 'survey.<sup><a id="fnr.1" class="footref" href="#fn.1" role="doc-backlink">1</a></sup>' in out
        assert out.count("# Footnotes") == 1
        assert '<sup><a id="fn.1" href="#fnr.1">1</a></sup> Collected in April.' in out

    def test_user_options_below_document_keywords(self, notes_path: Path) -> None:
        """Test that #+OPTIONS: overrides the caller's options."""
        out = export_to_string(notes_path, with_toc=False)
        assert "# Table of Contents" in out

    def test_options_object(self, notes_path: Path) -> None:
        """Test passing a MarkdownExportOptions instance."""
        out = export_to_string(notes_path, "md", MarkdownExportOptions(md_headline_style="setext"))
        assert "Setup\n=====" in out
        assert "Method\n------" in out

    def test_html_backend(self, notes_path: Path) -> None:
        """Test that the same tree exports to HTML."""
        out = export_to_string(notes_path, "html", body_only=True)
        assert 'id="setup"' in out
        assert "<li><code>[X]</code> scale</li>" in out
        assert "Hidden text" not in out

    def test_tree_reused(self, notes_path: Path) -> None:
        """Test that exporting leaves the parsed tree untouched."""
        tree = OrgParser().parse(notes_path)
        first = export_as(tree, "md")
        second = export_as(tree, "md", section_numbers=False)
        third = export_as(tree, "md")
        assert first == third
        assert first != second

    def test_custom_todo_keywords(self, fixtures_dir: Path) -> None:
        """Test #+TODO: keywords through the export."""
        out = export_to_string(fixtures_dir / "tasks.org", with_toc=False, section_numbers=False)
        assert "# NEXT Call the lab" in out
        out = export_to_string(fixtures_dir / "tasks.org", with_todo_keywords=False, with_tasks="todo")
        assert "Call the lab" in out
        assert "NEXT" not in out
        assert "Trip" not in out


@pytest.mark.integration
class TestSubtreeExport:
    """Test exporting one headline and its children."""

    def test_subtree(self, notes_path: Path, caplog) -> None:
        """Test that only the subtree is exported, numbered from 1."""
        tree = OrgParser().parse(notes_path)
        results = next(child for child in tree.children if child.get("raw_value") == "Results")

        out = export_as(tree, "md", subtree=results, body_only=True)

        assert "# Results" in out
        assert "Measured **twice**." in out
        assert "Install the tools" not in out
        assert "[1.1](#org" in out
        # The custom-id target lives outside the subtree
        assert "See the setup and" in out
        assert "Unable to resolve link: setup" in caplog.text
        assert results.parent is tree

    def test_subtree_not_in_tree(self, notes_path: Path) -> None:
        """Test that a foreign subtree is rejected."""
        tree = OrgParser().parse(notes_path)
        other = OrgParser().parse("* Elsewhere\n")
        with pytest.raises(ValueError, match="not part of the exported tree"):
            export_as(tree, "md", subtree=other.children[0])


@pytest.mark.integration
class TestCancellation:
    """Test host-requested cancellation."""

    def test_cancel_immediately(self, notes_path: Path) -> None:
        """Test a cancellation check that always fires."""
        with pytest.raises(ExportCancelledError):
            export_to_string(notes_path, cancel_check=lambda: True)

    def test_cancel_midway(self, notes_path: Path) -> None:
        """Test cancelling after some top-level children were exported."""
        calls = []

        def cancel_after_two() -> bool:
            calls.append(1)
            return len(calls) > 2

        with pytest.raises(ExportCancelledError):
            export_to_string(notes_path, cancel_check=cancel_after_two)
        assert len(calls) == 3

    def test_no_cancel(self, notes_path: Path) -> None:
        """Test that a check returning False changes nothing."""
        assert export_to_string(notes_path, cancel_check=lambda: False) == export_to_string(notes_path)


@pytest.mark.integration
class TestFileExport:
    """Test writing exports to disk."""

    def test_export_file_default_destination(self, notes_path: Path) -> None:
        """Test that x.org is written as x.md next to it."""
        written = export_file(notes_path)
        assert written == notes_path.with_suffix(".md")
        assert "# Setup" in written.read_text(encoding="utf-8")

    def test_export_file_explicit_destination(self, notes_path: Path, tmp_path: Path) -> None:
        """Test an explicit output path with missing parent directories."""
        destination = tmp_path / "out" / "nested" / "notes.html"
        assert export_file(notes_path, destination, "html") == destination
        assert destination.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_export_file_missing_input(self, tmp_path: Path) -> None:
        """Test a missing input file."""
        with pytest.raises(FileError, match="Input file not found"):
            export_file(tmp_path / "missing.org")

    def test_failed_export_writes_nothing(self, notes_path: Path) -> None:
        """Test that an invalid option leaves no partial output."""
        with pytest.raises(ValidationError):
            export_file(notes_path, with_tocc=2)
        assert not notes_path.with_suffix(".md").exists()

    def test_export_files(self, notes_path: Path, fixtures_dir: Path, tmp_path: Path) -> None:
        """Test a batch export into an output directory."""
        output_dir = tmp_path / "site"
        written = export_files([notes_path, fixtures_dir / "tasks.org"], output_dir)
        assert written == [output_dir / "field_notes.md", output_dir / "tasks.md"]
        assert all(path.is_file() for path in written)

    def test_unknown_backend(self, notes_path: Path) -> None:
        """Test an unregistered backend name."""
        with pytest.raises(UnknownBackendError):
            export_to_string(notes_path, "rst")

    def test_extensions(self) -> None:
        """Test output extensions per backend."""
        assert export_extension("md") == ".md"
        assert export_extension("html") == ".html"
        assert export_extension("md-toc-entry") == ".md"
