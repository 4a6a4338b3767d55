#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_org_parser.py
"""Unit tests for the Org document parser."""

import io
from pathlib import Path

import pytest

from org2md.ast.utils import walk
from org2md.options import OrgParserOptions
from org2md.parsers.elements import parse_switches
from org2md.parsers.org import OrgParser


def _parse(text: str, **options):
    return OrgParser(OrgParserOptions(**options) if options else None).parse(text)


def _first(tree, kind):
    return next(node for node in walk(tree) if node.kind == kind)


@pytest.mark.unit
class TestOutline:
    """Test headline structure and headline properties."""

    def test_nesting(self) -> None:
        """Test that headlines nest by level with a leading section."""
        doc = _parse("* A\nText\n** B\n*** C\n* D\n")
        assert [child.get("raw_value") for child in doc.children] == ["A", "D"]
        a = doc.children[0]
        assert [child.kind for child in a.children] == ["section", "headline"]
        assert a.children[1].get("level") == 2
        assert a.children[1].children[0].get("raw_value") == "C"

    def test_skipped_level(self) -> None:
        """Test that a deeper headline attaches to the nearest shallower one."""
        doc = _parse("* A\n*** Deep\n")
        assert doc.children[0].children[0].get("level") == 3

    def test_preamble(self) -> None:
        """Test that text before the first headline forms a section."""
        doc = _parse("#+TITLE: Notes\nIntro text\n* A\n")
        assert [child.kind for child in doc.children] == ["section", "headline"]
        assert [child.kind for child in doc.children[0].children] == ["keyword", "paragraph"]

    def test_todo_priority_tags(self) -> None:
        """Test the parts of a full headline line."""
        doc = _parse("* TODO [#A] Write report :work:urgent:\n")
        headline = doc.children[0]
        assert headline.get("todo_keyword") == "TODO"
        assert headline.get("todo_type") == "todo"
        assert headline.get("priority") == "A"
        assert headline.get("tags") == ["work", "urgent"]
        assert headline.get("raw_value") == "Write report"

    def test_done_keyword(self) -> None:
        """Test the done class."""
        headline = _parse("* DONE Ship it\n").children[0]
        assert headline.get("todo_type") == "done"

    def test_todo_keyword_line(self) -> None:
        """Test keywords declared with #+TODO:."""
        doc = _parse("#+TODO: NEXT WAIT(w) | CANCELLED\n* WAIT Reply\n* CANCELLED Trip\n")
        wait, cancelled = doc.children[1:]
        assert (wait.get("todo_keyword"), wait.get("todo_type")) == ("WAIT", "todo")
        assert (cancelled.get("todo_keyword"), cancelled.get("todo_type")) == ("CANCELLED", "done")

    def test_custom_keywords_option(self) -> None:
        """Test keywords configured through parser options."""
        doc = _parse("* NEXT Call\n", todo_keywords=["NEXT"], done_keywords=["FINISHED"])
        assert doc.children[0].get("todo_keyword") == "NEXT"

    def test_title_objects(self) -> None:
        """Test that titles are parsed into objects."""
        headline = _parse("* A /nice/ title\n").children[0]
        assert [node.kind for node in headline.get("title")] == ["plain-text", "italic", "plain-text"]

    def test_commented(self) -> None:
        """Test COMMENT headlines."""
        headline = _parse("* COMMENT Draft\n").children[0]
        assert headline.get("commented") is True
        assert headline.get("raw_value") == "Draft"

    def test_footnote_section(self) -> None:
        """Test the footnote section headline, with a custom title."""
        assert _parse("* Footnotes\n[fn:1] Note.\n").children[0].get("footnote_section") is True
        doc = _parse("* Notes\n[fn:1] Note.\n", footnote_section_title="Notes")
        assert doc.children[0].get("footnote_section") is True

    def test_properties(self) -> None:
        """Test that property drawers become headline properties."""
        doc = _parse("* A\n:PROPERTIES:\n:CUSTOM_ID: intro\n:EXPORT_TITLE: Other\n:END:\nBody\n")
        headline = doc.children[0]
        assert headline.get("CUSTOM_ID") == "intro"
        assert headline.get("EXPORT_TITLE") == "Other"
        assert [child.kind for child in headline.children[0].children] == ["property-drawer", "paragraph"]

    def test_properties_disabled(self) -> None:
        """Test parsing without reading properties."""
        doc = _parse("* A\n:PROPERTIES:\n:CUSTOM_ID: intro\n:END:\n", parse_properties=False)
        assert doc.children[0].get("CUSTOM_ID") is None

    def test_planning(self) -> None:
        """Test that a planning line right after the headline is recognized."""
        doc = _parse("* A\nDEADLINE: <2024-01-02 Tue> SCHEDULED: <2024-01-01 Mon>\nText\n")
        planning = _first(doc, "planning")
        assert planning.get("deadline") == "<2024-01-02 Tue>"
        assert planning.get("scheduled") == "<2024-01-01 Mon>"


@pytest.mark.unit
class TestElements:
    """Test section content."""

    def test_post_blank(self) -> None:
        """Test that blank lines after an element become its post_blank."""
        paragraphs = _parse("One\n\n\nTwo\n").children[0].children
        assert [p.post_blank for p in paragraphs] == [2, 0]

    def test_unordered_list(self) -> None:
        """Test items and nesting."""
        plain_list = _first(_parse("- a\n  - b\n- c\n"), "plain-list")
        assert plain_list.get("type") == "unordered"
        assert len(plain_list.children) == 2
        assert plain_list.children[0].children[1].kind == "plain-list"

    def test_ordered_list_counter_checkbox(self) -> None:
        """Test counters and checkboxes."""
        plain_list = _first(_parse("1. [@3] [X] done\n2. [ ] open\n"), "plain-list")
        first, second = plain_list.children
        assert plain_list.get("type") == "ordered"
        assert (first.get("counter"), first.get("checkbox")) == (3, "on")
        assert second.get("checkbox") == "off"

    def test_descriptive_list(self) -> None:
        """Test item tags."""
        plain_list = _first(_parse("- term :: meaning\n"), "plain-list")
        item = plain_list.children[0]
        assert plain_list.get("type") == "descriptive"
        assert item.get("tag")[0].value == "term"
        assert item.children[0].children[0].value == "meaning\n"

    def test_two_blank_lines_end_list(self) -> None:
        """Test that two blank lines close a list."""
        section = _parse("- a\n\n\nAfter\n").children[0]
        assert [child.kind for child in section.children] == ["plain-list", "paragraph"]

    def test_src_block(self) -> None:
        """Test source block language, switches and parameters."""
        block = _first(_parse("#+BEGIN_SRC python -n :results output\nx = 1\n#+END_SRC\n"), "src-block")
        assert block.get("language") == "python"
        assert block.value == "x = 1\n"
        assert block.get("number_lines") == ("new", 0)
        assert block.get("parameters") == ":results output"

    def test_comma_escape(self) -> None:
        """Test that protective commas are removed from code."""
        block = _first(_parse("#+BEGIN_EXAMPLE\n,* not a headline\n,#+not a keyword\n#+END_EXAMPLE\n"), "example-block")
        assert block.value == "* not a headline\n#+not a keyword\n"

    def test_quote_and_special_blocks(self) -> None:
        """Test greater blocks holding elements."""
        doc = _parse("#+BEGIN_QUOTE\nQuoted\n#+END_QUOTE\n#+BEGIN_note\nAside\n#+END_note\n")
        quote, special = doc.children[0].children
        assert quote.kind == "quote-block"
        assert quote.children[0].kind == "paragraph"
        assert (special.kind, special.get("type")) == ("special-block", "note")

    def test_affiliated_keywords(self) -> None:
        """Test that captions and names attach to the next element."""
        doc = _parse("#+CAPTION: Results\n#+NAME: tbl\n| a | b |\n|---|\n| 1 | 2 |\n")
        table = _first(doc, "table")
        assert table.get("name") == "tbl"
        assert table.get("caption")[0].value == "Results"
        assert [row.get("type") for row in table.children] == ["standard", "rule", "standard"]

    def test_drawer_and_fixed_width(self) -> None:
        """Test drawers, fixed-width areas, rules and comments."""
        doc = _parse(":NOTES:\nInside\n:END:\n: fixed\n-----\n# comment\n")
        kinds = [child.kind for child in doc.children[0].children]
        assert kinds == ["drawer", "fixed-width", "horizontal-rule", "comment"]

    def test_footnote_definition(self) -> None:
        """Test a footnote definition and its contents."""
        definition = _first(_parse("Text[fn:1].\n\n[fn:1] The note.\n"), "footnote-definition")
        assert definition.get("label") == "1"
        assert definition.children[0].kind == "paragraph"

    def test_radio_links(self) -> None:
        """Test that radio targets turn matching text into links."""
        doc = _parse("<<<Org>>> is a format.\n\nI write org daily.\n")
        link = _first(doc, "link")
        assert link.get("type") == "radio"

    def test_latex_environment(self) -> None:
        """Test LaTeX environments."""
        env = _first(_parse("\\begin{equation}\nx=1\n\\end{equation}\n"), "latex-environment")
        assert env.value.startswith("\\begin{equation}")


@pytest.mark.unit
class TestSwitches:
    """Test block switches."""

    @pytest.mark.parametrize(
        "switches,number_lines,retain,use",
        [
            ("", None, True, True),
            ("-n", ("new", 0), True, True),
            ("+n 5", ("continued", 4), True, True),
            ("-r", None, False, False),
            ("-n -r -k", ("new", 0), True, False),
        ],
    )
    def test_parse_switches(self, switches: str, number_lines, retain: bool, use: bool) -> None:
        """Test line numbering and label switches."""
        result = parse_switches(switches)
        assert result["number_lines"] == number_lines
        assert result["retain_labels"] is retain
        assert result["use_labels"] is use


@pytest.mark.unit
class TestInputs:
    """Test accepted input types."""

    def test_bytes(self) -> None:
        """Test raw bytes input."""
        assert _parse(b"* Plain\n").children[0].get("raw_value") == "Plain"

    def test_path(self, tmp_path: Path) -> None:
        """Test reading from a path."""
        path = tmp_path / "notes.org"
        path.write_text("* From file\n", encoding="utf-8")
        assert OrgParser().parse(path).children[0].get("raw_value") == "From file"

    def test_stream(self) -> None:
        """Test a text stream."""
        assert OrgParser().parse(io.StringIO("* Streamed\n")).children[0].get("raw_value") == "Streamed"

    def test_invalid_options(self) -> None:
        """Test that options must be an OrgParserOptions instance."""
        with pytest.raises(TypeError):
            OrgParser({"todo_keywords": ["TODO"]})


@pytest.mark.unit
class TestParseAndExport:
    """Test parsed documents through the Markdown backend."""

    def test_simple_document(self, org_to_md) -> None:
        """Test a headline with emphasis."""
        assert org_to_md("* Intro\nSome *bold* text.", with_toc=False).strip() == "# Intro\n\nSome **bold** text."

    def test_options_keyword(self, org_to_md) -> None:
        """Test that #+OPTIONS: reaches the export."""
        out = org_to_md("#+OPTIONS: toc:nil num:nil\n* TODO Task :work:\n")
        assert out.strip() == "# TODO Task     :work:"

    def test_noexport_subtree(self, org_to_md) -> None:
        """Test that noexport subtrees disappear."""
        out = org_to_md("* Keep\n* Drop :noexport:\nSecret\n", with_toc=False)
        assert "Keep" in out
        assert "Secret" not in out and "Drop" not in out
