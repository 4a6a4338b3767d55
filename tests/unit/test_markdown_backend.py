#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_backend.py
"""Unit tests for the Markdown backend translators."""

import re

import pytest

from org2md.ast import builder as b
from org2md.backends.markdown import md_headline_title

_LINK_ID_RE = re.compile(r"\]\(#([^)]+)\)")
_ANCHOR_ID_RE = re.compile(r'<a id="([^"]+)"></a>')


def _doc(*elements):
    """Wrap elements in a document with a leading section."""
    return b.document(b.section(*elements))


@pytest.mark.unit
class TestPlainText:
    """Test escaping of Markdown syntax in text."""

    def test_emphasis_characters_escaped(self, export_md) -> None:
        """Test that emphasis markers in text are escaped."""
        assert export_md(_doc(b.paragraph("a *b* c"))).strip() == r"a \*b\* c"

    def test_backslash_backtick_underscore(self, export_md) -> None:
        """Test the remaining special characters."""
        assert export_md(_doc(b.paragraph("snake_case `x` C:\\dir"))).strip() == r"snake\_case \`x\` C:\\dir"

    def test_heading_marker_at_line_start(self, export_md) -> None:
        """Test that a # starting a line cannot become a heading."""
        out = export_md(_doc(b.paragraph("first\n# second")))
        assert "first\n\\# second" in out

    def test_paragraph_starting_with_hash(self, export_md) -> None:
        """Test that a paragraph beginning with # is protected."""
        assert export_md(_doc(b.paragraph("# not a heading"))).strip() == r"\# not a heading"

    def test_image_syntax_escaped(self, export_md) -> None:
        """Test that text resembling an image is escaped."""
        assert export_md(_doc(b.paragraph("look ![here]"))).strip() == r"look \![here]"

    def test_special_strings(self, export_md) -> None:
        """Test special string conversion and its option."""
        assert export_md(_doc(b.paragraph("a -- b..."))).strip() == "a &ndash; b&hellip;"
        assert export_md(_doc(b.paragraph("a -- b")), with_special_strings=False).strip() == "a -- b"

    def test_preserve_breaks(self, export_md) -> None:
        """Test that \\n:t turns newlines into hard breaks."""
        out = export_md(_doc(b.paragraph("line one\nline two")), preserve_breaks=True)
        assert "line one  \nline two" in out


@pytest.mark.unit
class TestObjects:
    """Test inline markup."""

    def test_bold_and_italic(self, export_md) -> None:
        """Test bold and italic markers."""
        out = export_md(_doc(b.paragraph(b.bold("strong"), " and ", b.italic("soft"))))
        assert out.strip() == "**strong** and *soft*"

    def test_code_spans(self, export_md) -> None:
        """Test code and verbatim with embedded backticks."""
        assert export_md(_doc(b.paragraph(b.code("x = 1")))).strip() == "`x = 1`"
        assert export_md(_doc(b.paragraph(b.verbatim("a`b")))).strip() == "``a`b``"
        assert export_md(_doc(b.paragraph(b.code("`tick")))).strip() == "`` `tick ``"

    def test_line_break(self, export_md) -> None:
        """Test forced line breaks."""
        out = export_md(_doc(b.paragraph("one", b.line_break(), "two")))
        assert "one  \ntwo" in out

    def test_latex_fragments(self, export_md) -> None:
        """Test inline and display math delimiters."""
        assert export_md(_doc(b.paragraph(b.latex_fragment("\\(x^2\\)")))).strip() == "$x^2$"
        assert export_md(_doc(b.paragraph(b.latex_fragment("\\[y\\]")))).strip() == "$$y$$"

    def test_latex_disabled(self, export_md) -> None:
        """Test that tex:nil drops fragments."""
        out = export_md(_doc(b.paragraph("a ", b.latex_fragment("\\(x\\)"))), with_latex=False)
        assert out.strip() == "a"


@pytest.mark.unit
class TestHeadlines:
    """Test headline styles and degradation to list items."""

    def _outline(self):
        return b.document(
            b.headline(
                "Intro",
                b.section(b.paragraph("Hello")),
                b.headline("Detail", b.headline("Deeper", level=3), level=2),
            )
        )

    def test_atx(self, export_md) -> None:
        """Test the default atx style."""
        out = export_md(self._outline(), with_toc=False)
        assert out.strip() == "# Intro\n\nHello\n\n\n## Detail\n\n\n### Deeper"

    def test_setext(self, export_md) -> None:
        """Test setext underlines for the first two levels."""
        tree = b.document(b.headline("Intro", b.section(b.paragraph("Hello"))))
        out = export_md(tree, with_toc=False, md_headline_style="setext")
        assert out.strip() == "Intro\n=====\n\nHello"

    def test_setext_degrades_below_level_two(self, export_md) -> None:
        """Test that setext headlines beyond level 2 become list items."""
        out = export_md(self._outline(), with_toc=False, md_headline_style="setext", section_numbers=False)
        assert "Detail\n------" in out
        assert "-   Deeper" in out

    def test_mixed(self, export_md) -> None:
        """Test setext for levels 1-2 and atx below."""
        out = export_md(self._outline(), with_toc=False, md_headline_style="mixed")
        assert "Intro\n=====" in out
        assert "Detail\n------" in out
        assert "### Deeper" in out

    def test_toplevel_hlevel(self, export_md) -> None:
        """Test shifting all headline levels."""
        out = export_md(self._outline(), with_toc=False, md_toplevel_hlevel=2)
        assert "## Intro" in out
        assert "#### Deeper" in out

    def test_beyond_max_level_becomes_item(self, export_md) -> None:
        """Test that levels past the style maximum become list items."""
        tree = b.document(b.headline("Deep"))
        out = export_md(tree, with_toc=False, section_numbers=False, md_toplevel_hlevel=8)
        assert out.strip() == "-   Deep"

    def test_low_level_numbered_item(self, export_md) -> None:
        """Test numbered bullets and indented contents for low-level headlines."""
        tree = b.document(
            b.headline(
                "Top",
                b.headline("Sub", b.section(b.paragraph("Body")), level=2),
                level=1,
            )
        )
        out = export_md(tree, with_toc=False, headline_levels=1)
        assert "# Top" in out
        assert "1.  Sub\n\n    Body" in out

    def test_todo_and_tags(self, export_md) -> None:
        """Test TODO keywords, priorities and tags in titles."""
        tree = b.document(b.headline("Task", todo="TODO", priority="A", tags=["work"]))
        assert export_md(tree, with_toc=False).strip() == "# TODO Task     :work:"
        out = export_md(tree, with_toc=False, with_todo_keywords=False, with_tags=False, with_priority=True)
        assert out.strip() == "# [#A] Task"

    def test_footnote_section_headline_skipped(self, export_md) -> None:
        """Test that the footnote section headline is not rendered."""
        tree = b.document(b.headline("Body"), b.headline("Footnotes", footnote_section=True))
        out = export_md(tree, with_toc=False)
        assert "Footnotes" not in out

    def test_headline_title_helper(self) -> None:
        """Test the title block helper directly."""
        assert md_headline_title("atx", 2, "Title") == "\n## Title\n\n"
        assert md_headline_title("setext", 1, "Ab", '<a id="x"></a>') == '\n<a id="x"></a>\n\nAb\n==\n\n'
        assert md_headline_title("mixed", 3, "Deep", tags="     :t:") == "\n### Deep     :t:\n\n"


@pytest.mark.unit
class TestTableOfContents:
    """Test ToC generation and headline anchors."""

    def _outline(self):
        return b.document(
            b.headline("A", b.headline("A1", level=2, CUSTOM_ID="a1"), CUSTOM_ID="a"),
            b.headline("B", CUSTOM_ID="b"),
        )

    def test_unnumbered_toc(self, export_md) -> None:
        """Test bullets, indentation and custom anchors."""
        out = export_md(self._outline(), with_toc=2, section_numbers=False)
        assert out.startswith("\n# Table of Contents\n\n-   [A](#a)\n    -   [A1](#a1)\n-   [B](#b)\n")
        assert '<a id="a"></a>\n\n# A' in out
        assert '<a id="a1"></a>\n\n## A1' in out

    def test_numbered_toc(self, export_md) -> None:
        """Test numbered ToC entries."""
        out = export_md(self._outline(), with_toc=2)
        assert "1.  [A](#a)\n    1.  [A1](#a1)\n2.  [B](#b)" in out

    def test_toc_depth(self, export_md) -> None:
        """Test limiting the ToC depth."""
        out = export_md(self._outline(), with_toc=1, section_numbers=False)
        assert "-   [A](#a)\n-   [B](#b)" in out
        assert "[A1]" not in out
        assert '<a id="a1"></a>' not in out

    def test_no_toc_no_anchors(self, export_md) -> None:
        """Test that headlines nobody refers to get no anchor."""
        out = export_md(self._outline(), with_toc=False)
        assert "Table of Contents" not in out
        assert "<a id=" not in out

    def test_generated_anchor(self, export_md) -> None:
        """Test references for headlines without CUSTOM_ID."""
        tree = b.document(b.headline("Plain"))
        out = export_md(tree, section_numbers=False)
        assert "-   [Plain](#org0000001)" in out
        assert '<a id="org0000001"></a>' in out

    def test_toc_keyword(self, export_md) -> None:
        """Test a #+TOC: keyword placing a ToC without a title."""
        tree = b.document(
            b.section(b.keyword("TOC", "headlines 1")),
            b.headline("A", CUSTOM_ID="a"),
        )
        out = export_md(tree, with_toc=False, section_numbers=False)
        assert out.strip().startswith("-   [A](#a)")
        assert "Table of Contents" not in out

    def test_target_toc_keyword(self, export_md) -> None:
        """Test that a :target ToC lists and anchors the target's children only."""
        tree = b.document(
            b.section(b.keyword("TOC", 'headlines 1 :target "*B"')),
            b.headline("A"),
            b.headline("B", b.headline("B1", level=2)),
        )
        out = export_md(tree, with_toc=False, section_numbers=False)
        links = _LINK_ID_RE.findall(out)
        assert out.strip().startswith("-   [B1](#")
        assert len(links) == 1
        assert _ANCHOR_ID_RE.findall(out) == links
        assert f'<a id="{links[0]}"></a>\n\n## B1' in out

    def test_local_toc_keyword(self, export_md) -> None:
        """Test a local ToC inside a headline's section."""
        tree = b.document(
            b.headline(
                "A",
                b.section(b.keyword("TOC", "headlines 1 local")),
                b.headline("A1", level=2, CUSTOM_ID="a1"),
            ),
            b.headline("B", CUSTOM_ID="b"),
        )
        out = export_md(tree, with_toc=False, section_numbers=False)
        assert "-   [A1](#a1)" in out
        assert "[B]" not in out
        assert _ANCHOR_ID_RE.findall(out) == ["a1"]

    @pytest.mark.parametrize(
        "value",
        ["headlines 2", "headlines 2 local", 'headlines 1 :target "*A"', 'headlines local :target "*B"'],
    )
    def test_every_toc_link_has_anchor(self, export_md, value) -> None:
        """Test that each ToC link points at an emitted anchor."""
        tree = b.document(
            b.headline(
                "A",
                b.section(b.keyword("TOC", value)),
                b.headline("A1", level=2),
            ),
            b.headline("B", b.headline("B1", level=2)),
        )
        out = export_md(tree, with_toc=False)
        links = _LINK_ID_RE.findall(out)
        assert links
        assert set(links) <= set(_ANCHOR_ID_RE.findall(out))

    def test_translated_title(self, export_md) -> None:
        """Test the ToC title in the document language."""
        out = export_md(self._outline(), with_toc=1, language="fr")
        assert "Table des matières" in out


@pytest.mark.unit
class TestFootnotes:
    """Test footnote references and the footnote section."""

    def test_numbered_by_first_reference(self, export_md) -> None:
        """Test that a later-defined footnote referenced first gets number 1."""
        tree = _doc(
            b.paragraph("See", b.footnote_reference("2"), " and", b.footnote_reference("1")),
            b.footnote_definition("1", b.paragraph("One")),
            b.footnote_definition("2", b.paragraph("Two")),
        )
        out = export_md(tree)
        assert (
            'See<sup><a id="fnr.1" class="footref" href="#fn.1" role="doc-backlink">1</a></sup>'
            ' and<sup><a id="fnr.2" class="footref" href="#fn.2" role="doc-backlink">2</a></sup>'
        ) in out
        assert "\n# Footnotes\n\n" in out
        assert '<sup><a id="fn.1" href="#fnr.1">1</a></sup> Two\n' in out
        assert '<sup><a id="fn.2" href="#fnr.2">2</a></sup> One\n' in out
        assert out.index("Two") < out.index("One")

    def test_repeated_reference(self, export_md) -> None:
        """Test the back-reference id of a second reference."""
        tree = _doc(
            b.paragraph("A", b.footnote_reference("x"), " B", b.footnote_reference("x")),
            b.footnote_definition("x", b.paragraph("Ex")),
        )
        out = export_md(tree)
        assert 'id="fnr.1.100"' in out
        assert out.count('<a id="fn.1"') == 1

    def test_adjacent_references_separated(self, export_md) -> None:
        """Test the separator between consecutive references."""
        tree = _doc(
            b.paragraph("A", b.footnote_reference("1"), b.footnote_reference("2")),
            b.footnote_definition("1", b.paragraph("One")),
            b.footnote_definition("2", b.paragraph("Two")),
        )
        assert "</sup><sup>, </sup><sup>" in export_md(tree)

    def test_footnotes_disabled(self, export_md) -> None:
        """Test that f:nil drops references and the section."""
        tree = _doc(
            b.paragraph("A", b.footnote_reference("1")),
            b.footnote_definition("1", b.paragraph("One")),
        )
        out = export_md(tree, with_footnotes=False)
        assert "<sup>" not in out
        assert "Footnotes" not in out

    def test_no_footnotes_no_section(self, export_md) -> None:
        """Test that a document without footnotes has no section."""
        assert "Footnotes" not in export_md(_doc(b.paragraph("plain")))


@pytest.mark.unit
class TestElements:
    """Test block-level elements."""

    def test_unordered_list(self, export_md) -> None:
        """Test bullets and item spacing."""
        tree = _doc(b.plain_list(b.item(b.paragraph("a")), b.item(b.paragraph("b"))))
        assert export_md(tree).strip() == "-   a\n-   b"

    def test_nested_list(self, export_md) -> None:
        """Test that a sub-list stays attached to its item."""
        inner = b.plain_list(b.item(b.paragraph("b")))
        tree = _doc(b.plain_list(b.item(b.paragraph("a"), inner)))
        assert export_md(tree).strip() == "-   a\n    -   b"

    def test_ordered_list_with_counter(self, export_md) -> None:
        """Test ordered bullets honouring [@N]."""
        tree = _doc(
            b.plain_list(
                b.item(b.paragraph("a"), counter=3),
                b.item(b.paragraph("b")),
                type="ordered",
            )
        )
        assert export_md(tree).strip() == "3.  a\n4.  b"

    def test_checkboxes(self, export_md) -> None:
        """Test checkbox markers."""
        tree = _doc(
            b.plain_list(
                b.item(b.paragraph("done"), checkbox="on"),
                b.item(b.paragraph("open"), checkbox="off"),
                b.item(b.paragraph("partial"), checkbox="trans"),
            )
        )
        assert export_md(tree).strip() == "-   [X] done\n-   [ ] open\n-   [-] partial"

    def test_descriptive_item(self, export_md) -> None:
        """Test description list tags."""
        tree = _doc(b.plain_list(b.item(b.paragraph("meaning"), tag=["term"]), type="descriptive"))
        assert export_md(tree).strip() == "-   **term:** meaning"

    def test_src_block_indented(self, export_md) -> None:
        """Test that code blocks become indented code."""
        tree = _doc(b.src_block("def f():\n    return 1\n", "python"))
        assert export_md(tree).strip("\n") == "    def f():\n        return 1"

    def test_example_block_common_indent_removed(self, export_md) -> None:
        """Test that common indentation is removed before re-indenting."""
        tree = _doc(b.example_block("  a\n    b\n"))
        assert export_md(tree).strip("\n") == "    a\n      b"

    def test_quote_block(self, export_md) -> None:
        """Test blockquote prefixes, including blank lines between paragraphs."""
        tree = _doc(b.quote_block(b.paragraph("first"), b.paragraph("second")))
        assert export_md(tree).strip() == "> first\n> \n> second"

    def test_horizontal_rule(self, export_md) -> None:
        """Test horizontal rules."""
        assert export_md(_doc(b.horizontal_rule())).strip() == "---"

    def test_table_as_html(self, export_md) -> None:
        """Test that tables fall back to HTML."""
        tree = _doc(b.table(b.table_row("a", "b")))
        out = export_md(tree)
        assert out.lstrip().startswith("<table")
        assert "</table>" in out

    def test_markdown_keyword_and_export_block(self, export_md) -> None:
        """Test raw Markdown passthrough."""
        tree = _doc(b.keyword("MD", "**raw**"), b.export_block("MARKDOWN", "  | a |\n"))
        out = export_md(tree)
        assert "**raw**" in out
        assert "| a |" in out

    def test_html_export_block(self, export_md) -> None:
        """Test that HTML export blocks pass through via the html backend."""
        out = export_md(_doc(b.export_block("HTML", "<div>x</div>\n")))
        assert "<div>x</div>" in out

    def test_other_export_block_dropped(self, export_md) -> None:
        """Test that export blocks for other backends are dropped."""
        out = export_md(_doc(b.paragraph("kept"), b.export_block("LATEX", "\\newpage\n")))
        assert "newpage" not in out

    def test_elements_separated_by_one_blank_line(self, export_md) -> None:
        """Test that parsed spacing is normalized between elements."""
        first = b.paragraph("one", post_blank=3)
        tree = _doc(first, b.paragraph("two"))
        assert export_md(tree).strip() == "one\n\ntwo"
