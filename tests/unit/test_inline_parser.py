#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_inline_parser.py
"""Unit tests for the Org inline object parser."""

import pytest

from org2md.export.protocols import register_link_protocol, unregister_link_protocol
from org2md.parsers.inline import InlineParser, classify_link


def _kinds(nodes):
    return [node.kind for node in nodes]


@pytest.mark.unit
class TestClassifyLink:
    """Test splitting bracket link destinations."""

    @pytest.mark.parametrize(
        "raw,link_type,path",
        [
            ("#intro", "custom-id", "intro"),
            ("(ref)", "coderef", "ref"),
            ("https://orgmode.org", "https", "//orgmode.org"),
            ("id:abc-123", "id", "abc-123"),
            ("file:notes.org", "file", "notes.org"),
            ("./img/cat.png", "file", "./img/cat.png"),
            ("/etc/hosts", "file", "/etc/hosts"),
            ("~/notes.org", "file", "~/notes.org"),
            ("Some Heading", "fuzzy", "Some Heading"),
            ("*Tasks", "fuzzy", "*Tasks"),
            ("unknown:thing", "fuzzy", "unknown:thing"),
        ],
    )
    def test_types(self, raw: str, link_type: str, path: str) -> None:
        """Test the type and path of common destinations."""
        result = classify_link(raw)
        assert result["type"] == link_type
        assert result["path"] == path

    def test_search_option(self) -> None:
        """Test the ``::`` search option of file links."""
        result = classify_link("file:notes.org::*Tasks")
        assert result == {"type": "file", "path": "notes.org", "search_option": "*Tasks"}

    def test_line_breaks_collapse(self) -> None:
        """Test that a destination spanning lines is joined with a space."""
        assert classify_link("Some\n   Heading")["path"] == "Some Heading"

    def test_escaped_brackets(self) -> None:
        """Test that backslash-escaped brackets are unescaped."""
        assert classify_link(r"file:a\[1\].org")["path"] == "a[1].org"

    def test_registered_protocol(self) -> None:
        """Test that registered protocols are recognized as link types."""
        register_link_protocol("issue", lambda path, desc, backend, ctx: path)
        try:
            assert classify_link("issue:42") == {"type": "issue", "path": "42"}
        finally:
            unregister_link_protocol("issue")
        assert classify_link("issue:42")["type"] == "fuzzy"


@pytest.mark.unit
class TestEmphasis:
    """Test emphasis markers and object spacing."""

    def test_bold_with_post_blank(self) -> None:
        """Test that spaces after an object become its post_blank."""
        nodes = InlineParser().parse("some *bold* text")
        assert _kinds(nodes) == ["plain-text", "bold", "plain-text"]
        assert nodes[0].value == "some "
        assert nodes[1].post_blank == 1
        assert nodes[1].children[0].value == "bold"
        assert nodes[2].value == "text"

    @pytest.mark.parametrize(
        "marker,kind",
        [("*", "bold"), ("/", "italic"), ("_", "underline"), ("+", "strike-through")],
    )
    def test_markers(self, marker: str, kind: str) -> None:
        """Test each recursive emphasis marker."""
        nodes = InlineParser().parse(f"a {marker}word{marker}.")
        assert _kinds(nodes) == ["plain-text", kind, "plain-text"]

    def test_verbatim_and_code(self) -> None:
        """Test that verbatim and code keep their body as a value."""
        nodes = InlineParser().parse("=x *y*= and ~z~")
        assert _kinds(nodes) == ["verbatim", "plain-text", "code"]
        assert nodes[0].value == "x *y*"
        assert nodes[2].value == "z"

    def test_nested(self) -> None:
        """Test emphasis inside emphasis."""
        nodes = InlineParser().parse("*bold /italic/*")
        assert nodes[0].kind == "bold"
        assert _kinds(nodes[0].children) == ["plain-text", "italic"]

    def test_inside_word_ignored(self) -> None:
        """Test that markers inside a word are plain text."""
        nodes = InlineParser().parse("a*b*c")
        assert _kinds(nodes) == ["plain-text"]
        assert nodes[0].value == "a*b*c"

    def test_multiline_limit(self) -> None:
        """Test that emphasis may not span more than two lines."""
        assert _kinds(InlineParser().parse("*a\nb*")) == ["bold"]
        assert _kinds(InlineParser().parse("*a\nb\nc*")) == ["plain-text"]


@pytest.mark.unit
class TestLinks:
    """Test bracket, angle and plain links."""

    def test_bracket_link_with_description(self) -> None:
        """Test a described bracket link."""
        (link,) = InlineParser().parse("[[https://orgmode.org][The /Org/ site]]")
        assert link.get("type") == "https"
        assert link.get("path") == "//orgmode.org"
        assert link.get("raw_link") == "https://orgmode.org"
        assert link.get("format") == "bracket"
        assert _kinds(link.children) == ["plain-text", "italic", "plain-text"]

    def test_description_cannot_hold_links(self) -> None:
        """Test that a description is parsed without links."""
        (link,) = InlineParser().parse("[[x][see https://example.com]]")
        assert _kinds(link.children) == ["plain-text"]

    def test_plain_link(self) -> None:
        """Test that trailing punctuation is not part of a plain link."""
        nodes = InlineParser().parse("see https://example.com.")
        assert _kinds(nodes) == ["plain-text", "link", "plain-text"]
        assert nodes[1].get("path") == "//example.com"
        assert nodes[1].get("format") == "plain"
        assert nodes[2].value == "."

    def test_angle_link(self) -> None:
        """Test an angle link."""
        (link,) = InlineParser().parse("<https://example.com/a b>")
        assert link.get("format") == "angle"
        assert link.get("path") == "//example.com/a b"

    def test_radio_link(self) -> None:
        """Test that text matching a radio target becomes a radio link."""
        nodes = InlineParser(["Org mode"]).parse("I like org mode a lot")
        assert _kinds(nodes) == ["plain-text", "link", "plain-text"]
        assert nodes[1].get("type") == "radio"
        assert nodes[1].get("path") == "org mode"


@pytest.mark.unit
class TestOtherObjects:
    """Test the remaining object kinds."""

    def test_footnote_references(self) -> None:
        """Test labelled and inline footnote references."""
        nodes = InlineParser().parse("A[fn:1] B[fn::inline [note]]")
        refs = [node for node in nodes if node.kind == "footnote-reference"]
        assert refs[0].get("label") == "1"
        assert refs[1].get("label") is None
        assert refs[1].get("type") == "inline"
        assert refs[1].children[0].value == "inline [note]"

    def test_targets(self) -> None:
        """Test targets and radio targets."""
        nodes = InlineParser().parse("<<here>> and <<<Radio>>>")
        assert _kinds(nodes) == ["target", "plain-text", "radio-target"]
        assert nodes[0].value == "here"
        assert nodes[2].value == "Radio"

    def test_timestamps(self) -> None:
        """Test active and inactive timestamps."""
        nodes = InlineParser().parse("<2024-01-02 Tue> [2024-01-03 Wed]")
        assert [node.get("type") for node in nodes] == ["active", "inactive"]

    def test_statistics_cookie(self) -> None:
        """Test [n/m] cookies."""
        (cookie,) = InlineParser().parse("[2/3]")
        assert cookie.kind == "statistics-cookie"

    def test_entity(self) -> None:
        """Test that known entities are recognized and unknown commands are LaTeX."""
        nodes = InlineParser().parse(r"\alpha \foo{x}")
        assert nodes[0].kind == "entity"
        assert nodes[0].get("utf8") == "α"
        assert nodes[1].kind == "latex-fragment"

    def test_latex_fragments(self) -> None:
        """Test inline math delimiters."""
        nodes = InlineParser().parse(r"$x$ and \(y\)")
        assert _kinds(nodes) == ["latex-fragment", "plain-text", "latex-fragment"]

    def test_line_break(self) -> None:
        """Test that a line break keeps no post_blank."""
        nodes = InlineParser().parse("one\\\\\ntwo")
        assert _kinds(nodes) == ["plain-text", "line-break", "plain-text"]
        assert nodes[1].post_blank == 0

    def test_subscript(self) -> None:
        """Test bare and braced subscripts."""
        nodes = InlineParser().parse("H_2 and x_{ij}")
        scripts = [node for node in nodes if node.kind == "subscript"]
        assert [node.get("use_brackets") for node in scripts] == [False, True]

    def test_export_snippet(self) -> None:
        """Test @@backend:value@@ snippets."""
        (snippet,) = InlineParser().parse("@@html:<br>@@")
        assert snippet.get("backend") == "html"
        assert snippet.value == "<br>"

    def test_inline_src_block(self) -> None:
        """Test src_lang{code}."""
        (block,) = InlineParser().parse("src_python{print(1)}")
        assert block.get("language") == "python"
        assert block.value == "print(1)"
