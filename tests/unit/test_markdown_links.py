#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_links.py
"""Unit tests for link classification in the Markdown backend."""

import pytest

from org2md.ast import builder as b
from org2md.export.protocols import register_link_protocol, registered_link_types, unregister_link_protocol


def _doc(*elements):
    return b.document(b.section(*elements))


@pytest.fixture
def issue_protocol():
    """Register an ``issue:`` link exporter for the duration of a test."""

    def export_issue(path, description, backend, ctx):
        return f"[{description or 'issue ' + path}](https://tracker.example.org/{path})"

    register_link_protocol("issue", export_issue)
    yield export_issue
    unregister_link_protocol("issue")


@pytest.mark.unit
class TestExternalLinks:
    """Test links leaving the document."""

    def test_url_with_description(self, export_md) -> None:
        """Test a described web link."""
        out = export_md(_doc(b.paragraph(b.link("//example.com", "Example", type="https"))))
        assert out.strip() == "[Example](https://example.com)"

    def test_bare_url(self, export_md) -> None:
        """Test an autolink."""
        out = export_md(_doc(b.paragraph(b.link("//example.com/a", type="https"))))
        assert out.strip() == "<https://example.com/a>"

    def test_org_file_rewritten(self, export_md) -> None:
        """Test that .org file links point at the exported .md file."""
        link = b.link("notes.org", "Notes", type="file")
        assert export_md(_doc(b.paragraph(link))).strip() == "[Notes](notes.md)"

    def test_org_file_rewrite_disabled(self, export_md) -> None:
        """Test keeping .org links as written."""
        link = b.link("notes.org", "Notes", type="file")
        out = export_md(_doc(b.paragraph(link)), md_link_org_files_as_md=False)
        assert out.strip() == "[Notes](notes.org)"

    def test_absolute_file_uri(self, export_md) -> None:
        """Test that absolute paths become file URIs."""
        link = b.link("/tmp/data.txt", type="file")
        assert export_md(_doc(b.paragraph(link))).strip() == "<file:///tmp/data.txt>"

    def test_inline_image(self, export_md) -> None:
        """Test that undescribed image links are inlined."""
        link = b.link("img/cat.png", type="file")
        assert export_md(_doc(b.paragraph(link))).strip() == "![img](img/cat.png)"

    def test_inline_image_with_caption(self, export_md) -> None:
        """Test that the enclosing paragraph's caption becomes the image title."""
        para = b.paragraph(b.link("img/cat.png", type="file"), caption=[b.text("A cat")])
        assert export_md(_doc(para)).strip() == '![img](img/cat.png "A cat")'

    def test_described_image_is_a_link(self, export_md) -> None:
        """Test that a described image link is not inlined."""
        link = b.link("img/cat.png", "the cat", type="file")
        assert export_md(_doc(b.paragraph(link))).strip() == "[the cat](img/cat.png)"

    def test_custom_protocol(self, export_md, issue_protocol) -> None:
        """Test that a registered protocol renders its links."""
        assert "issue" in registered_link_types()
        out = export_md(_doc(b.paragraph(b.link("42", type="issue"))))
        assert out.strip() == "[issue 42](https://tracker.example.org/42)"

    def test_internal_type_protected(self) -> None:
        """Test that internal link types cannot be overridden."""
        with pytest.raises(ValueError, match="internal link type"):
            register_link_protocol("fuzzy", lambda path, desc, backend, ctx: path)


@pytest.mark.unit
class TestInternalLinks:
    """Test links resolved inside the document."""

    def test_headline_link_uses_number(self, export_md) -> None:
        """Test that an undescribed headline link shows the section number."""
        tree = b.document(b.headline("Intro", b.section(b.paragraph("See ", b.link("Intro")))))
        out = export_md(tree, with_toc=False)
        assert "See [1](#org0000001)" in out
        assert '<a id="org0000001"></a>\n\n# Intro' in out

    def test_headline_link_unnumbered_uses_title(self, export_md) -> None:
        """Test the title fallback when numbering is off."""
        tree = b.document(b.headline("Intro", b.section(b.paragraph(b.link("Intro")))))
        out = export_md(tree, with_toc=False, section_numbers=False)
        assert "[Intro](#org0000001)" in out

    def test_custom_id_link_with_description(self, export_md) -> None:
        """Test custom-id links and anchors."""
        tree = b.document(
            b.headline("Setup", CUSTOM_ID="setup"),
            b.headline("Usage", b.section(b.paragraph(b.link("setup", "the setup", type="custom-id")))),
        )
        out = export_md(tree, with_toc=False)
        assert "[the setup](#setup)" in out
        assert '<a id="setup"></a>' in out
        assert "Usage" in out and '<a id="org' not in out

    def test_id_link_to_other_file(self, export_md) -> None:
        """Test id links resolved through id_locations."""
        tree = _doc(b.paragraph(b.link("abc-123", "elsewhere", type="id")))
        out = export_md(tree, id_locations={"abc-123": "other.org"})
        assert out.strip() == "[elsewhere](other.md)"

    def test_target_link(self, export_md) -> None:
        """Test a link to a <<target>> inside a headline."""
        tree = b.document(
            b.headline(
                "Section",
                b.section(b.paragraph("Here", b.target("spot")), b.paragraph("Go ", b.link("spot"))),
            )
        )
        out = export_md(tree, with_toc=False)
        assert 'Here<a id="org0000001"></a>' in out
        assert "Go [1](#org0000001)" in out

    def test_coderef_link(self, export_md) -> None:
        """Test coderef links to labelled code lines."""
        block = b.src_block("x = 1 (ref:one)\n", "python", use_labels=False)
        tree = _doc(block, b.paragraph("line ", b.link("one", type="coderef")))
        out = export_md(tree)
        assert "    x = 1 (one)" in out
        assert "line 1" in out

    def test_coderef_label(self, export_md) -> None:
        """Test coderef links showing the label itself."""
        block = b.src_block("y = 2 (ref:two)\n", "python")
        tree = _doc(block, b.paragraph("see (", b.link("two", type="coderef"), ")"))
        assert "see (two)" in export_md(tree)

    def test_radio_link(self, export_md) -> None:
        """Test radio links pointing at their radio target."""
        tree = _doc(
            b.paragraph(b.radio_target("Org"), " is a format."),
            b.paragraph("Use ", b.link("Org", "Org", type="radio")),
        )
        out = export_md(tree)
        assert '<a id="org0000001"></a>Org' in out
        assert 'Use <a href="#org0000001">Org</a>' in out


@pytest.mark.unit
class TestBrokenLinks:
    """Test the broken-links modes."""

    def _tree(self):
        return _doc(b.paragraph("See ", b.link("Nowhere", "there"), " now"))

    def test_default_keeps_description(self, export_md, caplog) -> None:
        """Test that unresolved links keep their text and log a warning."""
        out = export_md(self._tree())
        assert out.strip() == "See there now"
        assert "Unable to resolve link: Nowhere" in caplog.text

    def test_mark(self, export_md) -> None:
        """Test marking broken links."""
        out = export_md(self._tree(), with_broken_links="mark")
        assert out.strip() == "See [BROKEN LINK: Nowhere] now"

    def test_drop(self, export_md) -> None:
        """Test dropping broken links."""
        out = export_md(self._tree(), with_broken_links=False)
        assert out.strip() == "See  now"

    def test_undescribed_broken_link_shows_raw_link(self, export_md) -> None:
        """Test the raw link as fallback text."""
        out = export_md(_doc(b.paragraph(b.link("Nowhere"))))
        assert out.strip() == "Nowhere"
