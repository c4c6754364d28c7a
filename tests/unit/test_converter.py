"""
Tests for HTML-to-content-node conversion.
"""

import pytest
from telegraphkit.content.converter import ConversionOverrides, MarkupConverter, convert_html, map_tag
from telegraphkit.content.nodes import ElementNode, TextNode
from telegraphkit.errors import MarkupParseError


def elements(nodes):
    return [node for node in nodes if isinstance(node, ElementNode)]


@pytest.fixture
def converter():
    return MarkupConverter()


@pytest.mark.unit
class TestTagMapping:
    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("h1", "h3"),
            ("H2", "h3"),
            ("b", "strong"),
            ("i", "em"),
            ("div", "p"),
            ("span", "p"),
            ("figure", "figure"),
            ("h4", "h4"),
            ("section", "p"),
            ("marquee", "p"),
        ],
    )
    def test_map_tag(self, tag, expected):
        assert map_tag(tag) == expected


@pytest.mark.unit
class TestBodyConversion:
    def test_simple_paragraph(self, converter):
        page = converter.convert("<p>Hello</p>")
        assert page.content == (ElementNode("p", children=(TextNode("Hello"),)),)

    def test_headings_are_remapped(self, converter):
        page = converter.convert("<h1>Title</h1><h2>Sub</h2><h4>Small</h4>")
        assert [node.tag for node in elements(page.content)] == ["h3", "h3", "h4"]

    def test_script_and_style_dropped_with_contents(self, converter):
        page = converter.convert("<p>a</p><script>alert(1)</script><style>p{}</style><p>b</p>")
        assert page.content == (
            ElementNode("p", children=(TextNode("a"),)),
            ElementNode("p", children=(TextNode("b"),)),
        )

    def test_nested_containers_become_paragraphs(self, converter):
        page = converter.convert("<div><span>x</span></div>")
        assert page.content == (ElementNode("p", children=(ElementNode("p", children=(TextNode("x"),)),)),)

    def test_only_href_and_src_survive(self, converter):
        page = converter.convert(
            '<p><a href="https://example.com" class="ext" target="_blank">link</a>'
            '<img src="https://example.com/cat.png" alt="cat" width="10"></p>'
        )
        link, image = page.content[0].children

        assert dict(link.attrs) == {"href": "https://example.com"}
        assert dict(image.attrs) == {"src": "https://example.com/cat.png"}

    def test_text_is_kept_verbatim(self, converter):
        page = converter.convert("<p>  two  spaces </p>")
        assert page.content[0].children == (TextNode("  two  spaces "),)

    @pytest.mark.parametrize(
        "markup, trailing",
        [
            ("<p>x</p>   \n  ", "   \n  "),
            ("  <p>x</p>  ", "  "),
            ("<html><body><p>x</p>\n\n</body></html>\n", "\n\n\n"),
        ],
    )
    def test_whitespace_after_block_elements_is_kept(self, converter, markup, trailing):
        page = converter.convert(markup)

        assert page.content[-2] == ElementNode("p", children=(TextNode("x"),))
        assert page.content[-1] == TextNode(trailing)

    def test_whitespace_between_block_elements_is_kept(self, converter):
        page = converter.convert("<p>a</p> \t\n <p>b</p>")
        assert page.content[1] == TextNode(" \t\n ")

    def test_comments_are_skipped(self, converter):
        page = converter.convert("<p>a<!-- note -->b</p>")
        assert page.content[0].children == (TextNode("a"), TextNode("b"))

    def test_inline_formatting(self, converter):
        page = converter.convert("<p><b>bold</b> and <i>italic</i></p>")
        assert page.content[0] == ElementNode(
            "p",
            children=(
                ElementNode("strong", children=(TextNode("bold"),)),
                TextNode(" and "),
                ElementNode("em", children=(TextNode("italic"),)),
            ),
        )

    def test_full_document(self, converter, sample_html):
        page = converter.convert(sample_html)

        assert [node.tag for node in elements(page.content)] == ["h3", "p", "p", "img", "ul"]
        intro = elements(page.content)[1]
        assert intro.children == (
            TextNode("Intro with "),
            ElementNode("strong", children=(TextNode("bold"),)),
            TextNode(" and "),
            ElementNode("em", children=(TextNode("italic"),)),
            TextNode("."),
        )
        assert all("alert" not in getattr(node, "text", "") for node in page.content)

    def test_head_only_document_has_no_content(self, converter):
        page = converter.convert("<title>T</title>")
        assert page.title == "T"
        assert page.content == ()


@pytest.mark.unit
class TestMetadata:
    def test_extracts_title_and_meta(self, converter, sample_html):
        page = converter.convert(sample_html)

        assert page.title == "Sample Article"
        assert page.author_name == "Jane Doe"
        assert page.author_url == "https://jane.example.com"
        assert page.description == "A short sample"

    def test_missing_metadata_is_empty(self, converter):
        page = converter.convert("<p>x</p>")
        assert (page.title, page.author_name, page.author_url, page.description) == ("", "", "", "")

    def test_first_meta_wins(self, converter):
        page = converter.convert(
            '<html><head><meta name="author" content="First"><meta name="author" content="Second"></head>'
            "<body><p>x</p></body></html>"
        )
        assert page.author_name == "First"

    def test_overrides_take_precedence(self, converter, sample_html):
        page = converter.convert(
            sample_html,
            ConversionOverrides(title="Custom", author_name="Override", description=""),
        )

        assert page.title == "Custom"
        assert page.author_name == "Override"
        # Empty overrides leave the document's value alone.
        assert page.description == "A short sample"
        assert page.author_url == "https://jane.example.com"


@pytest.mark.unit
class TestParseFailures:
    @pytest.mark.parametrize("markup", ["", "   \n\t "])
    def test_blank_markup(self, converter, markup):
        with pytest.raises(MarkupParseError):
            converter.convert(markup)

    @pytest.mark.parametrize("markup", [None, 42, ["<p>x</p>"]])
    def test_non_text_markup(self, converter, markup):
        with pytest.raises(MarkupParseError, match="markup must be text"):
            converter.convert(markup)

    def test_bytes_are_decoded(self, converter):
        page = converter.convert("<p>café</p>".encode("utf-8"))
        assert page.content[0].children == (TextNode("café"),)

    def test_module_level_helper(self):
        assert convert_html("<p>x</p>").content == (ElementNode("p", children=(TextNode("x"),)),)
