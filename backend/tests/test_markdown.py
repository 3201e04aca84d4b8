"""Tests for devtoolshub.markdown, highlight and markdown_export."""

from __future__ import annotations

from unittest.mock import MagicMock

from devtoolshub.highlight import get_highlight_css, highlight_code, resolve_language
from devtoolshub.markdown import (
    ContainerBlock,
    extract_containers,
    parse_markdown_document,
    placeholder,
    render_container,
)
from devtoolshub.markdown_export import MD_VUE_CSS, export_markdown_as_html, preview_html_for_copy


# -----------------------------------------------------------------------
# extract_containers
# -----------------------------------------------------------------------


class TestExtractContainers:
    """Line-based container extraction."""

    def test_extracts_blocks_in_order(self, sample_markdown: str):
        extracted = extract_containers(sample_markdown)
        assert [b.type for b in extracted.blocks] == ["tip", "warning", "details"]
        assert extracted.blocks[0].title == "Heads up"
        assert extracted.blocks[1].title is None
        assert extracted.blocks[0].content == "Run the migrations first."

    def test_placeholders_replace_blocks(self, sample_markdown: str):
        text = extract_containers(sample_markdown).text_with_placeholders
        for index in range(3):
            assert placeholder(index) in text
        assert ":::" not in text

    def test_placeholder_format(self):
        extracted = extract_containers("::: tip\ncontent\n:::")
        assert extracted.text_with_placeholders == "<!--vue-block-0-->"

    def test_nonce_placeholders(self):
        extracted = extract_containers("a\n::: tip\nx\n:::\n::: danger\ny", nonce="f00d")
        assert extracted.text_with_placeholders == "a\n<!--vue-block-f00d-0-->\n<!--vue-block-f00d-1-->"

    def test_text_without_containers_is_unchanged(self):
        raw = "# Title\n\nbody"
        extracted = extract_containers(raw)
        assert extracted.blocks == []
        assert extracted.text_with_placeholders == raw

    def test_unterminated_block_runs_to_end(self):
        extracted = extract_containers("intro\n::: danger\nline 1\nline 2")
        assert extracted.blocks == [ContainerBlock(type="danger", title=None, content="line 1\nline 2")]
        assert extracted.text_with_placeholders == "intro\n" + placeholder(0)

    def test_new_opener_ends_previous_block(self):
        extracted = extract_containers("::: tip\none\n::: warning\ntwo\n:::")
        assert [(b.type, b.content) for b in extracted.blocks] == [("tip", "one"), ("warning", "two")]

    def test_crlf_line_endings(self):
        extracted = extract_containers("::: tip\r\nbody\r\n:::\r\nafter")
        assert extracted.blocks[0].content == "body"
        assert extracted.text_with_placeholders == placeholder(0) + "\nafter"

    def test_unknown_type_is_plain_text(self):
        extracted = extract_containers("::: note\nbody\n:::")
        assert extracted.blocks == []

    def test_type_must_be_a_whole_word(self):
        assert extract_containers("::: tipster\nbody\n:::").blocks == []

    def test_indented_markers(self):
        extracted = extract_containers("  ::: warning  Careful \nbody\n  :::  ")
        assert extracted.blocks[0].title == "Careful"
        assert extracted.blocks[0].content == "body"


# -----------------------------------------------------------------------
# render_container / parse_markdown_document
# -----------------------------------------------------------------------


class TestRenderContainer:
    def test_titled_tip(self):
        html = render_container(ContainerBlock("tip", "Note", "**hi**"))
        assert html.startswith('<div class="vue-container vue-tip">')
        assert '<p class="vue-container-title"><strong>Note</strong></p>' in html
        assert "<strong>hi</strong>" in html

    def test_untitled_block_has_no_title(self):
        html = render_container(ContainerBlock("danger", None, "x"))
        assert "vue-container-title" not in html

    def test_details_uses_default_label(self):
        html = render_container(ContainerBlock("details", None, "x"), details_label="Details")
        assert html.startswith('<details class="vue-container vue-details">')
        assert '<summary class="vue-container-title">Details</summary>' in html

    def test_title_is_escaped(self):
        html = render_container(ContainerBlock("tip", "<b>x</b>", ""))
        assert "&lt;b&gt;x&lt;/b&gt;" in html


class TestParseMarkdownDocument:
    """Whole-document rendering."""

    def test_renders_containers_in_place(self, sample_markdown: str):
        result = parse_markdown_document(sample_markdown)
        assert result.ok
        assert "<h1>Release notes</h1>" in result.html
        assert "vue-tip" in result.html
        assert "vue-warning" in result.html
        assert "<details" in result.html
        assert "<!--vue-block-" not in result.html
        assert len(result.blocks) == 3

    def test_literal_placeholder_comment_in_input_is_left_alone(self):
        raw = "<!--vue-block-0-->\n\nIntro\n\n::: tip\nBody\n:::\n"
        html = parse_markdown_document(raw).html
        assert html.count("vue-container vue-tip") == 1
        assert html.index("<!--vue-block-0-->") < html.index("<p>Intro</p>") < html.index("vue-tip")
        assert "<!--vue-block-" not in html.replace("<!--vue-block-0-->", "", 1)

    def test_fenced_code_inside_container_is_highlighted(self, sample_markdown: str):
        html = parse_markdown_document(sample_markdown).html
        assert 'class="language-python highlight"' in html

    def test_tables_and_strikethrough(self):
        html = parse_markdown_document("| a | b |\n|---|---|\n| 1 | 2 |\n\n~~gone~~").html
        assert "<table>" in html
        assert "<s>gone</s>" in html

    def test_single_newline_is_a_line_break(self):
        assert "<br" in parse_markdown_document("one\ntwo").html

    def test_unterminated_container_is_not_an_error(self):
        result = parse_markdown_document("::: warning\nstill open")
        assert result.ok
        assert "vue-warning" in result.html

    def test_oversized_input_rejected(self):
        result = parse_markdown_document("x" * 11, max_length=10)
        assert not result.ok
        assert result.error == "Input exceeds maximum length (10 characters)"

    def test_renderer_failure_becomes_error(self):
        broken = MagicMock()
        broken.render.side_effect = RuntimeError("boom")
        result = parse_markdown_document("text", renderer=broken)
        assert not result.ok
        assert result.error == "boom"


# -----------------------------------------------------------------------
# highlight
# -----------------------------------------------------------------------


class TestHighlight:
    def test_known_language(self):
        code = highlight_code("x = 1\n", "python")
        assert code.highlighted
        assert code.html.startswith('<pre><code class="language-python highlight">')

    def test_unknown_language_is_escaped_plain_text(self):
        code = highlight_code("<script>", "no-such-language")
        assert not code.highlighted
        assert code.html == "<pre><code>&lt;script&gt;</code></pre>"

    def test_missing_language(self):
        assert highlight_code("a < b").html == "<pre><code>a &lt; b</code></pre>"

    def test_aliases(self):
        assert resolve_language("Vue") == "html"
        assert resolve_language("sh") == "shell"
        assert resolve_language(None) == ""

    def test_css_is_scoped(self):
        assert ".highlight" in get_highlight_css()

    def test_unknown_style_falls_back(self):
        assert get_highlight_css("no-such-style") == get_highlight_css("default")


# -----------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------


class TestExport:
    def test_full_document(self, sample_markdown: str):
        result = export_markdown_as_html(sample_markdown, lang="en")
        assert result.ok
        assert result.html.startswith("<!DOCTYPE html>")
        assert '<html lang="en">' in result.html
        assert MD_VUE_CSS in result.html
        assert ".highlight" in result.html
        assert '<div class="md-vue">' in result.html

    def test_export_propagates_errors(self):
        result = export_markdown_as_html("x" * 20, max_length=5)
        assert not result.ok

    def test_preview_fragment(self):
        result = preview_html_for_copy("# Hi")
        assert result.html == '<div class="md-vue"><h1>Hi</h1>\n</div>'
