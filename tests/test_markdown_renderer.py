import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quicknotes.services.markdown_renderer import MarkdownRenderer, preview_delay_ms


def test_preview_delay_grows_with_length():
    assert preview_delay_ms(0) == 300
    assert preview_delay_ms(100) == 300
    assert preview_delay_ms(400) == 600
    assert preview_delay_ms(700) == 600
    assert preview_delay_ms(100_000) == 800


def test_render_basic_markdown():
    html = MarkdownRenderer().render_fragment("# Title\n\nsome *text*")
    assert "<h1>Title</h1>" in html
    assert "<em>text</em>" in html


def test_render_strips_scripts_and_handlers():
    html = MarkdownRenderer().render_fragment(
        '<script>alert(1)</script>\n\n<a href="javascript:x()" onclick="y()">link</a>'
    )
    assert "<script" not in html
    assert "onclick" not in html
    assert "javascript:" not in html


def test_render_page_wraps_body():
    page = MarkdownRenderer().render_page("hello")
    assert page.startswith("<html>")
    assert "<p>hello</p>" in page
