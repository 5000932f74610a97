from notedeck.core.models import Note
from notedeck.services.markdown_renderer import MarkdownRenderer

NID = "a" * 32


def test_render_page_header_and_body():
    note = Note(id=NID, title="Hello <World>", labels=("work",), link="https://example.com",
                markdown="# Heading\n\nsome *text*")
    page = MarkdownRenderer().render_page(note)

    assert "<h1>Hello &lt;World&gt;</h1>" in page
    assert '<span class="label">work</span>' in page
    assert 'href="https://example.com"' in page
    assert "<em>text</em>" in page


def test_render_body_strips_scripts():
    out = MarkdownRenderer().render_body("hi <script>alert(1)</script>")
    assert "<script>" not in out


def test_untitled_placeholder():
    page = MarkdownRenderer().render_page(Note(id=NID))
    assert "<em>Untitled</em>" in page
