from __future__ import annotations

from pathlib import Path, PurePosixPath

from bs4 import BeautifulSoup
import pytest

from folio.adapters.markdown import MarkdownConverter, render_markdown
from folio.core.book import Affix, Chapter, NumberedChapter, Spacer
from folio.core.diagnostics import NullEmitter
from folio.core.exceptions import (
    DestinationError,
    RenderError,
    SourceReadError,
    exception_hint,
)
from folio.core.renderer import HtmlRenderer, derive_index, load_chapter_html, render_book


def _chapter(name: str, path: str = "") -> Chapter:
    return Chapter(name, PurePosixPath(path) if path else PurePosixPath())


def _main(page: str) -> str:
    start = page.index("<main>") + len("<main>")
    return page[start : page.rindex("</main>")]


class RecordingEmitter(NullEmitter):
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, object]]] = []

    def event(self, name, payload):
        self.events.append((name, dict(payload)))


def _scenario_items():
    return [
        NumberedChapter("1.", _chapter("Intro", "intro.md")),
        Spacer(),
        Affix(_chapter("Appendix", "app.md")),
    ]


def test_render_writes_one_page_per_chapter(make_book, theme) -> None:
    book = make_book(
        _scenario_items(),
        {"intro.md": "Intro text\n", "app.md": "Appendix text\n"},
    )

    render_book(book, theme=theme)

    dest = book.destination_dir
    assert (dest / "intro.html").is_file()
    assert (dest / "app.html").is_file()
    assert (dest / "index.html").is_file()
    assert (dest / "print.html").is_file()
    chapter_pages = {
        path.name for path in dest.glob("*.html") if path.name not in {"index.html", "print.html"}
    }
    assert chapter_pages == {"intro.html", "app.html"}


def test_index_is_first_page_without_base_href(make_book, theme) -> None:
    book = make_book(
        _scenario_items(),
        {"intro.md": "Intro text\n", "app.md": "Appendix text\n"},
    )

    render_book(book, theme=theme)

    intro = (book.destination_dir / "intro.html").read_bytes().decode("utf-8")
    index = (book.destination_dir / "index.html").read_bytes().decode("utf-8")
    assert "<base href=" in intro
    assert "<base href=" not in index
    expected = "\n".join(line for line in intro.split("\n") if "<base href=" not in line)
    assert index == expected


def test_print_page_concatenates_chapters_in_order(make_book, theme) -> None:
    intro_source = "# Intro\n\nIntro text\n"
    app_source = "Appendix text\n"
    book = make_book(_scenario_items(), {"intro.md": intro_source, "app.md": app_source})

    render_book(book, theme=theme)

    page = (book.destination_dir / "print.html").read_text(encoding="utf-8")
    assert _main(page) == render_markdown(intro_source) + render_markdown(app_source)
    assert "<title>Test Book</title>" in page


def test_chapter_pages_carry_their_title(make_book, theme) -> None:
    book = make_book(
        _scenario_items(),
        {"intro.md": "Intro text\n", "app.md": "Appendix text\n"},
    )

    render_book(book, theme=theme)

    intro = (book.destination_dir / "intro.html").read_text(encoding="utf-8")
    app = (book.destination_dir / "app.html").read_text(encoding="utf-8")
    assert "<title>Intro - Test Book</title>" in intro
    assert "<title>Appendix - Test Book</title>" in app
    assert _main(app) == render_markdown("Appendix text\n")
    assert '<li class="spacer"></li>' in app


def test_placeholder_chapter_is_listed_but_not_rendered(make_book, theme) -> None:
    items = [
        NumberedChapter("1.", _chapter("Part One")),
        NumberedChapter("2.", _chapter("Real", "real.md")),
    ]
    book = make_book(items, {"real.md": "Real text\n"})
    emitter = RecordingEmitter()

    HtmlRenderer(emitter).render(book, theme=theme)

    dest = book.destination_dir
    pages = sorted(path.name for path in dest.glob("*.html"))
    assert pages == ["index.html", "print.html", "real.html"]
    real = (dest / "real.html").read_text(encoding="utf-8")
    assert "<span><strong>1.</strong> Part One</span>" in real
    index_events = [payload for name, payload in emitter.events if name == "index_rendered"]
    assert index_events == [{"source": "real.html"}]


def test_base_href_in_content_is_removed_from_index_only(make_book, theme) -> None:
    source = 'Before\n\n<base href="http://example.com/">\n\nAfter\n'
    book = make_book([Affix(_chapter("Front", "front.md"))], {"front.md": source})

    render_book(book, theme=theme)

    page = (book.destination_dir / "front.html").read_text(encoding="utf-8")
    index = (book.destination_dir / "index.html").read_text(encoding="utf-8")
    assert "http://example.com/" in page
    assert "http://example.com/" not in index
    assert "After" in index


def test_nested_pages_use_relative_root(make_book, theme) -> None:
    items = [NumberedChapter("1.", _chapter("Deep", "a/b/page.md"))]
    book = make_book(items, {"a/b/page.md": "Deep text\n"})

    render_book(book, theme=theme)

    page = (book.destination_dir / "a" / "b" / "page.html").read_text(encoding="utf-8")
    assert '<base href="../../">' in page
    printed = (book.destination_dir / "print.html").read_text(encoding="utf-8")
    assert '<base href="">' in printed


def test_theme_assets_are_published(make_book, theme) -> None:
    book = make_book([], {})

    render_book(book, theme=theme)

    dest = book.destination_dir
    for name in (
        "book.js",
        "book.css",
        "favicon.png",
        "jquery.js",
        "highlight.css",
        "tomorrow-night.css",
        "highlight.js",
        "_FontAwesome/css/font-awesome.css",
        "_FontAwesome/fonts/fontawesome-webfont.eot",
        "_FontAwesome/fonts/fontawesome-webfont.svg",
        "_FontAwesome/fonts/fontawesome-webfont.ttf",
        "_FontAwesome/fonts/fontawesome-webfont.woff",
        "_FontAwesome/fonts/fontawesome-webfont.woff2",
        "_FontAwesome/fonts/FontAwesome.ttf",
    ):
        assert (dest / name).is_file(), name
    assert (dest / "book.css").read_bytes() == theme.css
    assert (dest / "_FontAwesome/fonts/FontAwesome.ttf").read_bytes() == theme.font_awesome_ttf


def test_book_without_pages_has_no_index(make_book, theme) -> None:
    book = make_book([Spacer()], {})

    render_book(book, theme=theme)

    assert not (book.destination_dir / "index.html").exists()
    assert (book.destination_dir / "print.html").is_file()


def test_auxiliary_files_are_copied(make_book, theme) -> None:
    book = make_book(
        [Affix(_chapter("Front", "front.md"))],
        {
            "front.md": "![logo](img/logo.png)\n",
            "img/logo.png": b"\x89PNG fake",
            "notes/draft.md": "not copied",
        },
    )

    render_book(book, theme=theme)

    dest = book.destination_dir
    assert (dest / "img" / "logo.png").read_bytes() == b"\x89PNG fake"
    assert not (dest / "notes" / "draft.md").exists()
    assert not (dest / "front.md").exists()


def test_rendering_twice_is_byte_identical(make_book, theme) -> None:
    book = make_book(
        _scenario_items(),
        {"intro.md": "Intro text\n", "app.md": "Appendix [^1]\n\n[^1]: note\n"},
    )

    render_book(book, theme=theme)
    first = {
        path.relative_to(book.destination_dir): path.read_bytes()
        for path in book.destination_dir.rglob("*")
        if path.is_file()
    }
    render_book(book, theme=theme)
    second = {
        path.relative_to(book.destination_dir): path.read_bytes()
        for path in book.destination_dir.rglob("*")
        if path.is_file()
    }

    assert first == second


def test_livereload_endpoint_reaches_template(make_book, theme_factory) -> None:
    template = "{% if livereload is defined %}{{ livereload }}{% endif %}|{{ content }}"
    book = make_book(
        [Affix(_chapter("Front", "front.md"))],
        {"front.md": "Hi\n"},
        livereload="ws://localhost:3001",
    )

    render_book(book, theme=theme_factory(template))

    page = (book.destination_dir / "front.html").read_text(encoding="utf-8")
    assert page.startswith("ws://localhost:3001|")


def test_playpen_markers_are_expanded(make_book, theme) -> None:
    book = make_book(
        [Affix(_chapter("Code", "code/example.md"))],
        {
            "code/example.md": "Example:\n\n{{#playpen main.rs}}\n",
            "code/main.rs": 'fn main() { println!("<hi>"); }\n',
        },
    )

    render_book(book, theme=theme)

    page = (book.destination_dir / "code" / "example.html").read_text(encoding="utf-8")
    assert '<pre class="playpen"><code class="language-rust">' in page
    assert "println!(&quot;&lt;hi&gt;&quot;);" in page
    assert (book.destination_dir / "code" / "main.rs").is_file()


def test_missing_chapter_aborts_render(make_book, theme) -> None:
    book = make_book(_scenario_items(), {"intro.md": "Intro text\n"})

    with pytest.raises(SourceReadError, match="app.md"):
        render_book(book, theme=theme)

    assert not (book.destination_dir / "print.html").exists()


def test_invalid_utf8_chapter_aborts_render(make_book, theme) -> None:
    book = make_book([Affix(_chapter("Bad", "bad.md"))], {"bad.md": b"\xff\xfe\xfa"})

    with pytest.raises(SourceReadError) as excinfo:
        render_book(book, theme=theme)

    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_destination_failure_is_normalised(make_book, theme) -> None:
    book = make_book([], {})
    book.root.joinpath("book").write_text("a file, not a directory", encoding="utf-8")

    with pytest.raises(DestinationError) as excinfo:
        render_book(book, theme=theme)

    assert str(excinfo.value) == "Unexpected error when constructing destination path"
    assert excinfo.value.__cause__ is None
    assert excinfo.value.__suppress_context__
    assert exception_hint(excinfo.value) == str(excinfo.value)


def test_template_error_aborts_render(make_book, theme_factory) -> None:
    book = make_book([Affix(_chapter("Front", "front.md"))], {"front.md": "Hi\n"})

    with pytest.raises(RenderError, match="front.md"):
        render_book(book, theme=theme_factory("{{ undefined_field }}"))


def test_load_chapter_html_runs_preprocessor_and_converter(make_book) -> None:
    book = make_book([], {"page.md": "\\{{#playpen skip.rs}}\n\n*hi*\n"})

    html = load_chapter_html(book, _chapter("Page", "page.md"), MarkdownConverter())

    assert "{{#playpen skip.rs}}" in html
    assert "<em>hi</em>" in html


def test_derive_index_preserves_other_lines() -> None:
    page = "a\n<base href=\"../\">\nb\r\n  <base href='x'>\nc\n"
    assert derive_index(page) == "a\nb\r\nc\n"
    assert derive_index("no base here") == "no base here"


def test_default_theme_renders_book(make_book, vendor_cache: Path) -> None:
    book = make_book(
        _scenario_items(),
        {"intro.md": "# Intro\n", "app.md": "# Appendix\n"},
    )

    render_book(book)

    dest = book.destination_dir
    intro = (dest / "intro.html").read_text(encoding="utf-8")
    assert '<html lang="en">' in intro
    assert 'class="nav-chapters next"' in intro
    assert 'href="app.html"' in intro
    assert (dest / "jquery.js").read_bytes() == b"vendor:jquery.js"
    printed = (dest / "print.html").read_text(encoding="utf-8")
    assert "window.print()" in printed


def test_default_theme_escapes_text_fields(make_book, vendor_cache: Path) -> None:
    items = [
        NumberedChapter("1.", _chapter("Vec<T> & co", "vec.md")),
        NumberedChapter("2.", _chapter('Say "bye"', "bye.md")),
    ]
    book = make_book(
        items,
        {"vec.md": "<em>kept</em>\n", "bye.md": "Bye\n"},
        title='Q&A "<b>"',
        description='say "hi"',
    )

    render_book(book)

    page = (book.destination_dir / "vec.html").read_text(encoding="utf-8")
    assert "<title>Vec&lt;T&gt; &amp; co - Q&amp;A &#34;&lt;b&gt;&#34;</title>" in page
    assert '<meta name="description" content="say &#34;hi&#34;">' in page
    assert 'title="Say &#34;bye&#34;"' in page
    assert "<b>" not in page
    assert "<em>kept</em>" in page
    soup = BeautifulSoup(page, "html.parser")
    assert soup.title.string == 'Vec<T> & co - Q&A "<b>"'
    assert soup.find("meta", attrs={"name": "description"})["content"] == 'say "hi"'
