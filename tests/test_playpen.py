from __future__ import annotations

import logging
from pathlib import Path

from folio.adapters.playpen import find_playpens, render_playpen


def test_find_playpens_reads_arguments() -> None:
    text = "a {{#playpen src/main.rs editable}} b \\{{#playpen demo.py}}"

    playpens = list(find_playpens(text))

    assert [playpen.file for playpen in playpens] == [Path("src/main.rs"), Path("demo.py")]
    assert playpens[0].editable is True
    assert playpens[0].escaped is False
    assert playpens[1].escaped is True
    assert playpens[1].language == "python"
    assert text[playpens[0].start : playpens[0].end] == "{{#playpen src/main.rs editable}}"


def test_render_playpen_inlines_escaped_source(tmp_path: Path) -> None:
    (tmp_path / "main.rs").write_text("fn main() {\n    let a = 1 < 2;\n}\n", encoding="utf-8")

    result = render_playpen("Before\n{{#playpen main.rs editable}}\nAfter", tmp_path)

    assert result == (
        "Before\n"
        '<pre class="playpen"><code class="language-rust editable">'
        "fn main() {\n    let a = 1 &lt; 2;\n}"
        "</code></pre>\n"
        "After"
    )


def test_escaped_marker_is_kept_literal(tmp_path: Path) -> None:
    assert render_playpen("\\{{#playpen main.rs}}", tmp_path) == "{{#playpen main.rs}}"


def test_missing_file_keeps_marker(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="folio.adapters.playpen"):
        result = render_playpen("x {{#playpen missing.rs}} y", tmp_path)

    assert result == "x {{#playpen missing.rs}} y"
    assert "missing.rs" in caplog.text


def test_text_without_markers_is_unchanged(tmp_path: Path) -> None:
    text = "Plain {{ jinja }} text and {{#other thing}}"

    assert render_playpen(text, tmp_path) == text
