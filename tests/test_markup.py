from __future__ import annotations

from ai_writer.platforms.markup import (
    demote_top_headings,
    extract_hashtags,
    label_code_fences,
    normalize_headings,
    summarize,
    truncate,
    wrap_html,
)


def test_truncate_respects_limit() -> None:
    assert truncate("  short  ", 10) == "short"
    assert truncate("abcdefghij", 5) == "abcd…"
    assert truncate(truncate("abcdefghij", 5), 5) == "abcd…"


def test_wrap_html_only_wraps_once() -> None:
    wrapped = wrap_html("# Title\n\ntext", "ai-article")
    assert wrapped.startswith('<div class="ai-article">')
    assert "<h1>Title</h1>" in wrapped
    assert wrap_html(wrapped, "ai-article") == wrapped


def test_heading_helpers_skip_code_blocks() -> None:
    text = "#   One\n```\n#   not a heading\n```\n# Two"
    assert normalize_headings(text) == "# One\n```\n#   not a heading\n```\n# Two"
    assert demote_top_headings(text) == "## One\n```\n#   not a heading\n```\n## Two"


def test_label_code_fences_keeps_existing_languages() -> None:
    assert label_code_fences("~~~\nx\n~~~", "text") == "~~~text\nx\n~~~"
    assert label_code_fences("```js\nx\n```") == "```js\nx\n```"


def test_extract_hashtags_ignores_entities_and_fragments() -> None:
    text = "Learn #Python and #效率，see https://a.example/#frag &#123; #Python again"
    assert extract_hashtags(text) == ["#Python", "#效率"]


def test_summarize_strips_markup() -> None:
    assert summarize("## Heading\n\nSome **bold** text", limit=50) == "Heading Some bold text"
