"""Markdown helpers shared by the platform adapters.

Every helper here is safe to apply more than once: feeding a helper its own
output returns that output unchanged.
"""

from __future__ import annotations

import re
from typing import Callable

from bs4 import BeautifulSoup
from markdown import markdown

_FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")
_HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(?=\S)")
_H1_PATTERN = re.compile(r"^#(?!#)[ \t]+(?=\S)")
_HASHTAG_PATTERN = re.compile(r"(?<![\w&/#])#([^\s#.,;:!?，。；：！？()（）\[\]]+)")
_WHITESPACE_PATTERN = re.compile(r"\s+")

ELLIPSIS = "…"


def markdown_to_html(text: str) -> str:
    return markdown(text, extensions=["extra", "sane_lists"])


def wrap_html(body: str, css_class: str) -> str:
    """Render Markdown into a ``<div class=...>`` wrapper unless already wrapped."""
    opening = f'<div class="{css_class}">'
    if body.lstrip().startswith(opening):
        return body
    return f"{opening}\n{markdown_to_html(body)}\n</div>"


def truncate(text: str, limit: int) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + ELLIPSIS


def plain_text(markdown_text: str) -> str:
    """Strip Markdown and HTML, leaving single-spaced readable text."""
    soup = BeautifulSoup(markdown_to_html(markdown_text), "html.parser")
    return _WHITESPACE_PATTERN.sub(" ", soup.get_text(" ", strip=True)).strip()


def summarize(markdown_text: str, limit: int = 200) -> str:
    return truncate(plain_text(markdown_text), limit)


def map_prose_lines(text: str, func: Callable[[str], str]) -> str:
    """Apply ``func`` to every line that is not inside a fenced code block."""
    output: list[str] = []
    in_fence = False
    for line in text.split("\n"):
        if _FENCE_PATTERN.match(line):
            in_fence = not in_fence
            output.append(line)
            continue
        output.append(line if in_fence else func(line))
    return "\n".join(output)


def normalize_headings(text: str) -> str:
    """Collapse the whitespace after ATX heading markers to a single space."""
    return map_prose_lines(text, lambda line: _HEADING_PATTERN.sub(r"\1 ", line))


def demote_top_headings(text: str) -> str:
    """Turn level-1 headings into level-2 headings."""
    return map_prose_lines(text, lambda line: _H1_PATTERN.sub("## ", line))


def label_code_fences(text: str, default_language: str = "plaintext") -> str:
    """Give bare opening code fences an explicit language."""
    output: list[str] = []
    in_fence = False
    for line in text.split("\n"):
        match = _FENCE_PATTERN.match(line)
        if match:
            if not in_fence and line.strip() == match.group(1):
                line = f"{line.rstrip()}{default_language}"
            in_fence = not in_fence
        output.append(line)
    return "\n".join(output)


def extract_hashtags(text: str) -> list[str]:
    """Return ``#topic`` tokens in order of first appearance."""
    seen: dict[str, None] = {}
    for match in _HASHTAG_PATTERN.finditer(text):
        seen.setdefault(f"#{match.group(1)}", None)
    return list(seen)


__all__ = [
    "ELLIPSIS",
    "demote_top_headings",
    "extract_hashtags",
    "label_code_fences",
    "map_prose_lines",
    "markdown_to_html",
    "normalize_headings",
    "plain_text",
    "summarize",
    "truncate",
    "wrap_html",
]
