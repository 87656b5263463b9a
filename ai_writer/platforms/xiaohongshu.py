"""Xiaohongshu note formatter.

Xiaohongshu offers no public publishing API, so this adapter never calls
the network: it reshapes the article into short emoji-styled note text and
hands it back as copy content together with up to ten hashtags.
"""

from __future__ import annotations

import re
from typing import Iterable

from ..settings.publishers import XiaohongshuConfig
from ..utils.logging import get_logger
from .base import Article, PlatformAdapter, PublishOptions, PublishResult
from .markup import extract_hashtags, truncate

LOGGER = get_logger(__name__)

TITLE_LIMIT = 20
BODY_LIMIT = 1000
MAX_TAGS = 10
MIN_TAGS = 5
DEFAULT_TAGS = ("#AI工具", "#学习笔记", "#干货分享")
_MAX_PASSES = 8

_FENCE = re.compile(r"^\s*(```|~~~)")
_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"!\[[^\]]*\]\([^)]*\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]*\)"), r"\1"),
    (re.compile(r"^[ \t]*#{1,2}[ \t]+(?=\S)", re.MULTILINE), "✅ "),
    (re.compile(r"^[ \t]*#{3,6}[ \t]+(?=\S)", re.MULTILINE), "👉 "),
    (re.compile(r"\*\*(.+?)\*\*"), r"⭐\1"),
    (re.compile(r"`([^`\n]+)`"), r"\1"),
    # A marker surfaced by the rules above must not open a fence on the next run.
    (re.compile(r"^[^\S\n]*(?:`{3,}|~{3,})[^\S\n]*", re.MULTILINE), ""),
    (re.compile(r"^[ \t]*[-*+][ \t]+(?=\S)", re.MULTILINE), "• "),
    (re.compile(r"^([ \t]*\d+)\.[ \t]+(?=\S)", re.MULTILINE), r"\1) "),
    (re.compile(r"\n{3,}"), "\n\n"),
)


def _flatten_code_blocks(text: str) -> str:
    output: list[str] = []
    in_fence = False
    for line in text.split("\n"):
        if _FENCE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            output.append(f"💻 {line.strip()}" if line.strip() else "")
        else:
            output.append(line)
    return "\n".join(output)


def to_note_text(markdown_text: str) -> str:
    """Rewrite Markdown into Xiaohongshu note style; a fixed point of itself."""
    text = _flatten_code_blocks(markdown_text)
    for _ in range(_MAX_PASSES):
        previous = text
        for pattern, replacement in _RULES:
            text = pattern.sub(replacement, text)
        if text == previous:
            break
    return text.strip()


def collect_tags(text: str, extra: Iterable[str] = ()) -> list[str]:
    """Hashtags found in ``text`` plus ``extra``, padded with defaults and capped."""
    tags = extract_hashtags(text)
    tags.extend(tag if tag.startswith("#") else f"#{tag}" for tag in extra if tag)
    if len(tags) < MIN_TAGS:
        tags.extend(DEFAULT_TAGS)
    return list(dict.fromkeys(tags))[:MAX_TAGS]


class XiaohongshuAdapter(PlatformAdapter):
    """Always returns copy content; credentials only change the message."""

    name = "Xiaohongshu"

    _config: XiaohongshuConfig | None

    def transform(self, title: str, body: str) -> Article:
        return Article(
            title=truncate(title, TITLE_LIMIT),
            body=truncate(to_note_text(body), BODY_LIMIT),
        )

    def copy_content(self, title: str, body: str, tags: Iterable[str] = ()) -> str:
        tags = list(tags)
        parts = [title.strip(), body.strip(), " ".join(tags)]
        return "\n\n".join(part for part in parts if part)

    def publish(self, title: str, body: str, options: PublishOptions) -> PublishResult:
        self._require_title(title)
        tags = collect_tags(f"{title}\n{body}", options.tags)
        if self.is_configured():
            message = f"{self.name} has no public publishing API; copy the content and publish it manually"
        else:
            message = f"No credentials configured for {self.name}; copy the content and publish it manually"
        LOGGER.info(
            "Prepared Xiaohongshu copy content",
            extra={"event": "publish.manual", "platform": self.name, "tags": len(tags)},
        )
        return PublishResult.manual(
            self.name,
            copy_content=self.copy_content(title, body, tags),
            message=message,
        )
