"""Prompt templates for turning raw notes into articles."""

from __future__ import annotations

import re
from enum import StrEnum


class PromptKind(StrEnum):
    CHAT = "chat"
    LINK = "link"
    DEFAULT = "default"


class Style(StrEnum):
    XHS = "xhs"
    ZHIHU = "zhihu"
    JUEJIN = "juejin"
    CSDN = "csdn"


STYLE_LABELS = {
    Style.XHS: "小红书",
    Style.ZHIHU: "知乎",
    Style.JUEJIN: "掘金",
    Style.CSDN: "CSDN",
}

_FORMAT_MARKER = "输出为Markdown格式"

_TEMPLATES = {
    PromptKind.CHAT: """你是一位资深技术博主。请将下面的AI对话记录整理成一篇优质的公众号技术文章。

要求：
1. 标题要吸引人，包含关键词，并以一级标题（# 标题）开头
2. 内容要有逻辑，分段落
3. 代码片段用代码块包裹
4. 关键步骤用加粗或列表标注
5. 文章结尾可以添加思考或总结
6. {format_marker}

对话记录：
{content}""",
    PromptKind.LINK: """你是一位资深技术博主。请结合原文链接内容和我的个人理解，整理成一篇优质的公众号文章。

要求：
1. 标题要吸引人，并以一级标题（# 标题）开头
2. 先简要介绍原文核心观点
3. 融入我的个人理解和思考
4. 有自己的见解和延伸
5. 段落清晰，逻辑通顺
6. {format_marker}

原文链接内容/摘要：
{content}""",
    PromptKind.DEFAULT: """你是一位资深技术博主。请将下面的内容整理成一篇优质的公众号文章。

要求：
1. 标题要吸引人，并以一级标题（# 标题）开头
2. 内容有逻辑，有深度
3. 适当加入个人见解
4. {format_marker}

内容：
{content}""",
}

_STYLE_HINTS = {
    Style.XHS: "用小红书风格写，标题要吸引眼球，多用emoji，段落要短，末尾加话题标签。",
    Style.ZHIHU: "用知乎专栏风格写，语气专业理性，可以加\"泻药\"开头。",
    Style.JUEJIN: "用掘金技术文章风格写，简洁直接，干货为主。",
    Style.CSDN: "用CSDN博客风格写，通俗易懂，步骤详细。",
}

_CHAT_MARKERS = re.compile(r"对话|^\s*(?:AI|User|Assistant|用户|助手)\s*[:：]", re.MULTILINE)
_URL_PATTERN = re.compile(r"https?://[^\s]+")


def build_prompt(
    content: str,
    kind: PromptKind | str = PromptKind.DEFAULT,
    style: Style | str | None = None,
) -> str:
    """Render the template for ``kind`` and append the hint for ``style``."""
    kind = PromptKind(kind)
    format_marker = _FORMAT_MARKER
    if style:
        format_marker = f"{_FORMAT_MARKER}\n\n注意：{_STYLE_HINTS[Style(style)]}"
    return _TEMPLATES[kind].format(format_marker=format_marker, content=content.strip())


def detect_kind(text: str) -> PromptKind:
    """Guess whether ``text`` is a chat transcript, a link note or plain notes."""
    if _CHAT_MARKERS.search(text):
        return PromptKind.CHAT
    if find_url(text):
        return PromptKind.LINK
    return PromptKind.DEFAULT


def find_url(text: str) -> str | None:
    match = _URL_PATTERN.search(text)
    return match.group(0) if match else None


def link_content(url: str, note: str, page_text: str | None = None) -> str:
    """Assemble the material handed to the link template."""
    parts = [f"URL: {url}", f"我的理解:\n{note.strip()}"]
    if page_text:
        parts.append(f"网页内容摘要:\n{page_text}")
    return "\n\n".join(parts)
