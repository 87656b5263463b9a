from __future__ import annotations

import pytest

from ai_writer.ai import (
    ArticleGenerationError,
    ArticleWriter,
    OpenAICompatibleProvider,
    PromptKind,
    build_prompt,
    clean_article,
    detect_kind,
    link_content,
)
from ai_writer.settings import AISettings


class StubProvider:
    def __init__(self, name: str, reply: str | None = None) -> None:
        self.name = name
        self._reply = reply
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self._reply is None:
            raise ArticleGenerationError(f"{self.name} is down")
        return self._reply


class StubResponse:
    def __init__(self, payload: object) -> None:
        self._payload = payload

    def raise_for_status(self) -> None:
        return None

    def json(self) -> object:
        return self._payload


class StubSession:
    def __init__(self, payload: object) -> None:
        self._payload = payload
        self.calls: list[tuple[str, dict[str, object]]] = []

    def post(self, url: str, **kwargs: object) -> StubResponse:
        self.calls.append((url, kwargs))
        return StubResponse(self._payload)


def test_build_prompt_selects_template_and_style() -> None:
    prompt = build_prompt("User: 你好\nAI: 你好", PromptKind.CHAT, "juejin")
    assert "AI对话记录" in prompt
    assert prompt.endswith("User: 你好\nAI: 你好")
    assert "掘金技术文章风格" in prompt


def test_build_prompt_without_style_has_no_hint() -> None:
    prompt = build_prompt("{braces} stay", "default")
    assert "注意" not in prompt
    assert "{braces} stay" in prompt


def test_detect_kind() -> None:
    assert detect_kind("User: how?\nAI: like this") is PromptKind.CHAT
    assert detect_kind("see https://example.com/post") is PromptKind.LINK
    assert detect_kind("just some notes") is PromptKind.DEFAULT


def test_link_content_includes_page_text_when_present() -> None:
    assert link_content("https://a", "note") == "URL: https://a\n\n我的理解:\nnote"
    assert link_content("https://a", "note", "page").endswith("网页内容摘要:\npage")


def test_clean_article_unwraps_markdown_fence() -> None:
    assert clean_article("```markdown\n# Title\n\nbody\n```") == "# Title\n\nbody"
    assert clean_article("# Title\n```py\nx\n```") == "# Title\n```py\nx\n```"


def test_writer_falls_back_to_next_provider() -> None:
    primary = StubProvider("gemini")
    fallback = StubProvider("deepseek", "# Done\n\ntext")
    writer = ArticleWriter([primary, fallback])

    assert writer.write("notes") == "# Done\n\ntext"
    assert primary.prompts == fallback.prompts


def test_writer_raises_when_every_provider_fails() -> None:
    writer = ArticleWriter([StubProvider("gemini"), StubProvider("kimi", "   ")])
    with pytest.raises(ArticleGenerationError) as excinfo:
        writer.generate("prompt")
    assert "gemini is down" in str(excinfo.value)
    assert "kimi: empty response" in str(excinfo.value)


def test_from_settings_skips_providers_without_keys() -> None:
    settings = AISettings(provider="deepseek", fallbacks=("ollama",))
    assert ArticleWriter.from_settings(settings).providers == ("ollama",)


def test_from_settings_without_any_provider_fails() -> None:
    with pytest.raises(ArticleGenerationError):
        ArticleWriter.from_settings(AISettings(provider="openai"))


def test_openai_compatible_provider_reads_first_choice() -> None:
    session = StubSession({"choices": [{"message": {"content": "# Hi"}}]})
    provider = OpenAICompatibleProvider("kimi", api_key="k", model="moonshot-v1-8k", session=session)

    assert provider.generate("prompt") == "# Hi"
    url, kwargs = session.calls[0]
    assert url == "https://api.moonshot.cn/v1/chat/completions"
    assert kwargs["headers"] == {"Authorization": "Bearer k"}
    assert kwargs["json"]["messages"] == [{"role": "user", "content": "prompt"}]


def test_openai_compatible_provider_rejects_bad_payload() -> None:
    provider = OpenAICompatibleProvider("openai", api_key="k", model="m", session=StubSession({}))
    with pytest.raises(ArticleGenerationError):
        provider.generate("prompt")
