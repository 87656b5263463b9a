"""Language-model backed article generation with provider fallback."""

from __future__ import annotations

import re
import time
from typing import Any, Protocol, Sequence

import requests
from google import genai

from ..settings.loader import AISettings
from ..utils.logging import get_logger
from .prompts import PromptKind, Style, build_prompt

LOGGER = get_logger(__name__)

OPENAI_COMPATIBLE_URLS = {
    "deepseek": "https://api.deepseek.com/v1",
    "kimi": "https://api.moonshot.cn/v1",
    "openai": "https://api.openai.com/v1",
}

_WRAPPING_FENCE = re.compile(r"^```(?:markdown|md)?\s*\n(.*)\n```\s*$", re.DOTALL | re.IGNORECASE)


class ArticleGenerationError(RuntimeError):
    """Raised when no provider could produce an article."""


class TextProvider(Protocol):
    name: str

    def generate(self, prompt: str) -> str: ...


class GeminiProvider:
    """Calls Gemini through the google-genai SDK."""

    name = "gemini"

    def __init__(self, client: genai.Client, *, model: str) -> None:
        self._client = client
        self._model = model

    @classmethod
    def from_key(cls, api_key: str, *, model: str) -> "GeminiProvider":
        if not api_key:
            raise ArticleGenerationError("Gemini API key not found. Set GEMINI_API_KEY.")
        return cls(genai.Client(api_key=api_key), model=model)

    def generate(self, prompt: str) -> str:
        try:
            response = self._client.models.generate_content(model=self._model, contents=prompt)
        except Exception as exc:
            raise ArticleGenerationError(f"Gemini API call failed: {exc}") from exc
        return response.text or ""


class OpenAICompatibleProvider:
    """Any ``/chat/completions`` endpoint: DeepSeek, Kimi (Moonshot) or OpenAI."""

    def __init__(
        self,
        name: str,
        *,
        api_key: str,
        model: str,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 120.0,
    ) -> None:
        if not api_key:
            raise ArticleGenerationError(f"No API key configured for {name}")
        self.name = name
        self._api_key = api_key
        self._model = model
        self._base_url = (base_url or OPENAI_COMPATIBLE_URLS[name]).rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def generate(self, prompt: str) -> str:
        payload = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.7,
        }
        data = _post_json(
            self._session,
            f"{self._base_url}/chat/completions",
            payload,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=self._timeout,
            provider=self.name,
        )
        try:
            return str(data["choices"][0]["message"]["content"] or "")
        except (KeyError, IndexError, TypeError) as exc:
            raise ArticleGenerationError(f"{self.name} response is missing choices") from exc


class OllamaProvider:
    """Local Ollama server via ``/api/generate``."""

    name = "ollama"

    def __init__(
        self,
        *,
        host: str,
        model: str,
        session: requests.Session | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._host = host.rstrip("/")
        self._model = model
        self._session = session or requests.Session()
        self._timeout = timeout

    def generate(self, prompt: str) -> str:
        data = _post_json(
            self._session,
            f"{self._host}/api/generate",
            {"model": self._model, "prompt": prompt, "stream": False},
            headers={},
            timeout=self._timeout,
            provider=self.name,
        )
        return str(data.get("response") or "")


def _post_json(
    session: requests.Session,
    url: str,
    payload: dict[str, Any],
    *,
    headers: dict[str, str],
    timeout: float,
    provider: str,
) -> dict[str, Any]:
    try:
        response = session.post(url, json=payload, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise ArticleGenerationError(f"{provider} request failed: {exc}") from exc
    try:
        data = response.json()
    except ValueError as exc:
        raise ArticleGenerationError(f"Failed to decode {provider} response") from exc
    if not isinstance(data, dict):
        raise ArticleGenerationError(f"Unexpected {provider} response shape")
    return data


def build_provider(
    name: str,
    settings: AISettings,
    *,
    session: requests.Session | None = None,
) -> TextProvider:
    model = settings.model_for(name)
    if name == "gemini":
        return GeminiProvider.from_key(settings.key_for(name), model=model)
    if name == "ollama":
        return OllamaProvider(
            host=settings.ollama_host, model=model, session=session, timeout=settings.timeout
        )
    return OpenAICompatibleProvider(
        name,
        api_key=settings.key_for(name),
        model=model,
        session=session,
        timeout=settings.timeout,
    )


def clean_article(text: str) -> str:
    """Drop a ```markdown fence some models wrap the whole answer in."""
    text = text.strip()
    match = _WRAPPING_FENCE.match(text)
    return match.group(1).strip() if match else text


class ArticleWriter:
    """Generates Markdown articles, trying each provider in order until one answers."""

    def __init__(self, providers: Sequence[TextProvider]) -> None:
        if not providers:
            raise ArticleGenerationError("No AI provider is available")
        self._providers = tuple(providers)

    @property
    def providers(self) -> tuple[str, ...]:
        return tuple(provider.name for provider in self._providers)

    @classmethod
    def from_settings(
        cls,
        settings: AISettings,
        *,
        session: requests.Session | None = None,
    ) -> "ArticleWriter":
        """Primary provider first, then every fallback that has credentials."""
        providers: list[TextProvider] = []
        for name in (settings.provider, *settings.fallbacks):
            if not settings.is_available(name):
                LOGGER.warning(
                    "Skipping AI provider without credentials",
                    extra={"event": "ai.provider_skipped", "provider": name},
                )
                continue
            providers.append(build_provider(name, settings, session=session))
        return cls(providers)

    def generate(self, prompt: str) -> str:
        errors: list[str] = []
        for provider in self._providers:
            start = time.monotonic()
            LOGGER.info(
                "Requesting article",
                extra={"event": "ai.request", "provider": provider.name, "prompt_chars": len(prompt)},
            )
            try:
                text = clean_article(provider.generate(prompt))
            except ArticleGenerationError as exc:
                LOGGER.warning(
                    "AI provider failed: %s",
                    exc,
                    extra={"event": "ai.failed", "provider": provider.name},
                )
                errors.append(f"{provider.name}: {exc}")
                continue
            if not text:
                errors.append(f"{provider.name}: empty response")
                continue
            LOGGER.info(
                "Article generated in %.2fs",
                time.monotonic() - start,
                extra={"event": "ai.done", "provider": provider.name, "chars": len(text)},
            )
            return text
        raise ArticleGenerationError("All AI providers failed: " + "; ".join(errors))

    def write(
        self,
        content: str,
        kind: PromptKind | str = PromptKind.DEFAULT,
        style: Style | str | None = None,
    ) -> str:
        return self.generate(build_prompt(content, kind, style))
