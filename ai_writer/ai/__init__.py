"""AI article generation package."""

from .prompts import PromptKind, Style, build_prompt, detect_kind, find_url, link_content
from .writer import (
    ArticleGenerationError,
    ArticleWriter,
    GeminiProvider,
    OllamaProvider,
    OpenAICompatibleProvider,
    build_provider,
    clean_article,
)

__all__ = [
    "ArticleGenerationError",
    "ArticleWriter",
    "GeminiProvider",
    "OllamaProvider",
    "OpenAICompatibleProvider",
    "PromptKind",
    "Style",
    "build_prompt",
    "build_provider",
    "clean_article",
    "detect_kind",
    "find_url",
    "link_content",
]
