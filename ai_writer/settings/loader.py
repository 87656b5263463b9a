"""Helpers for loading non-credential settings."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "AI_WRITER_CONFIG"

PROVIDERS = ("gemini", "deepseek", "kimi", "openai", "ollama")
DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "deepseek": "deepseek-chat",
    "kimi": "moonshot-v1-8k",
    "openai": "gpt-4o-mini",
    "ollama": "qwen2.5:7b",
}
API_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "kimi": "KIMI_API_KEY",
    "openai": "OPENAI_API_KEY",
}
DEFAULT_OLLAMA_HOST = "http://localhost:11434"


@dataclass(slots=True)
class HttpSettings:
    timeout: float = 30.0


@dataclass(slots=True)
class AISettings:
    provider: str = "gemini"
    model: str | None = None
    fallbacks: tuple[str, ...] = ()
    api_keys: dict[str, str] = field(default_factory=dict)
    ollama_host: str = DEFAULT_OLLAMA_HOST
    timeout: float = 120.0

    def model_for(self, provider: str) -> str:
        if provider == self.provider and self.model:
            return self.model
        return DEFAULT_MODELS[provider]

    def key_for(self, provider: str) -> str:
        return self.api_keys.get(provider, "")

    def is_available(self, provider: str) -> bool:
        """Ollama runs locally and needs no key; every other provider does."""
        return provider == "ollama" or bool(self.key_for(provider))


@dataclass(slots=True)
class PathSettings:
    output_dir: Path = Path("output")


@dataclass(slots=True)
class AppConfig:
    http: HttpSettings = field(default_factory=HttpSettings)
    ai: AISettings = field(default_factory=AISettings)
    paths: PathSettings = field(default_factory=PathSettings)
    source: Path | None = None


def _config_path(explicit: str | os.PathLike[str] | None, env: Mapping[str, str]) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit), True
    env_value = env.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value), True
    return Path.cwd() / DEFAULT_CONFIG_NAME, False


def _load_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _provider(value: Any) -> str:
    provider = str(value).strip().lower()
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown AI provider {value!r}; expected one of: {', '.join(PROVIDERS)}")
    return provider


def _fallbacks(value: Any, primary: str) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    ordered: dict[str, None] = {}
    for item in value or ():
        if str(item).strip():
            ordered.setdefault(_provider(item), None)
    ordered.pop(primary, None)
    return tuple(ordered)


def load_config(
    config_path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Read ``config.toml`` (optional) and apply environment overrides.

    The file is only mandatory when a path was given explicitly or through
    ``AI_WRITER_CONFIG``.
    """
    env = os.environ if env is None else env
    path, required = _config_path(config_path, env)
    data = _load_toml(path, required=required)

    http_section = data.get("http", {})
    ai_section = data.get("ai", {})
    paths_section = data.get("paths", {})

    timeout_raw = env.get("AI_WRITER_HTTP_TIMEOUT") or http_section.get("timeout", 30)
    provider = _provider(env.get("MODEL_PROVIDER") or ai_section.get("provider", "gemini"))
    model = env.get("AI_WRITER_MODEL") or ai_section.get("model")
    fallbacks = _fallbacks(env.get("AI_WRITER_FALLBACKS") or ai_section.get("fallbacks"), provider)
    output_dir = Path(env.get("AI_WRITER_OUTPUT_DIR") or paths_section.get("output_dir", "output"))

    api_keys = {
        name: env.get(variable, "").strip()
        for name, variable in API_KEY_ENV.items()
        if env.get(variable, "").strip()
    }

    config = AppConfig(
        http=HttpSettings(timeout=float(timeout_raw)),
        ai=AISettings(
            provider=provider,
            model=str(model) if model else None,
            fallbacks=fallbacks,
            api_keys=api_keys,
            ollama_host=(env.get("OLLAMA_HOST") or ai_section.get("ollama_host") or DEFAULT_OLLAMA_HOST).rstrip("/"),
            timeout=float(ai_section.get("timeout", 120)),
        ),
        paths=PathSettings(output_dir=output_dir),
        source=path if data else None,
    )
    LOGGER.debug(
        "Loaded settings",
        extra={
            "event": "config.loaded",
            "source": str(config.source) if config.source else None,
            "provider": provider,
            "fallbacks": list(fallbacks),
        },
    )
    return config
