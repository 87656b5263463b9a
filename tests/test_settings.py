from __future__ import annotations

from pathlib import Path

import pytest

from ai_writer.security import EnvSecretProvider, MappingSecretProvider, SecretNotFoundError, mask_secret
from ai_writer.settings import (
    WordPressConfig,
    XiaohongshuConfig,
    ZhihuConfig,
    load_config,
    resolve_publishers,
)


def test_empty_environment_resolves_nothing() -> None:
    config = resolve_publishers(MappingSecretProvider({}))
    assert config.present == []


def test_complete_wordpress_configuration() -> None:
    provider = MappingSecretProvider(
        {"WP_SITE_URL": "https://blog.example/", "WP_USERNAME": " editor ", "WP_PASSWORD": "pw"}
    )
    config = resolve_publishers(provider)
    assert config.wordpress == WordPressConfig(
        site_url="https://blog.example", username="editor", password="pw"
    )
    assert config.present == ["wordpress"]


def test_partial_configuration_is_absent() -> None:
    provider = MappingSecretProvider(
        {
            "WP_SITE_URL": "https://blog.example",
            "WP_USERNAME": "editor",
            "WP_PASSWORD": "   ",
            "CNBLOGS_BLOGNAME": "myblog",
        }
    )
    config = resolve_publishers(provider)
    assert config.wordpress is None
    assert config.cnblogs is None


def test_zhihu_accepts_bare_z_c0_token() -> None:
    config = resolve_publishers(MappingSecretProvider({"ZHIHU_Z_C0": "abc"}))
    assert config.zhihu == ZhihuConfig(cookie="z_c0=abc")


def test_xiaohongshu_needs_cookie_or_token() -> None:
    config = resolve_publishers(MappingSecretProvider({"XHS_ACCESS_TOKEN": "tok"}))
    assert config.xiaohongshu == XiaohongshuConfig(access_token="tok")


def test_env_provider_reads_given_mapping() -> None:
    provider = EnvSecretProvider(env={"JUEJIN_COOKIE": "a=1"})
    assert resolve_publishers(provider).juejin.cookie == "a=1"
    with pytest.raises(SecretNotFoundError):
        provider.get_secret("missing")


def test_mask_secret_hides_tail() -> None:
    assert mask_secret("supersecret") == "supe..."
    assert mask_secret("abc") == "***"
    assert mask_secret("") == ""


def test_load_config_defaults_without_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = load_config(env={})
    assert config.http.timeout == 30.0
    assert config.ai.provider == "gemini"
    assert config.ai.model_for("gemini") == "gemini-2.5-flash"
    assert config.paths.output_dir == Path("output")
    assert config.source is None


def test_load_config_reads_file_and_env_overrides(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        '[http]\ntimeout = 12\n\n[ai]\nprovider = "deepseek"\nmodel = "deepseek-reasoner"\n'
        'fallbacks = ["kimi", "deepseek", "ollama"]\n\n[paths]\noutput_dir = "articles"\n',
        encoding="utf-8",
    )
    env = {"AI_WRITER_HTTP_TIMEOUT": "5", "DEEPSEEK_API_KEY": " key ", "OLLAMA_HOST": "http://gpu:11434/"}

    config = load_config(path, env=env)

    assert config.http.timeout == 5.0
    assert config.ai.provider == "deepseek"
    assert config.ai.model_for("deepseek") == "deepseek-reasoner"
    assert config.ai.model_for("kimi") == "moonshot-v1-8k"
    assert config.ai.fallbacks == ("kimi", "ollama")
    assert config.ai.key_for("deepseek") == "key"
    assert config.ai.is_available("ollama")
    assert not config.ai.is_available("kimi")
    assert config.ai.ollama_host == "http://gpu:11434"
    assert config.paths.output_dir == Path("articles")
    assert config.source == path


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.toml", env={})


def test_unknown_provider_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValueError):
        load_config(env={"MODEL_PROVIDER": "llama-farm"})
