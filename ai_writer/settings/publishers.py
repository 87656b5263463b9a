"""Per-platform credential records resolved from the environment."""

from __future__ import annotations

from dataclasses import dataclass, fields

from ..security import EnvSecretProvider, SecretProvider, mask_secret
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class WordPressConfig:
    site_url: str
    username: str
    password: str

    @property
    def is_complete(self) -> bool:
        return bool(self.site_url and self.username and self.password)


@dataclass(frozen=True, slots=True)
class CnBlogsConfig:
    blog_name: str
    username: str
    password: str
    blog_id: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.blog_name and self.username and self.password)


@dataclass(frozen=True, slots=True)
class JuejinConfig:
    cookie: str
    csrf_token: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.cookie)


@dataclass(frozen=True, slots=True)
class ZhihuConfig:
    cookie: str

    @property
    def is_complete(self) -> bool:
        return bool(self.cookie)


@dataclass(frozen=True, slots=True)
class CsdnConfig:
    cookie: str
    username: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.cookie)


@dataclass(frozen=True, slots=True)
class XiaohongshuConfig:
    cookie: str = ""
    access_token: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.cookie or self.access_token)


@dataclass(frozen=True, slots=True)
class PublishersConfig:
    """Immutable snapshot of every platform's credentials; ``None`` means absent."""

    wordpress: WordPressConfig | None = None
    cnblogs: CnBlogsConfig | None = None
    juejin: JuejinConfig | None = None
    zhihu: ZhihuConfig | None = None
    csdn: CsdnConfig | None = None
    xiaohongshu: XiaohongshuConfig | None = None

    @property
    def present(self) -> list[str]:
        return [item.name for item in fields(self) if getattr(self, item.name) is not None]


class ConfigResolver:
    """Turns environment variables into a :class:`PublishersConfig`.

    A platform is only present when every one of its required variables is
    non-blank; partial configuration collapses to absent.
    """

    def __init__(self, provider: SecretProvider | None = None) -> None:
        self._provider = provider or EnvSecretProvider()

    def resolve(self) -> PublishersConfig:
        config = PublishersConfig(
            wordpress=self._complete(
                WordPressConfig(
                    site_url=self._get("WP_SITE_URL").rstrip("/"),
                    username=self._get("WP_USERNAME"),
                    password=self._get("WP_PASSWORD"),
                )
            ),
            cnblogs=self._complete(
                CnBlogsConfig(
                    blog_name=self._get("CNBLOGS_BLOGNAME"),
                    username=self._get("CNBLOGS_USERNAME"),
                    password=self._get("CNBLOGS_PASSWORD"),
                    blog_id=self._get("CNBLOGS_BLOG_ID"),
                )
            ),
            juejin=self._complete(
                JuejinConfig(
                    cookie=self._get("JUEJIN_COOKIE"),
                    csrf_token=self._get("JUEJIN_CSRF_TOKEN"),
                )
            ),
            zhihu=self._complete(ZhihuConfig(cookie=self._zhihu_cookie())),
            csdn=self._complete(
                CsdnConfig(
                    cookie=self._get("CSDN_COOKIE"),
                    username=self._get("CSDN_USERNAME"),
                )
            ),
            xiaohongshu=self._complete(
                XiaohongshuConfig(
                    cookie=self._get("XHS_COOKIE"),
                    access_token=self._get("XHS_ACCESS_TOKEN"),
                )
            ),
        )
        LOGGER.debug(
            "Resolved publisher configuration",
            extra={"event": "config.resolved", "platforms": config.present},
        )
        return config

    def _get(self, key: str) -> str:
        return self._provider.get_optional(key)

    def _zhihu_cookie(self) -> str:
        cookie = self._get("ZHIHU_COOKIE")
        if cookie:
            return cookie
        z_c0 = self._get("ZHIHU_Z_C0")
        return f"z_c0={z_c0}" if z_c0 else ""

    @staticmethod
    def _complete(config):
        if config.is_complete:
            return config
        partial = {
            item.name: mask_secret(getattr(config, item.name))
            for item in fields(config)
            if getattr(config, item.name)
        }
        if partial:
            LOGGER.warning(
                "Ignoring incomplete %s configuration",
                type(config).__name__,
                extra={"event": "config.partial", "fields": sorted(partial)},
            )
        return None


def resolve_publishers(provider: SecretProvider | None = None) -> PublishersConfig:
    return ConfigResolver(provider).resolve()


__all__ = [
    "CnBlogsConfig",
    "ConfigResolver",
    "CsdnConfig",
    "JuejinConfig",
    "PublishersConfig",
    "WordPressConfig",
    "XiaohongshuConfig",
    "ZhihuConfig",
    "resolve_publishers",
]
