"""Settings package exports."""

from .loader import AISettings, AppConfig, HttpSettings, PathSettings, load_config
from .publishers import (
    CnBlogsConfig,
    ConfigResolver,
    CsdnConfig,
    JuejinConfig,
    PublishersConfig,
    WordPressConfig,
    XiaohongshuConfig,
    ZhihuConfig,
    resolve_publishers,
)

__all__ = [
    "AISettings",
    "AppConfig",
    "HttpSettings",
    "PathSettings",
    "load_config",
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
