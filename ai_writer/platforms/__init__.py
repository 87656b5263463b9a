"""Platform integration package."""

from __future__ import annotations

from .base import (
    Article,
    PlatformAdapter,
    PlatformApiError,
    PublishOptions,
    PublishResult,
    PublishStatus,
)
from .cnblogs import CnBlogsAdapter
from .csdn import CsdnAdapter
from .factory import DEFAULT_REGISTRY, Platform, PlatformNotFoundError, PlatformRegistry, PlatformSpec
from .juejin import JuejinAdapter
from .wordpress import WordPressAdapter
from .xiaohongshu import XiaohongshuAdapter
from .zhihu import ZhihuAdapter

__all__ = [
    "Article",
    "PlatformAdapter",
    "PlatformApiError",
    "PublishOptions",
    "PublishResult",
    "PublishStatus",
    "CnBlogsAdapter",
    "CsdnAdapter",
    "JuejinAdapter",
    "WordPressAdapter",
    "XiaohongshuAdapter",
    "ZhihuAdapter",
    "DEFAULT_REGISTRY",
    "Platform",
    "PlatformNotFoundError",
    "PlatformRegistry",
    "PlatformSpec",
]
