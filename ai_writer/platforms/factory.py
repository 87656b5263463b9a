"""Registry of supported platforms and how to build their adapters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Iterable, Iterator

import requests

from ..settings.publishers import PublishersConfig
from .base import DEFAULT_TIMEOUT, PlatformAdapter
from .cnblogs import CnBlogsAdapter
from .csdn import CsdnAdapter
from .juejin import JuejinAdapter
from .wordpress import WordPressAdapter
from .xiaohongshu import XiaohongshuAdapter
from .zhihu import ZhihuAdapter


class Platform(StrEnum):
    WORDPRESS = "wordpress"
    CNBLOGS = "cnblogs"
    JUEJIN = "juejin"
    ZHIHU = "zhihu"
    CSDN = "csdn"
    XIAOHONGSHU = "xiaohongshu"


class PlatformNotFoundError(LookupError):
    """Raised when a caller names a platform that is not registered."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = tuple(available)
        choices = ", ".join(self.available) or "<none>"
        super().__init__(f"Unknown platform {name!r}; available: {choices}")

    def __str__(self) -> str:
        return str(self.args[0])


AdapterBuilder = Callable[..., PlatformAdapter]


@dataclass(frozen=True, slots=True)
class PlatformSpec:
    """How to recognise, configure and build one platform's adapter."""

    platform: Platform
    display_name: str
    builder: AdapterBuilder

    def config_from(self, config: PublishersConfig):
        return getattr(config, self.platform.value)

    def is_present(self, config: PublishersConfig) -> bool:
        return self.config_from(config) is not None

    def build(
        self,
        config: PublishersConfig,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> PlatformAdapter:
        return self.builder(self.config_from(config), session=session, timeout=timeout)

    def matches(self, name: str) -> bool:
        wanted = name.strip().lower()
        return wanted in (self.platform.value, self.display_name.lower())


class PlatformRegistry:
    """Ordered, closed set of platforms; iteration order is dispatch order."""

    def __init__(self, specs: Iterable[PlatformSpec]) -> None:
        self._specs = tuple(specs)
        seen = [spec.platform for spec in self._specs]
        if len(seen) != len(set(seen)):
            raise ValueError("Each platform may only be registered once")

    def __iter__(self) -> Iterator[PlatformSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    @property
    def specs(self) -> tuple[PlatformSpec, ...]:
        return self._specs

    def get(self, name: str | Platform) -> PlatformSpec:
        """Look a platform up by key (``"wordpress"``) or display name, case-insensitively."""
        for spec in self._specs:
            if spec.matches(str(name)):
                return spec
        raise PlatformNotFoundError(str(name), (spec.display_name for spec in self._specs))

    def active(self, config: PublishersConfig) -> list[PlatformSpec]:
        return [spec for spec in self._specs if spec.is_present(config)]


DEFAULT_REGISTRY = PlatformRegistry(
    (
        PlatformSpec(Platform.WORDPRESS, WordPressAdapter.name, WordPressAdapter),
        PlatformSpec(Platform.CNBLOGS, CnBlogsAdapter.name, CnBlogsAdapter),
        PlatformSpec(Platform.JUEJIN, JuejinAdapter.name, JuejinAdapter),
        PlatformSpec(Platform.ZHIHU, ZhihuAdapter.name, ZhihuAdapter),
        PlatformSpec(Platform.CSDN, CsdnAdapter.name, CsdnAdapter),
        PlatformSpec(Platform.XIAOHONGSHU, XiaohongshuAdapter.name, XiaohongshuAdapter),
    )
)
