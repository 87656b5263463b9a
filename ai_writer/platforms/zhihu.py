"""Zhihu column article adapter."""

from __future__ import annotations

import re

from ..settings.publishers import ZhihuConfig
from ..utils.logging import get_logger
from .base import USER_AGENT, Article, PlatformAdapter, PlatformApiError, PublishOptions, PublishResult
from .markup import demote_top_headings, markdown_to_html, truncate

LOGGER = get_logger(__name__)

ARTICLES_URL = "https://www.zhihu.com/api/v4/articles"
ARTICLE_PAGE = "https://zhuanlan.zhihu.com/p/{article_id}"
TITLE_LIMIT = 100
# 1 allows reposting, 2 forbids it, 3 requires paid licensing.
DEFAULT_LICENSE = 1

_XSRF_PATTERN = re.compile(r"(?:^|;\s*)_xsrf=([^;]+)")


class ZhihuAdapter(PlatformAdapter):
    """Posts column articles with a logged-in browser cookie."""

    name = "Zhihu"

    _config: ZhihuConfig | None

    def transform(self, title: str, body: str) -> Article:
        return Article(title=truncate(title, TITLE_LIMIT), body=demote_top_headings(body))

    def publish(self, title: str, body: str, options: PublishOptions) -> PublishResult:
        self._require_title(title)
        if not self.is_configured():
            return self._manual_result(title, body)

        payload = {
            "title": title,
            "html": markdown_to_html(body),
            "markdown": body,
            "topic": options.extra.get("topic", ""),
            "license": options.extra.get("license", DEFAULT_LICENSE),
            "is_submit": options.is_publish,
        }
        try:
            data = self._post_json(ARTICLES_URL, payload, headers=self._headers())
            article_id = data.get("id")
            if article_id is None:
                raise PlatformApiError("Zhihu response is missing id", details={"keys": sorted(data)})
        except PlatformApiError as exc:
            return self._failed_result(exc, title, body)

        url = data.get("url") or ARTICLE_PAGE.format(article_id=article_id)
        LOGGER.info(
            "Zhihu article stored",
            extra={"event": "publish.ok", "platform": self.name, "id": article_id},
        )
        return PublishResult.ok(self.name, status=options.status, url=str(url), id=article_id)

    def _headers(self) -> dict[str, str]:
        cookie = self._config.cookie
        headers = {
            "Cookie": cookie,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "Referer": "https://www.zhihu.com/",
        }
        match = _XSRF_PATTERN.search(cookie)
        if match:
            headers["x-xsrftoken"] = match.group(1)
        return headers
