"""CSDN blog adapter."""

from __future__ import annotations

from typing import Any

from ..settings.publishers import CsdnConfig
from ..utils.logging import get_logger
from .base import USER_AGENT, Article, PlatformAdapter, PlatformApiError, PublishOptions, PublishResult
from .markup import label_code_fences, summarize, truncate

LOGGER = get_logger(__name__)

PUBLISH_URL = "https://blog.csdn.net/phoenix/article/publish"
ARTICLE_PAGE = "https://blog.csdn.net/{username}/article/details/{article_id}"
TITLE_LIMIT = 100
ARTICLE_TYPES = ("original", "reproduced", "translated")
_OK_CODES = (0, 200)


class CsdnAdapter(PlatformAdapter):
    """Publishes Markdown articles through the CSDN editor endpoint."""

    name = "CSDN"

    _config: CsdnConfig | None

    def transform(self, title: str, body: str) -> Article:
        return Article(title=truncate(title, TITLE_LIMIT), body=label_code_fences(body))

    def publish(self, title: str, body: str, options: PublishOptions) -> PublishResult:
        self._require_title(title)
        if not self.is_configured():
            return self._manual_result(title, body)

        article_type = str(options.extra.get("type", "original"))
        if article_type not in ARTICLE_TYPES:
            raise ValueError(
                f"Unsupported CSDN article type {article_type!r}; expected one of: {', '.join(ARTICLE_TYPES)}"
            )
        payload = {
            "title": title,
            "markdowncontent": body,
            "content": body,
            "description": str(options.extra.get("description") or summarize(body) or title),
            "tags": ",".join(options.tags),
            "categories": ",".join(options.categories),
            "type": article_type,
            "status": 1 if options.is_publish else 0,
        }
        try:
            data = self._unwrap(self._post_json(PUBLISH_URL, payload, headers=self._headers()))
            article_id = data.get("id") or data.get("article_id")
            if not article_id:
                raise PlatformApiError("CSDN response is missing the article id", details=data)
        except PlatformApiError as exc:
            return self._failed_result(exc, title, body)

        url = data.get("url") or ARTICLE_PAGE.format(
            username=self._config.username or "u", article_id=article_id
        )
        LOGGER.info(
            "CSDN article stored",
            extra={"event": "publish.ok", "platform": self.name, "id": article_id},
        )
        return PublishResult.ok(self.name, status=options.status, url=str(url), id=article_id)

    def _headers(self) -> dict[str, str]:
        return {
            "Cookie": self._config.cookie,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "X-Requested-With": "XMLHttpRequest",
            "Referer": f"https://blog.csdn.net/{self._config.username}/article/details/",
        }

    @staticmethod
    def _unwrap(response: dict[str, Any]) -> dict[str, Any]:
        """Accept both the bare article object and the ``{code, msg, data}`` envelope."""
        code = response.get("code")
        if code is not None and code not in _OK_CODES:
            raise PlatformApiError(
                str(response.get("msg") or response.get("message") or "CSDN rejected the article"),
                details={"code": code},
            )
        data = response.get("data")
        return data if isinstance(data, dict) else response
