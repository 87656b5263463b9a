"""Juejin adapter: create a draft, then optionally publish it."""

from __future__ import annotations

import re
from typing import Any

from ..settings.publishers import JuejinConfig
from ..utils.logging import get_logger
from .base import Article, PlatformAdapter, PlatformApiError, PublishOptions, PublishResult
from .markup import markdown_to_html, normalize_headings, truncate

LOGGER = get_logger(__name__)

API_BASE = "https://api.juejin.cn/content_api/v1"
DRAFT_URL = f"{API_BASE}/article_draft/create"
PUBLISH_URL = f"{API_BASE}/article/publish"
DRAFT_PAGE = "https://juejin.cn/editor/drafts/{draft_id}"
POST_PAGE = "https://juejin.cn/post/{article_id}"
TITLE_LIMIT = 100

_CSRF_PATTERN = re.compile(r"csrf_token=([^;]+)")


def extract_csrf_token(cookie: str) -> str:
    match = _CSRF_PATTERN.search(cookie)
    return match.group(1).strip() if match else ""


class JuejinAdapter(PlatformAdapter):
    """Cookie authenticated client for the Juejin content API."""

    name = "Juejin"

    _config: JuejinConfig | None

    def transform(self, title: str, body: str) -> Article:
        return Article(title=truncate(title, TITLE_LIMIT), body=normalize_headings(body))

    def publish(self, title: str, body: str, options: PublishOptions) -> PublishResult:
        self._require_title(title)
        if not self.is_configured():
            return self._manual_result(title, body)

        payload = {
            "article_title": title,
            "mark_content": body,
            "html_content": markdown_to_html(body),
            "tag_ids": list(options.tags),
            "category_id": options.categories[0] if options.categories else "",
            "brief_content": str(options.extra.get("brief", "")),
            "status": 0,
        }
        try:
            draft = self._checked(self._post_json(DRAFT_URL, payload, headers=self._headers()))
            draft_id = draft.get("draft_id") or draft.get("id")
            if not draft_id:
                raise PlatformApiError("Juejin response is missing draft_id", details=draft)
            if options.is_publish:
                article = self._checked(
                    self._post_json(
                        PUBLISH_URL,
                        {"draft_id": draft_id, "status": 1},
                        headers=self._headers(),
                    )
                )
                article_id = article.get("article_id") or draft_id
                url, result_id = POST_PAGE.format(article_id=article_id), article_id
            else:
                url, result_id = DRAFT_PAGE.format(draft_id=draft_id), draft_id
        except PlatformApiError as exc:
            return self._failed_result(exc, title, body)

        LOGGER.info(
            "Juejin article stored",
            extra={"event": "publish.ok", "platform": self.name, "id": result_id},
        )
        return PublishResult.ok(self.name, status=options.status, url=url, id=result_id)

    def _headers(self) -> dict[str, str]:
        config = self._config
        return {
            "Cookie": config.cookie,
            "X-Csrf-Token": config.csrf_token or extract_csrf_token(config.cookie),
            "Content-Type": "application/json",
        }

    @staticmethod
    def _checked(response: dict[str, Any]) -> dict[str, Any]:
        """Juejin reports failures in ``err_no``/``err_msg`` with HTTP 200."""
        err_no = response.get("err_no", 0)
        if err_no:
            raise PlatformApiError(
                str(response.get("err_msg") or "Juejin rejected the request"),
                details={"err_no": err_no},
            )
        data = response.get("data")
        return data if isinstance(data, dict) else {}
