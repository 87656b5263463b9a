"""WordPress REST API adapter."""

from __future__ import annotations

from typing import Sequence

from ..settings.publishers import WordPressConfig
from ..utils.logging import get_logger
from .base import Article, PlatformAdapter, PlatformApiError, PublishOptions, PublishResult
from .markup import wrap_html

LOGGER = get_logger(__name__)

CSS_CLASS = "ai-article"


class WordPressAdapter(PlatformAdapter):
    """Creates posts through ``/wp-json/wp/v2/posts`` with an application password."""

    name = "WordPress"

    _config: WordPressConfig | None

    def transform(self, title: str, body: str) -> Article:
        return Article(title=title, body=wrap_html(body, CSS_CLASS))

    def publish(self, title: str, body: str, options: PublishOptions) -> PublishResult:
        self._require_title(title)
        if not self.is_configured():
            return self._manual_result(title, body)

        config = self._config
        payload = {
            "title": title,
            "content": body,
            "status": options.status.value,
            "categories": self._term_ids(options.categories, "categories"),
            "tags": self._term_ids(options.tags, "tags"),
        }
        try:
            data = self._post_json(
                f"{config.site_url}/wp-json/wp/v2/posts",
                payload,
                auth=(config.username, config.password),
            )
            link, post_id = data.get("link"), data.get("id")
            if not link or post_id is None:
                raise PlatformApiError(
                    "WordPress response is missing link or id",
                    details={"keys": sorted(data)},
                )
        except PlatformApiError as exc:
            return self._failed_result(exc, title, body)

        LOGGER.info(
            "WordPress post created",
            extra={"event": "publish.ok", "platform": self.name, "id": post_id},
        )
        return PublishResult.ok(self.name, status=options.status, url=str(link), id=post_id)

    def _term_ids(self, values: Sequence[str], kind: str) -> list[int]:
        """WordPress only accepts numeric term ids; names are skipped."""
        ids: list[int] = []
        for value in values:
            if value.isdecimal():
                ids.append(int(value))
            else:
                LOGGER.warning(
                    "Skipping non-numeric WordPress %s %r",
                    kind,
                    value,
                    extra={"event": "publish.term_skipped", "platform": self.name},
                )
        return ids
