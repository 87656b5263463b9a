"""CnBlogs adapter speaking the MetaWeblog XML-RPC dialect."""

from __future__ import annotations

import re
import xmlrpc.client
from typing import Any
from xml.parsers.expat import ExpatError

from ..settings.publishers import CnBlogsConfig
from ..utils.logging import get_logger
from .base import Article, PlatformAdapter, PlatformApiError, PublishOptions, PublishResult
from .markup import wrap_html

LOGGER = get_logger(__name__)

RPC_URL = "https://rpc.cnblogs.com/metaweblog/{blog}"
POST_URL = "https://www.cnblogs.com/{blog}/p/{post_id}.html"
CSS_CLASS = "cnblogs-markdown"

_SLUG_SEPARATORS = re.compile(r"\s+")


class CnBlogsAdapter(PlatformAdapter):
    """Calls ``metaWeblog.newPost`` with the account's username and password."""

    name = "CnBlogs"

    _config: CnBlogsConfig | None

    def transform(self, title: str, body: str) -> Article:
        return Article(title=title, body=wrap_html(body, CSS_CLASS))

    def publish(self, title: str, body: str, options: PublishOptions) -> PublishResult:
        self._require_title(title)
        if not self.is_configured():
            return self._manual_result(title, body)

        config = self._config
        post = {
            "title": title,
            "description": body,
            "categories": list(options.categories),
            "mt_keywords": ",".join(options.tags),
            "mt_allow_comments": 1,
            "wp_slug": _SLUG_SEPARATORS.sub("-", title.strip().lower()),
        }
        blog_id = config.blog_id or config.blog_name
        params = (blog_id, config.username, config.password, post, options.is_publish)
        try:
            post_id = self._call(RPC_URL.format(blog=config.blog_name), "metaWeblog.newPost", params)
        except PlatformApiError as exc:
            return self._failed_result(exc, title, body)

        LOGGER.info(
            "CnBlogs post created",
            extra={"event": "publish.ok", "platform": self.name, "id": post_id},
        )
        return PublishResult.ok(
            self.name,
            status=options.status,
            url=POST_URL.format(blog=config.blog_name, post_id=post_id),
            id=post_id,
        )

    def _call(self, url: str, method: str, params: tuple[Any, ...]) -> Any:
        request_body = xmlrpc.client.dumps(params, methodname=method, allow_none=True)
        response = self._post(
            url,
            headers={"Content-Type": "text/xml; charset=utf-8"},
            data=request_body.encode("utf-8"),
        )
        try:
            (result,), _ = xmlrpc.client.loads(response.content)
        except xmlrpc.client.Fault as exc:
            raise PlatformApiError(
                exc.faultString or "CnBlogs rejected the post",
                details={"fault_code": exc.faultCode},
            ) from exc
        except (xmlrpc.client.ResponseError, ExpatError, ValueError) as exc:
            raise PlatformApiError(
                "Failed to decode CnBlogs response",
                details={"url": url, "response": response.text[:200]},
            ) from exc
        if not result:
            raise PlatformApiError("CnBlogs returned an empty post id", details={"url": url})
        return result
